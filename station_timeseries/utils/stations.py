"""Station point loading and validation"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import geopandas as gpd

from station_timeseries.constants import STATION_ID_FIELD

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Station:
    """Named point location"""

    stationid: str
    longitude: float
    latitude: float


def validate_stations(
    stations: gpd.GeoDataFrame, id_field: str = STATION_ID_FIELD
) -> gpd.GeoDataFrame:
    """Check ids and geometries and return a WGS84 copy with string ids"""
    if id_field not in stations.columns:
        raise ValueError(f"Station id field '{id_field}' not found in {list(stations.columns)}")

    if stations.geometry.isna().any():
        raise ValueError("Stations without geometry found")

    geom_types = set(stations.geometry.geom_type)
    if geom_types - {"Point"}:
        raise ValueError(f"Stations must be point geometries, got {sorted(geom_types)}")

    stations = stations.copy()
    if stations[id_field].isna().any():
        raise ValueError("Stations with an empty id found")
    stations[id_field] = stations[id_field].astype(str)
    if (stations[id_field].str.strip() == "").any():
        raise ValueError("Stations with an empty id found")

    duplicated = stations[id_field][stations[id_field].duplicated()]
    if not duplicated.empty:
        raise ValueError(f"Duplicate station ids: {sorted(set(duplicated))}")

    # Ensure CRS is WGS84
    if stations.crs is not None and stations.crs != "EPSG:4326":
        stations = stations.to_crs("EPSG:4326")

    return stations


def load_stations(
    path: Union[str, Path], id_field: str = STATION_ID_FIELD
) -> gpd.GeoDataFrame:
    """Load station points from any vector file geopandas can read"""
    logger.info(f"Loading stations from {path}")
    stations = validate_stations(gpd.read_file(path), id_field)
    logger.info(f"Loaded {len(stations)} stations")
    return stations


def stations_from_frame(
    stations: gpd.GeoDataFrame, id_field: str = STATION_ID_FIELD
) -> List[Station]:
    """Convert a station GeoDataFrame to immutable Station records"""
    return [
        Station(stationid=str(row[id_field]), longitude=row.geometry.x, latitude=row.geometry.y)
        for _, row in stations.iterrows()
    ]
