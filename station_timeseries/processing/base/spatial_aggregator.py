"""Spatial sampler for averaging gridded data around station points"""

import logging
from typing import Dict, List, Sequence

import numpy as np
import pandas as pd
import xarray as xr
from tqdm import tqdm

from station_timeseries.constants import (
    EARTH_RADIUS_METERS,
    INTERVAL_KEY_FORMAT,
    STATION_ID_FIELD,
)
from station_timeseries.processing.base.temporal_aggregator import RasterFrame
from station_timeseries.utils.stations import Station

logger = logging.getLogger(__name__)

LATITUDE_NAMES = ["latitude", "lat", "y"]
LONGITUDE_NAMES = ["longitude", "lon", "x"]

# Long record columns
INTERVAL_KEY_COLUMN = "interval_key"
VALUE_COLUMN = "value"
TIME_START_COLUMN = "time_start"


def find_coordinate(data: xr.DataArray, candidates: Sequence[str]) -> str:
    """Return the first candidate name present as a coordinate of `data`"""
    for name in candidates:
        if name in data.coords:
            return name
    raise ValueError(f"None of the coordinates {list(candidates)} found in data")


def haversine_distance(lat1, lon1, lat2, lon2):
    """Great-circle distance in metres (inputs in degrees, broadcastable)"""
    lat1, lon1, lat2, lon2 = map(np.radians, (lat1, lon1, lat2, lon2))
    a = (
        np.sin((lat2 - lat1) / 2) ** 2
        + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_METERS * np.arcsin(np.sqrt(a))


class SpatialSampler:
    """Samples rasters at station points as the mean of pixels within a disk

    A pixel contributes to a station when its centre lies within `scale`
    metres of the station and its value is not NaN. A station without any
    contributing pixel gets NaN, never zero.
    """

    def __init__(
        self,
        stations: List[Station],
        scale: float,
        id_field: str = STATION_ID_FIELD,
        key_format: str = INTERVAL_KEY_FORMAT,
    ):
        """Initialize with the fixed station set

        Args:
            stations: Stations to sample
            scale: Disk radius in metres
            id_field: Name of the station id column in the output
            key_format: strftime format used to derive interval keys
        """
        self.stations = stations
        self.scale = scale
        self.id_field = id_field
        self.key_format = key_format
        self._mask_cache: Dict[tuple, xr.DataArray] = {}
        logger.info(
            f"SpatialSampler initialized with {len(stations)} stations at {scale} m"
        )

    def station_masks(self, data: xr.DataArray) -> xr.DataArray:
        """Boolean (station, lat, lon) masks of the pixels each station averages"""
        lat_name = find_coordinate(data, LATITUDE_NAMES)
        lon_name = find_coordinate(data, LONGITUDE_NAMES)
        lats = data[lat_name].values
        lons = data[lon_name].values

        cache_key = (lat_name, lon_name, lats.tobytes(), lons.tobytes())
        if cache_key in self._mask_cache:
            return self._mask_cache[cache_key]

        grid_lat, grid_lon = np.meshgrid(lats, lons, indexing="ij")
        masks = np.zeros((len(self.stations),) + grid_lat.shape, dtype=bool)
        for i, station in enumerate(self.stations):
            distance = haversine_distance(
                station.latitude, station.longitude, grid_lat, grid_lon
            )
            masks[i] = distance <= self.scale

        empty = [s.stationid for s, m in zip(self.stations, masks) if not m.any()]
        if empty:
            logger.warning(
                f"{len(empty)} stations have no pixel centre within {self.scale} m: {empty[:5]}"
            )

        result = xr.DataArray(
            masks,
            dims=("station", lat_name, lon_name),
            coords={
                "station": [s.stationid for s in self.stations],
                lat_name: lats,
                lon_name: lons,
            },
        )
        self._mask_cache[cache_key] = result
        return result

    def _station_means(self, data: xr.DataArray) -> xr.DataArray:
        """Mean of valid pixels per station, reducing the spatial dimensions"""
        masks = self.station_masks(data)
        spatial_dims = [masks.dims[1], masks.dims[2]]
        means = [
            data.where(masks.sel(station=station.stationid, drop=True)).mean(
                dim=spatial_dims, skipna=True
            )
            for station in tqdm(self.stations, desc="Sampling stations", disable=len(self.stations) < 2)
        ]
        return xr.concat(means, dim="station").assign_coords(
            station=[s.stationid for s in self.stations]
        )

    def _empty_records(self) -> pd.DataFrame:
        return pd.DataFrame(
            columns=[self.id_field, INTERVAL_KEY_COLUMN, VALUE_COLUMN, TIME_START_COLUMN]
        )

    def sample_frame(self, frame: RasterFrame) -> pd.DataFrame:
        """Sample one raster frame: one record per station"""
        if not self.stations:
            return self._empty_records()

        means = self._station_means(frame.data)
        return pd.DataFrame(
            {
                self.id_field: [s.stationid for s in self.stations],
                INTERVAL_KEY_COLUMN: frame.time_start.strftime(self.key_format),
                VALUE_COLUMN: means.values.astype(float),
                TIME_START_COLUMN: frame.time_start,
            }
        )

    def sample(self, aggregated: xr.DataArray) -> pd.DataFrame:
        """Sample every interval of an aggregated stack

        Args:
            aggregated: Output of TemporalAggregator.aggregate

        Returns:
            Long DataFrame with id, interval_key, value, time_start columns,
            ordered by interval then station
        """
        if not self.stations:
            return self._empty_records()

        means = self._station_means(aggregated).transpose("interval", "station")
        starts = pd.to_datetime(aggregated["time_start"].values)
        n_intervals, n_stations = means.shape

        records = pd.DataFrame(
            {
                self.id_field: np.tile([s.stationid for s in self.stations], n_intervals),
                INTERVAL_KEY_COLUMN: np.repeat(starts.strftime(self.key_format), n_stations),
                VALUE_COLUMN: means.values.astype(float).ravel(),
                TIME_START_COLUMN: np.repeat(starts, n_stations),
            }
        )
        missing = int(records[VALUE_COLUMN].isna().sum())
        logger.debug(f"Sampled {len(records)} records ({missing} missing)")
        return records
