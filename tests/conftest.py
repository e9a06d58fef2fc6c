from pathlib import Path

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
import xarray as xr
from shapely.geometry import Point

from station_timeseries.utils.stations import Station

LATS = [0.0, 0.1, 0.2]
LONS = [0.0, 0.1, 0.2]


def make_stack(times, values, lats=LATS, lons=LONS, name="temperature_2m"):
    """Build a (time, latitude, longitude) DataArray

    `values` is either a full 3-D array or a 1-D array with one value per
    time step, broadcast over the grid.
    """
    times = pd.to_datetime(times)
    values = np.asarray(values, dtype=float)
    if values.ndim == 1:
        values = np.broadcast_to(
            values[:, None, None], (len(times), len(lats), len(lons))
        ).copy()
    return xr.DataArray(
        values,
        dims=("time", "latitude", "longitude"),
        coords={"time": times, "latitude": lats, "longitude": lons},
        name=name,
    )


@pytest.fixture
def hourly_stack() -> xr.DataArray:
    """Two days of hourly data, value = hour offset from the first step"""
    times = pd.date_range("1986-09-23", periods=48, freq="h")
    return make_stack(times, np.arange(48))


@pytest.fixture
def stations() -> list:
    return [
        Station(stationid="S1", longitude=0.0, latitude=0.0),
        Station(stationid="FAR", longitude=50.0, latitude=50.0),
    ]


@pytest.fixture
def stations_gdf() -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        {"stationid": ["S1", "S2"]},
        geometry=[Point(0.0, 0.0), Point(0.2, 0.2)],
        crs="EPSG:4326",
    )


@pytest.fixture
def stations_file(tmp_path: Path, stations_gdf: gpd.GeoDataFrame) -> Path:
    path = tmp_path / "stations.geojson"
    stations_gdf.to_file(path, driver="GeoJSON")
    return path


@pytest.fixture
def netcdf_file(tmp_path: Path) -> Path:
    """Hourly stack for 1986-09-23 and 1986-09-24 plus one step after the window"""
    times = list(pd.date_range("1986-09-23", periods=48, freq="h")) + [
        pd.Timestamp("1986-09-26 12:00")
    ]
    values = np.concatenate([np.full(24, 280.0), np.full(24, 290.0), [999.0]])
    stack = make_stack(times, values)
    # Pixel nearest S2 is missing on the first day
    stack.loc[dict(time=slice("1986-09-23", "1986-09-23 23:00"), latitude=0.2, longitude=0.2)] = np.nan
    path = tmp_path / "era5_land_hourly.nc"
    stack.to_dataset().to_netcdf(path)
    return path
