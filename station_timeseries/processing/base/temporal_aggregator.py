"""Temporal aggregator for bucketing time-stamped rasters into fixed-width intervals"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Union

import numpy as np
import pandas as pd
import xarray as xr

from station_timeseries.constants import INTERVAL_UNITS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObservationInterval:
    """Half-open time range [start, end)"""

    index: int
    start: pd.Timestamp
    end: pd.Timestamp

    def contains(self, timestamp) -> bool:
        return self.start <= pd.Timestamp(timestamp) < self.end


@dataclass(frozen=True)
class RasterFrame:
    """Single-band raster for one observation interval"""

    time_start: pd.Timestamp
    time_end: pd.Timestamp
    data: xr.DataArray


def _offset(amount: int, unit: str) -> Union[pd.DateOffset, pd.Timedelta]:
    """Offset of `amount` units; months and years use calendar arithmetic"""
    if unit not in INTERVAL_UNITS:
        raise ValueError(f"Invalid interval unit: {unit}. Must be one of {INTERVAL_UNITS}")
    if unit == "year":
        return pd.DateOffset(years=amount)
    if unit == "month":
        return pd.DateOffset(months=amount)
    return pd.Timedelta(**{f"{unit}s": amount})


def build_intervals(
    origin, count: int, size: int, unit: str
) -> List[ObservationInterval]:
    """Build `count` contiguous intervals of `size` units starting at `origin`

    Every boundary is computed from the origin rather than from the previous
    boundary, so calendar units do not drift (Jan 31 + 2 months is Mar 31).
    """
    if count < 0:
        raise ValueError(f"Interval count cannot be negative, got {count}")
    if size <= 0:
        raise ValueError(f"Interval size must be positive, got {size}")

    origin = pd.Timestamp(origin)
    boundaries = [origin + _offset(i * size, unit) for i in range(count + 1)]
    return [
        ObservationInterval(index=i, start=boundaries[i], end=boundaries[i + 1])
        for i in range(count)
    ]


class TemporalAggregator:
    """Averages a time-stamped raster stack within fixed-width intervals"""

    def __init__(self, intervals: List[ObservationInterval], time_dim: str = "time"):
        """Initialize temporal aggregator

        Args:
            intervals: Contiguous intervals in increasing time order
            time_dim: Name of the time dimension of input stacks
        """
        self.intervals = intervals
        self.time_dim = time_dim
        self._starts = np.array([i.start.to_datetime64() for i in intervals], dtype="datetime64[ns]")
        self._ends = np.array([i.end.to_datetime64() for i in intervals], dtype="datetime64[ns]")
        logger.info(f"Temporal aggregator initialized with {len(intervals)} intervals")

    @classmethod
    def from_config(cls, config) -> "TemporalAggregator":
        return cls(config.get_intervals())

    def assign_intervals(self, times) -> np.ndarray:
        """Index of the interval containing each timestamp, -1 when outside all intervals"""
        times = np.asarray(pd.to_datetime(times), dtype="datetime64[ns]")
        if len(self.intervals) == 0:
            return np.full(times.shape, -1, dtype=int)

        index = np.searchsorted(self._starts, times, side="right") - 1
        inside = (index >= 0) & (times < self._ends[index.clip(min=0)])
        return np.where(inside, index, -1)

    def aggregate(self, data: xr.DataArray) -> xr.DataArray:
        """Average every pixel within each interval

        Args:
            data: DataArray with a time dimension plus spatial dimensions

        Returns:
            DataArray with an `interval` dimension of exactly len(intervals)
            entries, tagged with `time_start` and `time_end` coordinates.
            Intervals without any source step are all-NaN.
        """
        if self.time_dim not in data.dims:
            raise ValueError(f"Time dimension '{self.time_dim}' not found in data")

        index = self.assign_intervals(data[self.time_dim].values)
        inside = index >= 0
        logger.debug(
            f"Assigned {int(inside.sum())}/{len(index)} time steps to {len(self.intervals)} intervals"
        )

        positions = np.arange(len(self.intervals))
        if inside.any():
            subset = data.isel({self.time_dim: inside})
            subset = subset.assign_coords(interval=(self.time_dim, index[inside]))
            means = subset.groupby("interval").mean(self.time_dim, skipna=True)
            means = means.reindex(interval=positions)
        else:
            logger.warning("No time steps fall inside the observation intervals")
            spatial_dims = [dim for dim in data.dims if dim != self.time_dim]
            means = xr.DataArray(
                np.full([data.sizes[dim] for dim in spatial_dims], np.nan),
                dims=spatial_dims,
                coords={dim: data[dim].values for dim in spatial_dims if dim in data.coords},
                name=data.name,
            ).expand_dims(interval=positions)

        return means.assign_coords(
            time_start=("interval", self._starts),
            time_end=("interval", self._ends),
        )

    def frames(self, aggregated: xr.DataArray) -> Iterator[RasterFrame]:
        """Iterate over aggregated intervals as raster frames in time order"""
        starts = pd.to_datetime(aggregated["time_start"].values)
        ends = pd.to_datetime(aggregated["time_end"].values)
        for position in range(aggregated.sizes["interval"]):
            yield RasterFrame(
                time_start=starts[position],
                time_end=ends[position],
                data=aggregated.isel(interval=position),
            )
