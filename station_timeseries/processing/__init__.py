"""Processing module for turning gridded temperature into station time series

- Base classes in processing/base/ implement the four transforms
  (temporal aggregation, spatial sampling, pivot, date merge)
- processing/temperature/ runs them eagerly over local NetCDF files
"""

from station_timeseries.processing.base.config import ExtractionConfig
from station_timeseries.processing.temperature.config import TemperatureConfig
from station_timeseries.processing.temperature.processor import TemperatureProcessor

__all__ = [
    "ExtractionConfig",
    "TemperatureConfig",
    "TemperatureProcessor",
]
