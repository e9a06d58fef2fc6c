"""Local temperature time series processing"""

from station_timeseries.processing.temperature.config import TemperatureConfig
from station_timeseries.processing.temperature.processor import TemperatureProcessor

__all__ = ["TemperatureConfig", "TemperatureProcessor"]
