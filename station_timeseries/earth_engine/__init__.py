"""Server-side station series pipeline on Google Earth Engine"""

from station_timeseries.earth_engine.config import ExportConfig
from station_timeseries.earth_engine.exporter import TemperatureSeriesExporter
from station_timeseries.earth_engine.models import GEEConfig

__all__ = ["ExportConfig", "TemperatureSeriesExporter", "GEEConfig"]
