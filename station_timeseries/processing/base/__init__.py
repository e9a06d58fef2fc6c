"""Base processing classes shared by the station time series pipelines"""

from station_timeseries.processing.base.config import ProcessingConfig, ExtractionConfig
from station_timeseries.processing.base.processor import BaseProcessor
from station_timeseries.processing.base.temporal_aggregator import (
    ObservationInterval,
    RasterFrame,
    TemporalAggregator,
    build_intervals,
)
from station_timeseries.processing.base.spatial_aggregator import SpatialSampler
from station_timeseries.processing.base.formatter import PivotFormatter, DuplicateKeyError
from station_timeseries.processing.base.merger import DuplicateDateMerger

__all__ = [
    "ProcessingConfig",
    "ExtractionConfig",
    "BaseProcessor",
    "ObservationInterval",
    "RasterFrame",
    "TemporalAggregator",
    "build_intervals",
    "SpatialSampler",
    "PivotFormatter",
    "DuplicateKeyError",
    "DuplicateDateMerger",
]
