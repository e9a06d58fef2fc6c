"""Base configuration classes for station time series pipelines"""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from station_timeseries.constants import (
    COLLISION_POLICIES,
    DATE_PREFIX_LENGTH,
    INTERVAL_KEY_FORMAT,
    INTERVAL_UNITS,
    OUTPUT_FORMAT_CSV,
    OUTPUT_FORMAT_PARQUET,
    STATION_ID_FIELD,
    TEMPERATURE_BAND,
)
from station_timeseries.processing.base.merger import DuplicateDateMerger
from station_timeseries.processing.base.temporal_aggregator import (
    ObservationInterval,
    build_intervals,
)

logger = logging.getLogger(__name__)


class ProcessingConfig:
    """Base configuration class with shared parameters"""

    def __init__(
        self,
        data_dir: Optional[Path],
        output_format: str,
        debug: bool,
    ):
        self.data_dir = Path(data_dir or "data")
        self.output_format = output_format
        self.debug = debug

    def validate(self) -> None:
        """Validate base configuration parameters"""
        valid_formats = [OUTPUT_FORMAT_CSV, OUTPUT_FORMAT_PARQUET]
        if self.output_format not in valid_formats:
            raise ValueError(
                f"Invalid output_format: {self.output_format}. Must be one of {valid_formats}"
            )

    def get_output_directory(self) -> Path:
        """Get the final output directory"""
        return self.data_dir / "final"


class ExtractionConfig(ProcessingConfig):
    """Observation window, sampling and reshaping parameters shared by all pipelines"""

    def __init__(
        self,
        origin: str,
        end: str,
        interval_count: int,
        interval_size: int,
        interval_unit: str,
        scale: float,
        collision_policy: str,
        data_dir: Optional[Path],
        output_format: str,
        debug: bool,
        band: str = TEMPERATURE_BAND,
        id_field: str = STATION_ID_FIELD,
        key_format: str = INTERVAL_KEY_FORMAT,
        prefix_length: int = DATE_PREFIX_LENGTH,
    ):
        super().__init__(data_dir, output_format, debug)
        self.origin = origin
        self.end = end
        self.interval_count = interval_count
        self.interval_size = interval_size
        self.interval_unit = interval_unit
        self.scale = scale
        self.collision_policy = collision_policy
        self.band = band
        self.id_field = id_field
        self.key_format = key_format
        self.prefix_length = prefix_length

    @property
    def origin_timestamp(self) -> pd.Timestamp:
        return pd.Timestamp(self.origin)

    @property
    def end_timestamp(self) -> pd.Timestamp:
        return pd.Timestamp(self.end)

    def validate(self) -> None:
        """Validate the observation window and reshaping parameters

        A bucket count that does not line up with [origin, end) is only
        reported; it shows up downstream as extra or missing date columns.
        """
        super().validate()

        try:
            origin = self.origin_timestamp
            end = self.end_timestamp
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid origin/end date: {e}") from e

        if pd.isna(origin) or pd.isna(end):
            raise ValueError("origin and end dates must be specified")
        if end <= origin:
            raise ValueError("end must be after origin")

        if not isinstance(self.interval_count, int) or self.interval_count <= 0:
            raise ValueError(
                f"interval_count must be a positive integer, got {self.interval_count}"
            )
        if not isinstance(self.interval_size, int) or self.interval_size <= 0:
            raise ValueError(
                f"interval_size must be a positive integer, got {self.interval_size}"
            )
        if self.interval_unit not in INTERVAL_UNITS:
            raise ValueError(
                f"Invalid interval_unit: {self.interval_unit}. Must be one of {INTERVAL_UNITS}"
            )
        if self.scale is None or self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")
        if self.collision_policy not in COLLISION_POLICIES:
            raise ValueError(
                f"Invalid collision_policy: {self.collision_policy}. Must be one of {COLLISION_POLICIES}"
            )
        if not self.prefix_length or self.prefix_length <= 0:
            raise ValueError(
                f"prefix_length must be positive, got {self.prefix_length}"
            )
        if not self.band:
            raise ValueError("band must be specified")
        if not self.id_field:
            raise ValueError("id_field must be specified")

        last_end = self.get_intervals()[-1].end
        if last_end != end:
            logger.warning(
                f"{self.interval_count} x {self.interval_size} {self.interval_unit} intervals "
                f"from {origin.date()} end at {last_end}, not at {end}; "
                f"expect extra or missing date columns"
            )

    def get_intervals(self) -> List[ObservationInterval]:
        """Get the observation intervals covered by this configuration"""
        return build_intervals(
            self.origin_timestamp,
            self.interval_count,
            self.interval_size,
            self.interval_unit,
        )

    def get_interval_keys(self) -> List[str]:
        """Get the formatted interval key of every observation interval"""
        return [
            interval.start.strftime(self.key_format)
            for interval in self.get_intervals()
        ]

    def get_output_columns(self) -> List[str]:
        """Get the output schema: id field followed by distinct date prefixes"""
        merger = DuplicateDateMerger(self.id_field, self.prefix_length)
        return [self.id_field] + merger.merged_columns(self.get_interval_keys())
