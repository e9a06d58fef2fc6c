"""Local temperature processor: NetCDF stack -> merged station series CSV"""

import logging
from pathlib import Path
from typing import List

import geopandas as gpd
import numpy as np
import pandas as pd
import xarray as xr

from station_timeseries.constants import EXPORT_FILE_PREFIX
from station_timeseries.processing.base.formatter import PivotFormatter
from station_timeseries.processing.base.merger import DuplicateDateMerger
from station_timeseries.processing.base.processor import BaseProcessor
from station_timeseries.processing.base.spatial_aggregator import SpatialSampler
from station_timeseries.processing.base.temporal_aggregator import TemporalAggregator
from station_timeseries.processing.temperature.config import TemperatureConfig
from station_timeseries.utils.stations import load_stations, stations_from_frame

logger = logging.getLogger(__name__)


class TemperatureProcessor(BaseProcessor):
    """Runs aggregate -> sample -> pivot -> merge eagerly over local data"""

    def __init__(self, config: TemperatureConfig):
        super().__init__(config.data_dir, config.debug)
        self.config = config
        self.temporal_aggregator = TemporalAggregator.from_config(config)
        self.formatter = PivotFormatter(config.id_field, config.collision_policy)
        self.merger = DuplicateDateMerger(config.id_field, config.prefix_length)

    def process(self) -> List[Path]:
        """Extract the station series and save them"""
        logger.info(
            f"Processing {self.config.band} from {self.config.origin} to {self.config.end} "
            f"({self.config.interval_count} x {self.config.interval_size} {self.config.interval_unit})"
        )

        stations = load_stations(self.config.stations_path, self.config.id_field)
        dataset = self.combine_files_in_memory(self.config.get_input_files())
        stack = self.select_band(dataset)

        merged = self.run(stack, stations)

        output_file = self.save_output(
            merged,
            EXPORT_FILE_PREFIX,
            self.config.output_format,
            self.config.get_output_directory(),
        )
        return [output_file]

    def run(self, stack: xr.DataArray, stations: gpd.GeoDataFrame) -> pd.DataFrame:
        """Run the four transforms on an in-memory stack

        Args:
            stack: Single-band DataArray with time, latitude, longitude
            stations: Validated station points

        Returns:
            One row per station, one column per date prefix
        """
        stack = self.filter_date_range(stack)

        # Step 1: Average within observation intervals
        aggregated = self.temporal_aggregator.aggregate(stack)

        # Step 2: Sample intervals at station points
        sampler = SpatialSampler(
            stations_from_frame(stations, self.config.id_field),
            self.config.scale,
            self.config.id_field,
            self.config.key_format,
        )
        records = sampler.sample(aggregated)

        # Step 3: One row per station
        wide = self.formatter.pivot(records)

        # Step 4: Collapse columns sharing a date prefix
        merged = self.merger.merge(wide)

        return self.align_columns(merged, stations)

    def select_band(self, dataset: xr.Dataset) -> xr.DataArray:
        """Get the configured band as a DataArray"""
        if self.config.band not in dataset.data_vars:
            raise ValueError(
                f"Band '{self.config.band}' not found in input, available: {list(dataset.data_vars)}"
            )
        return dataset[self.config.band]

    def filter_date_range(self, stack: xr.DataArray) -> xr.DataArray:
        """Keep time steps in [origin, end)"""
        times = pd.to_datetime(stack["time"].values)
        keep = (times >= self.config.origin_timestamp) & (times < self.config.end_timestamp)
        logger.debug(f"Keeping {int(keep.sum())}/{len(times)} time steps inside the date range")
        return stack.isel(time=np.asarray(keep))

    def align_columns(self, merged: pd.DataFrame, stations: gpd.GeoDataFrame) -> pd.DataFrame:
        """Order rows like the station file and columns chronologically"""
        columns = self.config.get_output_columns()
        unexpected = [c for c in merged.columns if c not in columns]
        if unexpected:
            logger.warning(f"Dropping {len(unexpected)} unexpected columns: {unexpected[:5]}")

        aligned = merged.set_index(self.config.id_field).reindex(
            stations[self.config.id_field].tolist()
        )
        aligned.index.name = self.config.id_field
        return aligned.reset_index().reindex(columns=columns)
