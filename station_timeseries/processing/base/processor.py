"""Base processor class shared by the local and Earth Engine pipelines"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
import xarray as xr
from tqdm import tqdm

from station_timeseries.constants import OUTPUT_FORMAT_CSV, OUTPUT_FORMAT_PARQUET

logger = logging.getLogger(__name__)


class BaseProcessor(ABC):
    """Base class providing logging, validation and output helpers"""

    def __init__(self, data_dir: Optional[Path], debug: bool = False):
        """Initialize processor

        Args:
            data_dir: Base data directory (defaults to ./data)
            debug: Enable debug logging
        """
        self.data_dir = Path(data_dir or "data")
        self.debug = debug

        # Setup logging
        self._setup_logging()

        logger.info(f"Initialized {self.__class__.__name__}")

    def _setup_logging(self):
        """Setup logging configuration"""
        log_level = logging.DEBUG if self.debug else logging.INFO
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    def process_with_validation(self) -> List[Union[Path, str]]:
        """Template method that validates config before processing"""
        config = getattr(self, "config", None)
        if config is not None:
            config.validate()
        return self.process()

    @abstractmethod
    def process(self) -> List[Union[Path, str]]:
        """Process data - to be implemented by subclasses"""
        pass

    def save_output(
        self,
        df: pd.DataFrame,
        filename: str,
        output_format: str,
        output_dir: Path,
    ) -> Path:
        """Save dataframe to the output directory

        Args:
            df: DataFrame to save
            filename: Name of the output file without extension
            output_format: Output format ('csv' or 'parquet')
            output_dir: Directory to write to

        Returns:
            Path to saved file
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / f"{filename}.{output_format}"

        if output_format == OUTPUT_FORMAT_CSV:
            df.to_csv(output_file, index=False)

            # Check for NaN values after saving CSV
            self._check_nan_values(df, output_file.name)
        elif output_format == OUTPUT_FORMAT_PARQUET:
            df.to_parquet(output_file, index=False)
        else:
            raise ValueError(f"Unsupported output format: {output_format}")

        logger.info(f"Saved {df.shape[0]} rows x {df.shape[1]} columns to {output_file}")
        return output_file

    def _check_nan_values(self, df: pd.DataFrame, filename: str):
        """Check for NaN values in the dataset and log warnings"""
        nan_counts = df.isnull().sum()
        total_nans = nan_counts.sum()

        if total_nans > 0:
            logger.warning(
                f"NaN values detected in {filename}: {total_nans} total NaN values"
            )

            # Log only the worst columns, there is one per date
            cols_with_nans = nan_counts[nan_counts > 0].sort_values(ascending=False)
            for col, count in cols_with_nans.head(10).items():
                pct_nan = (count / len(df)) * 100
                logger.warning(f"  - {col}: {count} NaN values ({pct_nan:.1f}%)")
            if len(cols_with_nans) > 10:
                logger.warning(f"  ... and {len(cols_with_nans) - 10} more columns")
        else:
            logger.info(
                f"Data quality check passed for {filename}: No NaN values found"
            )

    def combine_files_in_memory(self, files: List[Path]) -> xr.Dataset:
        """Combine NetCDF files along time without saving

        Args:
            files: List of NetCDF file paths

        Returns:
            Combined xarray Dataset sorted by time
        """
        if not files:
            raise ValueError("No input files to combine")

        datasets = []
        for file_path in tqdm(sorted(files), desc="Loading files"):
            ds = xr.open_dataset(file_path)
            # Newer CDS NetCDF files name the time dimension valid_time
            if "time" not in ds.dims and "valid_time" in ds.dims:
                ds = ds.rename(valid_time="time")
            datasets.append(ds)

        # Concatenate along time dimension
        combined_ds = xr.concat(datasets, dim="time")
        combined_ds = combined_ds.sortby("time")
        return combined_ds
