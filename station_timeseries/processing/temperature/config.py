"""Local temperature processing configuration"""

import glob
from pathlib import Path
from typing import List, Optional

from station_timeseries.processing.base.config import ExtractionConfig


class TemperatureConfig(ExtractionConfig):
    """Configuration for extracting station series from local NetCDF files"""

    def __init__(
        self,
        input_paths: List[str],
        stations_path: Path,
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
        output_dir: Optional[Path] = None,
        **kwargs,
    ):
        super().__init__(
            origin,
            end,
            interval_count,
            interval_size,
            interval_unit,
            scale,
            collision_policy,
            data_dir,
            output_format,
            debug,
            **kwargs,
        )
        self.input_paths = [str(p) for p in input_paths or []]
        self.stations_path = Path(stations_path) if stations_path else None
        self.output_dir = Path(output_dir) if output_dir else None

    def validate(self) -> None:
        """Validate local processing configuration"""
        super().validate()

        if self.stations_path is None or not self.stations_path.exists():
            raise ValueError(f"Stations file not found: {self.stations_path}")
        if not self.get_input_files():
            raise ValueError(f"No input files match {self.input_paths}")

    def get_input_files(self) -> List[Path]:
        """Expand input paths and glob patterns to existing files"""
        files = []
        for pattern in self.input_paths:
            matches = sorted(glob.glob(pattern))
            files.extend(Path(m) for m in matches if Path(m).is_file())
        return sorted(set(files))

    def get_output_directory(self) -> Path:
        return self.output_dir or super().get_output_directory()
