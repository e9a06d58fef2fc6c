"""Earth Engine export configuration"""

from pathlib import Path
from typing import Optional

from station_timeseries.constants import COLLISION_ERROR, DEFAULT_DRIVE_FOLDER
from station_timeseries.processing.base.config import ExtractionConfig


class ExportConfig(ExtractionConfig):
    """Configuration for building and exporting the server-side pipeline"""

    def __init__(
        self,
        stations_asset: Optional[str],
        stations_path: Optional[Path],
        drive_folder: str,
        project: Optional[str],
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
        self.stations_asset = stations_asset
        self.stations_path = Path(stations_path) if stations_path else None
        self.drive_folder = drive_folder or DEFAULT_DRIVE_FOLDER
        self.project = project

    def validate(self) -> None:
        """Validate export configuration"""
        super().validate()

        if bool(self.stations_asset) == bool(self.stations_path):
            raise ValueError("Exactly one of stations_asset or stations_path must be given")
        if self.stations_path is not None and not self.stations_path.exists():
            raise ValueError(f"Stations file not found: {self.stations_path}")
        if self.collision_policy == COLLISION_ERROR:
            raise ValueError(
                "The 'error' collision policy cannot be evaluated server-side, "
                "use 'last', 'first' or 'reject'"
            )
