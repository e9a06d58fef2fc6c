"""Earth Engine dataset settings"""

from dataclasses import dataclass

from station_timeseries.constants import (
    DEFAULT_DRIVE_FOLDER,
    EE_INTERVAL_KEY_FORMAT,
    EXPORT_FILE_PREFIX,
)


@dataclass
class GEEConfig:
    """Configuration for Google Earth Engine ERA5-Land extraction"""

    dataset: str = "ECMWF/ERA5_LAND/HOURLY"
    crs: str = "EPSG:4326"

    # Interval keys, Joda-style pattern equivalent to %y-%m-%d
    key_format: str = EE_INTERVAL_KEY_FORMAT

    # reduceRegions output property for Reducer.mean()
    reducer_output: str = "mean"

    # Export settings
    export_format: str = "CSV"
    drive_folder: str = DEFAULT_DRIVE_FOLDER
    file_prefix: str = EXPORT_FILE_PREFIX
