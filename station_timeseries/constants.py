"""Constants used throughout the project"""

# Data directory
DATA_DIR = "data"

# Observation window (ERA5-Land hourly archive)
DEFAULT_ORIGIN_DATE = "1986-09-23"
DEFAULT_END_DATE = "2018-09-23"
DEFAULT_INTERVAL_COUNT = 11690
DEFAULT_INTERVAL_SIZE = 1
DEFAULT_INTERVAL_UNIT = "day"

# Time units accepted by ee.Date.advance
INTERVAL_UNITS = ["year", "month", "week", "day", "hour", "minute", "second"]

# Sampling
DEFAULT_SCALE_METERS = 11132  # ~0.1° pixels
EARTH_RADIUS_METERS = 6371008.8

# Bands and fields
TEMPERATURE_BAND = "temperature_2m"
STATION_ID_FIELD = "stationid"

# Interval keys, e.g. "86-09-23"
INTERVAL_KEY_FORMAT = "%y-%m-%d"
EE_INTERVAL_KEY_FORMAT = "YY-MM-dd"
DATE_PREFIX_LENGTH = 8

# Pivot collision policies
COLLISION_LAST = "last"
COLLISION_FIRST = "first"
COLLISION_REJECT = "reject"
COLLISION_ERROR = "error"
COLLISION_POLICIES = [
    COLLISION_LAST,
    COLLISION_FIRST,
    COLLISION_REJECT,
    COLLISION_ERROR,
]
DEFAULT_COLLISION_POLICY = COLLISION_LAST

# Export
EXPORT_FILE_PREFIX = "T_time_series_multiple"
DEFAULT_DRIVE_FOLDER = "earth_engine_exports"

# Output formats
OUTPUT_FORMAT_CSV = "csv"
OUTPUT_FORMAT_PARQUET = "parquet"
DEFAULT_OUTPUT_FORMAT = OUTPUT_FORMAT_CSV
