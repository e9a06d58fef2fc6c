from station_timeseries.utils.stations import (
    Station,
    load_stations,
    stations_from_frame,
    validate_stations,
)

__all__ = ["Station", "load_stations", "stations_from_frame", "validate_stations"]
