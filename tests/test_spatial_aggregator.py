import numpy as np
import pandas as pd
import pytest

from station_timeseries.processing.base.spatial_aggregator import (
    SpatialSampler,
    haversine_distance,
)
from station_timeseries.processing.base.temporal_aggregator import (
    TemporalAggregator,
    build_intervals,
)
from station_timeseries.utils.stations import Station
from tests.conftest import make_stack


def aggregate(stack, count=1):
    aggregator = TemporalAggregator(build_intervals("1986-09-23", count, 1, "day"))
    return aggregator, aggregator.aggregate(stack)


def test_haversine_one_degree_of_latitude():
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111195, rel=1e-3)


def test_haversine_wraps_longitude():
    assert haversine_distance(0.0, -179.95, 0.0, 179.95) == pytest.approx(
        haversine_distance(0.0, 0.0, 0.0, 0.1)
    )


def test_mean_of_pixels_inside_disk():
    times = pd.date_range("1986-09-23", periods=1, freq="h")
    values = np.zeros((1, 3, 3))
    values[0, 0, 0] = 1.0  # (0.0, 0.0) distance 0
    values[0, 0, 1] = 2.0  # (0.0, 0.1) ~11.1 km
    values[0, 1, 0] = 3.0  # (0.1, 0.0) ~11.1 km
    values[0, 1, 1] = 100.0  # (0.1, 0.1) ~15.7 km, outside
    _, aggregated = aggregate(make_stack(times, values))
    sampler = SpatialSampler([Station("S1", 0.0, 0.0)], scale=12000)

    records = sampler.sample(aggregated)

    assert records["value"].tolist() == [pytest.approx(2.0)]


def test_station_without_pixels_is_missing(hourly_stack, stations):
    _, aggregated = aggregate(hourly_stack)
    sampler = SpatialSampler(stations, scale=1000)

    records = sampler.sample(aggregated).set_index("stationid")

    assert records.loc["S1", "value"] == pytest.approx(11.5)
    assert np.isnan(records.loc["FAR", "value"])


def test_all_missing_pixels_are_not_coerced_to_zero():
    times = pd.date_range("1986-09-23", periods=24, freq="h")
    values = np.ones((24, 3, 3))
    values[:, 0, 0] = np.nan
    _, aggregated = aggregate(make_stack(times, values))
    sampler = SpatialSampler([Station("S1", 0.0, 0.0)], scale=1000)

    records = sampler.sample(aggregated)

    assert records["value"].isna().all()


def test_records_are_keyed_by_interval_start(hourly_stack, stations):
    _, aggregated = aggregate(hourly_stack, count=3)
    sampler = SpatialSampler(stations, scale=1000)

    records = sampler.sample(aggregated)

    assert len(records) == 3 * len(stations)
    assert records["interval_key"].tolist() == [
        "86-09-23",
        "86-09-23",
        "86-09-24",
        "86-09-24",
        "86-09-25",
        "86-09-25",
    ]
    assert records["stationid"].tolist() == ["S1", "FAR"] * 3
    assert records.loc[records["interval_key"] == "86-09-25", "value"].isna().all()


def test_sample_frame_matches_sample(hourly_stack, stations):
    aggregator, aggregated = aggregate(hourly_stack, count=2)
    sampler = SpatialSampler(stations, scale=1000)

    from_frames = pd.concat(
        [sampler.sample_frame(frame) for frame in aggregator.frames(aggregated)],
        ignore_index=True,
    )
    from_stack = sampler.sample(aggregated)

    pd.testing.assert_frame_equal(
        from_frames[["stationid", "interval_key", "value"]],
        from_stack[["stationid", "interval_key", "value"]],
    )


def test_no_stations(hourly_stack):
    _, aggregated = aggregate(hourly_stack)

    records = SpatialSampler([], scale=1000).sample(aggregated)

    assert records.empty
    assert "interval_key" in records.columns


def test_missing_coordinates(hourly_stack, stations):
    _, aggregated = aggregate(hourly_stack)
    sampler = SpatialSampler(stations, scale=1000)

    with pytest.raises(ValueError):
        sampler.sample(aggregated.rename(latitude="row", longitude="col"))
