import logging

import numpy as np
import pandas as pd
import pytest

from station_timeseries.processing.base.formatter import DuplicateKeyError, PivotFormatter


def records(rows):
    return pd.DataFrame(rows, columns=["stationid", "interval_key", "value"])


def test_one_row_per_station():
    data = records(
        [
            ("S1", "86-09-23", 10.0),
            ("S2", "86-09-23", 20.0),
            ("S1", "86-09-24", 11.0),
            ("S2", "86-09-24", 21.0),
        ]
    )

    wide = PivotFormatter().pivot(data)

    assert wide.columns.tolist() == ["stationid", "86-09-23", "86-09-24"]
    assert wide["stationid"].tolist() == ["S1", "S2"]
    assert wide.set_index("stationid").loc["S2", "86-09-24"] == 21.0


def test_field_set_matches_distinct_keys():
    data = records(
        [
            ("S1", "86-09-23", 1.0),
            ("S1", "86-09-24", 2.0),
            ("S1", "86-09-25", 3.0),
        ]
    )

    row = PivotFormatter().pivot(data).iloc[0]

    fields = row.drop("stationid")
    assert set(fields.index) == set(data["interval_key"])
    for _, record in data.iterrows():
        assert fields[record["interval_key"]] == record["value"]


def test_missing_values_stay_missing():
    data = records([("S2", "86-09-24", None)])

    wide = PivotFormatter().pivot(data)

    assert np.isnan(wide.loc[0, "86-09-24"])


def test_keys_absent_for_a_station_are_missing():
    data = records([("S1", "86-09-23", 1.0), ("S2", "86-09-24", 2.0)])

    wide = PivotFormatter().pivot(data).set_index("stationid")

    assert np.isnan(wide.loc["S1", "86-09-24"])
    assert np.isnan(wide.loc["S2", "86-09-23"])


COLLIDING = [
    ("S1", "86-09-23", 10.0),
    ("S1", "86-09-24", 5.0),
    ("S1", "86-09-23", 12.0),
]


@pytest.mark.parametrize(
    "policy,expected",
    [("last", 12.0), ("first", 10.0)],
)
def test_collision_policies_keep_one_value(policy, expected):
    wide = PivotFormatter(collision_policy=policy).pivot(records(COLLIDING))

    assert wide.loc[0, "86-09-23"] == expected
    assert wide.loc[0, "86-09-24"] == 5.0


def test_reject_policy_marks_collision_missing():
    wide = PivotFormatter(collision_policy="reject").pivot(records(COLLIDING))

    assert np.isnan(wide.loc[0, "86-09-23"])
    assert wide.loc[0, "86-09-24"] == 5.0


def test_error_policy_raises():
    with pytest.raises(DuplicateKeyError):
        PivotFormatter(collision_policy="error").pivot(records(COLLIDING))


def test_collisions_are_logged(caplog):
    with caplog.at_level(logging.WARNING):
        PivotFormatter(collision_policy="last").pivot(records(COLLIDING))

    assert "more than one record" in caplog.text


def test_no_warning_without_collisions(caplog):
    with caplog.at_level(logging.WARNING):
        PivotFormatter().pivot(records([("S1", "86-09-23", 1.0)]))

    assert "more than one record" not in caplog.text


def test_unknown_policy():
    with pytest.raises(ValueError):
        PivotFormatter(collision_policy="average")


def test_missing_column():
    with pytest.raises(ValueError):
        PivotFormatter().pivot(pd.DataFrame({"stationid": ["S1"], "value": [1.0]}))


@pytest.mark.parametrize("policy", ["last", "first", "reject", "error"])
def test_missing_sample_does_not_shadow_a_value(policy):
    data = records([("S1", "86-09-23", 10.0), ("S1", "86-09-23", None)])

    wide = PivotFormatter(collision_policy=policy).pivot(data)

    assert wide.loc[0, "86-09-23"] == 10.0


def test_repeated_missing_samples_stay_missing():
    data = records([("S1", "86-09-23", None), ("S1", "86-09-23", None)])

    wide = PivotFormatter(collision_policy="error").pivot(data)

    assert wide.columns.tolist() == ["stationid", "86-09-23"]
    assert np.isnan(wide.loc[0, "86-09-23"])
