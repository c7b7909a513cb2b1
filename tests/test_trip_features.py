import numpy as np
import pandas as pd
import pytest

from config import EARTH_RADIUS_KM
from trip_errors import InvalidConfigurationError, MalformedInputError
from trip_features import (
    derive_features,
    fiscal_quarter,
    flag_implausible_values,
    haversine_km,
    make_distance_buckets,
)


def test_output_matches_input_length_and_order(make_trips):
    trips = make_trips([
        {"start_time": "2018-03-05 17:00", "end_time": "2018-03-05 17:10"},
        {"start_time": "2018-01-01 08:00", "end_time": "2018-01-01 08:30"},
        {"start_time": "2018-02-10 12:00", "end_time": "2018-02-10 12:05"},
    ])
    trips.index = [10, 3, 7]

    features = derive_features(trips)

    assert len(features) == len(trips)
    assert list(features.index) == [10, 3, 7]
    assert (features["start_time"] == trips["start_time"]).all()


def test_calendar_fields_come_from_start_time(make_trips):
    trips = make_trips([
        # Monday, ends the next day
        {"start_time": "2018-01-01 23:50", "end_time": "2018-01-02 00:20"},
        # Saturday in April
        {"start_time": "2018-04-07 09:15", "end_time": "2018-04-07 09:45"},
    ])
    f = derive_features(trips)

    assert f["hour"].tolist() == [23, 9]
    assert f["weekday"].astype(str).tolist() == ["Mon", "Sat"]
    assert f["month"].astype(str).tolist() == ["Jan", "Apr"]
    assert f["quarter"].tolist() == [1, 2]
    assert f["date"].tolist() == [pd.Timestamp("2018-01-01"), pd.Timestamp("2018-04-07")]
    assert f["is_weekend"].tolist() == [False, True]
    assert f["weekday"].cat.ordered


def test_fiscal_quarter_start_month():
    months = pd.Series([1, 3, 4, 6, 7, 12])
    assert fiscal_quarter(months).tolist() == [1, 1, 2, 2, 3, 4]
    assert fiscal_quarter(months, start_month=4).tolist() == [4, 4, 1, 1, 2, 3]

    with pytest.raises(InvalidConfigurationError):
        fiscal_quarter(months, start_month=13)


def test_duration_is_not_clamped(make_trips):
    trips = make_trips([
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 09:30:00"},
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-04 10:00:00"},
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 10:12:30"},
    ])
    f = derive_features(trips)

    assert f["duration_minutes"].tolist() == [-30.0, 4320.0, 12.5]


def test_distance_zero_for_identical_coordinates(make_trips):
    trips = make_trips([{
        "start_time": "2018-01-01 10:00",
        "end_time": "2018-01-01 10:30",
        "start_station": "S01",
        "end_station": "S07",
        "start_lat": 40.7128, "start_long": -74.0060,
        "end_lat": 40.7128, "end_long": -74.0060,
    }])
    f = derive_features(trips)

    assert f.loc[0, "distance_km"] == 0.0
    assert f.loc[0, "distance_bucket"] == "0"


def test_distance_uses_coordinates_not_station_ids(make_trips):
    trips = make_trips([{
        "start_time": "2018-01-01 10:00",
        "end_time": "2018-01-01 10:30",
        "start_station": "S01",
        "end_station": "S01",
        "start_lat": 0.0, "start_long": 0.0,
        "end_lat": 1.0, "end_long": 0.0,
    }])
    f = derive_features(trips)

    # one degree of latitude on the calibrated sphere
    assert f.loc[0, "distance_km"] == pytest.approx(round(EARTH_RADIUS_KM * np.pi / 180, 3))
    assert f.loc[0, "distance_km"] == pytest.approx(111.161, abs=1e-3)


def test_haversine_symmetric_and_non_negative():
    rng = np.random.default_rng(0)
    lat1, lat2 = rng.uniform(-80, 80, size=(2, 200))
    lon1, lon2 = rng.uniform(-180, 180, size=(2, 200))

    d_fwd = haversine_km(lat1, lon1, lat2, lon2)
    d_back = haversine_km(lat2, lon2, lat1, lon1)

    assert np.allclose(d_fwd, d_back)
    assert (d_fwd >= 0).all()


def test_distance_rounded_to_three_decimals(sample_trips):
    f = derive_features(sample_trips)
    assert np.allclose(f["distance_km"], f["distance_km"].round(3))


def test_distance_buckets():
    s = pd.Series([0.0, 0.4, 1.0, 1.5, 4.0, 12.0])
    buckets = make_distance_buckets(s)

    assert buckets.astype(str).tolist() == ["0", "(0,1]", "(0,1]", "(1,2]", "(3,5]", "(5,∞]"]
    assert list(buckets.cat.categories) == ["0", "(0,1]", "(1,2]", "(2,3]", "(3,5]", "(5,∞]"]


def test_missing_optional_fields_stay_missing(make_trips):
    trips = make_trips([
        {"start_time": "2018-06-01 10:00", "end_time": "2018-06-01 10:30",
         "birth_year": None, "gender": None},
        {"start_time": "2018-06-01 11:00", "end_time": "2018-06-01 11:30",
         "birth_year": 1988},
    ])
    f = derive_features(trips)

    assert pd.isna(f.loc[0, "age_years"])
    assert pd.isna(f.loc[0, "gender"])
    assert f.loc[1, "age_years"] == 30


def test_missing_coordinates_raise(make_trips):
    trips = make_trips([
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 10:30", "end_long": None},
    ])
    with pytest.raises(MalformedInputError):
        derive_features(trips)


def test_missing_timestamp_column_raises(make_trips):
    trips = make_trips([
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 10:30"},
    ]).drop(columns=["end_time"])
    with pytest.raises(MalformedInputError, match="end_time"):
        derive_features(trips)


def test_derive_features_is_idempotent(sample_trips):
    first = derive_features(sample_trips)
    second = derive_features(sample_trips)
    pd.testing.assert_frame_equal(first, second)


def test_derive_features_does_not_mutate_input(make_trips):
    trips = make_trips([{"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 10:30"}])
    before = trips.copy()
    derive_features(trips)
    pd.testing.assert_frame_equal(trips, before)


def test_flag_implausible_values_keeps_data(make_trips):
    trips = make_trips([
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 10:30", "birth_year": 1890},
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 09:00", "birth_year": 1990},
        {"start_time": "2018-01-01 10:00", "end_time": "2018-01-01 10:30", "birth_year": None},
    ])
    f = derive_features(trips)
    flagged = flag_implausible_values(f)

    assert flagged["implausible_age"].tolist() == [True, False, False]
    assert flagged["implausible_duration"].tolist() == [False, True, False]
    assert flagged.loc[0, "age_years"] == 128
    assert flagged.loc[1, "duration_minutes"] == -60.0
    assert len(flagged) == len(f)
