import numpy as np
import pandas as pd
import pytest

from daily_aggregate import (
    add_weekend_labels,
    build_daily_series,
    build_daily_summary,
    rolling_average,
)
from trip_errors import InvalidConfigurationError, MalformedInputError
from trip_features import derive_features


def test_three_trip_example_is_gap_filled(make_trips):
    trips = make_trips([
        {"start_time": "2018-01-01 08:00", "end_time": "2018-01-01 08:30"},
        {"start_time": "2018-01-01 17:00", "end_time": "2018-01-01 17:20"},
        {"start_time": "2018-01-03 09:00", "end_time": "2018-01-03 09:10"},
    ])
    daily = build_daily_series(derive_features(trips))

    assert list(daily.itertuples(index=False, name=None)) == [
        (pd.Timestamp("2018-01-01"), 2),
        (pd.Timestamp("2018-01-02"), 0),
        (pd.Timestamp("2018-01-03"), 1),
    ]
    assert daily["hire_count"].sum() == 3


def test_daily_series_covers_every_date(sample_trips):
    features = derive_features(sample_trips)
    daily = build_daily_series(features)

    assert daily["date"].min() == features["date"].min()
    assert daily["date"].max() == features["date"].max()
    assert (daily["date"].diff().dropna() == pd.Timedelta(days=1)).all()
    assert daily["hire_count"].sum() == len(sample_trips)


def test_daily_series_requires_date_column():
    with pytest.raises(MalformedInputError):
        build_daily_series(pd.DataFrame({"hire_count": [1]}))


def test_empty_features_give_empty_series():
    daily = build_daily_series(pd.DataFrame({"date": pd.Series(dtype="datetime64[ns]")}))
    assert daily.empty
    assert list(daily.columns) == ["date", "hire_count"]


def test_rolling_average_interior_is_30_day_mean():
    counts = np.random.default_rng(5).poisson(20, size=90)
    avg = rolling_average(counts)

    for i in (14, 30, 45, 74):
        assert avg[i] == pytest.approx(counts[i - 14:i + 16].mean())
        assert len(counts[i - 14:i + 16]) == 30


def test_rolling_average_partial_edges():
    counts = np.arange(60)
    avg = rolling_average(counts, edge_policy="partial")

    assert not np.isnan(avg).any()
    assert avg[0] == pytest.approx(counts[0:16].mean())
    assert avg[59] == pytest.approx(counts[45:60].mean())


def test_rolling_average_edges_do_not_shrink_towards_zero():
    avg = rolling_average(np.full(40, 7))
    assert np.allclose(avg, 7.0)


def test_rolling_average_strict_edges_are_undefined():
    counts = np.arange(60)
    avg = rolling_average(counts, edge_policy="strict")

    assert np.isnan(avg[:14]).all()
    assert np.isnan(avg[-15:]).all()
    assert not np.isnan(avg[14:45]).any()
    assert avg[14] == pytest.approx(counts[0:30].mean())


def test_rolling_average_short_series_never_fails():
    avg = rolling_average([3, 5], edge_policy="partial")
    assert avg.tolist() == [4.0, 4.0]

    strict = rolling_average([3, 5], edge_policy="strict")
    assert np.isnan(strict).all()

    assert rolling_average([]).size == 0


def test_rolling_average_rejects_bad_config():
    with pytest.raises(InvalidConfigurationError):
        rolling_average([1, 2, 3], edge_policy="zero-pad")
    with pytest.raises(InvalidConfigurationError):
        rolling_average([1, 2, 3], before=-1)


def test_weekend_labels():
    daily = pd.DataFrame({
        "date": pd.date_range("2018-01-05", periods=4, freq="D"),
        "hire_count": [1, 2, 3, 4],
    })
    out = add_weekend_labels(daily)

    assert out["weekday"].astype(str).tolist() == ["Fri", "Sat", "Sun", "Mon"]
    assert out["is_weekend"].tolist() == [False, True, True, False]


def test_daily_summary_is_idempotent(sample_trips):
    features = derive_features(sample_trips)
    first = build_daily_summary(features)
    second = build_daily_summary(features)

    pd.testing.assert_frame_equal(first, second)
    assert {"date", "hire_count", "weekday", "is_weekend", "rolling_avg"} <= set(first.columns)


def test_daily_labels_follow_custom_weekend(make_trips):
    # 2018-01-05 is a Friday
    trips = make_trips([
        {"start_time": "2018-01-05 08:00", "end_time": "2018-01-05 08:30"},
        {"start_time": "2018-01-07 10:00", "end_time": "2018-01-07 10:15"},
    ])
    features = derive_features(trips, weekend_days={"Fri", "Sat"})
    daily = build_daily_summary(features, weekend_days={"Fri", "Sat"})

    assert daily["is_weekend"].tolist() == [True, True, False]
    by_date = features.groupby("date")["is_weekend"].first()
    assert (daily.set_index("date")["is_weekend"].loc[by_date.index] == by_date).all()
