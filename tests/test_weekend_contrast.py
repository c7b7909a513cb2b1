import numpy as np
import pandas as pd
import pytest

from daily_aggregate import add_weekend_labels
from trip_errors import InvalidConfigurationError, MalformedInputError
from weekend_contrast import mean_difference, weekend_permutation_test, welch_t_check


def make_daily(weekday_counts, weekend_counts, weeks=52, seed=0):
    """Daily series starting Monday 2018-01-01 with Poisson counts per day type."""
    rng = np.random.default_rng(seed)
    dates = pd.date_range("2018-01-01", periods=weeks * 7, freq="D")
    daily = add_weekend_labels(pd.DataFrame({"date": dates, "hire_count": 0}))
    is_weekend = daily["is_weekend"].to_numpy()
    daily["hire_count"] = np.where(
        is_weekend,
        rng.poisson(weekend_counts, size=len(daily)),
        rng.poisson(weekday_counts, size=len(daily)),
    )
    return daily


@pytest.mark.parametrize("reps", [0, -5])
def test_non_positive_reps_rejected(reps):
    with pytest.raises(InvalidConfigurationError):
        weekend_permutation_test(make_daily(20, 20), reps=reps)


@pytest.mark.parametrize("alpha", [0.0, 1.0, 1.5, -0.1])
def test_out_of_range_alpha_rejected(alpha):
    with pytest.raises(InvalidConfigurationError):
        weekend_permutation_test(make_daily(20, 20), alpha=alpha)


def test_config_checked_before_data():
    # bad config wins over bad data
    with pytest.raises(InvalidConfigurationError):
        weekend_permutation_test(pd.DataFrame(), reps=0)


def test_needs_both_day_types():
    daily = make_daily(20, 20).query("~is_weekend")
    with pytest.raises(MalformedInputError):
        weekend_permutation_test(daily, reps=10, seed=1)


def test_clear_weekend_dip_is_significant():
    daily = make_daily(weekday_counts=30, weekend_counts=12)
    result = weekend_permutation_test(daily, reps=500, alpha=0.05, seed=11)

    assert result.observed_statistic < 0
    assert result.p_value < 0.05
    assert result.reject
    assert result.n_weekend_days == 104
    assert result.n_weekday_days == 260


def test_result_shape_and_bounds():
    daily = make_daily(20, 19)
    result = weekend_permutation_test(daily, reps=250, alpha=0.1, seed=3)

    assert len(result.null_distribution) == 250
    assert 0.0 <= result.p_value <= 1.0
    assert result.reject == (result.p_value < 0.1)
    assert result.observed_statistic == pytest.approx(result.weekend_mean - result.weekday_mean)


def test_same_seed_same_result():
    daily = make_daily(20, 15)
    a = weekend_permutation_test(daily, reps=100, seed=42)
    b = weekend_permutation_test(daily, reps=100, seed=42)

    np.testing.assert_array_equal(a.null_distribution, b.null_distribution)
    assert a.p_value == b.p_value


def test_generator_can_be_passed_in():
    daily = make_daily(20, 15)
    a = weekend_permutation_test(daily, reps=100, rng=np.random.default_rng(9))
    b = weekend_permutation_test(daily, reps=100, seed=9)
    np.testing.assert_array_equal(a.null_distribution, b.null_distribution)


def test_permutation_keeps_counts_fixed():
    daily = make_daily(20, 15)
    counts = daily["hire_count"].to_numpy(dtype=float)
    labels = daily["is_weekend"].to_numpy()

    result = weekend_permutation_test(daily, reps=50, seed=0)

    # each permuted statistic is attainable from the same multiset of counts:
    # weekend_sum / k - (total - weekend_sum) / (n - k) inverts to an integer weekend_sum
    n, k = len(counts), labels.sum()
    weekend_sum = (result.null_distribution + counts.sum() / (n - k)) / (1 / k + 1 / (n - k))
    assert np.allclose(weekend_sum, np.round(weekend_sum))


def test_degenerate_counts_give_p_of_one():
    dates = pd.date_range("2018-01-01", periods=28, freq="D")
    daily = add_weekend_labels(pd.DataFrame({"date": dates, "hire_count": 5}))

    result = weekend_permutation_test(daily, reps=100, seed=0)

    assert result.observed_statistic == 0.0
    assert np.all(result.null_distribution == 0.0)
    assert result.p_value == 1.0
    assert not result.reject


def test_mean_difference_batches_match_single():
    counts = np.array([1.0, 4.0, 2.0, 8.0, 5.0])
    labels = np.array([[True, False, False, True, False],
                       [False, True, True, False, False]])

    batch = mean_difference(counts, labels)
    single = [float(mean_difference(counts, row)) for row in labels]

    assert batch.tolist() == pytest.approx(single)
    assert single[0] == pytest.approx((1 + 8) / 2 - (4 + 2 + 5) / 3)


def test_false_positive_rate_is_near_alpha():
    rejects = 0
    n_runs = 200
    for seed in range(n_runs):
        daily = make_daily(weekday_counts=20, weekend_counts=20, seed=1000 + seed)
        result = weekend_permutation_test(daily, reps=500, alpha=0.05, seed=seed)
        rejects += result.reject

    rate = rejects / n_runs
    assert 0.01 <= rate <= 0.11


def test_welch_cross_check_agrees_on_clear_dip():
    daily = make_daily(weekday_counts=30, weekend_counts=12)
    welch = welch_t_check(daily)

    assert welch["t_stat"] < 0
    assert welch["p_value"] < 0.05
    assert welch["df"] > 0


@pytest.mark.parametrize("alpha", [None, "0.05", True])
def test_non_numeric_alpha_rejected(alpha):
    with pytest.raises(InvalidConfigurationError):
        weekend_permutation_test(make_daily(20, 20), alpha=alpha)
