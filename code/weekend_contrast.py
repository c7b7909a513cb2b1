# -*- coding: utf-8 -*-
"""
Created on Sun Jan 12 16:03:27 2026

@author: epicx

Weekend vs weekday daily hires: one-sided permutation test.

H0: daily hire counts do not depend on the weekend label.
H1: weekend days have fewer hires than weekdays.

Statistic: mean(hire_count | weekend) - mean(hire_count | weekday).
The null distribution reshuffles the weekend labels across the fixed daily
counts (label permutation, not resampling). The p-value is the share of
permuted statistics <= the observed one.

Usage:
    from weekend_contrast import weekend_permutation_test, welch_t_check
"""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd
from statsmodels.stats.weightstats import ttest_ind

from config import PERMUTATION_REPS, SIGNIFICANCE_LEVEL
from trip_errors import InvalidConfigurationError, MalformedInputError


@dataclass
class WeekendTestResult:
    observed_statistic: float
    null_distribution: np.ndarray
    p_value: float
    reject: bool
    reps: int
    alpha: float
    weekend_mean: float
    weekday_mean: float
    n_weekend_days: int
    n_weekday_days: int


def check_test_config(reps, alpha) -> None:
    if isinstance(reps, bool) or not isinstance(reps, (int, np.integer)):
        raise InvalidConfigurationError(f"reps must be an integer, got {reps!r}")
    if reps <= 0:
        raise InvalidConfigurationError(f"reps must be > 0, got {reps}")
    if isinstance(alpha, bool) or not isinstance(alpha, (int, float, np.floating)):
        raise InvalidConfigurationError(f"Significance level must be a number, got {alpha!r}")
    if not 0 < alpha < 1:
        raise InvalidConfigurationError(f"Significance level must be in (0, 1), got {alpha}")


def _split_counts(daily: pd.DataFrame, count_col: str, label_col: str):
    for col in (count_col, label_col):
        if col not in daily.columns:
            raise MalformedInputError(f"Daily series is missing '{col}' column.")

    counts = daily[count_col].to_numpy(dtype=float)
    labels = daily[label_col].to_numpy(dtype=bool)

    n_weekend = int(labels.sum())
    n_weekday = len(labels) - n_weekend
    if n_weekend == 0 or n_weekday == 0:
        raise MalformedInputError(
            f"Need both weekend and weekday days (weekend={n_weekend}, weekday={n_weekday})."
        )
    return counts, labels


def mean_difference(counts: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """
    Weekend mean minus weekday mean.

    labels may be 1-D (one labelling) or 2-D (one labelling per row); the
    result is a scalar array or one statistic per row.
    """
    labels = labels.astype(float)
    n_weekend = labels.sum(axis=-1)
    n_weekday = labels.shape[-1] - n_weekend
    weekend_sum = labels @ counts
    weekday_sum = counts.sum() - weekend_sum
    return weekend_sum / n_weekend - weekday_sum / n_weekday


def weekend_permutation_test(
    daily: pd.DataFrame,
    reps: int = PERMUTATION_REPS,
    alpha: float = SIGNIFICANCE_LEVEL,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
    count_col: str = "hire_count",
    label_col: str = "is_weekend",
) -> WeekendTestResult:
    """
    Run the label-permutation test on a daily series with is_weekend attached.

    Pass either seed or a numpy Generator for reproducible draws; with
    neither, the draws are fresh each call.
    """
    check_test_config(reps, alpha)
    counts, labels = _split_counts(daily, count_col, label_col)

    if rng is None:
        rng = np.random.default_rng(seed)

    observed = float(mean_difference(counts, labels))

    # one row per repetition, each row an independent shuffle of the labels
    perms = rng.permuted(np.tile(labels, (reps, 1)), axis=1)
    null_dist = mean_difference(counts, perms)

    # inclusive left tail; isclose keeps exact ties from float noise
    at_or_below = (null_dist <= observed) | np.isclose(null_dist, observed)
    p_value = float(at_or_below.sum() / reps)

    return WeekendTestResult(
        observed_statistic=observed,
        null_distribution=null_dist,
        p_value=p_value,
        reject=bool(p_value < alpha),
        reps=int(reps),
        alpha=float(alpha),
        weekend_mean=float(counts[labels].mean()),
        weekday_mean=float(counts[~labels].mean()),
        n_weekend_days=int(labels.sum()),
        n_weekday_days=int((~labels).sum()),
    )


def welch_t_check(
    daily: pd.DataFrame,
    count_col: str = "hire_count",
    label_col: str = "is_weekend",
) -> dict:
    """
    Parametric cross-check: one-sided Welch t-test (weekend < weekday).

    Returns a dict with t_stat, p_value, df.
    """
    counts, labels = _split_counts(daily, count_col, label_col)
    t_stat, p_value, dof = ttest_ind(
        counts[labels],
        counts[~labels],
        alternative="smaller",
        usevar="unequal",
    )
    return {
        "t_stat": float(t_stat),
        "p_value": float(p_value),
        "df": float(dof),
    }


def print_test_summary(result: WeekendTestResult) -> None:
    print("=" * 90)
    print("[Weekend test] H1: weekend daily hires < weekday daily hires")
    print(f"  Weekend days: {result.n_weekend_days}  mean hires: {result.weekend_mean:.2f}")
    print(f"  Weekday days: {result.n_weekday_days}  mean hires: {result.weekday_mean:.2f}")
    print(f"  Observed difference: {result.observed_statistic:.3f}")
    print(f"  Permutations: {result.reps}  p-value: {result.p_value:.4f}")
    print(f"  Result: {'REJECT H0' if result.reject else 'FAIL TO REJECT H0'} "
          f"at alpha = {result.alpha}")
    print("=" * 90)
