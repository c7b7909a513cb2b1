# -*- coding: utf-8 -*-
"""
Created on Sat Jan 11 11:20:44 2026

@author: epicx

daily_aggregate.py

Trip features -> gap-filled daily hire series with a centered rolling average.

Output columns:
    date, hire_count, weekday, is_weekend, rolling_avg
"""
from __future__ import annotations

import numpy as np
import pandas as pd

from config import (
    ROLLING_DAYS_AFTER,
    ROLLING_DAYS_BEFORE,
    ROLLING_EDGE_POLICY,
    WEEKDAY_ORDER,
    WEEKEND_DAYS,
)
from trip_errors import InvalidConfigurationError, MalformedInputError


EDGE_POLICIES = ("partial", "strict")


def build_daily_series(features: pd.DataFrame, date_col: str = "date") -> pd.DataFrame:
    """
    Count hires per calendar date over every date between the first and last
    trip date (inclusive). Dates without trips get hire_count = 0.
    """
    if date_col not in features.columns:
        raise MalformedInputError(f"Missing '{date_col}' column; derive trip features first.")

    dates = pd.to_datetime(features[date_col]).dt.normalize()
    if dates.empty:
        return pd.DataFrame({
            "date": pd.Series(dtype="datetime64[ns]"),
            "hire_count": pd.Series(dtype="int64"),
        })

    counts = dates.value_counts().sort_index()
    full_range = pd.date_range(dates.min(), dates.max(), freq="D")
    counts = counts.reindex(full_range, fill_value=0)

    return pd.DataFrame({
        "date": full_range,
        "hire_count": counts.to_numpy(dtype="int64"),
    })


def rolling_average(
    counts,
    before: int = ROLLING_DAYS_BEFORE,
    after: int = ROLLING_DAYS_AFTER,
    edge_policy: str = ROLLING_EDGE_POLICY,
) -> np.ndarray:
    """
    Centered rolling mean over positions i-before .. i+after (inclusive).

    edge_policy:
      - "partial": near the ends, average over the positions that exist
        (the window shrinks; missing days are never counted as zero)
      - "strict":  positions whose full window is not inside the series are NaN
    """
    if edge_policy not in EDGE_POLICIES:
        raise InvalidConfigurationError(
            f"Unknown edge policy {edge_policy!r}; expected one of {EDGE_POLICIES}"
        )
    if before < 0 or after < 0:
        raise InvalidConfigurationError(
            f"Rolling window offsets must be >= 0 (before={before}, after={after})"
        )

    values = np.asarray(counts, dtype=float)
    n = len(values)
    if n == 0:
        return np.array([], dtype=float)

    idx = np.arange(n)
    lo = idx - before
    hi = idx + after

    # window sums from a cumulative sum: sum(values[lo:hi+1])
    csum = np.concatenate([[0.0], np.cumsum(values)])
    lo_c = np.clip(lo, 0, n)
    hi_c = np.clip(hi + 1, 0, n)
    avg = (csum[hi_c] - csum[lo_c]) / (hi_c - lo_c)

    if edge_policy == "strict":
        avg[(lo < 0) | (hi > n - 1)] = np.nan

    return avg


def add_weekend_labels(
    daily: pd.DataFrame,
    weekday_order=WEEKDAY_ORDER,
    weekend_days=WEEKEND_DAYS,
) -> pd.DataFrame:
    """Attach weekday name and is_weekend to each date."""
    out = daily.copy()
    weekday = out["date"].dt.dayofweek.map(dict(enumerate(weekday_order)))
    out["weekday"] = weekday.astype(pd.CategoricalDtype(weekday_order, ordered=True))
    out["is_weekend"] = weekday.isin(weekend_days)
    return out


def build_daily_summary(
    features: pd.DataFrame,
    before: int = ROLLING_DAYS_BEFORE,
    after: int = ROLLING_DAYS_AFTER,
    edge_policy: str = ROLLING_EDGE_POLICY,
    weekday_order=WEEKDAY_ORDER,
    weekend_days=WEEKEND_DAYS,
) -> pd.DataFrame:
    """
    Daily series + weekend labels + rolling average in one frame.

    Pass the same weekday_order / weekend_days used for derive_features so
    the daily labels agree with the per-trip is_weekend.
    """
    daily = build_daily_series(features)
    daily = add_weekend_labels(daily, weekday_order=weekday_order, weekend_days=weekend_days)
    daily["rolling_avg"] = rolling_average(
        daily["hire_count"],
        before=before,
        after=after,
        edge_policy=edge_policy,
    )
    return daily
