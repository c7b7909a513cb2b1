# -*- coding: utf-8 -*-
"""
Created on Fri Jan 10 14:48:09 2026

@author: epicx

trip_features.py

Per-trip time and distance features.

Adds to each trip row (same index, same order, nothing dropped):

    hour              0-23 from start_time
    weekday           ordered Mon..Sun
    month             ordered Jan..Dec
    quarter           fiscal quarter 1-4 (start month configurable)
    date              calendar date of start_time (midnight timestamp)
    is_weekend        weekday in Sat/Sun
    duration_minutes  end_time - start_time, NOT clamped (can be negative)
    distance_km       haversine distance between start and end coordinates
    distance_bucket   0, (0,1], (1,2], ... km
    age_years         start year - birth_year (nullable)

Calendar fields come from start_time only. Timestamps are treated as local
time already; no timezone conversion.
"""
from __future__ import annotations

from typing import Iterable, List

import numpy as np
import pandas as pd

from config import (
    DISTANCE_BUCKET_EDGES,
    DISTANCE_DECIMALS,
    EARTH_RADIUS_KM,
    FISCAL_YEAR_START_MONTH,
    MAX_PLAUSIBLE_AGE,
    MAX_PLAUSIBLE_DURATION_MIN,
    MIN_PLAUSIBLE_AGE,
    MONTH_ORDER,
    WEEKDAY_ORDER,
    WEEKEND_DAYS,
)
from trip_errors import InvalidConfigurationError
from trip_loader import TIME_COLS, validate_trips


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def haversine_km(lat1, lon1, lat2, lon2, radius_km: float = EARTH_RADIUS_KM):
    """
    Great-circle distance (km) on a sphere of the given radius.
    Works on scalars, numpy arrays and pandas Series.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    dphi = np.radians(lat2 - lat1)
    dlambda = np.radians(lon2 - lon1)

    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlambda / 2) ** 2
    # float noise can push a just outside [0, 1]
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arcsin(np.sqrt(a))
    return radius_km * c


def fiscal_quarter(month, start_month: int = FISCAL_YEAR_START_MONTH):
    """
    Fiscal quarter (1-4) for calendar month(s) 1-12.
    start_month=1 gives calendar quarters.
    """
    if not 1 <= int(start_month) <= 12:
        raise InvalidConfigurationError(f"Fiscal start month out of range 1-12: {start_month}")
    return (month - start_month) % 12 // 3 + 1


def distance_bucket_labels(edges: List[float] = DISTANCE_BUCKET_EDGES) -> List[str]:
    labels = ["0"]
    labels += [f"({edges[i]},{edges[i + 1]}]" for i in range(len(edges) - 1)]
    labels.append(f"({edges[-1]},∞]")
    return labels


def make_distance_buckets(
    s: pd.Series,
    edges: List[float] = DISTANCE_BUCKET_EDGES,
) -> pd.Series:
    """Return ordered categorical distance buckets: [0], (0,1], ..., (last,∞]."""
    labels = distance_bucket_labels(edges)

    zero_mask = s == 0
    pos = s[~zero_mask]

    bins = list(edges) + [np.inf]
    pos_binned = pd.cut(pos, bins=bins, right=True, include_lowest=False, labels=labels[1:])

    bucket = pd.Series(index=s.index, dtype="object")
    bucket[zero_mask] = "0"
    bucket[~zero_mask] = pos_binned.astype("object")

    return bucket.astype(pd.CategoricalDtype(labels, ordered=True))


def _ensure_datetimes(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    """Coerce listed columns to datetime if needed."""
    df = df.copy()
    for col in cols:
        if not pd.api.types.is_datetime64_any_dtype(df[col]):
            df[col] = pd.to_datetime(df[col])
    return df


# ---------------------------------------------------------------------------
# Feature derivation
# ---------------------------------------------------------------------------

def derive_features(
    trips: pd.DataFrame,
    radius_km: float = EARTH_RADIUS_KM,
    fiscal_start_month: int = FISCAL_YEAR_START_MONTH,
    distance_decimals: int = DISTANCE_DECIMALS,
    weekday_order: List[str] = WEEKDAY_ORDER,
    month_order: List[str] = MONTH_ORDER,
    weekend_days=WEEKEND_DAYS,
    bucket_edges: List[float] = DISTANCE_BUCKET_EDGES,
) -> pd.DataFrame:
    """
    Compute the derived features for every trip.

    Output has exactly one row per input row, in input order, with the
    original columns carried alongside. Raises MalformedInputError when a
    required field (ids, timestamps, coordinates) is missing.
    """
    validate_trips(trips)
    out = _ensure_datetimes(trips, TIME_COLS)

    start = out["start_time"]
    end = out["end_time"]

    # calendar fields
    out["hour"] = start.dt.hour
    weekday = start.dt.dayofweek.map(dict(enumerate(weekday_order)))
    out["weekday"] = weekday.astype(pd.CategoricalDtype(weekday_order, ordered=True))
    month = (start.dt.month - 1).map(dict(enumerate(month_order)))
    out["month"] = month.astype(pd.CategoricalDtype(month_order, ordered=True))
    out["quarter"] = fiscal_quarter(start.dt.month, fiscal_start_month)
    out["date"] = start.dt.normalize()
    out["is_weekend"] = weekday.isin(weekend_days)

    # hire duration, kept raw
    out["duration_minutes"] = (end - start).dt.total_seconds() / 60.0

    # distance from coordinates (not station ids)
    dist = haversine_km(
        out["start_lat"].to_numpy(dtype=float),
        out["start_long"].to_numpy(dtype=float),
        out["end_lat"].to_numpy(dtype=float),
        out["end_long"].to_numpy(dtype=float),
        radius_km=radius_km,
    )
    out["distance_km"] = np.round(dist, distance_decimals)
    out["distance_bucket"] = make_distance_buckets(out["distance_km"], bucket_edges)

    if "birth_year" in out.columns:
        birth_year = pd.to_numeric(out["birth_year"]).astype("Int64")
        out["birth_year"] = birth_year
        out["age_years"] = start.dt.year.astype("Int64") - birth_year
    else:
        out["birth_year"] = pd.Series(pd.NA, index=out.index, dtype="Int64")
        out["age_years"] = pd.Series(pd.NA, index=out.index, dtype="Int64")

    # optional rider field, all-missing when the source has none
    if "gender" not in out.columns:
        out["gender"] = pd.Series(pd.NA, index=out.index, dtype="object")

    return out


def flag_implausible_values(
    features: pd.DataFrame,
    min_age: int = MIN_PLAUSIBLE_AGE,
    max_age: int = MAX_PLAUSIBLE_AGE,
    max_duration_min: float = MAX_PLAUSIBLE_DURATION_MIN,
) -> pd.DataFrame:
    """
    Add boolean columns marking implausible ages and durations.

    Values are never altered or dropped here; filtering on the flags is
    left to the caller.

      - implausible_age      = age outside [min_age, max_age] (missing age -> False)
      - implausible_duration = duration < 0 or > max_duration_min
    """
    out = features.copy()

    age = out["age_years"]
    out["implausible_age"] = ((age < min_age) | (age > max_age)).fillna(False).astype(bool)

    dur = out["duration_minutes"]
    out["implausible_duration"] = (dur < 0) | (dur > max_duration_min)

    return out
