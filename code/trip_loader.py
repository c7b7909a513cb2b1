# -*- coding: utf-8 -*-
"""
Created on Fri Jan 10 10:15:36 2026

@author: epicx

trip_loader.py

Load the raw bike-share trip table (one row per hire).

Behavior:
1. Read .csv or .parquet from data/raw/ (or any path).
2. Normalize header names to snake_case and map known aliases.
3. Coerce timestamps, coordinates, birth year and ids.
4. Fail fast on missing required fields (nothing is silently dropped).

Implausible values (negative durations, 120-year-old riders) are kept as-is.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from config import DEFAULT_TRIPS_FILE
from report_utils import read_input
from trip_errors import MalformedInputError


REQUIRED_COLS = [
    "bike_id",
    "start_time",
    "end_time",
    "start_station",
    "end_station",
    "start_lat",
    "start_long",
    "end_lat",
    "end_long",
    "subscription_type",
]

OPTIONAL_COLS = [
    "birth_year",
    "gender",
]

TIME_COLS = ["start_time", "end_time"]
COORD_COLS = ["start_lat", "start_long", "end_lat", "end_long"]
ID_COLS = ["bike_id", "start_station", "end_station"]

# Header variants seen in bike-share exports -> canonical name
COLUMN_ALIASES = {
    "bikeid": "bike_id",
    "bike": "bike_id",
    "starttime": "start_time",
    "start_date": "start_time",
    "started_at": "start_time",
    "stoptime": "end_time",
    "end_date": "end_time",
    "ended_at": "end_time",
    "start_station_id": "start_station",
    "end_station_id": "end_station",
    "start_station_latitude": "start_lat",
    "start_station_longitude": "start_long",
    "end_station_latitude": "end_lat",
    "end_station_longitude": "end_long",
    "start_lon": "start_long",
    "start_lng": "start_long",
    "end_lon": "end_long",
    "end_lng": "end_long",
    "usertype": "subscription_type",
    "user_type": "subscription_type",
    "birthyear": "birth_year",
    "birth_year_": "birth_year",
}


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Lower-case / snake_case the headers and apply COLUMN_ALIASES.
    """
    out = df.copy()
    cols = (
        out.columns.astype(str)
        .str.strip()
        .str.lower()
        .str.replace(r"[\s\-]+", "_", regex=True)
    )
    out.columns = [COLUMN_ALIASES.get(c, c) for c in cols]
    return out


def coerce_trip_types(df: pd.DataFrame) -> pd.DataFrame:
    """
    Coerce column dtypes. Timestamps stay in local wall time: a tz-aware
    column just drops its tz, no conversion happens.
    """
    out = df.copy()

    for col in TIME_COLS:
        if col in out.columns:
            ts = pd.to_datetime(out[col])
            if ts.dt.tz is not None:
                ts = ts.dt.tz_localize(None)
            out[col] = ts

    for col in COORD_COLS:
        if col in out.columns:
            out[col] = pd.to_numeric(out[col]).astype(float)

    for col in ID_COLS + ["subscription_type"]:
        if col in out.columns:
            out[col] = out[col].where(out[col].isna(), out[col].astype(str))

    # Optional fields: add as all-missing when absent, never defaulted
    if "birth_year" in out.columns:
        out["birth_year"] = pd.to_numeric(out["birth_year"]).astype(float).round().astype("Int64")
    else:
        out["birth_year"] = pd.Series(pd.NA, index=out.index, dtype="Int64")

    if "gender" not in out.columns:
        out["gender"] = pd.Series(pd.NA, index=out.index, dtype="object")

    return out


def validate_trips(df: pd.DataFrame) -> None:
    """
    Raise MalformedInputError if a required column is missing or holds nulls.
    """
    missing = [c for c in REQUIRED_COLS if c not in df.columns]
    if missing:
        raise MalformedInputError(f"Trip table is missing required columns: {missing}")

    null_counts = df[REQUIRED_COLS].isna().sum()
    bad_cols = null_counts[null_counts > 0]
    if not bad_cols.empty:
        bad_rows = df.index[df[REQUIRED_COLS].isna().any(axis=1)]
        raise MalformedInputError(
            f"Required fields have missing values: {bad_cols.to_dict()} "
            f"(first rows: {list(bad_rows[:5])})"
        )


def prepare_trips(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize, coerce and validate an in-memory trip table."""
    out = normalize_columns(df)
    out = coerce_trip_types(out)
    validate_trips(out)
    return out


def load_trips(path: Path | str = DEFAULT_TRIPS_FILE) -> pd.DataFrame:
    df = prepare_trips(read_input(Path(path)))
    print(
        f"[Load] {len(df):,} trips, {df['bike_id'].nunique()} bikes, "
        f"{df['start_time'].min()} to {df['start_time'].max()} from: {path}"
    )
    return df
