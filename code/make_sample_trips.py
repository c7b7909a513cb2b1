# -*- coding: utf-8 -*-
"""
Created on Thu Jan 16 08:54:30 2026

@author: epicx

make_sample_trips.py

Write a synthetic one-year trip file for ten bikes so the report can run end to
end without the operator's export.

The data carries the same quirks as the real export:
  - fewer hires on weekends
  - commute peaks on weekdays, a midday bump on weekends
  - a handful of negative and day-long durations
  - missing / implausible birth years and a spike at one birth year
  - some round trips (same start and end station)

Usage (from repo root):

    python code/make_sample_trips.py --year 2018 --out data/raw/bike_trips.csv
"""
from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import pandas as pd

from config import DEFAULT_TRIPS_FILE
from report_utils import ensure_out_dir


# (station id, lat, long)
STATIONS = [
    ("S01", 40.7128, -74.0060),
    ("S02", 40.7193, -73.9985),
    ("S03", 40.7265, -73.9942),
    ("S04", 40.7306, -73.9866),
    ("S05", 40.7359, -73.9911),
    ("S06", 40.7411, -73.9897),
    ("S07", 40.7484, -73.9857),
    ("S08", 40.7527, -73.9772),
    ("S09", 40.7061, -74.0087),
    ("S10", 40.7021, -74.0119),
    ("S11", 40.7150, -74.0150),
    ("S12", 40.7420, -74.0048),
]

WEEKDAY_RATE = 2.6   # hires per bike per weekday
WEEKEND_RATE = 1.3   # hires per bike per weekend day

ROUND_TRIP_SHARE = 0.12
NEGATIVE_DURATION_SHARE = 0.003
LONG_DURATION_SHARE = 0.003
MISSING_BIRTH_YEAR_SHARE = 0.05
SPIKE_BIRTH_YEAR = 1969
SPIKE_BIRTH_YEAR_SHARE = 0.03
IMPLAUSIBLE_BIRTH_YEAR_SHARE = 0.005


def _hour_profile(peaks, widths, weights, base: float = 0.02) -> np.ndarray:
    """Mixture of bumps over 0-23, normalized to probabilities."""
    hours = np.arange(24)
    p = np.full(24, base)
    for peak, width, weight in zip(peaks, widths, weights):
        p += weight * np.exp(-0.5 * ((hours - peak) / width) ** 2)
    return p / p.sum()


WEEKDAY_HOURS = _hour_profile(peaks=[8, 17.5, 12.5], widths=[1.2, 1.5, 2.0], weights=[1.0, 1.0, 0.35])
WEEKEND_HOURS = _hour_profile(peaks=[14], widths=[3.0], weights=[1.0])


def make_sample_trips(
    year: int = 2018,
    n_bikes: int = 10,
    seed: int = 42,
    weekday_rate: float = WEEKDAY_RATE,
    weekend_rate: float = WEEKEND_RATE,
) -> pd.DataFrame:
    """
    Build the synthetic trip table (raw export headers, one row per hire).
    """
    rng = np.random.default_rng(seed)
    days = pd.date_range(f"{year}-01-01", f"{year}-12-31", freq="D")
    is_weekend_day = np.asarray(days.dayofweek >= 5)

    frames = []
    for bike in range(1, n_bikes + 1):
        lam = np.where(is_weekend_day, weekend_rate, weekday_rate)
        n_per_day = rng.poisson(lam)

        trip_days = np.repeat(days.to_numpy(), n_per_day)
        trip_weekend = np.repeat(is_weekend_day, n_per_day)
        n = len(trip_days)

        hours = np.where(
            trip_weekend,
            rng.choice(24, size=n, p=WEEKEND_HOURS),
            rng.choice(24, size=n, p=WEEKDAY_HOURS),
        )
        minutes = rng.integers(0, 60, size=n)
        seconds = rng.integers(0, 60, size=n)
        start = (
            pd.to_datetime(trip_days)
            + pd.to_timedelta(hours, unit="h")
            + pd.to_timedelta(minutes, unit="m")
            + pd.to_timedelta(seconds, unit="s")
        )

        frames.append(pd.DataFrame({
            "Bike ID": f"B{bike:02d}",
            "Start Time": start,
            "weekend": trip_weekend,
        }))

    df = pd.concat(frames, ignore_index=True)
    n = len(df)

    # stations
    start_idx = rng.integers(0, len(STATIONS), size=n)
    offset = rng.integers(1, len(STATIONS), size=n)
    end_idx = (start_idx + offset) % len(STATIONS)
    round_trip = rng.random(n) < ROUND_TRIP_SHARE
    end_idx = np.where(round_trip, start_idx, end_idx)

    ids = np.array([s[0] for s in STATIONS])
    lats = np.array([s[1] for s in STATIONS])
    longs = np.array([s[2] for s in STATIONS])

    # durations (minutes): lognormal, longer for round trips, plus raw anomalies
    duration = rng.lognormal(mean=np.log(13), sigma=0.55, size=n)
    duration = np.where(round_trip, duration * 2.5, duration)
    u = rng.random(n)
    negative = u < NEGATIVE_DURATION_SHARE
    very_long = (u >= NEGATIVE_DURATION_SHARE) & (u < NEGATIVE_DURATION_SHARE + LONG_DURATION_SHARE)
    duration = np.where(negative, -rng.uniform(1, 60, size=n), duration)
    duration = np.where(very_long, rng.uniform(1500, 5000, size=n), duration)

    df["End Time"] = df["Start Time"] + pd.to_timedelta(np.round(duration * 60), unit="s")
    df["Start Station"] = ids[start_idx]
    df["End Station"] = ids[end_idx]
    df["Start Lat"] = lats[start_idx]
    df["Start Long"] = longs[start_idx]
    df["End Lat"] = lats[end_idx]
    df["End Long"] = longs[end_idx]

    casual_p = np.where(df["weekend"], 0.45, 0.15)
    df["Subscription Type"] = np.where(rng.random(n) < casual_p, "Casual", "Subscriber")

    # birth year: plausible spread + missing + spike + implausible
    birth_year = np.round(rng.normal(1982, 11, size=n))
    u = rng.random(n)
    birth_year = np.where(u < SPIKE_BIRTH_YEAR_SHARE, SPIKE_BIRTH_YEAR, birth_year)
    implausible = (u >= SPIKE_BIRTH_YEAR_SHARE) & (u < SPIKE_BIRTH_YEAR_SHARE + IMPLAUSIBLE_BIRTH_YEAR_SHARE)
    birth_year = np.where(implausible, rng.integers(1890, 1910, size=n), birth_year)
    missing = rng.random(n) < MISSING_BIRTH_YEAR_SHARE
    df["Birth Year"] = pd.Series(np.where(missing, np.nan, birth_year), index=df.index).astype("Int64")

    df["Gender"] = rng.choice(["Male", "Female", "Unknown"], size=n, p=[0.6, 0.32, 0.08])

    df = df.drop(columns=["weekend"]).sort_values("Start Time").reset_index(drop=True)
    return df


def write_sample_trips(out_path: Path | str = DEFAULT_TRIPS_FILE, **kwargs) -> Path:
    out_path = Path(out_path)
    ensure_out_dir(out_path.parent)

    df = make_sample_trips(**kwargs)
    if out_path.suffix == ".parquet":
        df.to_parquet(out_path, index=False)
    else:
        df.to_csv(out_path, index=False)

    print(f"Wrote {len(df):,} synthetic trips to: {out_path}")
    return out_path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Write a synthetic bike-share trip file.")
    parser.add_argument("--year", type=int, default=2018)
    parser.add_argument("--bikes", type=int, default=10)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument(
        "--out",
        default=str(DEFAULT_TRIPS_FILE),
        help="Output path (.csv or .parquet). Defaults to data/raw/bike_trips.csv.",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    write_sample_trips(args.out, year=args.year, n_bikes=args.bikes, seed=args.seed)
