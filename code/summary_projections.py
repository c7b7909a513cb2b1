# -*- coding: utf-8 -*-
"""
Created on Mon Jan 13 10:31:55 2026

@author: epicx

summary_projections.py

Grouped counts / quantiles over derived trip features, for the charts and the
Excel workbook.

Every count table has a `hire_count` column. Trips with a missing gender or
birth year are left out of those groupings (not defaulted to a value).
Duration and distance summaries use quantiles, not means, so the raw
outliers (negative durations, day-long hires) do not drag them around.
"""
from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd

from config import MONTH_ORDER, WEEKDAY_ORDER


DEFAULT_QUANTILES = (0.25, 0.5, 0.75)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _count_by(features: pd.DataFrame, col: str, index=None) -> pd.DataFrame:
    """
    Count trips per value of `col`. Missing values are dropped.
    If `index` is given, the result is reindexed to it with zeros.
    """
    s = features[col].dropna()
    if isinstance(s.dtype, pd.CategoricalDtype):
        s = s.astype("object")

    counts = s.value_counts()
    if index is not None:
        counts = counts.reindex(index, fill_value=0)
    else:
        counts = counts.sort_index()

    out = counts.rename("hire_count").rename_axis(col).reset_index()
    out["hire_count"] = out["hire_count"].astype("int64")
    return out


# ---------------------------------------------------------------------------
# Calendar projections
# ---------------------------------------------------------------------------

def counts_by_hour(features: pd.DataFrame) -> pd.DataFrame:
    return _count_by(features, "hour", index=range(24))


def counts_by_weekday(features: pd.DataFrame, weekday_order=WEEKDAY_ORDER) -> pd.DataFrame:
    return _count_by(features, "weekday", index=weekday_order)


def counts_by_month(features: pd.DataFrame, month_order=MONTH_ORDER) -> pd.DataFrame:
    return _count_by(features, "month", index=month_order)


def counts_by_quarter(features: pd.DataFrame) -> pd.DataFrame:
    return _count_by(features, "quarter", index=range(1, 5))


def counts_by_hour_and_weekday(
    features: pd.DataFrame,
    weekday_order=WEEKDAY_ORDER,
) -> pd.DataFrame:
    """24 x 7 pivot: rows = hour of day, columns = weekday."""
    table = pd.crosstab(
        features["hour"],
        features["weekday"].astype("object"),
    )
    table = table.reindex(index=range(24), columns=weekday_order, fill_value=0)
    table.index.name = "hour"
    table.columns.name = None
    return table


# ---------------------------------------------------------------------------
# Rider projections
# ---------------------------------------------------------------------------

def counts_by_gender(features: pd.DataFrame) -> pd.DataFrame:
    return _count_by(features, "gender")


def counts_by_subscription(features: pd.DataFrame) -> pd.DataFrame:
    return _count_by(features, "subscription_type")


def counts_by_birth_year(features: pd.DataFrame) -> pd.DataFrame:
    """
    Hires per birth year. Implausible years (and any single-year spike) are
    kept as they are in the data.
    """
    return _count_by(features, "birth_year")


# ---------------------------------------------------------------------------
# Fleet / station / distance projections
# ---------------------------------------------------------------------------

def counts_by_bike(features: pd.DataFrame) -> pd.DataFrame:
    return _count_by(features, "bike_id")


def station_activity(features: pd.DataFrame) -> pd.DataFrame:
    """
    Departures, arrivals and net flow (arrivals - departures) per station,
    sorted by total activity.
    """
    departures = features["start_station"].value_counts().rename("departures")
    arrivals = features["end_station"].value_counts().rename("arrivals")

    out = pd.concat([departures, arrivals], axis=1).fillna(0).astype("int64")
    out["net_flow"] = out["arrivals"] - out["departures"]
    out["total"] = out["arrivals"] + out["departures"]
    out.index.name = "station"

    out = out.reset_index().sort_values(["total", "station"], ascending=[False, True])
    return out.reset_index(drop=True)


def counts_by_distance_bucket(features: pd.DataFrame) -> pd.DataFrame:
    labels = list(features["distance_bucket"].cat.categories)
    return _count_by(features, "distance_bucket", index=labels)


# ---------------------------------------------------------------------------
# Robust summaries
# ---------------------------------------------------------------------------

def _quantiles_by(
    features: pd.DataFrame,
    value_col: str,
    by: str | None,
    quantiles: Sequence[float],
) -> pd.DataFrame:
    cols = {f"q{int(round(q * 100)):02d}": q for q in quantiles}

    if by is None:
        s = features[value_col].dropna()
        row = {name: s.quantile(q) for name, q in cols.items()}
        row["n"] = len(s)
        return pd.DataFrame([row])

    grouped = features.dropna(subset=[by]).groupby(by, observed=True, sort=True)[value_col]
    out = pd.DataFrame({name: grouped.quantile(q) for name, q in cols.items()})
    out["n"] = grouped.count()
    return out.reset_index()


def duration_quantiles(
    features: pd.DataFrame,
    by: str | None = None,
    quantiles: Sequence[float] = DEFAULT_QUANTILES,
) -> pd.DataFrame:
    """Quantiles of duration_minutes, optionally per group (e.g. 'subscription_type')."""
    return _quantiles_by(features, "duration_minutes", by, quantiles)


def distance_quantiles(
    features: pd.DataFrame,
    by: str | None = None,
    quantiles: Sequence[float] = DEFAULT_QUANTILES,
) -> pd.DataFrame:
    return _quantiles_by(features, "distance_km", by, quantiles)


def build_all_projections(features: pd.DataFrame) -> Dict[str, pd.DataFrame]:
    """
    All projections in report order: name -> DataFrame.
    """
    return {
        "by_hour": counts_by_hour(features),
        "by_weekday": counts_by_weekday(features),
        "by_month": counts_by_month(features),
        "by_quarter": counts_by_quarter(features),
        "hour_x_weekday": counts_by_hour_and_weekday(features).reset_index(),
        "by_gender": counts_by_gender(features),
        "by_subscription": counts_by_subscription(features),
        "by_birth_year": counts_by_birth_year(features),
        "by_bike": counts_by_bike(features),
        "stations": station_activity(features),
        "by_distance_bucket": counts_by_distance_bucket(features),
        "duration_quantiles": duration_quantiles(features),
        "duration_by_subscription": duration_quantiles(features, by="subscription_type"),
        "duration_by_gender": duration_quantiles(features, by="gender"),
        "distance_quantiles": distance_quantiles(features),
    }
