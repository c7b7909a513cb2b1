# -*- coding: utf-8 -*-
"""
Created on Tue Jan 14 18:22:40 2026

@author: epicx

Plotting for the bike-share trip report.

Every plot either saves a PNG (save=True) into out_dir, defaulting to
<PROJECT_ROOT>/plots, or shows it interactively.
"""

from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from config import DAY_COLOR_MAP, PLOTS_DIR, WEEKDAY_ORDER
from report_utils import ensure_out_dir
from weekend_contrast import WeekendTestResult


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _finish(fig, filename: str, save: bool, out_dir: Path | None) -> Path | None:
    """Save to out_dir/filename or show, then close the figure."""
    path = None
    if save:
        if out_dir is None:
            out_dir = PLOTS_DIR
        out_dir = ensure_out_dir(out_dir)
        path = out_dir / filename
        fig.savefig(path, dpi=150, bbox_inches="tight")
    else:
        plt.show()
    plt.close(fig)
    return path


# ---------------------------------------------------------------------------
# Plotting functions
# ---------------------------------------------------------------------------

def plot_daily_hires(
    daily: pd.DataFrame,
    save: bool = False,
    out_dir: Path | None = None,
) -> Path | None:
    """
    Daily hires (bars) with the 30-day centered rolling average on top.
    Weekend days are drawn in a lighter shade.
    """
    if daily.empty or "hire_count" not in daily.columns:
        print("No daily series; skipping daily hires plot.")
        return None

    fig, ax = plt.subplots(figsize=(14, 5))

    colors = "tab:blue"
    if "is_weekend" in daily.columns:
        colors = np.where(daily["is_weekend"], "tab:gray", "tab:blue").tolist()
    ax.bar(daily["date"], daily["hire_count"], color=colors, width=1.0, alpha=0.5)

    if "rolling_avg" in daily.columns:
        ax.plot(
            daily["date"],
            daily["rolling_avg"],
            color="red",
            linewidth=2,
            label="30-day centered average",
        )
        ax.legend()

    ax.set_title("Daily hires")
    ax.set_xlabel("Date")
    ax.set_ylabel("Hires")
    ax.grid(True, axis="y", alpha=0.3)

    return _finish(fig, "daily_hires.png", save, out_dir)


def plot_counts_bar(
    table: pd.DataFrame,
    key_col: str,
    title: str,
    xlabel: str,
    filename: str,
    save: bool = False,
    out_dir: Path | None = None,
    color_map: dict | None = None,
) -> Path | None:
    """Bar chart of a projection table (key_col vs hire_count)."""
    if table.empty or key_col not in table.columns:
        print(f"No data for {title}; skipping.")
        return None

    keys = table[key_col].astype(str)
    colors = None
    if color_map is not None:
        colors = [color_map.get(k, "tab:blue") for k in keys]

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.bar(keys, table["hire_count"], color=colors)
    ax.set_title(title)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Hires")
    ax.grid(True, axis="y", alpha=0.3)
    if len(keys) > 12:
        ax.tick_params(axis="x", labelrotation=90)

    return _finish(fig, filename, save, out_dir)


def plot_hour_weekday_heatmap(
    pivot: pd.DataFrame,
    save: bool = False,
    out_dir: Path | None = None,
) -> Path | None:
    """Heatmap of hires by hour of day (rows) and weekday (columns)."""
    if pivot.empty:
        print("No hour x weekday table; skipping heatmap.")
        return None

    fig, ax = plt.subplots(figsize=(7, 8))
    im = ax.imshow(pivot.to_numpy(), aspect="auto", cmap="viridis")
    ax.set_xticks(range(len(pivot.columns)))
    ax.set_xticklabels(pivot.columns)
    ax.set_yticks(range(len(pivot.index)))
    ax.set_yticklabels(pivot.index)
    ax.set_xlabel("Weekday")
    ax.set_ylabel("Hour of day")
    ax.set_title("Hires by hour and weekday")
    fig.colorbar(im, ax=ax, label="Hires")

    return _finish(fig, "heatmap_hour_weekday.png", save, out_dir)


def plot_duration_hist(
    features: pd.DataFrame,
    save: bool = False,
    out_dir: Path | None = None,
    bin_width: float = 5.0,
    upper_quantile: float = 0.99,
) -> Path | None:
    """
    Histogram of hire duration (minutes) with the median marked.

    The x-range is cut at upper_quantile so a few day-long hires don't flatten
    the chart; the data itself is not filtered.
    """
    s = features["duration_minutes"].dropna()
    if s.empty:
        print("No data for duration histogram; skipping.")
        return None

    hi = s.quantile(upper_quantile)
    mn = np.floor(s.min() / bin_width) * bin_width
    mx = max(np.ceil(hi / bin_width) * bin_width, mn + bin_width)
    bins = np.arange(mn, mx + bin_width, bin_width)

    median_val = s.median()

    fig, ax = plt.subplots(figsize=(8, 4))
    ax.hist(s.clip(upper=mx), bins=bins)
    ax.set_title("Hire duration")
    ax.set_xlabel("Duration (minutes)")
    ax.set_ylabel("Count")
    ax.grid(True, axis="y", alpha=0.3)

    ax.axvline(
        median_val,
        color="red",
        linewidth=2,
        linestyle="--",
        label=f"Median = {median_val:.1f}"
    )
    ax.legend()

    return _finish(fig, "hist_duration_minutes.png", save, out_dir)


def plot_null_distribution(
    result: WeekendTestResult,
    save: bool = False,
    out_dir: Path | None = None,
) -> Path | None:
    """Permutation null distribution with the observed statistic marked."""
    fig, ax = plt.subplots(figsize=(8, 4))
    ax.hist(result.null_distribution, bins=30, color="tab:gray")
    ax.axvline(
        result.observed_statistic,
        color="red",
        linewidth=2,
        linestyle="--",
        label=f"Observed = {result.observed_statistic:.2f} (p = {result.p_value:.3f})",
    )
    ax.set_title(f"Weekend - weekday mean daily hires, {result.reps} permutations")
    ax.set_xlabel("Difference in mean daily hires")
    ax.set_ylabel("Count")
    ax.legend()

    return _finish(fig, "weekend_null_distribution.png", save, out_dir)


def plot_report_charts(
    features: pd.DataFrame,
    daily: pd.DataFrame,
    projections: dict,
    result: WeekendTestResult | None = None,
    save: bool = False,
    out_dir: Path | None = None,
) -> list:
    """Run every report chart; returns the saved paths (empty when showing)."""
    paths = [
        plot_daily_hires(daily, save=save, out_dir=out_dir),
        plot_counts_bar(projections["by_hour"], "hour", "Hires by hour of day",
                        "Hour of day (0–23)", "bar_hires_by_hour.png", save, out_dir),
        plot_counts_bar(projections["by_weekday"], "weekday", "Hires by weekday",
                        "Weekday", "bar_hires_by_weekday.png", save, out_dir,
                        color_map=DAY_COLOR_MAP),
        plot_counts_bar(projections["by_month"], "month", "Hires by month",
                        "Month", "bar_hires_by_month.png", save, out_dir),
        plot_counts_bar(projections["by_quarter"], "quarter", "Hires by quarter",
                        "Quarter", "bar_hires_by_quarter.png", save, out_dir),
        plot_counts_bar(projections["by_gender"], "gender", "Hires by gender",
                        "Gender", "bar_hires_by_gender.png", save, out_dir),
        plot_counts_bar(projections["by_subscription"], "subscription_type",
                        "Hires by subscription type", "Subscription",
                        "bar_hires_by_subscription.png", save, out_dir),
        plot_counts_bar(projections["by_birth_year"], "birth_year", "Hires by birth year",
                        "Birth year", "bar_hires_by_birth_year.png", save, out_dir),
        plot_counts_bar(projections["by_distance_bucket"], "distance_bucket",
                        "Hires by trip distance", "Distance (km)",
                        "bar_hires_by_distance.png", save, out_dir),
        plot_hour_weekday_heatmap(
            projections["hour_x_weekday"].set_index("hour")[WEEKDAY_ORDER],
            save=save, out_dir=out_dir,
        ),
        plot_duration_hist(features, save=save, out_dir=out_dir),
    ]
    if result is not None:
        paths.append(plot_null_distribution(result, save=save, out_dir=out_dir))

    return [p for p in paths if p is not None]
