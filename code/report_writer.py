# -*- coding: utf-8 -*-
"""
Created on Wed Jan 15 21:06:13 2026

@author: epicx

Report outputs: Excel workbook of projections + plain-text commentary.

Usage:
    from report_writer import write_projections_workbook, build_commentary, save_text_report
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import pandas as pd

from report_utils import clean_sheet_name, ensure_out_dir, sig_code
from weekend_contrast import WeekendTestResult


def write_projections_workbook(
    projections: Dict[str, pd.DataFrame],
    out_path: Path | str,
    daily: pd.DataFrame | None = None,
    test_summary: pd.DataFrame | None = None,
) -> Path:
    """
    One sheet per projection (sheet names cleaned to Excel's rules),
    plus optional Daily and Weekend test sheets.
    """
    out_path = Path(out_path)
    ensure_out_dir(out_path.parent)

    used = {"weekend test", "daily"}
    with pd.ExcelWriter(out_path, engine="xlsxwriter") as writer:
        if test_summary is not None:
            test_summary.to_excel(writer, sheet_name="Weekend test", index=False)
        if daily is not None:
            daily_out = daily.copy()
            if "weekday" in daily_out.columns:
                daily_out["weekday"] = daily_out["weekday"].astype(str)
            daily_out.to_excel(writer, sheet_name="Daily", index=False)
        for label, table in projections.items():
            sheet = clean_sheet_name(label, used)
            table_out = table.copy()
            # xlsxwriter can't write pandas categoricals / nullable ints with NA
            for col in table_out.columns:
                if isinstance(table_out[col].dtype, pd.CategoricalDtype):
                    table_out[col] = table_out[col].astype(str)
            table_out.astype(object).where(table_out.notna(), None).to_excel(
                writer, sheet_name=sheet, index=False
            )

    print(f"[Report] Projections written to: {out_path}")
    return out_path


def weekend_summary_frame(result: WeekendTestResult, welch: dict | None = None) -> pd.DataFrame:
    """One-row table of the weekend test outcome, for the workbook."""
    row = {
        "weekend_days": result.n_weekend_days,
        "weekday_days": result.n_weekday_days,
        "weekend_mean": result.weekend_mean,
        "weekday_mean": result.weekday_mean,
        "observed_diff": result.observed_statistic,
        "reps": result.reps,
        "p_value": result.p_value,
        "sig": sig_code(result.p_value),
        "alpha": result.alpha,
        "reject": result.reject,
    }
    if welch is not None:
        row["welch_t"] = welch["t_stat"]
        row["welch_p"] = welch["p_value"]
        row["welch_df"] = welch["df"]
    return pd.DataFrame([row])


def _top_row(table: pd.DataFrame, key_col: str):
    if table.empty or table["hire_count"].sum() == 0:
        return None, 0
    r = table.loc[table["hire_count"].idxmax()]
    return r[key_col], int(r["hire_count"])


def build_commentary(
    features: pd.DataFrame,
    daily: pd.DataFrame,
    projections: Dict[str, pd.DataFrame],
    result: WeekendTestResult | None = None,
    welch: dict | None = None,
) -> List[str]:
    """
    Business commentary, one paragraph per list entry.
    """
    lines: List[str] = []

    n_trips = len(features)
    n_bikes = features["bike_id"].nunique()
    lines.append(
        f"The fleet of {n_bikes} bikes made {n_trips:,} hires between "
        f"{daily['date'].min():%d %b %Y} and {daily['date'].max():%d %b %Y}, "
        f"{daily['hire_count'].mean():.1f} hires per day on average "
        f"({int((daily['hire_count'] == 0).sum())} days without any hire)."
    )

    peak_hour, peak_hour_n = _top_row(projections["by_hour"], "hour")
    peak_day, peak_day_n = _top_row(projections["by_weekday"], "weekday")
    peak_month, peak_month_n = _top_row(projections["by_month"], "month")
    lines.append(
        f"Demand peaks at {peak_hour}:00 ({peak_hour_n:,} hires), on {peak_day} "
        f"({peak_day_n:,} hires) and in {peak_month} ({peak_month_n:,} hires)."
    )

    dur = projections["duration_quantiles"].iloc[0]
    dist = projections["distance_quantiles"].iloc[0]
    n_negative = int((features["duration_minutes"] < 0).sum())
    lines.append(
        f"The median hire lasts {dur['q50']:.1f} minutes (IQR {dur['q25']:.1f}–{dur['q75']:.1f}) "
        f"and covers {dist['q50']:.2f} km in a straight line. "
        f"{n_negative} hires have an end time before their start time; they are kept "
        f"as recorded, which is why medians are reported rather than means."
    )

    subs = projections["by_subscription"]
    if not subs.empty:
        shares = (subs.set_index("subscription_type")["hire_count"] / subs["hire_count"].sum())
        share_txt = ", ".join(f"{k} {v:.0%}" for k, v in shares.items())
        lines.append(f"Hires by subscription type: {share_txt}.")

    by_year = projections["by_birth_year"]
    if not by_year.empty:
        top_year, top_year_n = _top_row(by_year, "birth_year")
        share = top_year_n / by_year["hire_count"].sum()
        lines.append(
            f"The most common rider birth year is {top_year} with {share:.0%} of hires "
            f"that report one; single-year spikes and implausible ages are left in the data."
        )

    if result is not None:
        verdict = (
            "significantly lower" if result.reject
            else "not significantly lower"
        )
        lines.append(
            f"Weekend days average {result.weekend_mean:.1f} hires against "
            f"{result.weekday_mean:.1f} on weekdays (difference {result.observed_statistic:.2f}). "
            f"A permutation test with {result.reps} reshuffles of the weekend labels gives "
            f"p = {result.p_value:.3f}, so weekend demand is {verdict} at the "
            f"{result.alpha:.0%} level."
        )
    if welch is not None:
        lines.append(
            f"As a parametric cross-check, a one-sided Welch t-test gives t = {welch['t_stat']:.2f}, "
            f"p = {welch['p_value']:.3f}."
        )

    return lines


def save_text_report(
    lines: List[str],
    out_path: Path | str,
    title: str = "Bike-share trip report",
) -> Path:
    out_path = Path(out_path)
    ensure_out_dir(out_path.parent)

    with open(out_path, "w", encoding="utf-8") as f:
        f.write(f"{title}\n")
        f.write("=" * 80 + "\n\n")
        for line in lines:
            f.write(line + "\n\n")

    print(f"[Report] Wrote text report: {out_path}")
    return out_path
