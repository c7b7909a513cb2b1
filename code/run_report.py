# -*- coding: utf-8 -*-
"""
Created on Fri Jan 17 19:40:02 2026

@author: epicx

run_report.py

Build the bike-share trip report end to end:

1. Load trips (data/raw/bike_trips.csv by default).
2. Derive per-trip features.
3. Build the gap-filled daily series + 30-day centered rolling average.
4. Permutation test: are weekend daily hires lower than weekday hires?
5. Summary projections -> Excel workbook, commentary -> text report.
6. Optional charts.

Usage (from repo root):

    python code/run_report.py --input data/raw/bike_trips.csv
    python code/run_report.py --input data/raw/bike_trips.csv --save-plots --seed 7

Outputs go to data/processed/, reports/ and plots/ unless --out-dir is given,
in which case everything lands under that directory.
"""
from __future__ import annotations

import argparse
from pathlib import Path

from config import (
    DEFAULT_TRIPS_FILE,
    PERMUTATION_REPS,
    PLOTS_DIR,
    PROCESSED_DIR,
    REPORTS_DIR,
    ROLLING_EDGE_POLICY,
    SIGNIFICANCE_LEVEL,
    ensure_project_dirs,
)
from daily_aggregate import EDGE_POLICIES, build_daily_summary
from report_plotting import plot_report_charts
from report_writer import (
    build_commentary,
    save_text_report,
    weekend_summary_frame,
    write_projections_workbook,
)
from summary_projections import build_all_projections
from trip_errors import MalformedInputError
from trip_features import derive_features, flag_implausible_values
from trip_loader import load_trips
from weekend_contrast import (
    check_test_config,
    print_test_summary,
    weekend_permutation_test,
    welch_t_check,
)


def _output_dirs(out_dir: Path | str | None) -> tuple[Path, Path, Path]:
    """(processed, reports, plots) directories."""
    if out_dir is None:
        ensure_project_dirs()
        return PROCESSED_DIR, REPORTS_DIR, PLOTS_DIR

    out_dir = Path(out_dir)
    return out_dir / "processed", out_dir / "reports", out_dir / "plots"


def run_report(
    input_path: Path | str = DEFAULT_TRIPS_FILE,
    out_dir: Path | str | None = None,
    reps: int = PERMUTATION_REPS,
    alpha: float = SIGNIFICANCE_LEVEL,
    seed: int | None = None,
    edge_policy: str = ROLLING_EDGE_POLICY,
    flag_implausible: bool = False,
    save_plots: bool = False,
    show_plots: bool = False,
) -> dict:
    """
    Run the full report. Returns a dict with features, daily, result, welch,
    projections and the written file paths.
    """
    check_test_config(reps, alpha)

    trips = load_trips(input_path)
    if trips.empty:
        raise MalformedInputError(f"No trips found in: {input_path}")

    features = derive_features(trips)
    print(f"[Features] Derived features for {len(features):,} trips")

    if flag_implausible:
        features = flag_implausible_values(features)
        print(
            f"[Features] Flagged {int(features['implausible_age'].sum())} implausible ages, "
            f"{int(features['implausible_duration'].sum())} implausible durations (kept)"
        )

    daily = build_daily_summary(features, edge_policy=edge_policy)
    print(
        f"[Daily] {len(daily)} days, {int((daily['hire_count'] == 0).sum())} without hires "
        f"(edge policy: {edge_policy})"
    )

    result = weekend_permutation_test(daily, reps=reps, alpha=alpha, seed=seed)
    print_test_summary(result)
    welch = welch_t_check(daily)

    projections = build_all_projections(features)

    processed_dir, reports_dir, plots_dir = _output_dirs(out_dir)
    processed_dir.mkdir(parents=True, exist_ok=True)

    features_path = processed_dir / "trip_features.parquet"
    daily_path = processed_dir / "daily_hires.parquet"
    features.to_parquet(features_path, index=False)
    daily.to_parquet(daily_path, index=False)
    print(f"[Report] Wrote processed data to: {processed_dir}")

    workbook_path = write_projections_workbook(
        projections,
        reports_dir / "trip_report_projections.xlsx",
        daily=daily,
        test_summary=weekend_summary_frame(result, welch),
    )
    commentary = build_commentary(features, daily, projections, result=result, welch=welch)
    text_path = save_text_report(commentary, reports_dir / "trip_report.txt")

    plot_paths = []
    if save_plots or show_plots:
        plot_paths = plot_report_charts(
            features, daily, projections, result=result,
            save=save_plots, out_dir=plots_dir,
        )

    return {
        "features": features,
        "daily": daily,
        "result": result,
        "welch": welch,
        "projections": projections,
        "paths": {
            "features": features_path,
            "daily": daily_path,
            "workbook": workbook_path,
            "text": text_path,
            "plots": plot_paths,
        },
    }


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Bike-share trip report.")

    parser.add_argument(
        "--input",
        default=str(DEFAULT_TRIPS_FILE),
        help="Trip file (.csv or .parquet). Defaults to data/raw/bike_trips.csv.",
    )
    parser.add_argument(
        "--out-dir",
        default=None,
        help="Optional output root. If omitted, writes to data/processed, reports and plots.",
    )
    parser.add_argument("--reps", type=int, default=PERMUTATION_REPS,
                        help="Number of label permutations for the weekend test.")
    parser.add_argument("--alpha", type=float, default=SIGNIFICANCE_LEVEL,
                        help="Significance level for the weekend test.")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the permutation draws (reproducible p-values).")
    parser.add_argument(
        "--edge-policy",
        choices=EDGE_POLICIES,
        default=ROLLING_EDGE_POLICY,
        help="Rolling average at the ends of the series: shrink the window or leave blank.",
    )
    parser.add_argument(
        "--flag-implausible",
        action="store_true",
        help="Add implausible_age / implausible_duration flags (values are never dropped).",
    )
    parser.add_argument(
        "--save-plots",
        action="store_true",
        help="Save charts as PNGs instead of skipping them.",
    )
    parser.add_argument(
        "--show-plots",
        action="store_true",
        help="Show charts interactively.",
    )

    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    run_report(
        input_path=Path(args.input),
        out_dir=args.out_dir,
        reps=args.reps,
        alpha=args.alpha,
        seed=args.seed,
        edge_policy=args.edge_policy,
        flag_implausible=args.flag_implausible,
        save_plots=args.save_plots,
        show_plots=args.show_plots,
    )
    print(f"Report complete for: {args.input}")


if __name__ == "__main__":
    main()
