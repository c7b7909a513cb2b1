# -*- coding: utf-8 -*-
"""
Created on Thu Jan  9 20:12:04 2026

@author: epicx

Paths and default constants for the bike-share trip report.

Nothing in here is read as hidden state by the computations; every constant
below is used as a default argument and can be overridden per call.
"""

from pathlib import Path

# Project root = parent of the code/ directory
PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = PROJECT_ROOT / "data"
RAW_DIR = DATA_DIR / "raw"
PROCESSED_DIR = DATA_DIR / "processed"

PLOTS_DIR = PROJECT_ROOT / "plots"
REPORTS_DIR = PROJECT_ROOT / "reports"

DEFAULT_TRIPS_FILE = RAW_DIR / "bike_trips.csv"

# ---------------------------------------------------------------------------
# Feature derivation
# ---------------------------------------------------------------------------

# Sphere radius calibrated for the operating region (not the mean Earth radius)
EARTH_RADIUS_KM = 6369.08
DISTANCE_DECIMALS = 3

# Fiscal quarters anchored at January => calendar quarters
FISCAL_YEAR_START_MONTH = 1

WEEKDAY_ORDER = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
WEEKEND_DAYS = {"Sat", "Sun"}

MONTH_ORDER = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]

# Upper edges (km) of the non-zero distance buckets; last bucket is open
DISTANCE_BUCKET_EDGES = [0, 1, 2, 3, 5]

# Plausibility limits, used only for optional flagging
MAX_PLAUSIBLE_AGE = 100
MIN_PLAUSIBLE_AGE = 5
MAX_PLAUSIBLE_DURATION_MIN = 24 * 60

# ---------------------------------------------------------------------------
# Daily series / weekend test
# ---------------------------------------------------------------------------

# 30-day centered window: 14 days before, the day itself, 15 days after
ROLLING_DAYS_BEFORE = 14
ROLLING_DAYS_AFTER = 15
ROLLING_EDGE_POLICY = "partial"  # or "strict"

PERMUTATION_REPS = 500
SIGNIFICANCE_LEVEL = 0.05

# ---------------------------------------------------------------------------
# Plotting
# ---------------------------------------------------------------------------

DAY_COLOR_MAP = {
    "Mon": "tab:blue",
    "Tue": "tab:orange",
    "Wed": "tab:green",
    "Thu": "tab:red",
    "Fri": "tab:purple",
    "Sat": "tab:brown",
    "Sun": "tab:pink",
}


def ensure_project_dirs() -> None:
    """Create the data / plots / reports directories if missing."""
    for p in [
        RAW_DIR,
        PROCESSED_DIR,
        PLOTS_DIR,
        REPORTS_DIR,
    ]:
        p.mkdir(parents=True, exist_ok=True)
