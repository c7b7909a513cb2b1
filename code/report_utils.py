# -*- coding: utf-8 -*-
"""
Created on Fri Jan 10 09:02:51 2026

@author: epicx
"""

# report_utils.py
import re
from pathlib import Path

import pandas as pd


# suffix (lower-cased) -> pandas reader
TRIP_READERS = {
    ".csv": pd.read_csv,
    ".parquet": pd.read_parquet,
    ".pq": pd.read_parquet,
}

# (upper p-value bound, marker), checked in order
SIG_LEVELS = [(0.001, "***"), (0.01, "**"), (0.05, "*"), (0.1, ".")]

EXCEL_SHEET_MAX = 31


def read_input(path: Path | str) -> pd.DataFrame:
    """
    Read a raw trip file. The suffix picks the reader and is matched
    case-insensitively (trips.CSV, trips.Parquet, trips.pq all work).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Trip file not found: {path}")

    reader = TRIP_READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(
            f"Unsupported file extension for trips: {path.suffix!r} "
            f"(expected one of {sorted(TRIP_READERS)})"
        )
    return reader(path)


def ensure_out_dir(out_dir: Path | str) -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


def sig_code(p) -> str:
    """Significance marker for the weekend test p-value."""
    for bound, marker in SIG_LEVELS:
        if p < bound:
            return marker
    return ""


def clean_sheet_name(label: str, used: set | None = None) -> str:
    """
    Excel-safe sheet name: forbidden characters become '_', length is capped
    at 31. If `used` is given, a numeric suffix keeps the name unique and the
    name is added to `used`.
    """
    name = re.sub(r"[\[\]\:\*\?\/\\]", "_", label)[:EXCEL_SHEET_MAX] or "sheet"
    if used is None:
        return name

    base, n = name, 2
    while name.lower() in used:
        tail = f"_{n}"
        name = base[:EXCEL_SHEET_MAX - len(tail)] + tail
        n += 1
    used.add(name.lower())
    return name
