import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from make_sample_trips import make_sample_trips
from trip_loader import prepare_trips


BASE_TRIP = {
    "bike_id": "B01",
    "start_station": "S01",
    "end_station": "S02",
    "start_lat": 40.7128,
    "start_long": -74.0060,
    "end_lat": 40.7193,
    "end_long": -73.9985,
    "subscription_type": "Subscriber",
    "birth_year": 1985,
    "gender": "Male",
}


@pytest.fixture
def make_trips():
    """Build a trip table from partial rows; unspecified fields take BASE_TRIP values."""
    def _make(rows):
        records = []
        for row in rows:
            rec = dict(BASE_TRIP)
            rec.update(row)
            records.append(rec)
        df = pd.DataFrame(records)
        for col in ("start_time", "end_time"):
            df[col] = pd.to_datetime(df[col])
        return df

    return _make


@pytest.fixture(scope="session")
def sample_trips():
    return prepare_trips(make_sample_trips(year=2018, n_bikes=10, seed=1))
