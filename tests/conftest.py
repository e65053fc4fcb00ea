"""Pytest configuration and fixtures for SkiLookup tests."""
import sys
from pathlib import Path

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import logging

import pandas as pd
import pytest


DATES = ["2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02", "2024-02-03"]

# Five days, two regions, straddling a month boundary.
# Derived new snow: St. Anton 0, 10, 0, 10, 5 and Zermatt 0, 0, 5, 0, 6
READINGS = {
    ("St. Anton", "Austria"): {
        "snow_depth_cm": [100.0, 110.0, 110.0, 120.0, 125.0],
        "temperature_c": [-5.0, -6.0, -4.0, -3.0, -2.0],
        "precipitation_mm": [5.0, 10.0, 0.0, 8.0, 3.0],
        "wind_beaufort": [2.0, 3.0, 2.0, 1.0, 2.0],
    },
    ("Zermatt", "Switzerland"): {
        "snow_depth_cm": [80.0, 80.0, 85.0, 84.0, 90.0],
        "temperature_c": [-10.0, -9.0, -8.0, -11.0, -12.0],
        "precipitation_mm": [0.0, 0.0, 4.0, 0.0, 2.0],
        "wind_beaufort": [4.0, 5.0, 4.0, 3.0, 4.0],
    },
}


def build_observations() -> pd.DataFrame:
    rows = []
    for (region, country), readings in READINGS.items():
        for i, day in enumerate(DATES):
            row = {"date": pd.Timestamp(day), "region": region, "country": country, "elevation_m": 1800.0}
            row.update({column: values[i] for column, values in readings.items()})
            rows.append(row)
    return pd.DataFrame(rows).sort_values("date", kind="stable").reset_index(drop=True)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove console handlers that cli.main attaches to the package logger."""
    yield
    package_logger = logging.getLogger("skilookup")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)


@pytest.fixture
def observations():
    """Canonical observation table for two regions, without new snow."""
    return build_observations()


@pytest.fixture
def observations_with_snow(observations):
    """Observation table with ``new_snow_cm`` derived."""
    from skilookup.snow.new_snow import add_new_snow

    return add_new_snow(observations)


@pytest.fixture
def observations_csv(tmp_path):
    """The same observations as a raw CSV export (day-first dates, display headers)."""
    df = build_observations()
    raw = pd.DataFrame({
        "Date": df["date"].dt.strftime("%d/%m/%Y"),
        "Region": df["region"],
        "Country": df["country"].map({"Austria": "AT", "Switzerland": "Schweiz"}),
        "Elevation (m)": df["elevation_m"],
        "Wind (Beaufort)": df["wind_beaufort"],
        "Temperature (°C)": df["temperature_c"],
        "Precipitation (mm)": df["precipitation_mm"],
        "Snow Depth (cm)": df["snow_depth_cm"],
    })
    path = tmp_path / "ski-regions-data.csv"
    raw.to_csv(path, index=False, encoding="utf-8")
    return path


@pytest.fixture
def scripted_input():
    """
    Factory for ``ask_text`` callables that replay fixed answers.

    Raises EOFError once the answers run out; the prompts seen are kept on
    the ``prompts`` attribute.
    """

    def factory(*answers):
        queue = list(answers)

        def ask(prompt):
            ask.prompts.append(prompt)
            if not queue:
                raise EOFError
            return queue.pop(0)

        ask.prompts = []
        return ask

    return factory


@pytest.fixture
def project_root():
    """Get the project root directory."""
    return Path(__file__).parent.parent
