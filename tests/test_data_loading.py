"""Tests for CSV ingestion and cleaning."""

import numpy as np
import pandas as pd
import pytest

from skilookup.data.loading import (
    canonical_country,
    find_date_column,
    interpolate_series,
    load_data,
    normalize_columns,
    prepare_observations,
    resolve_csv_path,
)


class TestCanonicalCountry:
    """Test country name canonicalization."""

    @pytest.mark.parametrize("raw, expected", [
        ("DE", "Germany"),
        ("deutschland", "Germany"),
        ("Österreich", "Austria"),
        ("oesterreich", "Austria"),
        ("AUT", "Austria"),
        (" CH ", "Switzerland"),
        ("Schweiz", "Switzerland"),
        (" Liechtenstein ", "Liechtenstein"),
    ])
    def test_synonyms(self, raw, expected):
        """DACH spellings and ISO codes map to one name; others are trimmed."""
        assert canonical_country(raw) == expected

    def test_missing_stays_missing(self):
        """None and NaN pass through."""
        assert canonical_country(None) is None
        assert np.isnan(canonical_country(np.nan))


class TestColumns:
    """Test header detection and renaming."""

    def test_find_date_column(self):
        """Known names win, then anything containing date/datum."""
        assert find_date_column(["Region", "Datum"]) == "Datum"
        assert find_date_column(["obs_date", "x"]) == "obs_date"
        assert find_date_column(["a", "b"]) is None

    def test_english_headers(self):
        """Display headers map onto canonical names."""
        df = pd.DataFrame(columns=[
            "date", "Region", "Country", "Elevation (m)", "Wind (Beaufort)",
            "Temperature (°C)", "Precipitation (mm)", "Snow Depth (cm)",
        ])
        assert list(normalize_columns(df).columns) == [
            "date", "region", "country", "elevation_m", "wind_beaufort",
            "temperature_c", "precipitation_mm", "snow_depth_cm",
        ]

    def test_german_headers(self):
        """German headers are recognised too; only the first temperature is used."""
        df = pd.DataFrame(columns=[
            "Temperatur Min", "Temperatur Max", "Niederschlag (mm)", "Schneehöhe (cm)", "Neuschnee (cm)",
        ])
        renamed = normalize_columns(df)
        assert list(renamed.columns) == [
            "temperature_c", "Temperatur Max", "precipitation_mm", "snow_depth_cm", "new_snow_cm",
        ]

    def test_summary_snow_columns_left_alone(self):
        """Monthly or max snow columns are not mistaken for depth."""
        df = pd.DataFrame(columns=["Snow Depth Max", "Snow (cm)"])
        assert list(normalize_columns(df).columns) == ["Snow Depth Max", "snow_depth_cm"]


class TestInterpolation:
    """Test gap filling."""

    def test_linear_with_edges(self):
        """Inner gaps are linear, edges copy the nearest value."""
        result = interpolate_series(pd.Series([np.nan, 1.0, np.nan, 3.0, np.nan]))
        assert result.tolist() == [1.0, 1.0, 2.0, 3.0, 3.0]

    def test_all_missing_unchanged(self):
        """Nothing to interpolate from."""
        assert interpolate_series(pd.Series([np.nan, np.nan])).isna().all()


class TestPrepareObservations:
    """Test the full cleaning pass."""

    def test_requires_date_column(self):
        """A table without dates cannot be used."""
        with pytest.raises(ValueError, match="No date column"):
            prepare_observations(pd.DataFrame({"Region": ["A"]}))

    def test_cleaning(self, caplog):
        """Dates parsed day-first, bad rows dropped, gaps filled per region."""
        raw = pd.DataFrame({
            " Date ": ["03/01/2024", "01/01/2024", "02/01/2024", "not a date", "01/01/2024", "02/01/2024"],
            "Region": ["A", "A", "A", "A", " B ", "B"],
            "Country": ["DE", "DE", "DE", "DE", "", "CH"],
            "Snow Depth (cm)": [30.0, 10.0, np.nan, 5.0, 100.0, np.nan],
            "Precipitation (mm)": [1.0, np.nan, 2.0, 0.0, 0.0, 0.0],
        })

        df = prepare_observations(raw)

        assert "Dropping 1 rows" in caplog.text
        assert df["date"].is_monotonic_increasing
        a = df[df["region"] == "A"].set_index("date")
        assert a["snow_depth_cm"].tolist() == [10.0, 20.0, 30.0]
        assert a["country"].unique().tolist() == ["Germany"]
        b = df[df["region"] == "B"]
        assert b["snow_depth_cm"].tolist() == [100.0, 100.0]
        assert pd.isna(b["country"].iloc[0])
        assert df["precipitation_mm"].notna().all()


class TestLoadData:
    """Test reading from disk."""

    def test_load_csv(self, observations_csv):
        """A raw export loads into the canonical table."""
        df = load_data(observations_csv, environ={})

        assert len(df) == 10
        assert {"date", "region", "country", "snow_depth_cm", "temperature_c"} <= set(df.columns)
        assert sorted(df["country"].unique()) == ["Austria", "Switzerland"]
        assert df["date"].min() == pd.Timestamp("2024-01-30")

    def test_csv_path_from_environment(self, observations_csv):
        """CSV_PATH is used when no path is given."""
        assert resolve_csv_path(environ={"CSV_PATH": str(observations_csv)}) == str(observations_csv)

    def test_remote_source_passes_through(self):
        """URLs are handed to pandas unchanged."""
        url = "https://example.org/ski.csv"
        assert resolve_csv_path(url, environ={}) == url

    def test_missing_file(self, tmp_path, monkeypatch):
        """No candidate file raises FileNotFoundError."""
        monkeypatch.setattr("skilookup.data.loading.DEFAULT_CSV_PATH", tmp_path / "none.csv")
        with pytest.raises(FileNotFoundError):
            load_data(tmp_path / "missing.csv", environ={})
