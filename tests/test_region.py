"""Tests for region lookups and detail tables."""

from datetime import date

import pandas as pd
import pytest

from skilookup.reporting.region import (
    available_countries,
    available_regions,
    current_month_summary,
    recent_conditions,
    region_history,
    region_rows,
    resolve_region_name,
    top_snow_events,
)


class TestLookups:
    """Test region and country name lookups."""

    def test_available_names(self, observations):
        """Names are sorted and de-duplicated."""
        assert available_regions(observations) == ["St. Anton", "Zermatt"]
        assert available_countries(observations) == ["Austria", "Switzerland"]

    def test_blank_names_skipped(self):
        """Empty and missing names are not listed."""
        df = pd.DataFrame({"region": [" Lech ", "", None, "Lech"]})
        assert available_regions(df) == ["Lech"]

    def test_no_region_column(self):
        """Tables without regions have none to offer."""
        assert available_regions(pd.DataFrame({"x": [1]})) == []

    @pytest.mark.parametrize("query, expected", [
        ("ZERMATT", ("Zermatt", [])),
        (" st. anton ", ("St. Anton", [])),
        ("anton", (None, ["St. Anton"])),
        ("t", (None, ["St. Anton", "Zermatt"])),
        ("Ischgl", (None, [])),
        ("", (None, [])),
    ])
    def test_resolve_region_name(self, observations, query, expected):
        """Exact matches ignore case; otherwise substrings are suggested."""
        assert resolve_region_name(observations, query) == expected

    def test_region_rows(self, observations):
        """Rows of one region, matched without case."""
        rows = region_rows(observations, "zermatt")
        assert len(rows) == 5
        assert set(rows["region"]) == {"Zermatt"}


class TestRegionHistory:
    """Test the monthly history table."""

    def test_monthly_summary(self, observations_with_snow):
        """One row per month with means and the new-snow total."""
        history = region_history(observations_with_snow, "st. anton")

        assert list(history.columns) == [
            "month",
            "avg_temperature_c",
            "avg_snow_depth_cm",
            "total_new_snow_cm",
            "avg_precipitation_mm",
            "avg_wind_beaufort",
        ]
        assert history["month"].tolist() == list(pd.to_datetime(["2024-01-01", "2024-02-01"]))
        assert history["avg_temperature_c"].tolist() == [-5.5, -3.0]
        assert history["total_new_snow_cm"].tolist() == [10.0, 15.0]
        assert history["avg_snow_depth_cm"].tolist() == [105.0, 118.33]

    def test_scored_with_weights(self, observations_with_snow):
        """Months are scored against each other when weights are given."""
        history = region_history(observations_with_snow, "St. Anton", weights={
            "snow_new": 30.0, "snow_depth": 25.0, "temperature": 20.0, "precipitation": 15.0, "wind": 10.0,
        })
        # February wins new snow, depth, precipitation and wind; January is colder
        assert history["weighted_score"].tolist() == [20.0, 80.0]

    def test_month_window(self, observations_with_snow):
        """Only the last N months are kept."""
        history = region_history(observations_with_snow, "St. Anton", months=1)
        assert history["month"].tolist() == [pd.Timestamp("2024-02-01")]

    def test_unknown_region(self, observations_with_snow):
        """No rows means an empty table."""
        assert region_history(observations_with_snow, "Ischgl").empty


class TestDetailTables:
    """Test snow events, recent conditions and the current-month summary."""

    def test_top_snow_events(self, observations_with_snow):
        """Largest gains first; days without new snow are dropped."""
        rows = region_rows(observations_with_snow, "St. Anton")
        events = top_snow_events(rows, top_n=2)

        assert list(events.columns) == ["date", "new_snow_cm", "snow_depth_cm", "temperature_c"]
        assert events["date"].tolist() == list(pd.to_datetime(["2024-01-31", "2024-02-02"]))
        assert events["new_snow_cm"].tolist() == [10.0, 10.0]

    def test_top_snow_events_without_column(self, observations):
        """Nothing to show before new snow is derived."""
        assert top_snow_events(observations).empty

    def test_recent_conditions(self, observations_with_snow):
        """Last rows with location and key metrics."""
        rows = region_rows(observations_with_snow, "St. Anton")
        recent = recent_conditions(rows, recent_days=2)

        assert len(recent) == 2
        assert recent["date"].iloc[-1] == pd.Timestamp("2024-02-03")
        assert list(recent.columns[:3]) == ["date", "region", "country"]
        assert "elevation_m" not in recent.columns

    def test_current_month_summary(self, observations_with_snow):
        """Average, minimum and maximum of each metric for the current month."""
        rows = region_rows(observations_with_snow, "St. Anton")
        summary = current_month_summary(rows, today=date(2024, 2, 20))

        assert summary.label == "February 2024"
        temperature = summary.table.set_index("metric").loc["temperature_c"]
        assert temperature.tolist() == [-3.0, -4.0, -2.0]

    def test_current_month_falls_back_to_latest(self, observations_with_snow):
        """Without data for today's month the latest month is used."""
        summary = current_month_summary(observations_with_snow, today=date(2030, 7, 1))
        assert summary.label == "February 2024"
        assert not summary.table.empty

    def test_current_month_explicit_january(self, observations_with_snow):
        """A reference date inside the data picks that month."""
        summary = current_month_summary(observations_with_snow, today=date(2024, 1, 5))
        assert summary.label == "January 2024"

    def test_current_month_no_data(self):
        """Empty tables give an empty summary."""
        summary = current_month_summary(pd.DataFrame({"date": pd.Series(dtype="datetime64[ns]")}))
        assert summary.label == "n/a"
        assert summary.table.empty
