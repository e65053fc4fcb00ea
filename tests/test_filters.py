"""Tests for run filters."""

from datetime import date

import pandas as pd
import pytest

from skilookup.data.filters import RunArgs, apply_filters, in_season, parse_date_value, season_months


class TestRunArgs:
    """Test run argument validation."""

    def test_defaults(self):
        """No dates and the whole year by default."""
        args = RunArgs()
        assert args.from_date is None
        assert args.season == "ALL"

    def test_season_normalized(self):
        """Season names ignore case and surrounding spaces."""
        assert RunArgs(season=" winter ").season == "WINTER"

    def test_unknown_season(self):
        """Unknown seasons are rejected."""
        with pytest.raises(ValueError, match="Unknown season"):
            RunArgs(season="spring")


class TestSeasons:
    """Test season membership."""

    @pytest.mark.parametrize("month, season, expected", [
        (11, "WINTER", True),
        (4, "WINTER", True),
        (5, "WINTER", False),
        (7, "SUMMER", True),
        (12, "SUMMER", False),
        (6, "ALL", True),
    ])
    def test_in_season(self, month, season, expected):
        """Winter is Nov-Apr, summer May-Oct."""
        assert in_season(month, season) is expected

    def test_in_season_accepts_dates(self):
        """Dates and timestamps are checked by their month."""
        assert in_season(date(2024, 12, 24), "WINTER") is True
        assert in_season(pd.Timestamp("2024-08-01"), "WINTER") is False

    def test_all_has_no_months(self):
        """ALL does not restrict months."""
        assert season_months("all") is None


def test_parse_date_value(caplog):
    """ISO dates parse, anything else is warned about and ignored."""
    assert parse_date_value("2024-02-01") == date(2024, 2, 1)
    assert parse_date_value("") is None
    assert parse_date_value(None) is None
    assert parse_date_value("01.02.2024", "from date") is None
    assert "from date" in caplog.text


class TestApplyFilters:
    """Test row filtering."""

    def test_no_filters_copy(self, observations):
        """Without filters every row is kept in a new table."""
        result = apply_filters(observations)
        assert len(result) == len(observations)
        assert result is not observations

    def test_region_ignores_case(self, observations):
        """Region filter matches regardless of case."""
        result = apply_filters(observations, region="st. ANTON")
        assert set(result["region"]) == {"St. Anton"}

    def test_country(self, observations):
        """Country filter keeps one country."""
        result = apply_filters(observations, country="switzerland")
        assert set(result["region"]) == {"Zermatt"}

    def test_date_range_inclusive(self, observations):
        """Both ends of the range are included."""
        args = RunArgs(from_date=date(2024, 1, 31), to_date=date(2024, 2, 2))
        result = apply_filters(observations, args)
        assert sorted(result["date"].unique()) == list(pd.to_datetime(["2024-01-31", "2024-02-01", "2024-02-02"]))

    def test_season(self, observations):
        """Summer filter drops winter readings."""
        assert apply_filters(observations, RunArgs(season="SUMMER")).empty
        assert len(apply_filters(observations, RunArgs(season="WINTER"))) == len(observations)

    def test_missing_region_values(self):
        """Rows without a region never match a region filter."""
        df = pd.DataFrame({"region": ["A", None], "date": pd.to_datetime(["2024-01-01", "2024-01-02"])})
        assert len(apply_filters(df, region="a")) == 1
