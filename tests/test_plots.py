"""Tests for the score trend plot."""

import numpy as np
import pandas as pd
import pytest

from skilookup.reporting.plots import rolling_mean, save_region_score_trend


class TestRollingMean:
    """Test the centred moving average."""

    def test_window_three(self):
        """Edges average the available neighbours."""
        np.testing.assert_allclose(rolling_mean([1.0, 2.0, 3.0, 4.0], 3), [1.5, 2.0, 3.0, 3.5])

    @pytest.mark.parametrize("window", [0, 1])
    def test_small_window_is_identity(self, window):
        """Windows of 1 or less return the values."""
        np.testing.assert_array_equal(rolling_mean([5.0, 1.0], window), [5.0, 1.0])

    def test_empty(self):
        """Empty input stays empty."""
        assert rolling_mean([], 3).size == 0


class TestScoreTrend:
    """Test saving the score trend image."""

    def test_saves_png(self, tmp_path):
        """A scored history is written as PNG named after the region."""
        history = pd.DataFrame({
            "month": pd.to_datetime(["2024-01-01", "2024-02-01", "2024-03-01"]),
            "weighted_score": [40.0, np.nan, 70.0],
        })
        path = save_region_score_trend(history, "St. Anton", tmp_path / "plots")

        assert path == tmp_path / "plots" / "st_anton_score_trend.png"
        assert path.exists()
        assert path.stat().st_size > 0

    def test_without_scores(self, tmp_path):
        """Nothing is written without a score column or scored months."""
        months = pd.to_datetime(["2024-01-01"])
        assert save_region_score_trend(pd.DataFrame({"month": months}), "Lech", tmp_path) is None
        unscored = pd.DataFrame({"month": months, "weighted_score": [np.nan]})
        assert save_region_score_trend(unscored, "Lech", tmp_path) is None
        assert list(tmp_path.iterdir()) == []
