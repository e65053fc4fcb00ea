"""
Tests for scoring transformation functions.

min_max converts a column into 0-1 scores relative to its own values.
"""

import numpy as np
import pytest

from skilookup.scoring.transforms import NEUTRAL_SCORE, min_max


class TestMinMax:
    """Test min-max normalization."""

    def test_spreads_to_unit_range(self):
        """Minimum maps to 0, maximum to 1, the rest in between."""
        result = min_max([5.0, 10.0, 20.0])
        np.testing.assert_allclose(result, [0.0, 1 / 3, 1.0])

    def test_invert_for_lower_is_better(self):
        """Inverted scores give the lowest value the highest score."""
        result = min_max([5.0, 10.0, 20.0], invert=True)
        np.testing.assert_allclose(result, [1.0, 2 / 3, 0.0])

    def test_constant_column_is_neutral(self):
        """A single distinct value carries no ranking information."""
        assert NEUTRAL_SCORE == 0.5
        np.testing.assert_array_equal(min_max([3.0, 3.0, 3.0]), [0.5, 0.5, 0.5])
        np.testing.assert_array_equal(min_max([3.0, 3.0], invert=True), [0.5, 0.5])

    def test_missing_values_stay_missing(self):
        """NaN inputs are ignored for the bounds and stay NaN."""
        result = min_max([np.nan, 2.0, 4.0])
        assert np.isnan(result[0])
        np.testing.assert_allclose(result[1:], [0.0, 1.0])

    def test_all_missing(self):
        """A column with no values yields all NaN."""
        assert np.all(np.isnan(min_max([np.nan, np.nan])))

    def test_output_in_unit_range(self):
        """All results lie in [0, 1]."""
        rng = np.random.default_rng(7)
        values = rng.normal(0, 100, size=50)
        result = min_max(values)
        assert result.min() >= 0.0
        assert result.max() <= 1.0

    @pytest.mark.parametrize("invert", [False, True])
    def test_single_value(self, invert):
        """One value is a constant column."""
        assert min_max([42.0], invert=invert)[0] == 0.5
