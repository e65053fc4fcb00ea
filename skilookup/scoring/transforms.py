"""
Scoring transformation functions.

Transformations convert raw values into scores in the range [0, 1].
Missing values (NaN) stay missing so callers can tell "no data" apart from
a genuine zero score.
"""

import numpy as np

# Score given to every value of a column that holds a single distinct value
NEUTRAL_SCORE = 0.5


def min_max(values, invert: bool = False) -> np.ndarray:
    """
    Min-max normalization relative to the values themselves.

    The bounds come from the non-missing values, so the score of a row
    depends on the rest of the population. When every value is identical
    the column carries no ranking information and all rows get 0.5.

    Args:
        values: 1-D sequence of numbers, NaN for missing
        invert: If True, low values map to high scores (lower is better)

    Returns:
        Float array of the same length in [0, 1], NaN where input was missing

    Example:
        >>> min_max([5.0, 10.0, 20.0])
        array([0.        , 0.33333333, 1.        ])
        >>> min_max([3.0, 3.0])
        array([0.5, 0.5])
    """
    values = np.asarray(values, dtype=float)
    result = np.full(values.shape, np.nan, dtype=float)

    valid = ~np.isnan(values)
    if not np.any(valid):
        return result

    vmin = values[valid].min()
    vmax = values[valid].max()
    value_range = vmax - vmin

    if value_range == 0:
        result[valid] = NEUTRAL_SCORE
    else:
        result[valid] = (values[valid] - vmin) / value_range

    if invert:
        result[valid] = 1.0 - result[valid]

    result[valid] = np.clip(result[valid], 0.0, 1.0)
    return result
