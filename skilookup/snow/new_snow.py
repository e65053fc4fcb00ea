"""
Daily new-snow derivation from snow-depth readings.

New snow is the day-over-day increase in snow depth within one region
(and country). An increase only counts when snowfall was plausible: either
day was cold enough or wet enough. Decreases (melt, settling) never count,
so the result is always >= 0.

Known limitation: gaps in the date sequence are not interpolated. The delta
is taken between chronologically adjacent available rows regardless of how
many days lie between them.
"""

import logging
from typing import Optional

import numpy as np
import pandas as pd

from skilookup.config import SNOW_MAX_TEMPERATURE_C, SNOW_MIN_PRECIPITATION_MM
from skilookup.scoring.metrics import (
    COUNTRY_COLUMN,
    DATE_COLUMN,
    NEW_SNOW_COLUMN,
    PRECIPITATION_COLUMN,
    REGION_COLUMN,
    SNOW_DEPTH_COLUMN,
    TEMPERATURE_COLUMN,
)

logger = logging.getLogger(__name__)


def is_snow_plausible(
    curr_temp: Optional[float],
    prev_temp: Optional[float],
    curr_precip: Optional[float],
    prev_precip: Optional[float],
) -> bool:
    """
    Decide whether a rise in snow depth can be fresh snow.

    Snow is plausible when either day is at or below 2.5 °C, or either day
    had at least 2.0 mm of precipitation. Pass None for a reading whose
    column does not exist at all: a check without data is treated as passed.
    NaN means the column exists but the value is missing, which fails the
    comparison.

    Example:
        >>> is_snow_plausible(5.0, 6.0, 0.0, 3.1)
        True
        >>> is_snow_plausible(5.0, 6.0, 0.0, 0.5)
        False
    """
    temp_ok = True
    if curr_temp is not None or prev_temp is not None:
        temp_ok = _at_most(curr_temp, SNOW_MAX_TEMPERATURE_C) or _at_most(prev_temp, SNOW_MAX_TEMPERATURE_C)

    precip_ok = True
    if curr_precip is not None or prev_precip is not None:
        precip_ok = _at_least(curr_precip, SNOW_MIN_PRECIPITATION_MM) or _at_least(prev_precip, SNOW_MIN_PRECIPITATION_MM)

    return temp_ok or precip_ok


def _at_most(value, limit) -> bool:
    return value is not None and not np.isnan(value) and value <= limit


def _at_least(value, limit) -> bool:
    return value is not None and not np.isnan(value) and value >= limit


def _numeric(df: pd.DataFrame, column: str) -> Optional[np.ndarray]:
    if column not in df.columns:
        return None
    return pd.to_numeric(df[column], errors="coerce").to_numpy(dtype=float)


def _derive_group(order, depths, temps, precips, out) -> None:
    """Fill ``out`` at the positions in ``order`` (already sorted by date)."""
    out[order[0]] = 0.0
    prev_depth = depths[order[0]]

    for prev_pos, pos in zip(order[:-1], order[1:]):
        current = depths[pos]
        if np.isnan(current) or np.isnan(prev_depth):
            out[pos] = 0.0
            if not np.isnan(current):
                prev_depth = current
            continue

        delta = current - prev_depth
        plausible = is_snow_plausible(
            None if temps is None else temps[pos],
            None if temps is None else temps[prev_pos],
            None if precips is None else precips[pos],
            None if precips is None else precips[prev_pos],
        )
        out[pos] = delta if delta > 0 and plausible else 0.0
        prev_depth = current


def _group_positions(df: pd.DataFrame) -> list[np.ndarray]:
    """Row positions per (region, country) group; one group without those columns."""
    group_cols = [c for c in (REGION_COLUMN, COUNTRY_COLUMN) if c in df.columns]
    if not group_cols:
        return [np.arange(len(df))]

    keys = pd.DataFrame({c: df[c].to_numpy() for c in group_cols})
    keys["_pos"] = np.arange(len(df))
    return [
        group["_pos"].to_numpy()
        for _, group in keys.groupby(group_cols, dropna=False, sort=False)
    ]


def add_new_snow(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add the ``new_snow_cm`` column in place.

    Rows are grouped by region and country (whichever exist) and ordered by
    date within each group. The first row of a group gets 0. Every later row
    gets the positive depth increase over the last known depth when snowfall
    was plausible, 0 otherwise. Missing depths yield 0 and do not move the
    reference depth.

    Values already present in a ``new_snow_cm`` column are kept (clipped at
    0); only missing ones are derived.

    Args:
        df: Observation table with ``date`` and ``snow_depth_cm`` columns

    Returns:
        The same DataFrame, for chaining. Unchanged when the date or
        snow-depth column is missing.
    """
    if SNOW_DEPTH_COLUMN not in df.columns or DATE_COLUMN not in df.columns:
        logger.info("No snow depth or date column; skipping new-snow derivation")
        return df
    if df.empty:
        df[NEW_SNOW_COLUMN] = pd.Series(dtype=float)
        return df

    depths = _numeric(df, SNOW_DEPTH_COLUMN)
    temps = _numeric(df, TEMPERATURE_COLUMN)
    precips = _numeric(df, PRECIPITATION_COLUMN)
    dates = pd.to_datetime(df[DATE_COLUMN]).to_numpy()

    computed = np.zeros(len(df), dtype=float)
    for positions in _group_positions(df):
        order = positions[np.argsort(dates[positions], kind="stable")]
        _derive_group(order, depths, temps, precips, computed)

    existing = _numeric(df, NEW_SNOW_COLUMN)
    if existing is not None:
        computed = np.where(np.isnan(existing), computed, np.clip(existing, 0.0, None))

    df[NEW_SNOW_COLUMN] = computed
    return df
