"""Plausibility checks on loaded observations."""

import logging

import pandas as pd

from skilookup.scoring.metrics import (
    DATE_COLUMN,
    PRECIPITATION_COLUMN,
    REGION_COLUMN,
    SNOW_DEPTH_COLUMN,
    TEMPERATURE_COLUMN,
    WIND_COLUMN,
)

logger = logging.getLogger(__name__)

MAX_BEAUFORT = 12
TEMPERATURE_RANGE_C = (-60.0, 50.0)
MISSING_DAY_SAMPLE = 10


def _missing_days(dates: pd.Series) -> list[pd.Timestamp]:
    days = pd.to_datetime(dates).dropna().dt.normalize()
    if days.empty:
        return []
    expected = pd.date_range(days.min(), days.max(), freq="D")
    return list(expected.difference(pd.DatetimeIndex(days.unique())))


def _count(df: pd.DataFrame, column: str, predicate) -> int:
    if column not in df.columns:
        return 0
    values = pd.to_numeric(df[column], errors="coerce")
    return int(predicate(values).sum())


def qc_checks(df: pd.DataFrame) -> list[str]:
    """
    List data-quality issues found in an observation table.

    Checks:
    - calendar days missing between a region's first and last reading
    - wind above 12 Bft
    - negative precipitation or snow depth
    - temperature outside -60..50 °C

    Returns:
        One message per issue; empty when the data looks fine
    """
    issues = []

    if REGION_COLUMN in df.columns and DATE_COLUMN in df.columns:
        for region, rows in df.groupby(REGION_COLUMN, sort=True):
            missing = _missing_days(rows[DATE_COLUMN])
            if not missing:
                continue
            sample = ", ".join(d.strftime("%Y-%m-%d") for d in missing[:MISSING_DAY_SAMPLE])
            extra = ", ..." if len(missing) > MISSING_DAY_SAMPLE else ""
            issues.append(f"{region}: {len(missing)} missing days ({sample}{extra})")

    low, high = TEMPERATURE_RANGE_C
    checks = (
        (WIND_COLUMN, lambda v: v > MAX_BEAUFORT, f"wind readings above {MAX_BEAUFORT} Bft"),
        (PRECIPITATION_COLUMN, lambda v: v < 0, "negative precipitation readings"),
        (SNOW_DEPTH_COLUMN, lambda v: v < 0, "negative snow depth readings"),
        (TEMPERATURE_COLUMN, lambda v: (v < low) | (v > high), f"temperatures outside {low:g}..{high:g} °C"),
    )
    for column, predicate, description in checks:
        count = _count(df, column, predicate)
        if count:
            issues.append(f"{count} {description}")

    for issue in issues:
        logger.warning(f"Data check: {issue}")
    return issues
