"""
Region lookups and per-region detail tables.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

import pandas as pd

from skilookup.config import DEFAULT_HISTORY_MONTHS, DEFAULT_LEADERBOARD_TOP_N, DEFAULT_RECENT_DAYS
from skilookup.reporting.overview import month_start
from skilookup.scoring.combiner import add_weighted_score
from skilookup.scoring.metrics import (
    AGGREGATE_PREFIX,
    COUNTRY_COLUMN,
    DATE_COLUMN,
    MONTH_COLUMN,
    NEW_SNOW_COLUMN,
    PRECIPITATION_COLUMN,
    REGION_COLUMN,
    SNOW_DEPTH_COLUMN,
    TEMPERATURE_COLUMN,
    TOTAL_PREFIX,
    WIND_COLUMN,
)

logger = logging.getLogger(__name__)

# Metric columns shown in detail tables, in display order
DETAIL_COLUMNS = (
    TEMPERATURE_COLUMN,
    SNOW_DEPTH_COLUMN,
    NEW_SNOW_COLUMN,
    PRECIPITATION_COLUMN,
    WIND_COLUMN,
)

# Columns summed (not averaged) in the monthly history
SUMMED_COLUMNS = (NEW_SNOW_COLUMN,)

MAX_SUGGESTIONS = 5


@dataclass
class MonthSummary:
    """Average, minimum and maximum of each metric for one month."""

    table: pd.DataFrame = field(default_factory=pd.DataFrame)
    label: str = "n/a"


def _sorted_labels(df: pd.DataFrame, column: str) -> list[str]:
    if column not in df.columns:
        return []
    labels = {str(v).strip() for v in df[column].dropna()}
    return sorted(label for label in labels if label)


def available_regions(df: pd.DataFrame) -> list[str]:
    """Sorted, de-duplicated region names."""
    return _sorted_labels(df, REGION_COLUMN)


def available_countries(df: pd.DataFrame) -> list[str]:
    """Sorted, de-duplicated country names."""
    return _sorted_labels(df, COUNTRY_COLUMN)


def resolve_region_name(df: pd.DataFrame, name: str) -> tuple[Optional[str], list[str]]:
    """
    Match user input against the dataset's region names.

    An exact match ignoring case wins. Otherwise every region whose name
    contains the input (ignoring case) is offered as a suggestion.

    Returns:
        (matched name, []) or (None, suggestions)

    Example:
        >>> resolve_region_name(df, "st. anton")
        ('St. Anton', [])
        >>> resolve_region_name(df, "anton")
        (None, ['St. Anton'])
    """
    target = str(name).strip().lower()
    regions = available_regions(df)
    if not target:
        return None, []
    for region in regions:
        if region.lower() == target:
            return region, []
    return None, [r for r in regions if target in r.lower()]


def region_rows(df: pd.DataFrame, region: str) -> pd.DataFrame:
    """Rows of one region (case-insensitive), as a copy."""
    if REGION_COLUMN not in df.columns:
        return df.iloc[0:0].copy()
    target = str(region).strip().lower()
    mask = df[REGION_COLUMN].map(lambda v: not pd.isna(v) and str(v).strip().lower() == target)
    return df.loc[mask.astype(bool)].copy()


def region_history(
    df: pd.DataFrame,
    region: str,
    months: int = DEFAULT_HISTORY_MONTHS,
    weights: Optional[Mapping[str, float]] = None,
) -> pd.DataFrame:
    """
    Month-by-month summary of one region over its last ``months`` months.

    The window ends at the region's latest month with data. Means (and the
    new-snow total) ignore missing readings and are rounded to 2 decimals.
    When ``weights`` is given the months are scored against each other and a
    ``weighted_score`` column is added.

    Args:
        df: Observation table (all regions or just this one)
        region: Region name, matched ignoring case
        months: Number of calendar months to include
        weights: Metric weights for scoring; no score column when None

    Returns:
        DataFrame sorted by ``month``; empty when the region has no dated rows
    """
    if DATE_COLUMN not in df.columns:
        return pd.DataFrame()
    rows = region_rows(df, region)
    if rows.empty:
        logger.info(f"No observations for region '{region}'")
        return pd.DataFrame()

    rows[MONTH_COLUMN] = month_start(rows[DATE_COLUMN])
    latest = rows[MONTH_COLUMN].max()
    cutoff = latest - pd.DateOffset(months=max(months, 1) - 1)
    recent = rows.loc[rows[MONTH_COLUMN] >= cutoff]
    if recent.empty:
        recent = rows

    history = pd.DataFrame(index=pd.DatetimeIndex(sorted(recent[MONTH_COLUMN].unique())))
    history.index.name = MONTH_COLUMN
    for column in DETAIL_COLUMNS:
        if column not in recent.columns:
            continue
        values = pd.to_numeric(recent[column], errors="coerce").groupby(recent[MONTH_COLUMN])
        if column in SUMMED_COLUMNS:
            history[TOTAL_PREFIX + column] = values.sum().round(2)
        else:
            history[AGGREGATE_PREFIX + column] = values.mean().round(2)
    history = history.reset_index()
    logger.debug(f"History for '{region}': {len(history)} months")

    if weights is not None and not history.empty:
        add_weighted_score(history, weights)
    return history


def top_snow_events(df: pd.DataFrame, top_n: int = DEFAULT_LEADERBOARD_TOP_N) -> pd.DataFrame:
    """
    The days with the largest fresh-snow gains.

    Snow depth and temperature are included for context when present. Days
    without new snow are left out.
    """
    if NEW_SNOW_COLUMN not in df.columns or DATE_COLUMN not in df.columns:
        return pd.DataFrame()

    columns = [DATE_COLUMN, NEW_SNOW_COLUMN] + [
        c for c in (SNOW_DEPTH_COLUMN, TEMPERATURE_COLUMN) if c in df.columns
    ]
    events = df[columns].copy()
    events[NEW_SNOW_COLUMN] = pd.to_numeric(events[NEW_SNOW_COLUMN], errors="coerce")
    events = events.loc[events[NEW_SNOW_COLUMN] > 0]
    if events.empty:
        return pd.DataFrame()
    events = events.sort_values(NEW_SNOW_COLUMN, ascending=False, kind="mergesort")
    return events.head(max(top_n, 0)).reset_index(drop=True)


def recent_conditions(df: pd.DataFrame, recent_days: int = DEFAULT_RECENT_DAYS) -> pd.DataFrame:
    """Last ``recent_days`` rows with date, location and the key metrics."""
    if df.empty or recent_days <= 0:
        return pd.DataFrame()
    columns = [c for c in (DATE_COLUMN, REGION_COLUMN, COUNTRY_COLUMN) + DETAIL_COLUMNS if c in df.columns]
    return df[columns].tail(recent_days).reset_index(drop=True)


def _month_rows(df: pd.DataFrame, year: int, month: int) -> pd.DataFrame:
    dates = pd.to_datetime(df[DATE_COLUMN])
    return df.loc[(dates.dt.year == year) & (dates.dt.month == month)]


def current_month_summary(df: pd.DataFrame, today: Optional[date] = None) -> MonthSummary:
    """
    Summarise the metrics of the current calendar month.

    Falls back to the latest month with data when the current month has no
    rows, so older datasets still get a summary.

    Args:
        df: Observation table, usually one region
        today: Reference date; ``date.today()`` when None

    Returns:
        MonthSummary with columns metric, average, minimum, maximum and a
        "Month YYYY" label; an empty table with label "n/a" when nothing
        can be summarised
    """
    if DATE_COLUMN not in df.columns or df.empty:
        return MonthSummary()

    today = today or date.today()
    subset = _month_rows(df, today.year, today.month)
    label_date = pd.Timestamp(today)
    if subset.empty:
        label_date = pd.to_datetime(df[DATE_COLUMN]).max()
        subset = _month_rows(df, label_date.year, label_date.month)
    if subset.empty:
        return MonthSummary()

    records = []
    for column in DETAIL_COLUMNS:
        if column not in subset.columns:
            continue
        values = pd.to_numeric(subset[column], errors="coerce").dropna()
        if values.empty:
            continue
        records.append({
            "metric": column,
            "average": round(float(values.mean()), 2),
            "minimum": round(float(values.min()), 2),
            "maximum": round(float(values.max()), 2),
        })
    table = pd.DataFrame(records, columns=["metric", "average", "minimum", "maximum"])
    return MonthSummary(table=table, label=label_date.strftime("%B %Y"))
