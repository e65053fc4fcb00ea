"""
Monthly overview, weighted ranking and new-snow leaderboard.

Every builder returns a small result object with a ``status``. Data that is
too thin to summarise never raises; the status says why the table is empty
so the caller can explain it and carry on.
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from skilookup.config import DEFAULT_LEADERBOARD_TOP_N, DEFAULT_TOP_N
from skilookup.scoring.combiner import add_weighted_score
from skilookup.scoring.metrics import (
    AGGREGATE_PREFIX,
    AGGREGATED_COLUMNS,
    COUNTRY_COLUMN,
    DATE_COLUMN,
    NEW_SNOW_COLUMN,
    OBSERVATIONS_COLUMN,
    REGION_COLUMN,
    SCORE_COLUMN,
    TOTAL_PREFIX,
)

logger = logging.getLogger(__name__)

RANKING_COLUMNS = ["rank", "region", "country", "score"]
TOTAL_NEW_SNOW_COLUMN = TOTAL_PREFIX + NEW_SNOW_COLUMN
MISSING_LABEL = "n/a"
LEADERBOARD_WINDOW_DAYS = 365

STATUS_MESSAGES = {
    "no_date": "No date column available; cannot build the monthly overview.",
    "no_metrics": "No weather or snow metrics available for the monthly overview.",
    "no_month_values": "No usable dates found for the monthly overview.",
    "no_rows": "No observations left to summarise.",
    "empty_grouping": "No regions to summarise for the most recent month.",
    "empty_overview": "Ranking unavailable: the monthly overview is empty.",
    "no_valid_scores": "Ranking unavailable: no region has enough data for a score.",
    "missing_columns": "New-snow leaderboard needs date and new-snow columns.",
}


@dataclass
class MonthlyOverview:
    """Per-region means for the focus month, scored and sorted."""

    table: pd.DataFrame = field(default_factory=pd.DataFrame)
    label: str = ""
    status: str = "ok"
    focus_month: Optional[pd.Timestamp] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class Ranking:
    """Top regions by weighted score: rank, region, country, score."""

    table: pd.DataFrame = field(default_factory=pd.DataFrame)
    label: str = ""
    status: str = "ok"

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class Leaderboard:
    """Regions with the most new snow over the last year."""

    table: pd.DataFrame = field(default_factory=pd.DataFrame)
    label: str = ""
    status: str = "ok"

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def month_start(dates: pd.Series) -> pd.Series:
    """Truncate dates to the first day of their month."""
    return pd.to_datetime(dates).dt.to_period("M").dt.to_timestamp()


def group_columns(df: pd.DataFrame) -> list[str]:
    return [c for c in (REGION_COLUMN, COUNTRY_COLUMN) if c in df.columns]


def _label_values(table: pd.DataFrame, column: str) -> list[str]:
    if column not in table.columns:
        return [MISSING_LABEL] * len(table)
    return [MISSING_LABEL if pd.isna(v) else str(v) for v in table[column]]


def sort_by_score(table: pd.DataFrame, column: str = SCORE_COLUMN) -> pd.DataFrame:
    """
    Sort descending by ``column`` with missing values last.

    Ties are broken by region, then country name (ascending), so equal
    scores always come out in the same order.
    """
    keys = [column] + group_columns(table)
    ascending = [False] + [True] * (len(keys) - 1)
    return table.sort_values(keys, ascending=ascending, na_position="last", kind="mergesort")


def build_monthly_overview(
    df: pd.DataFrame,
    weights: Optional[Mapping[str, float]] = None,
) -> MonthlyOverview:
    """
    Summarise the most recent month in the (already filtered) data per region.

    The focus month is the latest month present in ``df``, not the calendar
    month. Rows are grouped by region (and country when present); each group
    gets an observation count and the mean of every available metric. Means
    ignore missing values and stay missing when a group has none. The table
    is then scored and sorted by ``weighted_score``, or by mean new snow
    when no row could be scored.

    Args:
        df: Observation table with ``new_snow_cm`` already derived
        weights: Metric weights; defaults when None

    Returns:
        MonthlyOverview with status "ok" or one of no_date, no_metrics,
        no_month_values, no_rows, empty_grouping
    """
    if DATE_COLUMN not in df.columns:
        return MonthlyOverview(status="no_date")

    available = [c for c in AGGREGATED_COLUMNS if c in df.columns]
    if not available:
        return MonthlyOverview(status="no_metrics")
    if df.empty:
        return MonthlyOverview(status="no_rows")

    months = month_start(df[DATE_COLUMN])
    if months.dropna().empty:
        return MonthlyOverview(status="no_month_values")

    focus_month = months.max()
    subset = df.loc[months == focus_month]
    if subset.empty:
        return MonthlyOverview(status="no_rows")

    keys = group_columns(subset)
    if not keys:
        return MonthlyOverview(status="empty_grouping")

    numeric = subset[keys].copy()
    for column in available:
        numeric[column] = pd.to_numeric(subset[column], errors="coerce")

    grouped = numeric.groupby(keys, dropna=False, sort=True)
    aggregated = grouped.size().rename(OBSERVATIONS_COLUMN).to_frame()
    for column in available:
        aggregated[AGGREGATE_PREFIX + column] = grouped[column].mean().round(2)
    aggregated = aggregated.reset_index()

    if aggregated.empty:
        return MonthlyOverview(status="empty_grouping")

    add_weighted_score(aggregated, weights)

    if aggregated[SCORE_COLUMN].notna().any():
        aggregated = sort_by_score(aggregated, SCORE_COLUMN)
    elif AGGREGATE_PREFIX + NEW_SNOW_COLUMN in aggregated.columns:
        aggregated = sort_by_score(aggregated, AGGREGATE_PREFIX + NEW_SNOW_COLUMN)

    label = focus_month.strftime("%Y-%m")
    logger.info(f"Monthly overview for {label}: {len(aggregated)} regions")
    return MonthlyOverview(
        table=aggregated.reset_index(drop=True),
        label=label,
        status="ok",
        focus_month=focus_month,
    )


def build_weighted_ranking(
    monthly_table: pd.DataFrame,
    month_label: str = "",
    top_n: int = DEFAULT_TOP_N,
) -> Ranking:
    """
    Rank the scored regions of a monthly overview.

    Rows without a score are dropped. The rest are sorted by score
    (descending), numbered 1..N and cut to ``top_n``. A table without a
    ``weighted_score`` column is scored with the default weights first.

    Returns:
        Ranking with columns rank, region, country, score and status "ok",
        "empty_overview" or "no_valid_scores"
    """
    if monthly_table.empty:
        return Ranking(label=month_label, status="empty_overview")

    table = monthly_table.copy()
    if SCORE_COLUMN not in table.columns:
        add_weighted_score(table)

    valid = table[table[SCORE_COLUMN].notna()]
    if valid.empty:
        return Ranking(label=month_label, status="no_valid_scores")

    ranked = sort_by_score(valid).head(max(top_n, 0))
    result = pd.DataFrame({
        "rank": np.arange(1, len(ranked) + 1),
        "region": _label_values(ranked, REGION_COLUMN),
        "country": _label_values(ranked, COUNTRY_COLUMN),
        "score": ranked[SCORE_COLUMN].astype(float).to_numpy(),
    }, columns=RANKING_COLUMNS)
    return Ranking(table=result, label=month_label, status="ok")


def build_new_snow_leaderboard(
    df: pd.DataFrame,
    top_n: int = DEFAULT_LEADERBOARD_TOP_N,
) -> Leaderboard:
    """
    Total new snow per region over the year up to the latest date.

    Returns:
        Leaderboard with columns rank, region, country, total_new_snow_cm
        and status "ok", "missing_columns" or "no_rows"
    """
    keys = group_columns(df)
    if DATE_COLUMN not in df.columns or NEW_SNOW_COLUMN not in df.columns or not keys:
        return Leaderboard(status="missing_columns")
    if df.empty:
        return Leaderboard(status="no_rows")

    dates = pd.to_datetime(df[DATE_COLUMN])
    latest = dates.max()
    window_start = latest - pd.Timedelta(days=LEADERBOARD_WINDOW_DAYS - 1)
    window = df.loc[(dates >= window_start) & (dates <= latest)]
    if window.empty:
        return Leaderboard(status="no_rows")

    totals = (
        window.assign(**{NEW_SNOW_COLUMN: pd.to_numeric(window[NEW_SNOW_COLUMN], errors="coerce")})
        .groupby(keys, dropna=False, sort=True)[NEW_SNOW_COLUMN]
        .sum()
        .rename(TOTAL_NEW_SNOW_COLUMN)
        .reset_index()
    )
    leaders = sort_by_score(totals, TOTAL_NEW_SNOW_COLUMN).head(max(top_n, 0))

    table = pd.DataFrame({
        "rank": np.arange(1, len(leaders) + 1),
        "region": _label_values(leaders, REGION_COLUMN),
        "country": _label_values(leaders, COUNTRY_COLUMN),
        TOTAL_NEW_SNOW_COLUMN: leaders[TOTAL_NEW_SNOW_COLUMN].round(1).to_numpy(),
    })
    label = f"{window_start:%Y-%m-%d} to {latest:%Y-%m-%d}"
    return Leaderboard(table=table, label=label, status="ok")
