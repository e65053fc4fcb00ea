"""Date, season, region and country filters applied before reporting."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from skilookup.config import SEASONS, SUMMER_MONTHS, WINTER_MONTHS
from skilookup.data.loading import canonical_country
from skilookup.scoring.metrics import COUNTRY_COLUMN, DATE_COLUMN, REGION_COLUMN

logger = logging.getLogger(__name__)


@dataclass
class RunArgs:
    """
    Time filters for one run.

    Attributes:
        from_date: First day kept (inclusive), None for open start
        to_date: Last day kept (inclusive), None for open end
        season: "ALL", "WINTER" (Nov-Apr) or "SUMMER" (May-Oct)
    """

    from_date: Optional[date] = None
    to_date: Optional[date] = None
    season: str = "ALL"

    def __post_init__(self):
        self.season = (self.season or "ALL").strip().upper()
        if self.season not in SEASONS:
            raise ValueError(f"Unknown season '{self.season}'. Available: {list(SEASONS)}")


def parse_date_value(raw: Optional[str], label: str = "date") -> Optional[date]:
    """Parse an ISO date (YYYY-MM-DD); logs and returns None when invalid."""
    if raw is None or str(raw).strip() == "":
        return None
    try:
        return date.fromisoformat(str(raw).strip())
    except ValueError:
        logger.warning(f"Ignoring invalid {label} {raw!r}; expected YYYY-MM-DD")
        return None


def season_months(season: str) -> Optional[frozenset]:
    """Calendar months of a season; None for ALL."""
    season = season.upper()
    if season == "WINTER":
        return WINTER_MONTHS
    if season == "SUMMER":
        return SUMMER_MONTHS
    return None


def in_season(value, season: str) -> bool:
    """True when a month number (or anything with a ``month``, like a date) is in the season."""
    month = value.month if hasattr(value, "month") else int(value)
    months = season_months(season)
    return months is None or month in months


def _matches(values: pd.Series, wanted: str) -> pd.Series:
    target = wanted.strip().lower()
    return values.map(lambda v: not pd.isna(v) and str(v).strip().lower() == target).astype(bool)


def apply_filters(
    df: pd.DataFrame,
    run_args: Optional[RunArgs] = None,
    region: Optional[str] = None,
    country: Optional[str] = None,
) -> pd.DataFrame:
    """
    Return the rows matching region, country, date range and season.

    Region and country comparisons ignore case, and country spellings such
    as "CH" or "Schweiz" are canonicalized first. Filters on columns the
    table does not have are skipped.

    Args:
        df: Observation table
        run_args: Date range and season; no time filter when None
        region: Keep only this region
        country: Keep only this country

    Returns:
        Filtered copy
    """
    run_args = run_args or RunArgs()
    mask = pd.Series(True, index=df.index)

    if region and REGION_COLUMN in df.columns:
        mask &= _matches(df[REGION_COLUMN], region)
    if country and COUNTRY_COLUMN in df.columns:
        mask &= _matches(df[COUNTRY_COLUMN], canonical_country(country))

    if DATE_COLUMN in df.columns:
        dates = pd.to_datetime(df[DATE_COLUMN])
        if run_args.from_date is not None:
            mask &= dates >= pd.Timestamp(run_args.from_date)
        if run_args.to_date is not None:
            mask &= dates <= pd.Timestamp(run_args.to_date)
        months = season_months(run_args.season)
        if months is not None:
            mask &= dates.dt.month.isin(sorted(months))

    filtered = df.loc[mask].copy()
    logger.info(f"{len(filtered)} of {len(df)} observations match the active filters")
    return filtered
