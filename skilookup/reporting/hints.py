"""Short plain-language hints derived from the leaderboard and monthly overview."""

from typing import Optional

import pandas as pd

from skilookup.reporting.overview import TOTAL_NEW_SNOW_COLUMN
from skilookup.scoring.metrics import (
    AGGREGATE_PREFIX,
    PRECIPITATION_COLUMN,
    REGION_COLUMN,
    SCORE_COLUMN,
    TEMPERATURE_COLUMN,
    WIND_COLUMN,
)


def _extreme(table: pd.DataFrame, column: str, largest: bool) -> Optional[tuple[str, float]]:
    """Region and value of the smallest (or largest) entry in ``column``."""
    if column not in table.columns or REGION_COLUMN not in table.columns:
        return None
    values = pd.to_numeric(table[column], errors="coerce")
    if values.notna().sum() == 0:
        return None
    idx = values.idxmax() if largest else values.idxmin()
    region = table.at[idx, REGION_COLUMN]
    if pd.isna(region) or not str(region).strip():
        return None
    return str(region), float(values.at[idx])


def decision_hints(leaderboard: pd.DataFrame, monthly_table: pd.DataFrame) -> list[str]:
    """
    Build one-line hints for choosing a destination.

    Args:
        leaderboard: Table from build_new_snow_leaderboard
        monthly_table: Table from build_monthly_overview

    Returns:
        Hints in the order: most fresh snow, best weighted score, coldest,
        calmest, wettest. Hints without data are left out.
    """
    hints = []

    if not leaderboard.empty and {"region", TOTAL_NEW_SNOW_COLUMN} <= set(leaderboard.columns):
        top = leaderboard.iloc[0]
        hints.append(
            f"Most fresh snow over the last year: {top['region']} "
            f"({float(top[TOTAL_NEW_SNOW_COLUMN]):.1f} cm)"
        )

    best = _extreme(monthly_table, SCORE_COLUMN, largest=True)
    if best:
        hints.append(f"Best overall weighted score: {best[0]} ({best[1]:.2f})")

    for column, largest, label, unit in (
        (TEMPERATURE_COLUMN, False, "Coldest", " °C"),
        (WIND_COLUMN, False, "Calmest", " Bft"),
        (PRECIPITATION_COLUMN, True, "Wettest", " mm"),
    ):
        found = _extreme(monthly_table, AGGREGATE_PREFIX + column, largest)
        if found:
            hints.append(f"{label}: {found[0]} ({found[1]:.2f}{unit})")

    return hints
