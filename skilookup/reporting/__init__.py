"""
Reporting: monthly overview, rankings, region details, data checks and plots.
"""

from skilookup.reporting.hints import decision_hints
from skilookup.reporting.overview import (
    STATUS_MESSAGES,
    Leaderboard,
    MonthlyOverview,
    Ranking,
    build_monthly_overview,
    build_new_snow_leaderboard,
    build_weighted_ranking,
)
from skilookup.reporting.plots import rolling_mean, save_region_score_trend
from skilookup.reporting.qc import qc_checks
from skilookup.reporting.region import (
    MonthSummary,
    available_countries,
    available_regions,
    current_month_summary,
    recent_conditions,
    region_history,
    region_rows,
    resolve_region_name,
    top_snow_events,
)

__all__ = [
    "STATUS_MESSAGES",
    "Leaderboard",
    "MonthlyOverview",
    "MonthSummary",
    "Ranking",
    "available_countries",
    "available_regions",
    "build_monthly_overview",
    "build_new_snow_leaderboard",
    "build_weighted_ranking",
    "current_month_summary",
    "decision_hints",
    "qc_checks",
    "recent_conditions",
    "region_history",
    "region_rows",
    "resolve_region_name",
    "rolling_mean",
    "save_region_score_trend",
    "top_snow_events",
]
