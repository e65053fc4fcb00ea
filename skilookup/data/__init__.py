"""
Observation ingestion and filtering.

- load_data / prepare_observations: CSV -> canonical observation table
- canonical_country: collapse country spellings and ISO codes
- RunArgs / apply_filters: date range, season, region and country filters
"""

from .loading import (
    canonical_country,
    find_date_column,
    load_data,
    normalize_columns,
    prepare_observations,
    resolve_csv_path,
)
from .filters import RunArgs, apply_filters, in_season, parse_date_value

__all__ = [
    "canonical_country",
    "find_date_column",
    "load_data",
    "normalize_columns",
    "prepare_observations",
    "resolve_csv_path",
    "RunArgs",
    "apply_filters",
    "in_season",
    "parse_date_value",
]
