"""
CSV ingestion for ski-region observations.

Turns a raw export (English or German headers, day-first dates, mixed
country spellings) into the canonical observation table:

    date, region, country, temperature_c, precipitation_mm,
    snow_depth_cm, wind_beaufort, elevation_m [, new_snow_cm]
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd
from pandas.api.types import is_datetime64_any_dtype

from skilookup.config import DEFAULT_CSV_NAME, DEFAULT_CSV_PATH, PROJECT_ROOT
from skilookup.scoring.metrics import (
    COUNTRY_COLUMN,
    DATE_COLUMN,
    ELEVATION_COLUMN,
    NEW_SNOW_COLUMN,
    PRECIPITATION_COLUMN,
    REGION_COLUMN,
    SNOW_DEPTH_COLUMN,
    TEMPERATURE_COLUMN,
    WIND_COLUMN,
)

logger = logging.getLogger(__name__)

CSV_PATH_ENV = "CSV_PATH"

DATE_COLUMN_NAMES = ("date", "datum", "day", "tag", "datetime", "timestamp")
DATE_FORMATS = ("%d/%m/%Y", "%Y-%m-%d", "%d.%m.%Y")

NUMERIC_COLUMNS = (
    ELEVATION_COLUMN,
    WIND_COLUMN,
    TEMPERATURE_COLUMN,
    PRECIPITATION_COLUMN,
    SNOW_DEPTH_COLUMN,
    NEW_SNOW_COLUMN,
)

# Gaps in these readings are filled by linear interpolation per region
INTERPOLATED_COLUMNS = (WIND_COLUMN, TEMPERATURE_COLUMN, SNOW_DEPTH_COLUMN)

COUNTRY_SYNONYMS = {
    "AUSTRIA": "Austria",
    "OESTERREICH": "Austria",
    "ÖSTERREICH": "Austria",
    "AT": "Austria",
    "AUT": "Austria",
    "GERMANY": "Germany",
    "DEUTSCHLAND": "Germany",
    "DE": "Germany",
    "DEU": "Germany",
    "SWITZERLAND": "Switzerland",
    "SCHWEIZ": "Switzerland",
    "CH": "Switzerland",
    "CHE": "Switzerland",
}


def is_remote_source(path: str) -> bool:
    lowered = str(path).strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def resolve_csv_path(
    csv_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Pick the CSV file to load.

    Candidates, in order: the given path (or ``CSV_PATH``), the same path
    relative to the project root, ``<project>/<default name>`` when the given
    path is not a .csv file, and finally ``data/ski-regions-data.csv``.
    URLs are returned unchanged and read by pandas directly.

    Returns:
        The first existing candidate, or None
    """
    environ = os.environ if environ is None else environ
    requested = csv_path if csv_path is not None else environ.get(CSV_PATH_ENV)
    requested = str(requested).strip() if requested is not None else ""

    candidates = []
    if requested:
        if is_remote_source(requested):
            return requested
        candidates.append(Path(requested).expanduser())
        candidates.append(PROJECT_ROOT / requested)
        if Path(requested).suffix.lower() != ".csv":
            candidates.append(PROJECT_ROOT / DEFAULT_CSV_NAME)
    candidates.append(DEFAULT_CSV_PATH)

    for candidate in candidates:
        if candidate.is_file():
            return str(candidate)
    return None


def find_date_column(columns: Iterable[str]) -> Optional[str]:
    """Return the column most likely holding dates, or None."""
    columns = list(columns)
    by_lower = {str(c).strip().lower(): c for c in columns}
    for name in DATE_COLUMN_NAMES:
        if name in by_lower:
            return by_lower[name]
    for column in columns:
        lowered = str(column).lower()
        if "date" in lowered or "datum" in lowered:
            return column
    return None


def _canonical_name(lowered: str, temp_found: bool) -> Optional[str]:
    is_snow = "snow" in lowered or "schnee" in lowered
    if "elevation" in lowered:
        return ELEVATION_COLUMN
    if "wind" in lowered and "beaufort" in lowered:
        return WIND_COLUMN
    if "temp" in lowered and not temp_found:
        return TEMPERATURE_COLUMN
    if "precip" in lowered or "niedersch" in lowered:
        return PRECIPITATION_COLUMN
    if is_snow and any(token in lowered for token in ("new", "neu", "fresh")):
        return NEW_SNOW_COLUMN
    if is_snow and not any(token in lowered for token in ("daily", "monthly", "mean", "max")):
        return SNOW_DEPTH_COLUMN
    if lowered == "region":
        return REGION_COLUMN
    if lowered == "country":
        return COUNTRY_COLUMN
    return None


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Rename weather/snow columns to the canonical names.

    Matching is by keyword (English or German), so "Temperature (°C)",
    "Schneehöhe (cm)" or "Niederschlag" all land on the canonical columns.
    Only the first temperature column is used and a canonical name is never
    assigned twice.

    Returns:
        Renamed copy
    """
    renames = {}
    taken = set()
    temp_found = False
    for column in df.columns:
        if column == DATE_COLUMN:
            continue
        lowered = " ".join(str(column).lower().split())
        target = _canonical_name(lowered, temp_found)
        if target is None or target in taken:
            continue
        if target == TEMPERATURE_COLUMN:
            temp_found = True
        renames[column] = target
        taken.add(target)
    return df.rename(columns=renames)


def canonical_country(value):
    """
    Map spellings and ISO codes of Austria, Germany and Switzerland to one name.

    Unknown values are returned trimmed; missing values stay missing.

    Example:
        >>> canonical_country("DE")
        'Germany'
        >>> canonical_country(" Liechtenstein ")
        'Liechtenstein'
    """
    if value is None or pd.isna(value):
        return value
    text = str(value).strip()
    return COUNTRY_SYNONYMS.get(text.upper(), text)


def _clean_label(value):
    if pd.isna(value):
        return np.nan
    text = str(value).strip()
    return text if text else np.nan


def parse_dates(values: pd.Series) -> pd.Series:
    """Parse day-first (or ISO) date strings; unparseable entries become NaT."""
    if is_datetime64_any_dtype(values):
        return values.dt.normalize()

    present = values.notna()
    best = None
    for fmt in DATE_FORMATS:
        parsed = pd.to_datetime(values, format=fmt, errors="coerce")
        if parsed[present].notna().all():
            return parsed
        if best is None or parsed.notna().sum() > best.notna().sum():
            best = parsed
    return best


def interpolate_series(values: pd.Series) -> pd.Series:
    """
    Fill gaps by straight lines between known values.

    Leading and trailing gaps copy the nearest known value. A series with no
    known values is returned unchanged.
    """
    if values.notna().sum() == 0:
        return values
    return values.interpolate(method="linear", limit_direction="both")


def _interpolate_by_region(df: pd.DataFrame, column: str) -> pd.Series:
    if REGION_COLUMN not in df.columns:
        return interpolate_series(df[column])
    return df.groupby(REGION_COLUMN, dropna=False, sort=False)[column].transform(interpolate_series)


def prepare_observations(df: pd.DataFrame) -> pd.DataFrame:
    """
    Clean a raw table into canonical observations.

    Steps: trim headers, locate and parse the date column, sort by date,
    rename columns, coerce numbers, trim region/country labels, canonicalize
    countries, treat missing precipitation as 0 and interpolate gaps in wind,
    temperature and snow depth per region.

    Raises:
        ValueError: When no date column can be found
    """
    df = df.rename(columns={c: str(c).strip() for c in df.columns})

    date_col = find_date_column(df.columns)
    if date_col is None:
        raise ValueError(
            f"No date column found. Expected one of {DATE_COLUMN_NAMES}, got {list(df.columns)}"
        )
    df = df.rename(columns={date_col: DATE_COLUMN})
    df[DATE_COLUMN] = parse_dates(df[DATE_COLUMN])

    unparsed = int(df[DATE_COLUMN].isna().sum())
    if unparsed:
        logger.warning(f"Dropping {unparsed} rows with unreadable dates")
        df = df.dropna(subset=[DATE_COLUMN])

    df = df.sort_values(DATE_COLUMN, kind="stable").reset_index(drop=True)
    df = normalize_columns(df)

    for column in NUMERIC_COLUMNS:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors="coerce").astype(float)

    for column in (REGION_COLUMN, COUNTRY_COLUMN):
        if column in df.columns:
            df[column] = df[column].map(_clean_label)

    if COUNTRY_COLUMN in df.columns:
        df[COUNTRY_COLUMN] = df[COUNTRY_COLUMN].map(canonical_country)

    if PRECIPITATION_COLUMN in df.columns:
        df[PRECIPITATION_COLUMN] = df[PRECIPITATION_COLUMN].fillna(0.0)

    for column in INTERPOLATED_COLUMNS:
        if column in df.columns:
            df[column] = _interpolate_by_region(df, column)

    return df


def load_data(
    csv_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> pd.DataFrame:
    """
    Read and clean the ski-region dataset.

    Args:
        csv_path: File path or URL; falls back to ``CSV_PATH`` and the default
        environ: Environment mapping; ``os.environ`` when None

    Returns:
        Canonical observation table sorted by date

    Raises:
        FileNotFoundError: When no CSV file can be found
        ValueError: When the file has no date column
    """
    path = resolve_csv_path(csv_path, environ)
    if path is None:
        raise FileNotFoundError(
            f"No data file found. Pass --csv, set {CSV_PATH_ENV}, or place "
            f"{DEFAULT_CSV_NAME} in {DEFAULT_CSV_PATH.parent}"
        )

    logger.info(f"Loading data from {path}")
    df = prepare_observations(pd.read_csv(path))
    logger.info(f"Loaded {len(df)} observations with columns {list(df.columns)}")
    return df
