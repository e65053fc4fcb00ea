"""Configuration module for SkiLookup.

Centralizes data paths and default settings.
"""
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_CSV_NAME = "ski-regions-data.csv"
DEFAULT_CSV_PATH = DATA_DIR / DEFAULT_CSV_NAME

# Output directories (created when a plot is saved)
PLOTS_DIR = PROJECT_ROOT / "plots"

# Default settings
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TOP_N = 10
DEFAULT_LEADERBOARD_TOP_N = 5
DEFAULT_HISTORY_MONTHS = 12
DEFAULT_RECENT_DAYS = 14

# Seasons (calendar months)
WINTER_MONTHS = frozenset({11, 12, 1, 2, 3, 4})
SUMMER_MONTHS = frozenset({5, 6, 7, 8, 9, 10})
SEASONS = ("ALL", "WINTER", "SUMMER")

# New-snow plausibility gates
SNOW_MAX_TEMPERATURE_C = 2.5
SNOW_MIN_PRECIPITATION_MM = 2.0

# Weights must sum to this total (within WEIGHT_TOLERANCE)
WEIGHT_TOTAL = 100.0
WEIGHT_TOLERANCE = 1e-6
