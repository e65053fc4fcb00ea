"""
Metric registry for weighted region scoring.

Each scoring metric binds a stable key to its observation column, the column
produced by monthly aggregation, a preference direction and a default weight.
The registry is defined once at import time and never mutated; scoring code
resolves columns through it instead of matching column labels.

Metrics (default weights sum to 100):
- snow_new: fresh snow (higher is better), 30
- snow_depth: snow base (higher is better), 25
- temperature: air temperature (lower is better), 20
- precipitation: precipitation (lower is better), 15
- wind: wind force in Beaufort (lower is better), 10
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Literal, Optional

# Observation columns
DATE_COLUMN = "date"
REGION_COLUMN = "region"
COUNTRY_COLUMN = "country"
TEMPERATURE_COLUMN = "temperature_c"
PRECIPITATION_COLUMN = "precipitation_mm"
SNOW_DEPTH_COLUMN = "snow_depth_cm"
NEW_SNOW_COLUMN = "new_snow_cm"
WIND_COLUMN = "wind_beaufort"
ELEVATION_COLUMN = "elevation_m"

# Derived columns
MONTH_COLUMN = "month"
OBSERVATIONS_COLUMN = "observations"
SCORE_COLUMN = "weighted_score"
AGGREGATE_PREFIX = "avg_"
TOTAL_PREFIX = "total_"

Preference = Literal["higher", "lower"]


@dataclass(frozen=True)
class MetricDefinition:
    """
    Static description of one scoring metric.

    Attributes:
        key: Stable identifier used in weight maps
        column: Observation column holding the raw readings
        preference: "higher" if larger values are better, "lower" otherwise
        default_weight: Weight used when nothing overrides it
        env_key: Environment variable that overrides the weight
        cli_flag: Command-line flag that overrides the weight
        label: Human readable name for prompts and reports
    """

    key: str
    column: str
    preference: Preference
    default_weight: float
    env_key: str
    cli_flag: str
    label: str

    def __post_init__(self):
        if self.preference not in ("higher", "lower"):
            raise ValueError(
                f"Metric '{self.key}' has unknown preference '{self.preference}'. "
                "Use 'higher' or 'lower'."
            )

    @property
    def aggregate_column(self) -> str:
        """Column holding the monthly mean of this metric."""
        return AGGREGATE_PREFIX + self.column

    @property
    def total_column(self) -> str:
        """Column holding the monthly sum of this metric."""
        return TOTAL_PREFIX + self.column

    @property
    def lower_is_better(self) -> bool:
        return self.preference == "lower"


METRICS: tuple[MetricDefinition, ...] = (
    MetricDefinition(
        key="snow_new",
        column=NEW_SNOW_COLUMN,
        preference="higher",
        default_weight=30.0,
        env_key="WEIGHT_SNOW_NEW",
        cli_flag="--weight-snow-new",
        label="New snow (cm)",
    ),
    MetricDefinition(
        key="snow_depth",
        column=SNOW_DEPTH_COLUMN,
        preference="higher",
        default_weight=25.0,
        env_key="WEIGHT_SNOW_DEPTH",
        cli_flag="--weight-snow-depth",
        label="Snow depth (cm)",
    ),
    MetricDefinition(
        key="temperature",
        column=TEMPERATURE_COLUMN,
        preference="lower",
        default_weight=20.0,
        env_key="WEIGHT_TEMPERATURE",
        cli_flag="--weight-temperature",
        label="Temperature (°C)",
    ),
    MetricDefinition(
        key="precipitation",
        column=PRECIPITATION_COLUMN,
        preference="lower",
        default_weight=15.0,
        env_key="WEIGHT_PRECIPITATION",
        cli_flag="--weight-precipitation",
        label="Precipitation (mm)",
    ),
    MetricDefinition(
        key="wind",
        column=WIND_COLUMN,
        preference="lower",
        default_weight=10.0,
        env_key="WEIGHT_WIND",
        cli_flag="--weight-wind",
        label="Wind (Beaufort)",
    ),
)

METRIC_KEYS: tuple[str, ...] = tuple(m.key for m in METRICS)

_METRICS_BY_KEY = MappingProxyType({m.key: m for m in METRICS})

METRICS_BY_FLAG = MappingProxyType({m.cli_flag: m for m in METRICS})

DEFAULT_METRIC_WEIGHTS = MappingProxyType({m.key: m.default_weight for m in METRICS})

# Observation columns averaged by the monthly overview, in display order
AGGREGATED_COLUMNS: tuple[str, ...] = (
    TEMPERATURE_COLUMN,
    PRECIPITATION_COLUMN,
    WIND_COLUMN,
    SNOW_DEPTH_COLUMN,
    NEW_SNOW_COLUMN,
)


def get_metric(key: str) -> MetricDefinition:
    """Look up a metric by key; raises KeyError for unknown keys."""
    try:
        return _METRICS_BY_KEY[key]
    except KeyError:
        raise KeyError(
            f"Unknown metric '{key}'. Available: {list(METRIC_KEYS)}"
        ) from None


def default_weights() -> dict[str, float]:
    """Fresh, caller-owned copy of the default weight map."""
    return {m.key: m.default_weight for m in METRICS}


def resolve_column(metric: MetricDefinition, columns: Iterable[str]) -> Optional[str]:
    """
    Pick the column that carries a metric in a given table.

    Aggregated tables carry the ``avg_`` column (or a ``total_`` column for
    monthly sums), raw observation tables the plain one. Returns None when
    none is present.
    """
    available = set(columns)
    for candidate in (metric.aggregate_column, metric.total_column):
        if candidate in available:
            return candidate
    if metric.column in available:
        return metric.column
    return None
