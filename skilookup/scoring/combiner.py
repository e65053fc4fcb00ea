"""
Score combination for weighted region scoring.

Provides:
- ScoreComponent: One metric with its weight
- ScoreCombiner: Combines components into a final 0-100 score
- add_weighted_score: Attach a ``weighted_score`` column to a table

Each component min-max normalizes its column across the rows being scored,
flips the axis for lower-is-better metrics and multiplies by its weight.

Formula: score = sum(weight * normalized) over metrics with data for the row

The score is relative to the current row population: filtering the table
changes the min/max bounds and can change every score.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from skilookup.config import WEIGHT_TOLERANCE, WEIGHT_TOTAL
from skilookup.scoring.metrics import (
    METRICS,
    SCORE_COLUMN,
    MetricDefinition,
    default_weights,
    get_metric,
    resolve_column,
)
from skilookup.scoring.transforms import min_max
from skilookup.scoring.weights import normalize_weights

SCORE_DECIMALS = 3


@dataclass
class ScoreComponent:
    """
    A single weighted metric.

    Attributes:
        metric: Registry entry describing the column and preference
        weight: Share of the final score (0-100)
    """

    metric: MetricDefinition
    weight: float

    def __post_init__(self):
        """Validate the component configuration."""
        if self.weight < 0:
            raise ValueError(
                f"Component '{self.metric.key}' has negative weight {self.weight}."
            )

    @property
    def name(self) -> str:
        return self.metric.key

    def apply(self, values) -> np.ndarray:
        """
        Weighted, preference-adjusted normalized values.

        Args:
            values: Raw column values (NaN for missing)

        Returns:
            Array in [0, weight], NaN where the input was missing
        """
        normalized = min_max(values, invert=self.metric.lower_is_better)
        return self.weight * normalized


@dataclass
class ScoreCombiner:
    """
    Combines ScoreComponents into a final score.

    Attributes:
        components: One component per metric; weights must sum to 100
    """

    components: list[ScoreComponent] = field(default_factory=list)

    def __post_init__(self):
        """Validate the combiner configuration."""
        weights = [c.weight for c in self.components]
        total = sum(weights)
        if not np.isclose(total, WEIGHT_TOTAL, rtol=0, atol=WEIGHT_TOLERANCE):
            raise ValueError(
                f"Component weights must sum to {WEIGHT_TOTAL:g}, got {total:.4f}. "
                f"Weights: {weights}"
            )

    @classmethod
    def from_weights(cls, weights: Mapping[str, float]) -> "ScoreCombiner":
        """Build a combiner from a weight map keyed by metric key."""
        for key in weights:
            get_metric(key)
        components = [
            ScoreComponent(metric=m, weight=float(weights.get(m.key, 0.0)))
            for m in METRICS
        ]
        return cls(components=components)

    def get_component_scores(self, table: pd.DataFrame) -> dict[str, np.ndarray]:
        """
        Get the weighted contribution of each metric.

        Metrics with zero weight, no matching column, or no valid values
        are left out.

        Args:
            table: Aggregated or raw observation table

        Returns:
            Dictionary mapping metric keys to per-row contributions (NaN = no data)
        """
        scores = {}
        for component in self.components:
            if component.weight == 0:
                continue
            column = resolve_column(component.metric, table.columns)
            if column is None:
                continue
            values = pd.to_numeric(table[column], errors="coerce").to_numpy(dtype=float)
            if np.all(np.isnan(values)):
                continue
            scores[component.name] = component.apply(values)
        return scores

    def compute(self, table: pd.DataFrame) -> pd.Series:
        """
        Compute the combined score for every row.

        Args:
            table: Aggregated or raw observation table

        Returns:
            Series aligned with ``table``; rounded to 3 decimals, NaN for rows
            to which no metric contributed
        """
        component_scores = self.get_component_scores(table)
        if not component_scores:
            return pd.Series(np.nan, index=table.index, dtype=float, name=SCORE_COLUMN)

        stacked = np.vstack(list(component_scores.values()))
        contributed = ~np.all(np.isnan(stacked), axis=0)
        totals = np.nansum(stacked, axis=0)

        scores = np.where(contributed, np.round(totals, SCORE_DECIMALS), np.nan)
        return pd.Series(scores, index=table.index, dtype=float, name=SCORE_COLUMN)


def add_weighted_score(
    table: pd.DataFrame,
    weights: Optional[Mapping[str, float]] = None,
) -> pd.DataFrame:
    """
    Create or replace the ``weighted_score`` column in place.

    The weight map is copied and normalized to sum to 100 before scoring, so
    the caller's map is never modified.

    Args:
        table: Aggregated or raw observation table (modified in place)
        weights: Metric weights; defaults when None

    Returns:
        The same table, for chaining
    """
    if table.empty:
        return table
    resolved = normalize_weights(dict(weights) if weights is not None else default_weights())
    combiner = ScoreCombiner.from_weights(resolved)
    table[SCORE_COLUMN] = combiner.compute(table)
    return table
