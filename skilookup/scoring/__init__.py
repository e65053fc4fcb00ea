"""
Scoring module for weighted region rankings.

Registry:
- MetricDefinition / METRICS: the five scoring metrics, their columns,
  preference direction, default weight and override keys

Weights:
- normalize_weights: rescale to a total of 100 (defaults when not positive)
- resolve_weights: defaults -> environment -> CLI -> preset -> manual entry
- WEIGHT_PRESETS: named weight bundles (balanced, powder, family, sunny)

Combination:
- ScoreComponent / ScoreCombiner: weighted min-max normalization
- add_weighted_score: attach a ``weighted_score`` column to a table
"""

from skilookup.scoring.metrics import (
    DEFAULT_METRIC_WEIGHTS,
    METRICS,
    MetricDefinition,
    default_weights,
    get_metric,
)
from skilookup.scoring.weights import (
    WEIGHT_PRESETS,
    WeightPreset,
    apply_cli_overrides,
    apply_env_overrides,
    apply_preset,
    find_preset,
    normalize_weights,
    prepare_weights,
    prompt_metric_weights,
    prompt_weight_profile,
    resolve_weights,
)
from skilookup.scoring.transforms import min_max
from skilookup.scoring.combiner import ScoreComponent, ScoreCombiner, add_weighted_score

__all__ = [
    # Registry
    "DEFAULT_METRIC_WEIGHTS",
    "METRICS",
    "MetricDefinition",
    "default_weights",
    "get_metric",
    # Weights
    "WEIGHT_PRESETS",
    "WeightPreset",
    "apply_cli_overrides",
    "apply_env_overrides",
    "apply_preset",
    "find_preset",
    "normalize_weights",
    "prepare_weights",
    "prompt_metric_weights",
    "prompt_weight_profile",
    "resolve_weights",
    # Transforms
    "min_max",
    # Combiner
    "ScoreComponent",
    "ScoreCombiner",
    "add_weighted_score",
]
