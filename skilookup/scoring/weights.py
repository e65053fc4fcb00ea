"""
Weight resolution for weighted region scoring.

A weight map is a plain ``dict`` from metric key to a non-negative weight.
Before any scoring runs the weights must add up to 100. Layers are applied
in order, later layers winning:

1. Registry defaults
2. Environment variables (``WEIGHT_SNOW_NEW`` ... ``WEIGHT_WIND``)
3. Command-line flags (``--weight-snow-new`` ... ``--weight-wind``)
4. A named preset, picked by token (``--preset powder``) or interactively
5. Manual entry, one prompt per metric, repeated until the sum is exactly 100

Invalid override values are logged and ignored. Normalization rescales any
positive total to 100 and falls back to the defaults when the total is not
positive.

All interactive input goes through an ``ask_text(prompt) -> str`` callable
so scripted answers can stand in for a terminal.
"""

import logging
import os
import sys
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Literal, Mapping, MutableMapping, Optional

from skilookup.config import WEIGHT_TOLERANCE, WEIGHT_TOTAL
from skilookup.scoring.metrics import (
    DEFAULT_METRIC_WEIGHTS,
    METRICS,
    METRICS_BY_FLAG,
    default_weights,
    get_metric,
)
from skilookup.utils.helpers import parse_bool, parse_weight_value

logger = logging.getLogger(__name__)

AskText = Callable[[str], str]
ProfileChoice = Literal["skip", "manual", "preset", "preset_manual"]

FORCE_PROMPT_ENV = "FORCE_WEIGHT_PROMPT"
PRESET_ENV = "WEIGHT_PRESET"

MANUAL_TOKENS = ("custom", "manual", "manuell")
YES_TOKENS = ("y", "yes", "j", "ja")
NO_TOKENS = ("", "n", "no", "nein")

# Totals at or below this are treated as "no weights at all"
_MIN_TOTAL = sys.float_info.epsilon


@dataclass(frozen=True)
class WeightPreset:
    """
    Named bundle of weights offered as a shortcut to manual entry.

    Attributes:
        key: Stable identifier
        name: Display name
        description: One-line explanation for the profile menu
        aliases: Tokens accepted when picking the preset by name
        weights: Weight for every metric (sums to 100)
    """

    key: str
    name: str
    description: str
    aliases: tuple[str, ...]
    weights: Mapping[str, float]


WEIGHT_PRESETS: tuple[WeightPreset, ...] = (
    WeightPreset(
        key="balanced",
        name="Balanced",
        description="Default mix of fresh snow, base and weather",
        aliases=("balanced", "default", "standard", "ausgewogen"),
        weights=DEFAULT_METRIC_WEIGHTS,
    ),
    WeightPreset(
        key="powder",
        name="Powder hunter",
        description="Fresh snow and a deep base above everything else",
        aliases=("powder", "pulver", "powderhunter", "powderjaeger", "powderjäger", "pulverschnee"),
        weights=MappingProxyType({
            "snow_new": 45.0,
            "snow_depth": 35.0,
            "temperature": 8.0,
            "precipitation": 7.0,
            "wind": 5.0,
        }),
    ),
    WeightPreset(
        key="family",
        name="Family friendly",
        description="Reliable base, mild temperatures and little wind",
        aliases=("family", "familie", "familyfriendly", "familienfreundlich"),
        weights=MappingProxyType({
            "snow_new": 15.0,
            "snow_depth": 30.0,
            "temperature": 25.0,
            "precipitation": 15.0,
            "wind": 15.0,
        }),
    ),
    WeightPreset(
        key="sunny",
        name="Sunny skier",
        description="Cold, dry and calm days on a decent base",
        aliases=("sunny", "sonnig", "sun", "sunnyskier", "sonnenskifahrer"),
        weights=MappingProxyType({
            "snow_new": 20.0,
            "snow_depth": 20.0,
            "temperature": 35.0,
            "precipitation": 10.0,
            "wind": 15.0,
        }),
    ),
)


def stdin_is_tty() -> bool:
    """True when standard input is attached to a terminal."""
    return sys.stdin is not None and sys.stdin.isatty()


def weights_total(weights: Mapping[str, float]) -> float:
    return float(sum(weights.values()))


def weights_sum_to_total(weights: Mapping[str, float]) -> bool:
    """True when the weights add up to 100 within tolerance."""
    return abs(weights_total(weights) - WEIGHT_TOTAL) <= WEIGHT_TOLERANCE


def normalize_weights(weights: MutableMapping[str, float]) -> MutableMapping[str, float]:
    """
    Rescale weights in place so they sum to 100.

    When the total is not positive the defaults are restored instead.

    Args:
        weights: Weight map (modified in place)

    Returns:
        The same map, for chaining

    Example:
        >>> normalize_weights({"snow_new": 10.0, "wind": 30.0})
        {'snow_new': 25.0, 'wind': 75.0}
    """
    total = weights_total(weights)
    if total <= _MIN_TOTAL:
        logger.warning(
            f"Metric weights sum to {total:g}; restoring default weights. Current: {dict(weights)}"
        )
        weights.update(DEFAULT_METRIC_WEIGHTS)
        return weights

    factor = WEIGHT_TOTAL / total
    for key, value in weights.items():
        weights[key] = value * factor
    return weights


def _set_weight(weights: MutableMapping[str, float], key: str, raw, source: str) -> bool:
    """Parse and store one override; logs and returns False when rejected."""
    parsed = parse_weight_value(raw)
    if parsed is None:
        logger.warning(f"Ignoring invalid weight {raw!r} from {source}")
        return False
    if parsed < 0:
        logger.warning(f"Ignoring negative weight {raw!r} from {source}")
        return False
    weights[key] = parsed
    return True


def apply_env_overrides(
    weights: MutableMapping[str, float],
    environ: Optional[Mapping[str, str]] = None,
) -> MutableMapping[str, float]:
    """
    Apply ``WEIGHT_*`` environment overrides in place.

    Args:
        weights: Weight map (modified in place)
        environ: Environment mapping; ``os.environ`` when None

    Returns:
        The same map
    """
    environ = os.environ if environ is None else environ
    for metric in METRICS:
        if metric.env_key in environ:
            _set_weight(weights, metric.key, environ[metric.env_key], metric.env_key)
    return weights


def apply_cli_overrides(
    weights: MutableMapping[str, float],
    overrides: Mapping[str, Optional[str]],
) -> MutableMapping[str, float]:
    """
    Apply command-line weight overrides in place.

    Args:
        weights: Weight map (modified in place)
        overrides: Maps a flag (``--weight-wind``) or a metric key (``wind``)
            to its raw value; None means the flag was given without a value

    Returns:
        The same map
    """
    for name, raw in overrides.items():
        metric = METRICS_BY_FLAG.get(name)
        if metric is None:
            try:
                metric = get_metric(name)
            except KeyError:
                logger.warning(f"Unknown weight option {name!r}")
                continue
        if raw is None:
            logger.warning(f"Weight option {name} requires a value")
            continue
        _set_weight(weights, metric.key, raw, name)
    return weights


def read_force_prompt(environ: Optional[Mapping[str, str]] = None, default: bool = False) -> bool:
    """Read ``FORCE_WEIGHT_PROMPT``; unclear values are logged and ignored."""
    environ = os.environ if environ is None else environ
    if FORCE_PROMPT_ENV not in environ:
        return default
    parsed = parse_bool(environ[FORCE_PROMPT_ENV])
    if parsed is None:
        logger.warning(
            f"Ignoring invalid {FORCE_PROMPT_ENV} value {environ[FORCE_PROMPT_ENV]!r}"
        )
        return default
    return parsed


def _token_key(token: str) -> str:
    return "".join(ch for ch in token.strip().lower() if ch not in " -_")


def find_preset(token: str) -> Optional[WeightPreset]:
    """Match a preset by key or alias, ignoring case, spaces, '-' and '_'."""
    wanted = _token_key(token)
    if not wanted:
        return None
    for preset in WEIGHT_PRESETS:
        if wanted == _token_key(preset.key) or wanted in {_token_key(a) for a in preset.aliases}:
            return preset
    return None


def apply_preset(weights: MutableMapping[str, float], preset: WeightPreset) -> MutableMapping[str, float]:
    """Overwrite every metric weight with the preset's values, then normalize."""
    for metric in METRICS:
        weights[metric.key] = float(preset.weights.get(metric.key, metric.default_weight))
    return normalize_weights(weights)


def _profile_menu() -> str:
    lines = ["Choose a weight profile (Enter for custom weights):"]
    for index, preset in enumerate(WEIGHT_PRESETS, start=1):
        lines.append(f"  {index}) {preset.name} - {preset.description}")
    lines.append(f"  {len(WEIGHT_PRESETS) + 1}) Custom weights")
    lines.append("> ")
    return "\n".join(lines)


def prompt_weight_profile(
    weights: MutableMapping[str, float],
    ask_text: AskText,
    interactive: bool = True,
) -> ProfileChoice:
    """
    Offer the preset menu and apply the chosen preset in place.

    Args:
        weights: Weight map (modified in place when a preset is chosen)
        ask_text: Blocking input callable
        interactive: When False nothing is asked and "skip" is returned

    Returns:
        "skip", "manual" (custom weights requested), "preset" (preset kept as is)
        or "preset_manual" (preset applied, user wants to adjust it)
    """
    if not interactive:
        return "skip"

    custom_index = len(WEIGHT_PRESETS) + 1
    while True:
        try:
            answer = ask_text(_profile_menu()).strip()
        except EOFError:
            logger.warning("No input available; keeping current weights")
            return "skip"

        lowered = answer.lower()
        if answer == "" or lowered in MANUAL_TOKENS:
            return "manual"

        chosen = None
        if answer.isdigit():
            index = int(answer)
            if index == custom_index:
                return "manual"
            if 1 <= index <= len(WEIGHT_PRESETS):
                chosen = WEIGHT_PRESETS[index - 1]
        else:
            chosen = find_preset(answer)

        if chosen is None:
            logger.warning(f"Unrecognised weight profile {answer!r}, please try again")
            continue

        apply_preset(weights, chosen)
        logger.info(f"Applied weight profile: {chosen.name}")
        return "preset_manual" if _ask_yes_no("Adjust these weights manually? [y/N] ", ask_text) else "preset"


def _ask_yes_no(prompt: str, ask_text: AskText) -> bool:
    while True:
        try:
            answer = ask_text(prompt).strip().lower()
        except EOFError:
            return False
        if answer in NO_TOKENS:
            return False
        if answer in YES_TOKENS:
            return True
        logger.warning("Please answer y or n")


def _metric_prompt(metric, current: float) -> str:
    hint = " (lower is better)" if metric.lower_is_better else ""
    return f"{metric.label}{hint} weight [{round(current, 2):g}]: "


def prompt_metric_weights(
    weights: MutableMapping[str, float],
    ask_text: AskText,
    interactive: bool = True,
) -> MutableMapping[str, float]:
    """
    Ask for every metric weight until the five values add up to exactly 100.

    An empty answer keeps the current value. Answers outside [0, 100] or
    that do not parse repeat the same prompt. If the finished pass does not
    sum to 100 the whole pass starts again from the first metric; there is
    no retry limit. Running out of input (EOF) stops the entry and leaves the
    remaining weights to normalization.

    Args:
        weights: Weight map (modified in place)
        ask_text: Blocking input callable
        interactive: When False nothing is asked

    Returns:
        The same map
    """
    if not interactive:
        logger.info("Not running in a terminal; skipping the weight prompt")
        return weights

    while True:
        for metric in METRICS:
            current = weights.get(metric.key, 0.0)
            while True:
                try:
                    answer = ask_text(_metric_prompt(metric, current)).strip()
                except EOFError:
                    logger.warning("Input ended before the weights added up to 100")
                    return weights
                if answer == "":
                    break
                parsed = parse_weight_value(answer)
                if parsed is None or not 0 <= parsed <= WEIGHT_TOTAL:
                    logger.warning(f"Weights must be numbers between 0 and {WEIGHT_TOTAL:g}")
                    continue
                weights[metric.key] = parsed
                break

        if weights_sum_to_total(weights):
            return weights
        logger.warning(
            f"Weights add up to {round(weights_total(weights), 2):g}, "
            f"they must add up to {WEIGHT_TOTAL:g}. Please enter them again."
        )


def prepare_weights(
    weights: MutableMapping[str, float],
    ask_text: AskText,
    interactive: bool,
    prompt: bool = True,
) -> MutableMapping[str, float]:
    """Run the profile menu and manual entry when asked to, then normalize."""
    if prompt:
        selection = prompt_weight_profile(weights, ask_text, interactive=interactive)
        if selection in ("manual", "preset_manual"):
            prompt_metric_weights(weights, ask_text, interactive=interactive)
    return normalize_weights(weights)


def resolve_weights(
    environ: Optional[Mapping[str, str]] = None,
    cli_overrides: Optional[Mapping[str, Optional[str]]] = None,
    ask_text: AskText = input,
    interactive: Optional[bool] = None,
    force: bool = False,
    prompt: bool = True,
    preset: Optional[str] = None,
) -> dict[str, float]:
    """
    Build the final weight map from every layer.

    Args:
        environ: Environment mapping; ``os.environ`` when None
        cli_overrides: Weight flags from the command line
        ask_text: Blocking input callable for the interactive layers
        interactive: Whether a terminal is attached; detected when None
        force: Prompt even without a terminal
        prompt: Offer the interactive layers at all
        preset: Preset token; falls back to ``WEIGHT_PRESET``

    Returns:
        New weight map summing to 100
    """
    environ = os.environ if environ is None else environ
    weights = default_weights()
    apply_env_overrides(weights, environ)
    if cli_overrides:
        apply_cli_overrides(weights, cli_overrides)

    token = preset if preset is not None else environ.get(PRESET_ENV)
    chosen = None
    if token:
        chosen = find_preset(token)
        if chosen is None:
            logger.warning(f"Unknown weight preset {token!r}")
        else:
            apply_preset(weights, chosen)
            logger.info(f"Applied weight profile: {chosen.name}")

    if interactive is None:
        interactive = stdin_is_tty()
    can_prompt = interactive or force

    # A preset chosen by token replaces the profile menu
    if prompt and chosen is None:
        prepare_weights(weights, ask_text, interactive=can_prompt)
    else:
        normalize_weights(weights)
    return weights
