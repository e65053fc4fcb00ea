"""
Command-line interface for SkiLookup.

Commands:
    report        Monthly overview, weighted ranking and new-snow leaderboard
    list          All region names in the (filtered) dataset
    region NAME   Detail view for one region

Everything the CLI reads from the environment and argv ends up in a
ReportConfig that is passed explicitly into the pipeline.
"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence

import pandas as pd

from skilookup.config import DEFAULT_LOG_LEVEL, DEFAULT_TOP_N, SEASONS
from skilookup.data.filters import RunArgs, apply_filters, parse_date_value
from skilookup.data.loading import load_data
from skilookup.reporting.hints import decision_hints
from skilookup.reporting.overview import (
    STATUS_MESSAGES,
    build_monthly_overview,
    build_new_snow_leaderboard,
    build_weighted_ranking,
)
from skilookup.reporting.plots import save_region_score_trend
from skilookup.reporting.qc import qc_checks
from skilookup.reporting.region import (
    MAX_SUGGESTIONS,
    available_regions,
    current_month_summary,
    recent_conditions,
    region_history,
    region_rows,
    resolve_region_name,
    top_snow_events,
)
from skilookup.scoring.metrics import COUNTRY_COLUMN, DATE_COLUMN, METRICS, MONTH_COLUMN, SCORE_COLUMN
from skilookup.scoring.weights import AskText, read_force_prompt, resolve_weights
from skilookup.snow.new_snow import add_new_snow
from skilookup.utils.helpers import get_logger

logger = logging.getLogger(__name__)

COMMANDS = ("report", "list", "region")


@dataclass
class ReportConfig:
    """
    Everything one run needs, resolved from argv and the environment.

    Attributes:
        command: "report", "list" or "region"
        csv_path: Data file or URL; None uses CSV_PATH or the default file
        run_args: Date range and season filter
        region: Region for the detail view
        country: Keep only this country
        weight_overrides: Raw ``--weight-*`` values by flag
        prompt_weights: Offer the interactive weight prompts at all
        force_prompt: Prompt even without a terminal
        preset: Weight preset token
        top_n: Rows in the weighted ranking
        plot_dir: Where plots are saved; None uses the default plots directory
        log_level: Console log level name
    """

    command: str = "report"
    csv_path: Optional[str] = None
    run_args: RunArgs = field(default_factory=RunArgs)
    region: Optional[str] = None
    country: Optional[str] = None
    weight_overrides: dict = field(default_factory=dict)
    prompt_weights: bool = True
    force_prompt: bool = False
    preset: Optional[str] = None
    top_n: int = DEFAULT_TOP_N
    plot_dir: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skilookup",
        description="Rank ski regions by recent snow and weather conditions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Monthly report for the winter season
  skilookup report --season winter

  # Powder-heavy weights, no prompts
  skilookup --preset powder --no-ask-weights

  # Details for one region
  skilookup region "St. Anton" --from 2024-11-01
        """,
    )

    parser.add_argument("command", nargs="?", default="report", choices=COMMANDS, help="What to show (default: report)")
    parser.add_argument("region", nargs="?", help="Region name for the region command")

    parser.add_argument("--csv", dest="csv_path", help="CSV file or URL (default: $CSV_PATH or data/ski-regions-data.csv)")
    parser.add_argument("--from", dest="from_date", help="First date to include (YYYY-MM-DD)")
    parser.add_argument("--to", dest="to_date", help="Last date to include (YYYY-MM-DD)")
    parser.add_argument("--season", type=str.upper, choices=SEASONS, help="Restrict to WINTER (Nov-Apr) or SUMMER (May-Oct)")
    parser.add_argument("--country", help="Only include regions in this country")
    parser.add_argument("--top-n", type=int, default=DEFAULT_TOP_N, help=f"Rows in the ranking (default: {DEFAULT_TOP_N})")
    parser.add_argument("--preset", help="Weight preset: balanced, powder, family or sunny")
    parser.add_argument("--plot-dir", type=Path, help="Directory for saved plots (default: plots/)")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, type=str.upper, help="Console log level (default: INFO)")

    ask = parser.add_mutually_exclusive_group()
    ask.add_argument("--ask-weights", dest="ask_weights", action="store_true", default=None, help="Always ask for weights, even without a terminal")
    ask.add_argument("--no-ask-weights", dest="ask_weights", action="store_false", help="Never ask for weights")

    weights = parser.add_argument_group("weights", "Override one metric weight (weights are rescaled to sum to 100)")
    for metric in METRICS:
        weights.add_argument(
            metric.cli_flag,
            dest=f"weight_{metric.key}",
            nargs="?",
            const=None,
            default=argparse.SUPPRESS,
            metavar="VALUE",
            help=f"Weight for {metric.label.lower()}",
        )

    return parser


def _season_from_env(environ: Mapping[str, str]) -> str:
    value = environ.get("SEASON", "")
    raw = value.strip().upper()
    if not raw:
        return "ALL"
    if raw not in SEASONS:
        logger.warning(f"Ignoring invalid SEASON {value!r}; expected one of {list(SEASONS)}")
        return "ALL"
    return raw


def build_config(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ReportConfig:
    """
    Parse argv on top of the environment. Flags win over environment values.

    Raises:
        SystemExit: On argv that argparse rejects (unknown command, bad --top-n)
    """
    environ = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)

    from_date = parse_date_value(args.from_date or environ.get("FROM_DATE"), "from date")
    to_date = parse_date_value(args.to_date or environ.get("TO_DATE"), "to date")
    if from_date and to_date and from_date > to_date:
        logger.warning(f"From date {from_date} is after to date {to_date}; no rows will match")
    season = args.season or _season_from_env(environ)

    overrides = {
        metric.cli_flag: getattr(args, f"weight_{metric.key}")
        for metric in METRICS
        if hasattr(args, f"weight_{metric.key}")
    }

    return ReportConfig(
        command=args.command,
        csv_path=args.csv_path,
        run_args=RunArgs(from_date=from_date, to_date=to_date, season=season),
        region=args.region or environ.get("REGION") or None,
        country=args.country or environ.get("COUNTRY") or None,
        weight_overrides=overrides,
        prompt_weights=args.ask_weights is not False,
        force_prompt=bool(args.ask_weights) or read_force_prompt(environ),
        preset=args.preset,
        top_n=args.top_n,
        plot_dir=args.plot_dir,
        log_level=args.log_level,
    )


def print_table(title: str, table: pd.DataFrame) -> None:
    print()
    print(title)
    print(table.to_string(index=False))


def print_weights(weights: Mapping[str, float]) -> None:
    parts = [f"{m.label} {weights.get(m.key, 0.0):.1f}" for m in METRICS]
    print()
    print("Active weights: " + ", ".join(parts))


def run_list(df: pd.DataFrame) -> int:
    regions = available_regions(df)
    if not regions:
        print("No regions found.")
        return 0
    print(f"{len(regions)} regions:")
    for region in regions:
        print(f"  {region}")
    return 0


def run_report(df: pd.DataFrame, config: ReportConfig, weights: Mapping[str, float]) -> int:
    """Data checks, leaderboard, monthly overview, ranking and hints."""
    issues = qc_checks(df)
    print()
    print("Data checks:")
    for issue in issues or ["No issues found."]:
        print(f"  - {issue}")

    leaderboard = build_new_snow_leaderboard(df)
    if leaderboard.ok:
        print_table(f"Yearly new snow leaderboard ({leaderboard.label})", leaderboard.table)
    else:
        print()
        print(STATUS_MESSAGES[leaderboard.status])

    print_weights(weights)
    overview = build_monthly_overview(df, weights)
    if not overview.ok:
        print()
        print(STATUS_MESSAGES[overview.status])
        return 0

    print_table(f"Monthly overview ({overview.label})", overview.table)

    ranking = build_weighted_ranking(overview.table, overview.label, top_n=config.top_n)
    if ranking.ok:
        print_table(f"Weighted ranking ({ranking.label})", ranking.table)
    else:
        print()
        print(STATUS_MESSAGES[ranking.status])

    hints = decision_hints(leaderboard.table, overview.table)
    print()
    print("Decision hints:")
    for hint in hints or ["Not enough data for hints."]:
        print(f"  - {hint}")

    if config.region:
        return run_region(df, config, weights)
    return 0


def run_region(df: pd.DataFrame, config: ReportConfig, weights: Mapping[str, float]) -> int:
    """Detail view for ``config.region``; exit code 1 when it cannot be found."""
    if not config.region:
        print("Give a region name, e.g. skilookup region \"St. Anton\". Available regions:")
        run_list(df)
        return 1

    match, suggestions = resolve_region_name(df, config.region)
    if match is None:
        print(f"Region '{config.region}' not found.")
        if suggestions:
            print("Did you mean: " + ", ".join(suggestions[:MAX_SUGGESTIONS]) + "?")
        print("Run 'skilookup list' to see all regions.")
        return 1

    rows = region_rows(df, match)
    if rows.empty:
        print(f"No observations for {match} with the active filters.")
        return 0

    countries = rows[COUNTRY_COLUMN].dropna().unique() if COUNTRY_COLUMN in rows.columns else []
    country = str(countries[0]) if len(countries) else "Unknown"
    dates = pd.to_datetime(rows[DATE_COLUMN])
    print()
    print(f"{match} ({country}): {len(rows)} observations, {dates.min():%Y-%m-%d} to {dates.max():%Y-%m-%d}")
    print_weights(weights)

    summary = current_month_summary(rows)
    if summary.table.empty:
        print()
        print("No data for the current month.")
    else:
        print_table(f"Current month ({summary.label})", summary.table)

    events = top_snow_events(rows)
    if not events.empty:
        print_table("Top new snow days", events)

    recent = recent_conditions(rows)
    if not recent.empty:
        print_table("Recent conditions", recent)

    history = region_history(rows, match, weights=weights)
    if history.empty:
        return 0

    display = history.assign(**{MONTH_COLUMN: history[MONTH_COLUMN].dt.strftime("%Y-%m")})
    print_table(f"Monthly history ({match})", display)

    scored = history.loc[history[SCORE_COLUMN].notna()] if SCORE_COLUMN in history.columns else history.iloc[0:0]
    if not scored.empty:
        latest = scored.iloc[-1]
        print(f"Weighted score ({latest[MONTH_COLUMN]:%Y-%m}): {latest[SCORE_COLUMN]:.2f}")

    try:
        path = save_region_score_trend(history, match, config.plot_dir)
    except OSError as e:
        logger.warning(f"Could not save score trend plot for {match}: {e}")
        path = None
    if path is not None:
        print(f"Score trend saved to {path}")
    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    ask_text: AskText = input,
    environ: Optional[Mapping[str, str]] = None,
    interactive: Optional[bool] = None,
) -> int:
    """
    Run one command and return the process exit code.

    Args:
        argv: Arguments without the program name; ``sys.argv[1:]`` when None
        ask_text: Input callable for the weight prompts
        environ: Environment mapping; ``os.environ`` when None
        interactive: Whether a terminal is attached; detected when None
    """
    environ = os.environ if environ is None else environ
    config = build_config(argv, environ)
    get_logger("skilookup", getattr(logging, config.log_level, logging.INFO))

    try:
        df = load_data(config.csv_path, environ)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    add_new_snow(df)
    # The region command matches its name against all regions for suggestions
    region_filter = config.region if config.command != "region" else None
    df = apply_filters(df, config.run_args, region=region_filter, country=config.country)
    if df.empty:
        logger.warning("No data left after filters")
        print("No data left after filters; check the region, country, date range and season.")

    if config.command == "list":
        return run_list(df)

    weights = resolve_weights(
        environ=environ,
        cli_overrides=config.weight_overrides,
        ask_text=ask_text,
        interactive=interactive,
        force=config.force_prompt,
        prompt=config.prompt_weights,
        preset=config.preset,
    )

    if config.command == "region":
        return run_region(df, config, weights)
    return run_report(df, config, weights)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
