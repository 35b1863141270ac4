"""Click CLI for staff-scorer.

Commands:
    score    -- Score a window and print the leaderboard.
    report   -- Score a window and write the HTML location report.
    pipeline -- Invoke a full pypyr pipeline (monthly).
"""

from __future__ import annotations

import datetime
import json
import logging
import os

import click
from dotenv import load_dotenv

from staff_scorer import DEFAULT_DATASET_PATH

logger = logging.getLogger("staff_scorer.cli")

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _resolve_dataset_path(ctx_dataset: str | None) -> str:
    """Return the dataset path from --dataset flag, env var, or default."""
    if ctx_dataset:
        return ctx_dataset
    env_path = os.environ.get("STAFF_SCORER_DATASET")
    if env_path:
        return env_path
    return DEFAULT_DATASET_PATH


def _configure_logging(level: str | None) -> None:
    level = (level or os.environ.get("STAFF_SCORER_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _score_window(
    ctx: click.Context,
    start: datetime.datetime,
    end: datetime.datetime,
    as_of: datetime.datetime | None,
    location: str | None,
) -> list[dict]:
    """Load the dataset and score the window, exiting 1 on a bad dataset."""
    from staff_scorer.data.loader import DatasetError, load_dataset
    from staff_scorer.scoring.cohort import score_cohort

    dataset_path = ctx.obj["dataset_path"]
    try:
        dataset = load_dataset(dataset_path)
    except DatasetError as exc:
        logger.error("Dataset load failed: %s", exc)
        click.echo(click.style(f"Error: {exc}", fg="red"))
        raise SystemExit(1)

    reference = as_of.date() if as_of else datetime.date.today()
    return score_cohort(
        dataset, start.date(), end.date(), reference, location_id=location
    )


def _score_color(score: float) -> str:
    from staff_scorer.scoring.leaderboard import (
        HIGH_PERFORMER_THRESHOLD,
        NEEDS_IMPROVEMENT_THRESHOLD,
    )

    if score >= HIGH_PERFORMER_THRESHOLD:
        return "green"
    if score >= NEEDS_IMPROVEMENT_THRESHOLD:
        return "yellow"
    return "red"


def _window_options(func):
    """Attach the shared --start/--end/--as-of/--location options."""
    func = click.option(
        "--location",
        default=None,
        help="Only score employees of this location id.",
    )(func)
    func = click.option(
        "--as-of",
        "as_of",
        default=None,
        type=_DATE,
        help="Reference date treated as 'now' (default: today).",
    )(func)
    func = click.option(
        "--end", required=True, type=_DATE, help="Last day of the window."
    )(func)
    func = click.option(
        "--start", required=True, type=_DATE, help="First day of the window."
    )(func)
    return func


@click.group()
@click.option(
    "--dataset",
    default=None,
    help="Path to the JSON dataset file.",
)
@click.option(
    "--log-level",
    default=None,
    help="Logging level (DEBUG, INFO, WARNING, ...).",
)
@click.pass_context
def main(ctx: click.Context, dataset: str | None, log_level: str | None) -> None:
    """staff-scorer: Employee performance and warning-penalty scoring."""
    load_dotenv()
    _configure_logging(log_level)
    ctx.ensure_object(dict)
    ctx.obj["dataset_path"] = _resolve_dataset_path(dataset)


@main.command()
@_window_options
@click.option(
    "--top",
    default=10,
    show_default=True,
    type=int,
    help="Number of employees shown in the leaderboard.",
)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    help="Print the full leaderboard as JSON.",
)
@click.pass_context
def score(
    ctx: click.Context,
    start: datetime.datetime,
    end: datetime.datetime,
    as_of: datetime.datetime | None,
    location: str | None,
    top: int,
    as_json: bool,
) -> None:
    """Score every active employee and print the leaderboard."""
    from staff_scorer.scoring.leaderboard import build_leaderboard

    scores = _score_window(ctx, start, end, as_of, location)
    board = build_leaderboard(scores, limit=top)

    if as_json:
        click.echo(json.dumps(board, indent=2, default=str))
        return

    click.echo(
        click.style(
            f"Leaderboard for {start.date()} to {end.date()} "
            f"({len(board['all_scores'])} employees)",
            fg="cyan",
        )
    )
    for row in board["leaderboard"]:
        overall = row["overall_score"]
        click.echo(
            f"  {row['rank']:>3}. {row.get('employee_name') or '(unknown)':<30} "
            f"{row.get('location_name') or '':<20} "
            + click.style(f"{overall:6.1f}", fg=_score_color(overall))
        )

    for group in board["by_location"]:
        summary = group["summary"]
        click.echo(
            f"{group['location_name']}: {summary['employee_count']} employees, "
            f"avg {summary['average_score']:.1f}, "
            + click.style(f"{summary['high_performers']} high", fg="green")
            + " | "
            + click.style(f"{summary['needs_improvement']} low", fg="red")
        )


@main.command()
@_window_options
@click.option(
    "--output",
    required=True,
    type=click.Path(dir_okay=False, writable=True),
    help="Where to write the HTML report.",
)
@click.pass_context
def report(
    ctx: click.Context,
    start: datetime.datetime,
    end: datetime.datetime,
    as_of: datetime.datetime | None,
    location: str | None,
    output: str,
) -> None:
    """Score a window and write the HTML location performance report."""
    import pathlib
    from staff_scorer.reporting.composer import compose_location_report

    scores = _score_window(ctx, start, end, as_of, location)
    report_data = compose_location_report(
        scores, start.date().isoformat(), end.date().isoformat()
    )

    path = pathlib.Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report_data["html_body"], encoding="utf-8")

    click.echo(
        click.style(
            f"Report written to {output}: {report_data['employee_count']} "
            f"employees, {report_data['location_count']} locations.",
            fg="green",
        )
    )


@main.command()
@click.argument("name", type=click.Choice(["monthly"]))
@click.option(
    "--as-of",
    "as_of",
    default=None,
    type=_DATE,
    help="Reference date; the window is the month before it.",
)
@click.pass_context
def pipeline(
    ctx: click.Context, name: str, as_of: datetime.datetime | None
) -> None:
    """Run a full pypyr pipeline (monthly)."""
    from pypyr import pipelinerunner
    from staff_scorer import PACKAGE_DIR

    pipeline_map = {
        "monthly": "monthly_scores",
    }

    pipeline_name = pipeline_map[name]
    pipeline_path = str(PACKAGE_DIR / "pipelines" / pipeline_name)
    click.echo(
        click.style(f"Running pipeline: {pipeline_name}", fg="cyan")
    )

    dict_in = {"dataset_path": ctx.obj["dataset_path"]}
    if as_of:
        dict_in["reference_date"] = as_of.date().isoformat()

    try:
        pipelinerunner.run(pipeline_name=pipeline_path, dict_in=dict_in)
        click.echo(
            click.style(f"Pipeline '{pipeline_name}' completed.", fg="green")
        )
    except Exception as exc:
        logger.error("Pipeline failed: %s", exc)
        click.echo(
            click.style(f"Pipeline failed: {exc}", fg="red")
        )
        raise SystemExit(1)
