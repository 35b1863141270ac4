"""Compose the location performance report.

Ranks a cohort of computed scores, groups them by location, and
renders an HTML report using the Jinja2 template at
``templates/location_report.html``.
"""

import logging
import pathlib

from jinja2 import Environment, FileSystemLoader

from staff_scorer.scoring.leaderboard import (
    HIGH_PERFORMER_THRESHOLD,
    NEEDS_IMPROVEMENT_THRESHOLD,
    build_leaderboard,
)

logger = logging.getLogger(__name__)

# Locate the templates directory relative to this file.
_TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"


def _score_band(score) -> str:
    """Map an overall score to the CSS band used by the template."""
    if score is None:
        return "none"
    if score >= HIGH_PERFORMER_THRESHOLD:
        return "high"
    if score >= NEEDS_IMPROVEMENT_THRESHOLD:
        return "mid"
    return "low"


def _format_score(value) -> str:
    if value is None:
        return "-"
    return f"{value:.1f}"


def compose_location_report(
    scores: list[dict],
    window_start,
    window_end,
    limit: int = 10,
) -> dict:
    """Build the HTML location performance report.

    Args:
        scores: ``employee_performance_score`` dicts for the cohort.
        window_start: First day of the reporting window.
        window_end: Last day of the reporting window.
        limit: Size of the overall top-performers table.

    Returns:
        A dict with keys:
            - ``subject`` (str): A title line for the report.
            - ``html_body`` (str): The rendered HTML report.
            - ``location_count`` (int): Number of location sections.
            - ``employee_count`` (int): Number of employees ranked.
    """
    board = build_leaderboard(scores, limit=limit)
    window_label = f"{window_start} to {window_end}"

    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=True,
    )
    env.filters["score"] = _format_score
    env.filters["band"] = _score_band
    template = env.get_template("location_report.html")

    html_body = template.render(
        window_label=window_label,
        leaderboard=board["leaderboard"],
        locations=board["by_location"],
        high_threshold=HIGH_PERFORMER_THRESHOLD,
        low_threshold=NEEDS_IMPROVEMENT_THRESHOLD,
    )

    employee_count = len(board["all_scores"])
    location_count = len(board["by_location"])
    subject = (
        f"Staff Performance Report | {window_label} "
        f"| {employee_count} employees, {location_count} locations"
    )

    logger.info(
        "Composed location report: %d employees, %d locations",
        employee_count, location_count,
    )

    return {
        "subject": subject,
        "html_body": html_body,
        "location_count": location_count,
        "employee_count": employee_count,
    }
