"""pypyr step: score every active employee for the reporting window.

Window bounds default to the previous calendar month relative to
``reference_date`` (itself defaulting to today), which is the monthly
snapshot cadence.

Context keys consumed:
    dataset (dict): The loaded dataset.
    reference_date (str, optional): ISO date treated as "now".
    window_start / window_end (str, optional): ISO window bounds.
    location_id (str, optional): Only score this location.

Context keys produced:
    scored_employees (list[dict]): ``employee_performance_score`` dicts.
    window_start / window_end / reference_date (str): resolved values.
"""

import datetime
import logging

from staff_scorer.scoring.cohort import score_cohort
from staff_scorer.utils import parse_date

logger = logging.getLogger(__name__)


def previous_month_window(reference: datetime.date) -> tuple:
    """Return the first and last day of the month before *reference*."""
    last_day = reference.replace(day=1) - datetime.timedelta(days=1)
    return last_day.replace(day=1), last_day


def run_step(context: dict) -> None:
    """pypyr entry-point: score the cohort and store the results.

    Args:
        context: The mutable pypyr context dictionary.
    """
    dataset: dict = context["dataset"]

    reference = parse_date(context.get("reference_date")) or datetime.date.today()
    default_start, default_end = previous_month_window(reference)
    window_start = parse_date(context.get("window_start")) or default_start
    window_end = parse_date(context.get("window_end")) or default_end

    scored = score_cohort(
        dataset,
        window_start,
        window_end,
        reference,
        location_id=context.get("location_id"),
    )

    context["scored_employees"] = scored
    context["window_start"] = window_start.isoformat()
    context["window_end"] = window_end.isoformat()
    context["reference_date"] = reference.isoformat()

    logger.info(
        "Scored %d employees for %s to %s",
        len(scored), window_start, window_end,
    )
