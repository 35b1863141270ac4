"""Batch scoring of every employee in a dataset.

Each employee is scored independently.  A failure while scoring one
employee is logged and that employee is skipped; everyone already
scored is still returned.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from staff_scorer.data.aggregates import (
    build_performance_inputs,
    location_names,
    warnings_for_employee,
)
from staff_scorer.data.loader import active_employees
from staff_scorer.scoring.composite import calculate_employee_score
from staff_scorer.utils import parse_date

logger = logging.getLogger(__name__)


def score_employee(
    dataset: dict,
    employee: dict,
    window_start,
    window_end,
    reference_date,
) -> dict:
    """Assemble inputs for one employee and compute their score."""
    inputs = build_performance_inputs(
        dataset, employee, window_start, window_end, reference_date
    )
    warnings = warnings_for_employee(dataset, employee.get("id"))
    return calculate_employee_score(
        employee,
        inputs,
        warnings,
        reference_date,
        location_name=location_names(dataset).get(employee.get("location_id")),
    )


def _score_or_none(dataset, employee, window_start, window_end, reference_date):
    try:
        return score_employee(
            dataset, employee, window_start, window_end, reference_date
        )
    except Exception:
        logger.exception(
            "Error scoring employee_id=%s, skipping", employee.get("id")
        )
        return None


def score_cohort(
    dataset: dict,
    window_start,
    window_end,
    reference_date,
    location_id=None,
    max_workers: int | None = None,
) -> list[dict]:
    """Score every active employee in *dataset* for one window.

    Args:
        dataset: A loaded dataset.
        window_start: First day of the reporting window (inclusive).
        window_end: Last day of the reporting window (inclusive).
        reference_date: The "now" used for past-shift, overdue and
            warning-age checks.
        location_id: Only score employees of this location.
        max_workers: Score on a thread pool of this size when greater
            than 1.  Results are the same as sequential scoring.

    Returns:
        A list of ``employee_performance_score`` dicts in dataset order,
        without the employees whose scoring failed.

    Raises:
        ValueError: If *reference_date* or a window bound cannot be
            parsed.
    """
    for label, value in (
        ("reference date", reference_date),
        ("window start", window_start),
        ("window end", window_end),
    ):
        if parse_date(value) is None:
            raise ValueError(f"Invalid {label}: {value!r}")

    employees = active_employees(dataset, location_id)

    if max_workers and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(
                    _score_or_none,
                    dataset, employee, window_start, window_end, reference_date,
                )
                for employee in employees
            ]
            results = [future.result() for future in futures]
    else:
        results = [
            _score_or_none(
                dataset, employee, window_start, window_end, reference_date
            )
            for employee in employees
        ]

    scored = [r for r in results if r is not None]

    logger.info(
        "Cohort scoring complete: %d of %d employees scored (%s to %s)",
        len(scored), len(employees), window_start, window_end,
    )
    return scored
