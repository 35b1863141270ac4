"""Composite scorer for the staff-scorer project.

Combines the five component scores into an equal-weight base score,
subtracts the warning penalty, and assembles the final
``employee_performance_score`` record.
"""

import logging

from staff_scorer.scoring.attendance import calculate_attendance_score
from staff_scorer.scoring.punctuality import calculate_punctuality_score
from staff_scorer.scoring.tasks import calculate_task_score
from staff_scorer.scoring.assessments import calculate_test_score
from staff_scorer.scoring.reviews import calculate_review_score
from staff_scorer.scoring.penalty import calculate_warning_penalty
from staff_scorer.utils import clamp, mean, to_number

logger = logging.getLogger(__name__)

# Fixed equal weights (20% each).
COMPONENT_KEYS: list[str] = [
    "attendance_score",
    "punctuality_score",
    "task_score",
    "test_score",
    "performance_review_score",
]

RAW_COUNT_KEYS: list[str] = [
    "shifts_scheduled",
    "shifts_worked",
    "shifts_missed",
    "late_count",
    "total_late_minutes",
    "tasks_assigned",
    "tasks_completed",
    "tasks_completed_on_time",
    "tasks_overdue",
    "tests_taken",
    "tests_passed",
    "reviews_count",
]


def calculate_component_scores(inputs: dict) -> dict:
    """Run the five component scorers on one ``raw_performance_inputs`` dict."""
    return {
        "attendance_score": calculate_attendance_score(inputs),
        "punctuality_score": calculate_punctuality_score(inputs),
        "task_score": calculate_task_score(inputs),
        "test_score": calculate_test_score(inputs),
        "performance_review_score": calculate_review_score(inputs),
    }


def calculate_base_score(components: dict) -> float:
    """Return the unweighted mean of the five component scores.

    A component missing from *components* counts as 0.
    """
    total = sum(to_number(components.get(key)) for key in COMPONENT_KEYS)
    return clamp(total / len(COMPONENT_KEYS))


def calculate_overall_score(base_score: float, total_penalty: float) -> float:
    """Subtract the warning penalty from *base_score* and clamp to [0, 100]."""
    return clamp(to_number(base_score) - to_number(total_penalty))


def calculate_employee_score(
    employee: dict,
    inputs: dict,
    warnings: list[dict],
    reference_date,
    location_name: str | None = None,
) -> dict:
    """Compute the full performance score for one employee.

    Args:
        employee: Identity dict with ``id``, ``full_name``, ``role``,
            ``location_id`` and ``avatar_url``.
        inputs: The employee's ``raw_performance_inputs`` for the window.
        warnings: The employee's warning log (any span).
        reference_date: The "now" used to age warnings.
        location_name: Display name of the employee's location.

    Returns:
        An ``employee_performance_score`` dict: identity passthrough,
        the five component scores, ``base_score``, the full
        ``warning_penalty`` payload, ``overall_score`` and the raw
        counts used.
    """
    employee_id = employee.get("id")

    components = calculate_component_scores(inputs)
    base_score = calculate_base_score(components)
    penalty = calculate_warning_penalty(
        warnings, reference_date, employee_id=employee_id
    )
    overall_score = calculate_overall_score(base_score, penalty["total_penalty"])

    average_test = mean(inputs.get("test_scores") or [])
    average_review = mean(inputs.get("review_scores") or [])

    result: dict = {
        "employee_id": employee_id,
        "employee_name": employee.get("full_name"),
        "role": employee.get("role"),
        "location_id": employee.get("location_id"),
        "location_name": location_name or "Unknown",
        "avatar_url": employee.get("avatar_url"),
        **components,
        "base_score": base_score,
        "warning_penalty": penalty,
        "warning_count": penalty["warning_count"],
        "overall_score": overall_score,
    }

    for key in RAW_COUNT_KEYS:
        result[key] = inputs.get(key) or 0
    result["average_test_score"] = average_test if average_test is not None else 0.0
    result["average_review_score"] = (
        average_review if average_review is not None else 0.0
    )

    logger.info(
        "Scored employee_id=%s: overall=%.1f base=%.1f penalty=%.1f "
        "[att=%.0f, pun=%.0f, task=%.0f, test=%.0f, rev=%.0f]",
        employee_id, overall_score, base_score, penalty["total_penalty"],
        components["attendance_score"], components["punctuality_score"],
        components["task_score"], components["test_score"],
        components["performance_review_score"],
    )
    return result
