"""Warning-penalty calculator for the staff-scorer project.

Turns an employee's disciplinary warning log into a single penalty
that is subtracted from the base performance score.  Each warning is
weighted by severity, escalated when it repeats within the same
category, decayed with age, and the per-month total is capped.
"""

import datetime
import logging

from staff_scorer.utils import parse_date

logger = logging.getLogger(__name__)

# Base points per severity.  Anything unrecognised counts as minor.
SEVERITY_POINTS: dict[str, int] = {
    "minor": 2,
    "major": 5,
    "critical": 10,
}
DEFAULT_SEVERITY = "minor"
DEFAULT_CATEGORY = "other"

# Unknown or missing categories are bucketed as "other".
CATEGORIES: list[str] = [
    "attendance",
    "punctuality",
    "tasks",
    "hygiene_safety",
    "customer",
    "cash_inventory",
    "policy",
    "other",
]

RETENTION_DAYS = 90
REPEAT_WINDOW_DAYS = 60
MONTHLY_CAP = 10


# ---------------------------------------------------------------------------
# Rolling-window helpers
# ---------------------------------------------------------------------------

def days_between(later: datetime.date, earlier: datetime.date) -> int:
    """Return the number of whole calendar days from *earlier* to *later*."""
    return (later - earlier).days


def decay_factor(age_days: int) -> float:
    """Return the age-based weight of a warning.

    Thresholds (first match wins):
        - negative age -> 0.0 (clock skew, no penalty)
        - <= 30 days   -> 1.0
        - <= 60 days   -> 0.6
        - <= 90 days   -> 0.3
        - else         -> 0.0
    """
    if age_days < 0:
        return 0.0
    if age_days <= 30:
        return 1.0
    if age_days <= 60:
        return 0.6
    if age_days <= RETENTION_DAYS:
        return 0.3
    return 0.0


def repeat_multiplier(repeat_index: int) -> float:
    """Return the escalation multiplier for the Nth repeat in a category."""
    if repeat_index <= 0:
        return 1.0
    if repeat_index == 1:
        return 1.5
    return 2.0


def month_key(day: datetime.date) -> str:
    """Return the ``YYYY-MM`` bucket a date falls into."""
    return day.strftime("%Y-%m")


def _severity_of(warning: dict) -> str:
    metadata = warning.get("metadata") or {}
    severity = metadata.get("severity")
    if isinstance(severity, str):
        severity = severity.strip().lower()
    if severity not in SEVERITY_POINTS:
        return DEFAULT_SEVERITY
    return severity


def _category_of(warning: dict) -> str:
    metadata = warning.get("metadata") or {}
    category = metadata.get("category")
    if isinstance(category, str):
        category = category.strip().lower()
    if category not in CATEGORIES:
        return DEFAULT_CATEGORY
    return category


def _empty_penalty(employee_id) -> dict:
    return {
        "employee_id": employee_id,
        "total_penalty": 0.0,
        "warning_count": 0,
        "contributions": [],
        "monthly_penalties": {},
    }


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

def calculate_warning_penalty(
    warnings: list[dict],
    reference_date,
    employee_id=None,
) -> dict:
    """Calculate the capped, decayed warning penalty for one employee.

    Steps:
        1. Sort warnings by event date and group them by category.
        2. Drop warnings older than 90 days relative to *reference_date*.
        3. Weight each by severity (minor 2, major 5, critical 10).
        4. Count earlier same-category warnings within 60 days to get
           the repeat multiplier (1.0, 1.5, then 2.0).
        5. Apply the age decay (1.0, 0.6, 0.3).
        6. Sum effective points per calendar month and cap each month
           at 10.

    Args:
        warnings: Warning dicts with ``id``, ``staff_id``, ``event_date``
            and an optional ``metadata`` dict holding ``severity`` and
            ``category``.  Any time span is accepted.
        reference_date: The "now" that ages are measured against
            (``date``, ``datetime`` or ISO string).
        employee_id: Identifier to report; defaults to the ``staff_id``
            of the first warning.

    Returns:
        An ``employee_warning_penalty`` dict with keys ``employee_id``,
        ``total_penalty``, ``warning_count``, ``contributions`` and
        ``monthly_penalties``.

    Raises:
        ValueError: If *reference_date* cannot be parsed.
    """
    reference = parse_date(reference_date)
    if reference is None:
        raise ValueError(f"Invalid reference date: {reference_date!r}")

    if employee_id is None and warnings:
        employee_id = warnings[0].get("staff_id")

    dated: list[tuple[datetime.date, dict]] = []
    for warning in warnings or []:
        event_date = parse_date(warning.get("event_date"))
        if event_date is None:
            logger.warning(
                "Skipping warning %s with unparseable event_date %r",
                warning.get("id"), warning.get("event_date"),
            )
            continue
        dated.append((event_date, warning))

    if not dated:
        return _empty_penalty(employee_id)

    # Stable sort keeps input order for warnings on the same day.
    dated.sort(key=lambda item: item[0])

    by_category: dict[str, list[tuple[int, datetime.date]]] = {}
    for position, (event_date, warning) in enumerate(dated):
        by_category.setdefault(_category_of(warning), []).append(
            (position, event_date)
        )

    contributions: list[dict] = []
    for position, (event_date, warning) in enumerate(dated):
        age_days = days_between(reference, event_date)
        if age_days > RETENTION_DAYS:
            continue

        severity = _severity_of(warning)
        category = _category_of(warning)
        base_points = SEVERITY_POINTS[severity]

        repeat_index = 0
        for prior_position, prior_date in by_category[category]:
            if prior_position >= position:
                break
            gap = days_between(event_date, prior_date)
            if 0 <= gap <= REPEAT_WINDOW_DAYS:
                repeat_index += 1

        multiplier = repeat_multiplier(repeat_index)
        decay = decay_factor(age_days)

        contributions.append({
            "warning_id": warning.get("id"),
            "event_date": event_date.isoformat(),
            "severity": severity,
            "category": category,
            "base_points": base_points,
            "repeat_multiplier": multiplier,
            "decay_factor": decay,
            "effective_points": base_points * multiplier * decay,
            "month_key": month_key(event_date),
        })

    monthly_penalties: dict[str, dict] = {}
    for contribution in contributions:
        bucket = monthly_penalties.setdefault(
            contribution["month_key"], {"raw": 0.0, "capped": 0.0}
        )
        bucket["raw"] += contribution["effective_points"]

    for bucket in monthly_penalties.values():
        bucket["capped"] = min(float(MONTHLY_CAP), bucket["raw"])

    total_penalty = sum(b["capped"] for b in monthly_penalties.values())

    logger.debug(
        "Warning penalty for employee_id=%s: %.2f (%d contributing, %d months)",
        employee_id, total_penalty, len(contributions), len(monthly_penalties),
    )

    return {
        "employee_id": employee_id,
        "total_penalty": total_penalty,
        "warning_count": len(contributions),
        "contributions": contributions,
        "monthly_penalties": monthly_penalties,
    }
