"""Attendance scoring dimension for the staff-scorer project.

Scores an employee on the share of their past scheduled shifts that
they actually worked.  Range: 0-100.
"""

import logging

from staff_scorer.utils import clamp, to_number

logger = logging.getLogger(__name__)


def calculate_attendance_score(inputs: dict) -> float:
    """Calculate attendance score from shift counts.

    A shift counts as worked when a matching attendance record exists
    or its location does not require check-in (resolved upstream into
    ``shifts_worked``).

    Args:
        inputs: A ``raw_performance_inputs`` dict.

    Returns:
        ``100 * shifts_worked / shifts_scheduled``, or 100 when no
        shifts were scheduled.
    """
    scheduled = to_number(inputs.get("shifts_scheduled"))
    worked = to_number(inputs.get("shifts_worked"))

    if scheduled <= 0:
        return 100.0

    score = clamp(100.0 * worked / scheduled)

    logger.debug(
        "Attendance score: %.1f (worked=%d, scheduled=%d)",
        score, worked, scheduled,
    )
    return score
