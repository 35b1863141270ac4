"""Punctuality scoring dimension for the staff-scorer project.

Starts from 100 and deducts points for late arrivals and for the total
number of minutes late.  Range: 0-100.
"""

import logging
import math

from staff_scorer.utils import clamp, to_number

logger = logging.getLogger(__name__)

POINTS_PER_LATE_ARRIVAL = 5
MAX_LATE_ARRIVAL_DEDUCTION = 100
MINUTES_PER_POINT = 10
MAX_LATE_MINUTES_DEDUCTION = 50


def calculate_punctuality_score(inputs: dict) -> float:
    """Calculate punctuality score from late-arrival aggregates.

    Deductions (additive, result floored at 0):
        - 5 points per late arrival, at most 100
        - 1 point per full 10 minutes late, at most 50

    Args:
        inputs: A ``raw_performance_inputs`` dict.

    Returns:
        A float between 0 and 100.  Always defined: no late arrivals
        scores 100.
    """
    late_count = max(0.0, to_number(inputs.get("late_count")))
    late_minutes = max(0.0, to_number(inputs.get("total_late_minutes")))

    arrival_deduction = min(
        POINTS_PER_LATE_ARRIVAL * late_count, MAX_LATE_ARRIVAL_DEDUCTION
    )
    minutes_deduction = min(
        math.floor(late_minutes / MINUTES_PER_POINT), MAX_LATE_MINUTES_DEDUCTION
    )

    score = clamp(100.0 - arrival_deduction - minutes_deduction)

    logger.debug(
        "Punctuality score: %.1f (late=%d, minutes=%d)",
        score, late_count, late_minutes,
    )
    return score
