"""Task scoring dimension for the staff-scorer project.

Scores an employee on the share of assigned tasks completed on time.
Assigned tasks are the merged, deduplicated union of direct
assignments and attributed completions.  Range: 0-100.
"""

import logging

from staff_scorer.utils import clamp, to_number

logger = logging.getLogger(__name__)


def calculate_task_score(inputs: dict) -> float:
    """Calculate task score from merged task aggregates.

    Args:
        inputs: A ``raw_performance_inputs`` dict.

    Returns:
        ``100 * tasks_completed_on_time / tasks_assigned``, or 100 when
        nothing was assigned.
    """
    assigned = to_number(inputs.get("tasks_assigned"))
    on_time = to_number(inputs.get("tasks_completed_on_time"))

    if assigned <= 0:
        return 100.0

    score = clamp(100.0 * on_time / assigned)

    logger.debug(
        "Task score: %.1f (on_time=%d, assigned=%d)", score, on_time, assigned
    )
    return score
