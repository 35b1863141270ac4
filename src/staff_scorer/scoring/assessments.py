"""Test-results scoring dimension for the staff-scorer project.

Averages the scores of the knowledge tests an employee took in the
window.  Range: 0-100.
"""

import logging

from staff_scorer.utils import clamp, mean

logger = logging.getLogger(__name__)


def calculate_test_score(inputs: dict) -> float:
    """Calculate test score as the mean of ``test_scores``.

    Missing or non-numeric scores count as 0.  An employee who took no
    tests scores a neutral 100.
    """
    average = mean(inputs.get("test_scores") or [])
    if average is None:
        return 100.0

    score = clamp(average)
    logger.debug("Test score: %.1f", score)
    return score
