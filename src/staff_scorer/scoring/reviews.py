"""Performance-review scoring dimension for the staff-scorer project.

Averages the scores of the reviews an employee received in the window.
Range: 0-100.
"""

import logging

from staff_scorer.utils import clamp, mean

logger = logging.getLogger(__name__)


def calculate_review_score(inputs: dict) -> float:
    """Calculate review score as the mean of ``review_scores``.

    No reviews in the window yields a neutral 100.
    """
    average = mean(inputs.get("review_scores") or [])
    if average is None:
        return 100.0

    score = clamp(average)
    logger.debug("Review score: %.1f", score)
    return score
