"""Scoring sub-package for the staff-scorer project.

Exports the main entry points so other modules can do::

    from staff_scorer.scoring import calculate_employee_score, score_cohort
"""

from staff_scorer.scoring.cohort import score_cohort
from staff_scorer.scoring.composite import calculate_employee_score
from staff_scorer.scoring.leaderboard import build_leaderboard
from staff_scorer.scoring.penalty import calculate_warning_penalty

__all__ = [
    "build_leaderboard",
    "calculate_employee_score",
    "calculate_warning_penalty",
    "score_cohort",
]
