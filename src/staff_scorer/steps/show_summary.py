"""pypyr step: show_summary

Prints the top of the leaderboard and a per-location summary for the
employees scored earlier in the pipeline.
"""

from __future__ import annotations

import logging

from staff_scorer.scoring.leaderboard import build_leaderboard

logger = logging.getLogger(__name__)


def run_step(context: dict) -> None:
    """Print a summary of the scored cohort.

    Expects the following keys in *context*:
        scored_employees -- list of employee_performance_score dicts
        summary_limit    -- (optional) size of the top list, default 15
    """
    scored = context.get("scored_employees")
    if scored is None:
        logger.warning("show_summary: no scored employees in context")
        return

    board = build_leaderboard(scored, limit=context.get("summary_limit", 15))

    separator = "-" * 55
    print(separator)
    print(f"  Employees scored : {len(board['all_scores'])}")
    print(f"  Locations        : {len(board['by_location'])}")
    print(separator)
    print("  Top employees by overall score:")
    print(f"  {'#':<4} {'Employee':<35} {'Score':>6}")
    print(f"  {'---':<4} {'---':<35} {'---':>6}")
    for row in board["leaderboard"]:
        name = row.get("employee_name") or "(unknown)"
        # Truncate long names
        if len(name) > 33:
            name = name[:30] + "..."
        print(f"  {row['rank']:<4} {name:<35} {row['overall_score']:>6.1f}")
    print(separator)
    for group in board["by_location"]:
        summary = group["summary"]
        print(
            f"  {group['location_name']}: {summary['employee_count']} employees, "
            f"avg {summary['average_score']:.1f}"
        )
    print(separator)
