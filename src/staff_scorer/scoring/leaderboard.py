"""Leaderboard ranking for the staff-scorer project.

Organizes a cohort of already-computed ``employee_performance_score``
dicts for presentation: a ranked list, a top-N slice, and per-location
groups with ranks and summary figures.  Nothing here recomputes scores.
"""

import logging

from staff_scorer.utils import to_number

logger = logging.getLogger(__name__)

HIGH_PERFORMER_THRESHOLD = 90
NEEDS_IMPROVEMENT_THRESHOLD = 70
DEFAULT_LEADERBOARD_SIZE = 10


def rank_scores(scores: list[dict]) -> list[dict]:
    """Return *scores* sorted by ``overall_score`` descending.

    The sort is stable, so employees with equal scores keep their input
    order.
    """
    return sorted(
        scores, key=lambda s: to_number(s.get("overall_score")), reverse=True
    )


def top_performers(
    scores: list[dict], limit: int = DEFAULT_LEADERBOARD_SIZE
) -> list[dict]:
    """Return the *limit* highest-scoring employees."""
    if limit <= 0:
        return []
    return rank_scores(scores)[:limit]


def group_by_location(scores: list[dict]) -> dict:
    """Group scores by ``location_id``.

    Every input record lands in exactly one group.  Groups appear in
    order of their best-ranked member, and members are listed in ranked
    order.

    Returns:
        A dict mapping ``location_id`` to a dict with keys
        ``location_id``, ``location_name`` and ``employees``.
    """
    groups: dict = {}
    for score in rank_scores(scores):
        location_id = score.get("location_id")
        group = groups.get(location_id)
        if group is None:
            group = {
                "location_id": location_id,
                "location_name": score.get("location_name") or "Unknown",
                "employees": [],
            }
            groups[location_id] = group
        group["employees"].append(score)
    return groups


def assign_location_ranks(scores: list[dict]) -> list[int]:
    """Return the 1-based rank in its location of each record in *scores*.

    The result is parallel to *scores*.  Ranks come from each record's
    position inside its location group, so records without an
    ``employee_id`` or sharing one are still ranked individually.
    """
    ranks: dict = {}
    for group in group_by_location(scores).values():
        for position, score in enumerate(group["employees"], start=1):
            ranks[id(score)] = position
    return [ranks[id(score)] for score in scores]


def summarize_location(employees: list[dict]) -> dict:
    """Compute summary figures for one location's members.

    Returns:
        A dict with ``employee_count``, ``average_score`` (``None`` when
        empty), ``high_performers`` (overall >= 90) and
        ``needs_improvement`` (overall < 70).
    """
    overall = [to_number(e.get("overall_score")) for e in employees]
    return {
        "employee_count": len(overall),
        "average_score": sum(overall) / len(overall) if overall else None,
        "high_performers": sum(
            1 for s in overall if s >= HIGH_PERFORMER_THRESHOLD
        ),
        "needs_improvement": sum(
            1 for s in overall if s < NEEDS_IMPROVEMENT_THRESHOLD
        ),
    }


def build_leaderboard(
    scores: list[dict], limit: int = DEFAULT_LEADERBOARD_SIZE
) -> dict:
    """Bundle the ranked views of a cohort.

    Args:
        scores: ``employee_performance_score`` dicts for the cohort.
        limit: Size of the top-N slice.

    Returns:
        A dict with keys:
            - ``all_scores``: every record, ranked, each annotated with
              ``rank`` and ``rank_in_location``.
            - ``leaderboard``: the top *limit* records.
            - ``by_location``: list of location groups, each with a
              ``summary``.
    """
    ranked = rank_scores(scores)
    location_ranks = assign_location_ranks(ranked)

    annotated = []
    for position, (score, location_rank) in enumerate(
        zip(ranked, location_ranks), start=1
    ):
        annotated.append({
            **score,
            "rank": position,
            "rank_in_location": location_rank,
        })

    by_location = []
    for group in group_by_location(annotated).values():
        by_location.append({
            **group,
            "summary": summarize_location(group["employees"]),
        })

    logger.info(
        "Built leaderboard: %d employees across %d locations",
        len(annotated), len(by_location),
    )

    return {
        "all_scores": annotated,
        "leaderboard": annotated[:max(limit, 0)],
        "by_location": by_location,
    }
