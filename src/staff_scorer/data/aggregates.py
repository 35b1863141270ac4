"""Aggregation of raw records into per-employee scoring inputs.

Turns the raw record lists of a dataset (shifts, attendance logs,
tasks, task completions, test submissions, reviews) into the
``raw_performance_inputs`` dict consumed by the component scorers.

All functions take plain lists of dicts and an explicit reference date;
none of them read the clock or touch the filesystem.
"""

import datetime
import logging

from staff_scorer.utils import parse_date, parse_datetime, to_number

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shifts and punctuality
# ---------------------------------------------------------------------------

def aggregate_shifts(
    shifts: list[dict],
    attendance_logs: list[dict],
    reference_date,
    checkin_required: dict | None = None,
) -> dict:
    """Count scheduled, worked and missed shifts for one employee.

    Only past shifts (``shift_date <= reference_date``) are counted.  A
    shift is worked when an attendance log references it or its
    location does not require check-in; it is missed when check-in is
    required and no log exists.

    Args:
        shifts: The employee's approved shifts.
        attendance_logs: The employee's attendance logs.
        reference_date: The "today" that separates past from future.
        checkin_required: Optional ``location_id -> bool`` lookup.  A
            ``requires_checkin`` key on the shift itself wins; the
            default is ``True``.

    Returns:
        A dict with ``shifts_scheduled``, ``shifts_worked`` and
        ``shifts_missed``.
    """
    reference = parse_date(reference_date)
    checkin_required = checkin_required or {}
    checked_in = {log.get("shift_id") for log in attendance_logs}

    scheduled = worked = missed = 0
    for shift in shifts:
        shift_date = parse_date(shift.get("shift_date"))
        if shift_date is None:
            logger.debug("Skipping shift %s without a valid date", shift.get("id"))
            continue
        if shift_date > reference:
            continue

        requires_checkin = shift.get("requires_checkin")
        if requires_checkin is None:
            requires_checkin = checkin_required.get(shift.get("location_id"), True)

        scheduled += 1
        has_attendance = shift.get("id") in checked_in
        if has_attendance or not requires_checkin:
            worked += 1
        else:
            missed += 1

    return {
        "shifts_scheduled": scheduled,
        "shifts_worked": worked,
        "shifts_missed": missed,
    }


def aggregate_punctuality(attendance_logs: list[dict]) -> dict:
    """Return ``late_count`` and ``total_late_minutes`` over late check-ins."""
    late_logs = [log for log in attendance_logs if log.get("is_late")]
    return {
        "late_count": len(late_logs),
        "total_late_minutes": sum(
            to_number(log.get("late_minutes")) for log in late_logs
        ),
    }


# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------

def resolve_on_time(
    completion_late,
    task_late,
    completed_at,
    due_at,
) -> bool:
    """Decide whether one completed task counts as on time.

    Precedence (first applicable rule wins):
        1. the completion's own ``completed_late`` flag
        2. the parent task's ``completed_late`` flag
        3. ``completed_at <= due_at`` when both timestamps parse
        4. on time
    """
    if completion_late is not None:
        return not completion_late
    if task_late is not None:
        return not task_late

    completed = parse_datetime(completed_at)
    due = parse_datetime(due_at)
    if completed is not None and due is not None:
        return completed <= due
    return True


def merge_task_streams(
    employee_id,
    tasks: list[dict],
    completions: list[dict],
    shift_dates: set | None = None,
    own_task_ids: set | None = None,
) -> dict:
    """Merge directly assigned tasks with completions attributed to an employee.

    The two streams are unioned with the task id as dedup key: a
    completion by the employee whose ``task_id`` is already a direct
    assignment is folded into that assignment rather than counted a
    second time.

    Args:
        employee_id: The employee whose tasks are merged.
        tasks: All tasks in the window (any assignee).
        completions: All task completions in the window.
        shift_dates: When given, attributed completions whose
            ``occurrence_date`` is not one of these dates are dropped.
        own_task_ids: Ids of every task assigned to the employee, in or
            out of the window.  Completions of these tasks are never
            attributed, so a direct task created before the window and
            completed inside it is not counted again.

    Returns:
        A dict with two lists of items, ``direct`` and ``attributed``.
        Each item has keys ``task_id``, ``task`` (the parent task dict
        or ``None``) and ``completion`` (the completion dict or
        ``None``).
    """
    tasks_by_id = {task.get("id"): task for task in tasks}
    own_completions = [
        c for c in completions
        if c.get("completed_by_employee_id") == employee_id
    ]

    direct_tasks = [t for t in tasks if t.get("assigned_to") == employee_id]
    direct_ids = {t.get("id") for t in direct_tasks}
    excluded_ids = direct_ids | set(own_task_ids or ())

    completion_for_direct: dict = {}
    for completion in own_completions:
        task_id = completion.get("task_id")
        if task_id in direct_ids:
            completion_for_direct.setdefault(task_id, completion)

    direct = [
        {
            "task_id": task.get("id"),
            "task": task,
            "completion": completion_for_direct.get(task.get("id")),
        }
        for task in direct_tasks
    ]

    attributed = []
    for completion in own_completions:
        task_id = completion.get("task_id")
        if task_id in excluded_ids:
            continue
        if shift_dates is not None:
            if parse_date(completion.get("occurrence_date")) not in shift_dates:
                continue
        attributed.append({
            "task_id": task_id,
            "task": tasks_by_id.get(task_id),
            "completion": completion,
        })

    logger.debug(
        "Merged tasks for employee_id=%s: %d direct, %d attributed",
        employee_id, len(direct), len(attributed),
    )
    return {"direct": direct, "attributed": attributed}


def aggregate_tasks(
    employee_id,
    tasks: list[dict],
    completions: list[dict],
    reference_date,
    shift_dates: set | None = None,
    own_task_ids: set | None = None,
) -> dict:
    """Count assigned, completed, on-time and overdue tasks for one employee.

    Every merged item counts as assigned.  Attributed completions always
    count as completed; a direct task counts as completed when its
    status is ``completed`` or the employee logged a completion for it.
    Open direct tasks whose due time is before *reference_date* are
    overdue.

    Returns:
        A dict with ``tasks_assigned``, ``tasks_completed``,
        ``tasks_completed_on_time`` and ``tasks_overdue``.
    """
    reference = parse_datetime(reference_date)
    streams = merge_task_streams(
        employee_id, tasks, completions, shift_dates, own_task_ids
    )

    assigned = completed = on_time = overdue = 0

    for item in streams["direct"]:
        task = item["task"]
        completion = item["completion"]
        assigned += 1

        if task.get("status") == "completed" or completion is not None:
            completed += 1
            completed_at = (completion or {}).get("completed_at") or task.get(
                "completed_at"
            )
            if resolve_on_time(
                (completion or {}).get("completed_late"),
                task.get("completed_late"),
                completed_at,
                task.get("due_at"),
            ):
                on_time += 1
        else:
            due = parse_datetime(task.get("due_at"))
            if due is not None and reference is not None and due < reference:
                overdue += 1

    for item in streams["attributed"]:
        task = item["task"] or {}
        completion = item["completion"]
        assigned += 1
        completed += 1
        if resolve_on_time(
            completion.get("completed_late"),
            task.get("completed_late"),
            completion.get("completed_at"),
            task.get("due_at"),
        ):
            on_time += 1

    return {
        "tasks_assigned": assigned,
        "tasks_completed": completed,
        "tasks_completed_on_time": on_time,
        "tasks_overdue": overdue,
    }


# ---------------------------------------------------------------------------
# Tests and reviews
# ---------------------------------------------------------------------------

def aggregate_tests(submissions: list[dict]) -> dict:
    """Return ``tests_taken``, ``tests_passed`` and ``test_scores``."""
    return {
        "tests_taken": len(submissions),
        "tests_passed": sum(1 for s in submissions if s.get("passed")),
        "test_scores": [to_number(s.get("score")) for s in submissions],
    }


def aggregate_reviews(reviews: list[dict]) -> dict:
    """Return ``reviews_count`` and ``review_scores``."""
    return {
        "reviews_count": len(reviews),
        "review_scores": [to_number(r.get("score")) for r in reviews],
    }


# ---------------------------------------------------------------------------
# Per-employee assembly
# ---------------------------------------------------------------------------

def _in_window(
    value,
    window_start: datetime.date,
    window_end: datetime.date,
    keep_missing: bool = False,
) -> bool:
    day = parse_date(value)
    if day is None:
        return keep_missing
    return window_start <= day <= window_end


def checkin_lookup(dataset: dict) -> dict:
    """Return ``location_id -> requires_checkin`` for the dataset's locations."""
    return {
        loc.get("id"): bool(loc.get("requires_checkin", True))
        for loc in dataset.get("locations", [])
    }


def location_names(dataset: dict) -> dict:
    """Return ``location_id -> name`` for the dataset's locations."""
    return {
        loc.get("id"): loc.get("name") for loc in dataset.get("locations", [])
    }


def warnings_for_employee(dataset: dict, employee_id) -> list[dict]:
    """Return every warning logged against *employee_id* (any age)."""
    return [
        w for w in dataset.get("warnings", []) if w.get("staff_id") == employee_id
    ]


def build_performance_inputs(
    dataset: dict,
    employee: dict,
    window_start,
    window_end,
    reference_date,
    restrict_to_shift_days: bool = True,
) -> dict:
    """Resolve the ``raw_performance_inputs`` for one employee and window.

    Records are windowed on their natural date: ``shift_date``,
    ``check_in_at``, task ``created_at`` (tasks without one are kept),
    completion ``occurrence_date``, test ``completed_at`` and review
    ``review_date``.

    Args:
        dataset: A loaded dataset (see :mod:`staff_scorer.data.loader`).
        employee: The employee dict.
        window_start: First day of the reporting window (inclusive).
        window_end: Last day of the reporting window (inclusive).
        reference_date: The "now" for past-shift and overdue checks.
        restrict_to_shift_days: Only attribute completions that happened
            on days the employee had a shift.

    Returns:
        A ``raw_performance_inputs`` dict.

    Raises:
        ValueError: If a window bound cannot be parsed.
    """
    start = parse_date(window_start)
    end = parse_date(window_end)
    if start is None or end is None:
        raise ValueError(f"Invalid window: {window_start!r} - {window_end!r}")

    employee_id = employee.get("id")

    shifts = [
        s for s in dataset.get("shifts", [])
        if employee_id in (s.get("staff_ids") or [])
        and _in_window(s.get("shift_date"), start, end)
    ]
    attendance = [
        log for log in dataset.get("attendance_logs", [])
        if log.get("staff_id") == employee_id
        and _in_window(log.get("check_in_at"), start, end)
    ]
    own_task_ids = {
        t.get("id") for t in dataset.get("tasks", [])
        if t.get("assigned_to") == employee_id
    }
    tasks = [
        t for t in dataset.get("tasks", [])
        if _in_window(t.get("created_at"), start, end, keep_missing=True)
    ]
    completions = [
        c for c in dataset.get("task_completions", [])
        if _in_window(c.get("occurrence_date"), start, end, keep_missing=True)
    ]
    submissions = [
        s for s in dataset.get("test_submissions", [])
        if s.get("employee_id") == employee_id
        and _in_window(s.get("completed_at"), start, end)
    ]
    reviews = [
        r for r in dataset.get("reviews", [])
        if r.get("employee_id") == employee_id
        and _in_window(r.get("review_date"), start, end)
    ]

    shift_dates = None
    if restrict_to_shift_days:
        shift_dates = {parse_date(s.get("shift_date")) for s in shifts}

    inputs: dict = {}
    inputs.update(
        aggregate_shifts(shifts, attendance, reference_date, checkin_lookup(dataset))
    )
    inputs.update(aggregate_punctuality(attendance))
    inputs.update(
        aggregate_tasks(
            employee_id, tasks, completions, reference_date, shift_dates,
            own_task_ids,
        )
    )
    inputs.update(aggregate_tests(submissions))
    inputs.update(aggregate_reviews(reviews))
    return inputs
