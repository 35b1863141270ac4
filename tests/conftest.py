"""Shared pytest fixtures for the staff-scorer test suite.

Provides:
    reference_date -- the fixed "now" used across tests (2024-04-10)
    sample_dataset -- a small dataset with three active employees
    dataset_file   -- sample_dataset written to a temporary JSON file

Expected scores for ``sample_dataset`` (window March 2024):

* **Alice** (Downtown) -- attendance 80, punctuality 100, tasks 50,
  tests 85, reviews 90 -> base 81; critical warning 9 days old -> 10
  penalty -> overall 71.
* **Bob** (Downtown) -- attendance 100, punctuality 81, others 100 ->
  base 96.2, no warnings -> overall 96.2.
* **Carol** (Airport, no check-in) -- attendance 100, punctuality 100,
  tasks 100, tests 60, reviews 75 -> base 87; major warning 69 days
  old -> 1.5 penalty -> overall 85.5.
"""

import datetime
import json

import pytest


REFERENCE_DATE = datetime.date(2024, 4, 10)


def make_warning(
    warning_id: str,
    event_date: str,
    severity: str | None = "minor",
    category: str | None = "attendance",
    staff_id: str = "emp-1",
) -> dict:
    """Build a single warning dict for fixture use."""
    metadata = {}
    if severity is not None:
        metadata["severity"] = severity
    if category is not None:
        metadata["category"] = category
    return {
        "id": warning_id,
        "staff_id": staff_id,
        "event_date": event_date,
        "metadata": metadata,
    }


def days_before(days: int, reference: datetime.date = REFERENCE_DATE) -> str:
    """Return the ISO date *days* before *reference*."""
    return (reference - datetime.timedelta(days=days)).isoformat()


# ---------------------------------------------------------------------------
# reference_date fixture
# ---------------------------------------------------------------------------

@pytest.fixture()
def reference_date() -> datetime.date:
    """The fixed reference date used to age warnings and shifts."""
    return REFERENCE_DATE


# ---------------------------------------------------------------------------
# sample_dataset fixture
# ---------------------------------------------------------------------------

def _alice_records() -> dict:
    shifts = [
        {
            "id": f"shift-a{day}",
            "shift_date": f"2024-03-{day:02d}",
            "location_id": "loc-downtown",
            "staff_ids": ["alice"],
        }
        for day in range(1, 11)
    ]
    # Checked in for the first 8 of 10 shifts.
    attendance = [
        {
            "staff_id": "alice",
            "shift_id": f"shift-a{day}",
            "check_in_at": f"2024-03-{day:02d}T08:00:00",
            "is_late": False,
            "late_minutes": 0,
        }
        for day in range(1, 9)
    ]
    tasks = [
        {
            "id": "task-1", "assigned_to": "alice", "status": "completed",
            "created_at": "2024-03-02T07:00:00",
            "due_at": "2024-03-02T12:00:00",
            "completed_at": "2024-03-02T11:00:00", "completed_late": False,
        },
        {
            "id": "task-2", "assigned_to": "alice", "status": "completed",
            "created_at": "2024-03-03T07:00:00",
            "due_at": "2024-03-03T12:00:00",
            "completed_at": "2024-03-03T15:00:00", "completed_late": True,
        },
        {
            "id": "task-3", "assigned_to": "alice", "status": "pending",
            "created_at": "2024-03-04T07:00:00",
            "due_at": "2024-03-20T17:00:00",
            "completed_at": None, "completed_late": None,
        },
        {
            "id": "task-shared", "assigned_to": None, "status": "pending",
            "created_at": "2024-03-01T07:00:00",
            "due_at": None, "completed_at": None, "completed_late": None,
        },
    ]
    completions = [
        {
            "task_id": "task-shared", "completed_by_employee_id": "alice",
            "occurrence_date": "2024-03-05",
            "completed_at": "2024-03-05T10:00:00", "completed_late": None,
        },
        # Same task as a direct assignment: folded, not double counted.
        {
            "task_id": "task-1", "completed_by_employee_id": "alice",
            "occurrence_date": "2024-03-02",
            "completed_at": "2024-03-02T11:00:00", "completed_late": False,
        },
    ]
    tests = [
        {"employee_id": "alice", "score": 80, "passed": True,
         "completed_at": "2024-03-06T09:00:00"},
        {"employee_id": "alice", "score": 90, "passed": True,
         "completed_at": "2024-03-07T09:00:00"},
    ]
    reviews = [
        {"employee_id": "alice", "score": 90, "review_date": "2024-03-15"},
    ]
    warnings = [
        make_warning("w-alice-1", "2024-04-01", "critical", "policy", "alice"),
    ]
    return {
        "shifts": shifts, "attendance_logs": attendance, "tasks": tasks,
        "task_completions": completions, "test_submissions": tests,
        "reviews": reviews, "warnings": warnings,
    }


def _bob_records() -> dict:
    shifts = [
        {
            "id": f"shift-b{day}",
            "shift_date": f"2024-03-{day:02d}",
            "location_id": "loc-downtown",
            "staff_ids": ["bob"],
        }
        for day in (11, 12, 13)
    ]
    attendance = [
        {
            "staff_id": "bob", "shift_id": f"shift-b{day}",
            "check_in_at": f"2024-03-{day:02d}T08:{minutes:02d}:00",
            "is_late": True, "late_minutes": minutes,
        }
        for day, minutes in ((11, 10), (12, 15), (13, 20))
    ]
    return {"shifts": shifts, "attendance_logs": attendance}


def _carol_records() -> dict:
    shifts = [
        {
            "id": f"shift-c{day}",
            "shift_date": f"2024-03-{day:02d}",
            "location_id": "loc-airport",
            "staff_ids": ["carol"],
        }
        for day in (14, 15)
    ]
    tests = [
        {"employee_id": "carol", "score": 60, "passed": False,
         "completed_at": "2024-03-16T09:00:00"},
    ]
    reviews = [
        {"employee_id": "carol", "score": 70, "review_date": "2024-03-10"},
        {"employee_id": "carol", "score": 80, "review_date": "2024-03-20"},
    ]
    warnings = [
        make_warning("w-carol-1", "2024-02-01", "major", "customer", "carol"),
        # Older than 90 days: excluded from the penalty.
        make_warning("w-carol-0", "2023-10-01", "minor", "customer", "carol"),
    ]
    return {
        "shifts": shifts, "test_submissions": tests,
        "reviews": reviews, "warnings": warnings,
    }


@pytest.fixture()
def sample_dataset() -> dict:
    """Return a dataset with three active employees and one inactive one."""
    dataset = {
        "employees": [
            {"id": "alice", "full_name": "Alice Nowak", "role": "Barista",
             "location_id": "loc-downtown", "avatar_url": None,
             "status": "active"},
            {"id": "bob", "full_name": "Bob Kowalski", "role": "Cashier",
             "location_id": "loc-downtown", "avatar_url": None,
             "status": "active"},
            {"id": "carol", "full_name": "Carol Wisniewska", "role": "Barista",
             "location_id": "loc-airport", "avatar_url": None},
            {"id": "dan", "full_name": "Dan Inactive", "role": "Cook",
             "location_id": "loc-downtown", "avatar_url": None,
             "status": "inactive"},
        ],
        "locations": [
            {"id": "loc-downtown", "name": "Downtown", "requires_checkin": True},
            {"id": "loc-airport", "name": "Airport", "requires_checkin": False},
        ],
        "shifts": [],
        "attendance_logs": [],
        "tasks": [],
        "task_completions": [],
        "test_submissions": [],
        "reviews": [],
        "warnings": [],
    }
    for records in (_alice_records(), _bob_records(), _carol_records()):
        for section, rows in records.items():
            dataset[section].extend(rows)
    return dataset


# ---------------------------------------------------------------------------
# dataset_file fixture
# ---------------------------------------------------------------------------

@pytest.fixture()
def dataset_file(tmp_path, sample_dataset):
    """Write ``sample_dataset`` to a temporary JSON file and return its path."""
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(sample_dataset), encoding="utf-8")
    return path
