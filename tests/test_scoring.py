"""Tests for the five component scorers and the composite score.

Includes the worked attendance (8 of 10 shifts -> 80) and punctuality
(3 late arrivals, 45 minutes -> 81) examples, the neutral-100 defaults,
and the base/overall score arithmetic.
"""

import pytest

from conftest import REFERENCE_DATE, make_warning
from staff_scorer.scoring.attendance import calculate_attendance_score
from staff_scorer.scoring.punctuality import calculate_punctuality_score
from staff_scorer.scoring.tasks import calculate_task_score
from staff_scorer.scoring.assessments import calculate_test_score
from staff_scorer.scoring.reviews import calculate_review_score
from staff_scorer.scoring.composite import (
    COMPONENT_KEYS,
    calculate_base_score,
    calculate_component_scores,
    calculate_employee_score,
    calculate_overall_score,
)


def _inputs(**overrides) -> dict:
    """Build a raw_performance_inputs dict with no observations."""
    inputs = {
        "shifts_scheduled": 0,
        "shifts_worked": 0,
        "shifts_missed": 0,
        "late_count": 0,
        "total_late_minutes": 0,
        "tasks_assigned": 0,
        "tasks_completed": 0,
        "tasks_completed_on_time": 0,
        "tasks_overdue": 0,
        "tests_taken": 0,
        "tests_passed": 0,
        "test_scores": [],
        "reviews_count": 0,
        "review_scores": [],
    }
    inputs.update(overrides)
    return inputs


# ---------------------------------------------------------------------------
# Component scorers
# ---------------------------------------------------------------------------

class TestAttendance:

    def test_eight_of_ten(self):
        score = calculate_attendance_score(
            _inputs(shifts_scheduled=10, shifts_worked=8, shifts_missed=2)
        )
        assert score == pytest.approx(80.0)

    def test_no_shifts_is_neutral(self):
        assert calculate_attendance_score(_inputs()) == 100.0

    def test_inconsistent_counts_are_clamped(self):
        score = calculate_attendance_score(
            _inputs(shifts_scheduled=2, shifts_worked=5)
        )
        assert score == 100.0

    def test_missing_keys(self):
        assert calculate_attendance_score({}) == 100.0


class TestPunctuality:

    def test_three_late_forty_five_minutes(self):
        score = calculate_punctuality_score(
            _inputs(late_count=3, total_late_minutes=45)
        )
        # 100 - min(15, 100) - min(4, 50)
        assert score == 81.0

    def test_never_late(self):
        assert calculate_punctuality_score(_inputs()) == 100.0

    def test_deductions_are_capped(self):
        score = calculate_punctuality_score(
            _inputs(late_count=10, total_late_minutes=1000)
        )
        # 100 - 50 - 50
        assert score == 0.0

    def test_floor_at_zero(self):
        score = calculate_punctuality_score(
            _inputs(late_count=40, total_late_minutes=900)
        )
        assert score == 0.0

    def test_non_numeric_counts(self):
        score = calculate_punctuality_score(
            _inputs(late_count="two", total_late_minutes=None)
        )
        assert score == 100.0


class TestTasks:

    def test_ratio(self):
        score = calculate_task_score(
            _inputs(tasks_assigned=4, tasks_completed_on_time=3)
        )
        assert score == pytest.approx(75.0)

    def test_no_tasks_is_neutral(self):
        assert calculate_task_score(_inputs()) == 100.0


class TestTestsAndReviews:

    def test_test_average(self):
        score = calculate_test_score(_inputs(test_scores=[70, 90, 80]))
        assert score == pytest.approx(80.0)

    def test_no_tests_is_neutral(self):
        assert calculate_test_score(_inputs()) == 100.0

    def test_missing_scores_count_as_zero(self):
        score = calculate_test_score(_inputs(test_scores=[100, None, "n/a"]))
        assert score == pytest.approx(100 / 3)

    def test_review_average(self):
        score = calculate_review_score(_inputs(review_scores=[60, 80]))
        assert score == pytest.approx(70.0)

    def test_no_reviews_is_neutral(self):
        assert calculate_review_score(_inputs()) == 100.0

    def test_out_of_range_review_is_clamped(self):
        assert calculate_review_score(_inputs(review_scores=[250])) == 100.0


@pytest.mark.parametrize(
    "inputs",
    [
        _inputs(),
        _inputs(shifts_scheduled=5, shifts_worked=0, late_count=99,
                total_late_minutes=10_000, tasks_assigned=3,
                test_scores=[0, 0], review_scores=[-50]),
        _inputs(shifts_scheduled=1, shifts_worked=9, late_count=-3,
                total_late_minutes=-100, tasks_assigned=1,
                tasks_completed_on_time=4, test_scores=[400],
                review_scores=[float("nan")]),
    ],
)
def test_components_stay_within_bounds(inputs):
    components = calculate_component_scores(inputs)
    assert set(components) == set(COMPONENT_KEYS)
    for value in components.values():
        assert 0.0 <= value <= 100.0
    assert 0.0 <= calculate_base_score(components) <= 100.0


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------

class TestComposite:

    def test_base_is_equal_weight_mean(self):
        components = {
            "attendance_score": 80,
            "punctuality_score": 100,
            "task_score": 50,
            "test_score": 85,
            "performance_review_score": 90,
        }
        assert calculate_base_score(components) == pytest.approx(81.0)

    def test_overall_subtracts_penalty(self):
        assert calculate_overall_score(90, 10) == 80

    def test_overall_clamped_at_zero(self):
        assert calculate_overall_score(5, 20) == 0

    def test_overall_never_exceeds_hundred(self):
        assert calculate_overall_score(100, -5) == 100

    def test_employee_score_record(self):
        employee = {
            "id": "e1",
            "full_name": "Ewa Zielinska",
            "role": "Supervisor",
            "location_id": "loc-1",
            "avatar_url": "https://example.com/e1.png",
        }
        inputs = _inputs(
            shifts_scheduled=10, shifts_worked=8, shifts_missed=2,
            tasks_assigned=2, tasks_completed=2, tasks_completed_on_time=2,
            tests_taken=1, tests_passed=1, test_scores=[90],
        )
        warnings = [make_warning("w1", "2024-04-05", "major", "policy", "e1")]

        result = calculate_employee_score(
            employee, inputs, warnings, REFERENCE_DATE, location_name="Centrum"
        )

        assert result["employee_id"] == "e1"
        assert result["employee_name"] == "Ewa Zielinska"
        assert result["location_name"] == "Centrum"
        assert result["avatar_url"] == "https://example.com/e1.png"
        assert result["attendance_score"] == pytest.approx(80.0)
        assert result["test_score"] == pytest.approx(90.0)
        # (80 + 100 + 100 + 90 + 100) / 5
        assert result["base_score"] == pytest.approx(94.0)
        assert result["warning_penalty"]["total_penalty"] == 5
        assert result["warning_count"] == 1
        assert result["overall_score"] == pytest.approx(89.0)
        assert result["shifts_missed"] == 2
        assert result["tests_passed"] == 1
        assert result["average_test_score"] == pytest.approx(90.0)
        assert result["average_review_score"] == 0.0

    def test_overall_is_clamped_difference(self):
        employee = {"id": "e2", "location_id": "loc-1"}
        warnings = [
            make_warning(f"w{i}", f"2024-0{m}-0{i}", "critical", "tasks", "e2")
            for m in (2, 3, 4) for i in (1, 2)
        ]
        result = calculate_employee_score(
            employee, _inputs(), warnings, REFERENCE_DATE
        )
        expected = max(
            0.0,
            min(100.0, result["base_score"]
                - result["warning_penalty"]["total_penalty"]),
        )
        assert result["overall_score"] == pytest.approx(expected)
        assert result["location_name"] == "Unknown"
