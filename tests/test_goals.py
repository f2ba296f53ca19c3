# tests/test_goals.py
import pytest

from gpa_tracker.goals import get_goal_color, get_goal_label, project_goal, required_gpa
from gpa_tracker.models import GPASnapshot


def test_required_gpa_basic():
    # (3.5*120 - 3.0*60) / 60
    assert required_gpa(3.0, 60, 3.5, 60) == 4.0


def test_required_gpa_unreachable_exceeds_scale():
    result = required_gpa(current_gpa=2.0, current_credits=100, target_gpa=3.9, remaining_credits=10)
    assert result > 4.0
    assert result == 22.9


def test_required_gpa_already_exceeded_is_negative():
    assert required_gpa(4.0, 100, 2.0, 10) == -18.0


def test_required_gpa_without_history():
    assert required_gpa(0.0, 0, 3.2, 30) == 3.2


def test_required_gpa_zero_remaining_is_callers_problem():
    with pytest.raises(ZeroDivisionError):
        required_gpa(3.0, 60, 3.5, 0)


def test_goal_label_thresholds():
    assert get_goal_label(4.01) == "Target not achievable with current grading system"
    assert get_goal_label(4.0) == "Challenging but achievable with excellent grades"
    assert get_goal_label(3.51) == "Challenging but achievable with excellent grades"
    assert get_goal_label(3.5) == "Achievable with good performance"
    assert get_goal_label(3.01) == "Achievable with good performance"
    assert get_goal_label(3.0) == "Easily achievable"
    assert get_goal_label(-1.0) == "Easily achievable"


def test_goal_color():
    assert get_goal_color(4.5) == "red"
    assert get_goal_color(3.0) == "green"


def test_project_goal_uses_snapshot_figures():
    snapshot = GPASnapshot(overall_gpa=3.0, total_credits=60)
    result = project_goal(snapshot, 3.5, 60)
    assert result["required"] == 4.0
    assert result["label"] == "Challenging but achievable with excellent grades"
    assert result["current_credits"] == 60


def test_project_goal_guards_remaining_credits():
    with pytest.raises(ValueError):
        project_goal(GPASnapshot(), 3.5, 0)
