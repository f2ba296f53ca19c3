import pytest

from gpa_tracker.grades import GRADE_OPTIONS, GRADE_POINTS, grade_point, is_valid_grade, round_gpa


def test_grade_scale_values():
    assert GRADE_POINTS["A+"] == 4.0
    assert GRADE_POINTS["A"] == 4.0
    assert GRADE_POINTS["A-"] == 3.7
    assert GRADE_POINTS["B+"] == 3.3
    assert GRADE_POINTS["C-"] == 1.7
    assert GRADE_POINTS["D"] == 1.0
    assert GRADE_POINTS["F"] == 0.0


def test_grade_options_order():
    assert GRADE_OPTIONS == ("A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "F")


def test_grade_scale_is_read_only():
    with pytest.raises(TypeError):
        GRADE_POINTS["A"] = 5.0


def test_unknown_grade_is_zero_points():
    assert grade_point("Z") == 0.0
    assert grade_point(None) == 0.0
    assert grade_point("a") == 0.0


def test_is_valid_grade():
    assert is_valid_grade("B-")
    assert not is_valid_grade("E")
    assert not is_valid_grade(None)


def test_round_gpa_half_up():
    assert round_gpa(3.325) == 3.33
    assert round_gpa(2.675) == 2.68  # built-in round() gives 2.67
    assert round_gpa(3.4285714) == 3.43
    assert round_gpa(3.3225) == 3.32


def test_round_gpa_half_away_from_zero_for_negatives():
    assert round_gpa(-0.125) == -0.13
