"""Credit-weighted GPA aggregation for terms and for the whole record."""
from collections.abc import Mapping
from decimal import Decimal

from gpa_tracker.grades import grade_point, quantize_gpa, to_decimal


def _field(record, name: str):
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def aggregate(courses) -> dict:
    """Aggregate graded courses into a term GPA.

    Args:
        courses: Course objects or mappings with ``credits`` and ``grade``.
            Planned (ungraded) courses must be filtered out by the caller.

    Returns:
        Dict with ``gpa`` (rounded half-up to 2 places) and ``total_credits``.
        An unknown or missing grade contributes 0.0 points but its credits
        still count.
    """
    total_points = Decimal(0)
    total_credits = 0
    for course in courses:
        credits = _field(course, "credits")
        total_points += to_decimal(grade_point(_field(course, "grade"))) * credits
        total_credits += credits
    if total_credits == 0:
        return {"gpa": 0.0, "total_credits": 0}
    return {"gpa": quantize_gpa(total_points / total_credits), "total_credits": total_credits}


def aggregate_overall(terms) -> dict:
    """Aggregate already-aggregated terms into the cumulative GPA.

    Weights each term's rounded ``gpa`` by its ``total_credits``; raw course
    points are not re-summed, so the result can differ from a course-level
    aggregate in the second decimal place.
    """
    total_points = Decimal(0)
    total_credits = 0
    for term in terms:
        term_credits = _field(term, "total_credits")
        total_points += to_decimal(_field(term, "gpa")) * term_credits
        total_credits += term_credits
    if total_credits == 0:
        return {"overall_gpa": 0.0, "total_credits": 0}
    return {"overall_gpa": quantize_gpa(total_points / total_credits), "total_credits": total_credits}
