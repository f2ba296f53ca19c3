"""Fixed letter-grade scale and GPA rounding."""
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType

GRADE_POINTS = MappingProxyType({
    "A+": 4.0,
    "A": 4.0,
    "A-": 3.7,
    "B+": 3.3,
    "B": 3.0,
    "B-": 2.7,
    "C+": 2.3,
    "C": 2.0,
    "C-": 1.7,
    "D+": 1.3,
    "D": 1.0,
    "F": 0.0,
})

GRADE_OPTIONS = tuple(GRADE_POINTS)

MAX_GRADE_POINT = 4.0


def is_valid_grade(grade) -> bool:
    return isinstance(grade, str) and grade in GRADE_POINTS


def grade_point(grade) -> float:
    """Point value for a letter grade. Unknown or missing grades count as 0.0."""
    if not is_valid_grade(grade):
        return 0.0
    return GRADE_POINTS[grade]


def to_decimal(value) -> Decimal:
    """Exact decimal form of a point value, so sums of 3.3 stay 9.9."""
    return Decimal(str(value))


def quantize_gpa(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_gpa(value: float) -> float:
    """Round to 2 decimal places, halves away from zero (3.325 -> 3.33, -0.125 -> -0.13)."""
    return quantize_gpa(to_decimal(value))
