"""Academic standing labels derived from a GPA."""
from dataclasses import dataclass

from gpa_tracker.grades import grade_point


@dataclass(frozen=True)
class Classification:
    name: str
    description: str
    min_gpa: float
    color: str


CLASSIFICATIONS = (
    Classification("First Class Honours", "Excellent academic performance", 3.7, "bright_blue"),
    Classification("Second Class Upper", "Very good academic performance", 3.3, "blue"),
    Classification("Second Class Lower", "Good academic performance", 3.0, "cyan"),
    Classification("General Pass", "Satisfactory academic performance", 2.0, "yellow"),
    Classification("Below Pass", "Needs significant improvement", 0.0, "red"),
)


def get_classification(gpa: float) -> Classification:
    for classification in CLASSIFICATIONS:
        if gpa >= classification.min_gpa:
            return classification
    return CLASSIFICATIONS[-1]


def get_classification_range(classification: Classification) -> str:
    """Human-readable GPA band, e.g. ``3.30 - 3.69``."""
    index = CLASSIFICATIONS.index(classification)
    if index == len(CLASSIFICATIONS) - 1:
        return f"Below {CLASSIFICATIONS[index - 1].min_gpa:.2f}"
    upper = 4.0 if index == 0 else CLASSIFICATIONS[index - 1].min_gpa - 0.01
    return f"{classification.min_gpa:.2f} - {upper:.2f}"


def get_gpa_status(gpa: float) -> str:
    if gpa >= 3.7:
        return "Excellent"
    elif gpa >= 3.3:
        return "Good"
    elif gpa >= 3.0:
        return "Satisfactory"
    elif gpa >= 2.0:
        return "Needs Improvement"
    return "Critical"


def get_gpa_status_color(gpa: float) -> str:
    if gpa >= 3.7:
        return "green"
    elif gpa >= 3.3:
        return "blue"
    elif gpa >= 3.0:
        return "magenta"
    elif gpa >= 2.0:
        return "cyan"
    return "red"


def get_grade_color(grade: str) -> str:
    points = grade_point(grade)
    if points >= 3.7:
        return "green"
    elif points >= 3.0:
        return "blue"
    elif points >= 2.0:
        return "dark_orange"
    return "red"
