"""Goal projection: GPA needed on remaining credits to reach a target."""
from gpa_tracker.grades import quantize_gpa, to_decimal


def required_gpa(
    current_gpa: float,
    current_credits: int,
    target_gpa: float,
    remaining_credits: int,
) -> float:
    """Minimum average grade point needed over ``remaining_credits``.

    Not clamped: above 4.0 means the target is out of reach, below 0 means it
    is already exceeded. ``remaining_credits`` must be positive; callers guard.
    """
    total_credits = current_credits + remaining_credits
    required_points = to_decimal(target_gpa) * total_credits - to_decimal(current_gpa) * current_credits
    return quantize_gpa(required_points / remaining_credits)


def get_goal_label(required: float) -> str:
    if required > 4.0:
        return "Target not achievable with current grading system"
    elif required > 3.5:
        return "Challenging but achievable with excellent grades"
    elif required > 3.0:
        return "Achievable with good performance"
    return "Easily achievable"


def get_goal_color(required: float) -> str:
    if required > 4.0:
        return "red"
    elif required > 3.5:
        return "yellow"
    elif required > 3.0:
        return "cyan"
    return "green"


def project_goal(snapshot, target_gpa: float, remaining_credits: int) -> dict:
    """Project a target against the snapshot's cumulative figures."""
    if remaining_credits < 1:
        raise ValueError("Remaining credits must be at least 1")
    required = required_gpa(
        snapshot.overall_gpa, snapshot.total_credits, target_gpa, remaining_credits,
    )
    return {
        "required": required,
        "label": get_goal_label(required),
        "color": get_goal_color(required),
        "current_gpa": snapshot.overall_gpa,
        "current_credits": snapshot.total_credits,
        "target_gpa": target_gpa,
        "remaining_credits": remaining_credits,
    }
