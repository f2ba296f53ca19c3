"""Planned (not yet graded) modules."""
from gpa_tracker.models import Course, PlannedModule
from gpa_tracker.records import apply_mutation, load_snapshot
from gpa_tracker.state import AddPlannedModule, GradePlannedModule, RemovePlannedModule


def add_planned_module(db_path: str, user_id: str, name: str, credits: int, term_name: str) -> PlannedModule:
    snapshot = apply_mutation(
        db_path, user_id, AddPlannedModule(name=name, credits=credits, term_name=term_name),
    )
    return snapshot.planned_modules[-1]


def list_planned_modules(db_path: str, user_id: str) -> list:
    return list(load_snapshot(db_path, user_id).planned_modules)


def get_planned_credits(db_path: str, user_id: str) -> int:
    """Credits still to be graded, a natural default for goal projection."""
    return sum(m.credits for m in list_planned_modules(db_path, user_id))


def remove_planned_module(db_path: str, user_id: str, module_id: str) -> None:
    apply_mutation(db_path, user_id, RemovePlannedModule(module_id=module_id))


def complete_planned_module(db_path: str, user_id: str, module_id: str, grade: str):
    """Record a grade for a planned module, moving it into its term.

    The term is matched by name and created when no term has that name yet.
    Returns the updated snapshot.
    """
    return apply_mutation(db_path, user_id, GradePlannedModule(module_id=module_id, grade=grade))


def find_completed_course(snapshot, module_id: str) -> Course | None:
    for term in snapshot.terms:
        for course in term.courses:
            if course.id == module_id:
                return course
    return None
