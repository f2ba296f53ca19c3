"""Pure reducer over immutable GPA snapshots.

Every mutation returns a new ``GPASnapshot`` whose term and overall figures
have already been recomputed, so no caller can observe a term whose ``gpa``
disagrees with its courses or an overall figure that lags behind its terms.
"""
from dataclasses import dataclass, replace
from typing import Optional

from gpa_tracker.errors import InvalidRecordError, RecordNotFoundError
from gpa_tracker.gpa import aggregate, aggregate_overall
from gpa_tracker.grades import GRADE_OPTIONS, is_valid_grade
from gpa_tracker.models import Course, GPASnapshot, PlannedModule, Term, new_id


@dataclass(frozen=True)
class AddTerm:
    name: str
    term_id: Optional[str] = None


@dataclass(frozen=True)
class RenameTerm:
    term_id: str
    name: str


@dataclass(frozen=True)
class DeleteTerm:
    term_id: str


@dataclass(frozen=True)
class AddCourse:
    term_id: str
    name: str
    credits: int
    grade: str
    course_id: Optional[str] = None


@dataclass(frozen=True)
class UpdateCourse:
    term_id: str
    course_id: str
    name: Optional[str] = None
    credits: Optional[int] = None
    grade: Optional[str] = None


@dataclass(frozen=True)
class DeleteCourse:
    term_id: str
    course_id: str


@dataclass(frozen=True)
class AddPlannedModule:
    name: str
    credits: int
    term_name: str
    module_id: Optional[str] = None


@dataclass(frozen=True)
class RemovePlannedModule:
    module_id: str


@dataclass(frozen=True)
class GradePlannedModule:
    module_id: str
    grade: str


@dataclass(frozen=True)
class ReplaceAll:
    terms: tuple
    planned_modules: tuple = ()


def validate_name(name, kind: str = "Name") -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidRecordError(f"{kind} must not be blank")
    return name.strip()


def validate_credits(credits) -> int:
    if isinstance(credits, bool) or not isinstance(credits, int) or credits < 1:
        raise InvalidRecordError(f"Credits must be a positive integer, got {credits!r}")
    return credits


def validate_grade(grade) -> str:
    if not is_valid_grade(grade):
        raise InvalidRecordError(
            f"Unknown grade {grade!r}; expected one of {', '.join(GRADE_OPTIONS)}"
        )
    return grade


def recompute_term(term: Term) -> Term:
    result = aggregate(term.courses)
    return replace(term, gpa=result["gpa"], total_credits=result["total_credits"])


def _publish(terms, planned_modules) -> GPASnapshot:
    terms = tuple(terms)
    overall = aggregate_overall(terms)
    return GPASnapshot(
        terms=terms,
        overall_gpa=overall["overall_gpa"],
        total_credits=overall["total_credits"],
        planned_modules=tuple(planned_modules),
    )


def recompute(snapshot: GPASnapshot) -> GPASnapshot:
    """Re-derive every term and the overall figures from courses."""
    return _publish(
        (recompute_term(t) for t in snapshot.terms), snapshot.planned_modules,
    )


def build_snapshot(terms, planned_modules=()) -> GPASnapshot:
    return recompute(GPASnapshot(terms=tuple(terms), planned_modules=tuple(planned_modules)))


def _require_term(snapshot: GPASnapshot, term_id: str) -> Term:
    term = snapshot.find_term(term_id)
    if term is None:
        raise RecordNotFoundError("Term", term_id)
    return term


def _require_course(term: Term, course_id: str) -> Course:
    course = next((c for c in term.courses if c.id == course_id), None)
    if course is None:
        raise RecordNotFoundError("Course", course_id)
    return course


def _with_term(snapshot: GPASnapshot, updated: Term) -> GPASnapshot:
    terms = [recompute_term(updated) if t.id == updated.id else t for t in snapshot.terms]
    return _publish(terms, snapshot.planned_modules)


def _append_course(snapshot: GPASnapshot, term: Term, course: Course) -> GPASnapshot:
    return _with_term(snapshot, replace(term, courses=term.courses + (course,)))


def reduce(snapshot: GPASnapshot, mutation) -> GPASnapshot:
    """Apply one mutation and return the recomputed snapshot."""
    if isinstance(mutation, AddTerm):
        term = Term(id=mutation.term_id or new_id(), name=validate_name(mutation.name, "Term name"))
        return _publish(snapshot.terms + (term,), snapshot.planned_modules)

    if isinstance(mutation, RenameTerm):
        term = _require_term(snapshot, mutation.term_id)
        return _with_term(snapshot, replace(term, name=validate_name(mutation.name, "Term name")))

    if isinstance(mutation, DeleteTerm):
        _require_term(snapshot, mutation.term_id)
        terms = [t for t in snapshot.terms if t.id != mutation.term_id]
        return _publish(terms, snapshot.planned_modules)

    if isinstance(mutation, AddCourse):
        term = _require_term(snapshot, mutation.term_id)
        course = Course(
            id=mutation.course_id or new_id(),
            name=validate_name(mutation.name, "Course name"),
            credits=validate_credits(mutation.credits),
            grade=validate_grade(mutation.grade),
        )
        return _append_course(snapshot, term, course)

    if isinstance(mutation, UpdateCourse):
        term = _require_term(snapshot, mutation.term_id)
        course = _require_course(term, mutation.course_id)
        changes = {}
        if mutation.name is not None:
            changes["name"] = validate_name(mutation.name, "Course name")
        if mutation.credits is not None:
            changes["credits"] = validate_credits(mutation.credits)
        if mutation.grade is not None:
            changes["grade"] = validate_grade(mutation.grade)
        updated = replace(course, **changes)
        courses = tuple(updated if c.id == course.id else c for c in term.courses)
        return _with_term(snapshot, replace(term, courses=courses))

    if isinstance(mutation, DeleteCourse):
        term = _require_term(snapshot, mutation.term_id)
        _require_course(term, mutation.course_id)
        courses = tuple(c for c in term.courses if c.id != mutation.course_id)
        return _with_term(snapshot, replace(term, courses=courses))

    if isinstance(mutation, AddPlannedModule):
        module = PlannedModule(
            id=mutation.module_id or new_id(),
            name=validate_name(mutation.name, "Module name"),
            credits=validate_credits(mutation.credits),
            term_name=validate_name(mutation.term_name, "Term name"),
        )
        return replace(snapshot, planned_modules=snapshot.planned_modules + (module,))

    if isinstance(mutation, RemovePlannedModule):
        if snapshot.find_planned_module(mutation.module_id) is None:
            raise RecordNotFoundError("Planned module", mutation.module_id)
        modules = tuple(m for m in snapshot.planned_modules if m.id != mutation.module_id)
        return replace(snapshot, planned_modules=modules)

    if isinstance(mutation, GradePlannedModule):
        module = snapshot.find_planned_module(mutation.module_id)
        if module is None:
            raise RecordNotFoundError("Planned module", mutation.module_id)
        grade = validate_grade(mutation.grade)
        remaining = replace(
            snapshot,
            planned_modules=tuple(m for m in snapshot.planned_modules if m.id != module.id),
        )
        term = remaining.find_term_by_name(module.term_name)
        if term is None:
            remaining = reduce(remaining, AddTerm(name=module.term_name))
            term = remaining.terms[-1]
        course = Course(id=module.id, name=module.name, credits=module.credits, grade=grade)
        return _append_course(remaining, term, course)

    if isinstance(mutation, ReplaceAll):
        for term in mutation.terms:
            validate_name(term.name, "Term name")
            for course in term.courses:
                validate_name(course.name, "Course name")
                validate_credits(course.credits)
                validate_grade(course.grade)
        for module in mutation.planned_modules:
            validate_name(module.name, "Module name")
            validate_credits(module.credits)
            validate_name(module.term_name, "Term name")
        return build_snapshot(mutation.terms, mutation.planned_modules)

    raise TypeError(f"Unsupported mutation: {type(mutation).__name__}")


def diff_terms(before: GPASnapshot, after: GPASnapshot) -> dict:
    """Term ids added, changed or removed between two snapshots."""
    old = {t.id: t for t in before.terms}
    new = {t.id: t for t in after.terms}
    return {
        "added": [tid for tid in new if tid not in old],
        "changed": [tid for tid in new if tid in old and new[tid] != old[tid]],
        "removed": [tid for tid in old if tid not in new],
    }
