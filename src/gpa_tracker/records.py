"""Term and course storage.

Writes go through the pure reducer in ``gpa_tracker.state``: the current
snapshot is loaded, the mutation is applied, and the resulting rows are
stored together with every affected term's recomputed ``gpa`` and
``total_credits`` in one transaction.
"""
import logging
from datetime import datetime

from gpa_tracker.db import get_connection
from gpa_tracker.errors import RecordNotFoundError
from gpa_tracker.models import Course, GPASnapshot, PlannedModule, Term
from gpa_tracker.state import (
    AddCourse, AddTerm, DeleteCourse, DeleteTerm, RenameTerm, ReplaceAll,
    UpdateCourse, build_snapshot, diff_terms, reduce,
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().isoformat()


def _load(conn, user_id: str) -> GPASnapshot:
    term_rows = conn.execute(
        "SELECT id, name FROM terms WHERE user_id = ? ORDER BY created_at, rowid",
        (user_id,),
    ).fetchall()
    terms = []
    for row in term_rows:
        course_rows = conn.execute(
            "SELECT id, name, credits, grade FROM courses WHERE term_id = ? ORDER BY created_at, rowid",
            (row["id"],),
        ).fetchall()
        courses = tuple(
            Course(id=c["id"], name=c["name"], credits=c["credits"], grade=c["grade"])
            for c in course_rows
        )
        terms.append(Term(id=row["id"], name=row["name"], courses=courses))
    module_rows = conn.execute(
        "SELECT id, name, credits, term_name FROM planned_modules WHERE user_id = ? ORDER BY created_at, rowid",
        (user_id,),
    ).fetchall()
    modules = [
        PlannedModule(id=m["id"], name=m["name"], credits=m["credits"], term_name=m["term_name"])
        for m in module_rows
    ]
    # Stored gpa/total_credits are a cache for other readers; always re-derive.
    return build_snapshot(terms, modules)


def load_snapshot(db_path: str, user_id: str) -> GPASnapshot:
    conn = get_connection(db_path)
    snapshot = _load(conn, user_id)
    conn.close()
    return snapshot


def _insert_course(conn, term_id: str, course: Course) -> None:
    conn.execute(
        "INSERT INTO courses (id, term_id, name, credits, grade, created_at) VALUES (?, ?, ?, ?, ?, ?)",
        (course.id, term_id, course.name, course.credits, course.grade, _now()),
    )


def _sync_courses(conn, old: Term, new: Term) -> None:
    old_courses = {c.id: c for c in old.courses}
    new_ids = {c.id for c in new.courses}
    for course_id in old_courses:
        if course_id not in new_ids:
            conn.execute("DELETE FROM courses WHERE id = ?", (course_id,))
    for course in new.courses:
        previous = old_courses.get(course.id)
        if previous is None:
            _insert_course(conn, new.id, course)
        elif previous != course:
            conn.execute(
                "UPDATE courses SET name = ?, credits = ?, grade = ? WHERE id = ?",
                (course.name, course.credits, course.grade, course.id),
            )


def _sync(conn, user_id: str, before: GPASnapshot, after: GPASnapshot) -> None:
    changes = diff_terms(before, after)
    for term_id in changes["removed"]:
        conn.execute("DELETE FROM terms WHERE id = ? AND user_id = ?", (term_id, user_id))
    for term_id in changes["added"]:
        term = after.find_term(term_id)
        conn.execute(
            "INSERT INTO terms (id, user_id, name, gpa, total_credits, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (term.id, user_id, term.name, term.gpa, term.total_credits, _now()),
        )
        for course in term.courses:
            _insert_course(conn, term.id, course)
    for term_id in changes["changed"]:
        old, new = before.find_term(term_id), after.find_term(term_id)
        _sync_courses(conn, old, new)
        conn.execute(
            "UPDATE terms SET name = ?, gpa = ?, total_credits = ? WHERE id = ? AND user_id = ?",
            (new.name, new.gpa, new.total_credits, term_id, user_id),
        )

    new_module_ids = {m.id for m in after.planned_modules}
    old_module_ids = {m.id for m in before.planned_modules}
    for module_id in old_module_ids - new_module_ids:
        conn.execute("DELETE FROM planned_modules WHERE id = ? AND user_id = ?", (module_id, user_id))
    for module in after.planned_modules:
        if module.id not in old_module_ids:
            conn.execute(
                "INSERT INTO planned_modules (id, user_id, name, credits, term_name, created_at) VALUES (?, ?, ?, ?, ?, ?)",
                (module.id, user_id, module.name, module.credits, module.term_name, _now()),
            )


def apply_mutation(db_path: str, user_id: str, mutation) -> GPASnapshot:
    """Apply a reducer mutation to the stored record and return the new snapshot."""
    conn = get_connection(db_path)
    try:
        before = _load(conn, user_id)
        after = reduce(before, mutation)
        with conn:
            _sync(conn, user_id, before, after)
    finally:
        conn.close()
    logger.info(
        "%s for %s: overall GPA %.2f over %d credits",
        type(mutation).__name__, user_id, after.overall_gpa, after.total_credits,
    )
    return after


def find_course_term(snapshot: GPASnapshot, course_id: str) -> Term:
    for term in snapshot.terms:
        if any(c.id == course_id for c in term.courses):
            return term
    raise RecordNotFoundError("Course", course_id)


def create_term(db_path: str, user_id: str, name: str) -> Term:
    snapshot = apply_mutation(db_path, user_id, AddTerm(name=name))
    return snapshot.terms[-1]


def rename_term(db_path: str, user_id: str, term_id: str, name: str) -> Term:
    snapshot = apply_mutation(db_path, user_id, RenameTerm(term_id=term_id, name=name))
    return snapshot.find_term(term_id)


def delete_term(db_path: str, user_id: str, term_id: str) -> GPASnapshot:
    """Delete a term and, through the cascade, all of its courses."""
    return apply_mutation(db_path, user_id, DeleteTerm(term_id=term_id))


def add_course(db_path: str, user_id: str, term_id: str, name: str, credits: int, grade: str) -> Course:
    snapshot = apply_mutation(
        db_path, user_id, AddCourse(term_id=term_id, name=name, credits=credits, grade=grade),
    )
    return snapshot.find_term(term_id).courses[-1]


def update_course(
    db_path: str, user_id: str, course_id: str,
    name: str | None = None, credits: int | None = None, grade: str | None = None,
) -> Course:
    term = find_course_term(load_snapshot(db_path, user_id), course_id)
    snapshot = apply_mutation(
        db_path, user_id,
        UpdateCourse(term_id=term.id, course_id=course_id, name=name, credits=credits, grade=grade),
    )
    return next(c for c in snapshot.find_term(term.id).courses if c.id == course_id)


def delete_course(db_path: str, user_id: str, course_id: str) -> GPASnapshot:
    term = find_course_term(load_snapshot(db_path, user_id), course_id)
    return apply_mutation(db_path, user_id, DeleteCourse(term_id=term.id, course_id=course_id))


def replace_all(db_path: str, user_id: str, terms, planned_modules=()) -> GPASnapshot:
    """Replace every term, course and planned module the user owns."""
    conn = get_connection(db_path)
    try:
        after = reduce(GPASnapshot(), ReplaceAll(terms=tuple(terms), planned_modules=tuple(planned_modules)))
        with conn:
            conn.execute("DELETE FROM terms WHERE user_id = ?", (user_id,))
            conn.execute("DELETE FROM planned_modules WHERE user_id = ?", (user_id,))
            _sync(conn, user_id, GPASnapshot(), after)
    finally:
        conn.close()
    logger.info("Replaced record for %s with %d terms", user_id, len(after.terms))
    return after


def get_setting(db_path: str, user_id: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT value FROM user_settings WHERE user_id = ? AND key = ?", (user_id, key),
    ).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, user_id: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (user_id, key, value) VALUES (?, ?, ?) "
        "ON CONFLICT(user_id, key) DO UPDATE SET value = excluded.value",
        (user_id, key, value),
    )
    conn.commit()
    conn.close()
