# tests/test_records.py
import pytest

from gpa_tracker.db import get_connection
from gpa_tracker.errors import InvalidRecordError, RecordNotFoundError
from gpa_tracker.models import Course, Term
from gpa_tracker.records import (
    add_course, create_term, delete_course, delete_term, get_setting,
    load_snapshot, rename_term, replace_all, set_setting, update_course,
)


def test_empty_record(ready_db, user):
    snapshot = load_snapshot(ready_db, user)
    assert snapshot.terms == ()
    assert snapshot.overall_gpa == 0.0
    assert snapshot.total_credits == 0


def test_create_term_persists_empty_term(ready_db, user):
    term = create_term(ready_db, user, "Fall 2024")
    assert term.gpa == 0.0
    snapshot = load_snapshot(ready_db, user)
    assert [t.name for t in snapshot.terms] == ["Fall 2024"]
    assert snapshot.terms[0].id == term.id


def test_add_course_stores_recomputed_term_figures(ready_db, user):
    term = create_term(ready_db, user, "Fall 2024")
    add_course(ready_db, user, term.id, "Maths", 3, "A")
    add_course(ready_db, user, term.id, "Physics", 4, "B")
    conn = get_connection(ready_db)
    row = conn.execute("SELECT gpa, total_credits FROM terms WHERE id = ?", (term.id,)).fetchone()
    conn.close()
    assert row["gpa"] == 3.43
    assert row["total_credits"] == 7
    snapshot = load_snapshot(ready_db, user)
    assert snapshot.overall_gpa == 3.43
    assert [c.name for c in snapshot.terms[0].courses] == ["Maths", "Physics"]


def test_load_ignores_stale_stored_figures(ready_db, user):
    term = create_term(ready_db, user, "Fall 2024")
    add_course(ready_db, user, term.id, "Maths", 3, "B")
    conn = get_connection(ready_db)
    conn.execute("UPDATE terms SET gpa = 1.0, total_credits = 50")
    conn.commit()
    conn.close()
    snapshot = load_snapshot(ready_db, user)
    assert snapshot.terms[0].gpa == 3.0
    assert snapshot.terms[0].total_credits == 3


def test_update_course(ready_db, user):
    term = create_term(ready_db, user, "Fall 2024")
    course = add_course(ready_db, user, term.id, "Maths", 3, "C")
    updated = update_course(ready_db, user, course.id, grade="A", credits=4)
    assert updated == Course(id=course.id, name="Maths", credits=4, grade="A")
    snapshot = load_snapshot(ready_db, user)
    assert snapshot.terms[0].gpa == 4.0
    assert snapshot.total_credits == 4


def test_delete_course(ready_db, user):
    term = create_term(ready_db, user, "Fall 2024")
    keep = add_course(ready_db, user, term.id, "Maths", 3, "A")
    drop = add_course(ready_db, user, term.id, "Art", 2, "F")
    snapshot = delete_course(ready_db, user, drop.id)
    assert snapshot.terms[0].courses == (keep,)
    assert snapshot.overall_gpa == 4.0


def test_rename_term(ready_db, user):
    term = create_term(ready_db, user, "Fall")
    renamed = rename_term(ready_db, user, term.id, "Fall 2024")
    assert renamed.name == "Fall 2024"
    assert load_snapshot(ready_db, user).terms[0].name == "Fall 2024"


def test_delete_term_removes_its_courses(ready_db, user):
    fall = create_term(ready_db, user, "Fall")
    spring = create_term(ready_db, user, "Spring")
    add_course(ready_db, user, fall.id, "Maths", 3, "A")
    add_course(ready_db, user, spring.id, "Physics", 3, "C")
    snapshot = delete_term(ready_db, user, fall.id)
    assert [t.name for t in snapshot.terms] == ["Spring"]
    assert snapshot.overall_gpa == 2.0
    conn = get_connection(ready_db)
    assert conn.execute("SELECT COUNT(*) FROM courses").fetchone()[0] == 1
    conn.close()


def test_invalid_course_is_not_stored(ready_db, user):
    term = create_term(ready_db, user, "Fall")
    with pytest.raises(InvalidRecordError):
        add_course(ready_db, user, term.id, "Maths", 0, "A")
    assert load_snapshot(ready_db, user).terms[0].courses == ()


def test_unknown_course(ready_db, user):
    with pytest.raises(RecordNotFoundError):
        update_course(ready_db, user, "missing", grade="A")
    with pytest.raises(RecordNotFoundError):
        delete_course(ready_db, user, "missing")


def test_records_are_isolated_per_user(ready_db):
    term = create_term(ready_db, "alice", "Fall")
    add_course(ready_db, "alice", term.id, "Maths", 3, "A")
    assert load_snapshot(ready_db, "bob").terms == ()
    with pytest.raises(RecordNotFoundError):
        delete_term(ready_db, "bob", term.id)


def test_replace_all(ready_db, user):
    old = create_term(ready_db, user, "Old")
    add_course(ready_db, user, old.id, "Maths", 3, "A")
    new_term = Term(id="new", name="New", courses=(Course("c", "Art", 2, "B"),))
    snapshot = replace_all(ready_db, user, [new_term])
    assert [t.name for t in snapshot.terms] == ["New"]
    loaded = load_snapshot(ready_db, user)
    assert loaded == snapshot
    assert loaded.overall_gpa == 3.0


def test_replace_all_refuses_invalid_grade_and_keeps_data(ready_db, user):
    old = create_term(ready_db, user, "Old")
    add_course(ready_db, user, old.id, "Maths", 3, "A")
    before = load_snapshot(ready_db, user)
    bad = Term(id="new", name="New", courses=(Course("c", "Art", 2, "Z"),))
    with pytest.raises(InvalidRecordError):
        replace_all(ready_db, user, [bad])
    assert load_snapshot(ready_db, user) == before


def test_settings_round_trip(ready_db, user):
    assert get_setting(ready_db, user, "student_name") is None
    assert get_setting(ready_db, user, "student_name", "anon") == "anon"
    set_setting(ready_db, user, "student_name", "Sam Doe")
    set_setting(ready_db, user, "student_name", "Sam Q. Doe")
    assert get_setting(ready_db, user, "student_name") == "Sam Q. Doe"
    assert get_setting(ready_db, "other", "student_name") is None
