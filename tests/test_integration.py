# tests/test_integration.py
"""End-to-end test of the core workflow."""
from gpa_tracker.db import init_db
from gpa_tracker.exporter import export_file, import_file
from gpa_tracker.goals import project_goal
from gpa_tracker.planner import add_planned_module, complete_planned_module, get_planned_credits
from gpa_tracker.records import add_course, create_term, delete_course, load_snapshot, update_course
from gpa_tracker.report import render_report


def test_full_record_workflow(tmp_db, tmp_path):
    """Record two terms, plan ahead, project a goal, and export."""
    init_db(tmp_db)
    user = "student"

    fall = create_term(tmp_db, user, "Fall 2024")
    add_course(tmp_db, user, fall.id, "Calculus", 4, "A-")
    typo = add_course(tmp_db, user, fall.id, "Writing", 3, "C")
    update_course(tmp_db, user, typo.id, grade="B+")

    spring = create_term(tmp_db, user, "Spring 2025")
    add_course(tmp_db, user, spring.id, "Statistics", 3, "B")
    dropped = add_course(tmp_db, user, spring.id, "Drama", 2, "F")
    delete_course(tmp_db, user, dropped.id)

    snapshot = load_snapshot(tmp_db, user)
    # Fall: (4*3.7 + 3*3.3) / 7 = 3.528...
    assert snapshot.terms[0].gpa == 3.53
    assert snapshot.terms[1].gpa == 3.0
    # (3.53*7 + 3.0*3) / 10 = 3.371
    assert snapshot.overall_gpa == 3.37
    assert snapshot.total_credits == 10

    module = add_planned_module(tmp_db, user, "Algorithms", 4, "Fall 2025")
    assert get_planned_credits(tmp_db, user) == 4
    goal = project_goal(snapshot, 3.45, get_planned_credits(tmp_db, user))
    # (3.45*14 - 3.37*10) / 4 = 3.65
    assert goal["required"] == 3.65
    assert goal["label"] == "Challenging but achievable with excellent grades"

    snapshot = complete_planned_module(tmp_db, user, module.id, "A")
    assert [t.name for t in snapshot.terms] == ["Fall 2024", "Spring 2025", "Fall 2025"]
    assert snapshot.total_credits == 14
    # (3.53*7 + 3.0*3 + 4.0*4) / 14 = 3.55
    assert snapshot.overall_gpa == 3.55

    path = tmp_path / "record.json"
    export_file(tmp_db, user, str(path))
    restored = import_file(tmp_db, "restored", str(path))
    assert restored.overall_gpa == snapshot.overall_gpa
    assert [len(t.courses) for t in restored.terms] == [2, 1, 1]

    text = render_report(restored, "Sam Doe")
    assert "Fall 2025".upper() in text
