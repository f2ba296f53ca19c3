"""JSON / YAML import and export of a user's academic record.

The document layout matches the files written by the original web tool,
so exports from either side can be loaded by the other::

    {"semesters": [{"id", "name", "courses": [...], "gpa", "totalCredits"}],
     "overallGPA", "totalCredits", "plannedModules": [...]}
"""
import json
import logging
from datetime import date
from pathlib import Path

import yaml

from gpa_tracker.errors import ImportFormatError
from gpa_tracker.models import Course, GPASnapshot, PlannedModule, Term, new_id
from gpa_tracker.records import load_snapshot, replace_all
from gpa_tracker.state import build_snapshot, validate_credits, validate_grade, validate_name

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def snapshot_to_dict(snapshot: GPASnapshot) -> dict:
    return {
        "semesters": [
            {
                "id": term.id,
                "name": term.name,
                "courses": [
                    {"id": c.id, "name": c.name, "credits": c.credits, "grade": c.grade}
                    for c in term.courses
                ],
                "gpa": term.gpa,
                "totalCredits": term.total_credits,
            }
            for term in snapshot.terms
        ],
        "overallGPA": snapshot.overall_gpa,
        "totalCredits": snapshot.total_credits,
        "plannedModules": [
            {"id": m.id, "name": m.name, "credits": m.credits, "semester": m.term_name}
            for m in snapshot.planned_modules
        ],
    }


def _course_from_dict(data) -> Course:
    if not isinstance(data, dict):
        raise ImportFormatError(f"Course entry must be a mapping, got {type(data).__name__}")
    try:
        return Course(
            id=new_id(),
            name=validate_name(data.get("name"), "Course name"),
            credits=validate_credits(data.get("credits")),
            grade=validate_grade(data.get("grade")),
        )
    except ValueError as e:
        raise ImportFormatError(str(e)) from e


def _term_from_dict(data) -> Term:
    if not isinstance(data, dict):
        raise ImportFormatError(f"Semester entry must be a mapping, got {type(data).__name__}")
    courses = data.get("courses") or []
    if not isinstance(courses, list):
        raise ImportFormatError("Semester 'courses' must be a list")
    try:
        name = validate_name(data.get("name"), "Semester name")
    except ValueError as e:
        raise ImportFormatError(str(e)) from e
    return Term(id=new_id(), name=name, courses=tuple(_course_from_dict(c) for c in courses))


def _module_from_dict(data) -> PlannedModule:
    if not isinstance(data, dict):
        raise ImportFormatError(f"Planned module entry must be a mapping, got {type(data).__name__}")
    try:
        return PlannedModule(
            id=new_id(),
            name=validate_name(data.get("name"), "Module name"),
            credits=validate_credits(data.get("credits")),
            term_name=validate_name(data.get("semester"), "Module semester"),
        )
    except ValueError as e:
        raise ImportFormatError(str(e)) from e


def snapshot_from_dict(data) -> GPASnapshot:
    """Parse an exported document. Ids are reassigned and derived figures recomputed."""
    if not isinstance(data, dict):
        raise ImportFormatError("Import document must be a mapping")
    semesters = data.get("semesters") or []
    modules = data.get("plannedModules") or []
    if not isinstance(semesters, list) or not isinstance(modules, list):
        raise ImportFormatError("'semesters' and 'plannedModules' must be lists")
    return build_snapshot(
        [_term_from_dict(s) for s in semesters],
        [_module_from_dict(m) for m in modules],
    )


def read_document(file_path: str) -> dict:
    path = Path(file_path)
    text = path.read_text()
    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ImportFormatError(f"Could not parse {path.name}: {e}") from e


def write_document(file_path: str, data: dict) -> None:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() in YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=False))
    else:
        path.write_text(json.dumps(data, indent=2))


def default_export_name(today: date | None = None) -> str:
    return f"gpa_data_{(today or date.today()).isoformat()}.json"


def export_file(db_path: str, user_id: str, file_path: str) -> dict:
    """Write the user's record to ``file_path`` (JSON, or YAML by suffix)."""
    snapshot = load_snapshot(db_path, user_id)
    write_document(file_path, snapshot_to_dict(snapshot))
    logger.info("Exported %d terms for %s to %s", len(snapshot.terms), user_id, file_path)
    return {"filename": Path(file_path).name, "terms": len(snapshot.terms), "credits": snapshot.total_credits}


def import_file(db_path: str, user_id: str, file_path: str) -> GPASnapshot:
    """Replace the user's record with the contents of ``file_path``."""
    try:
        parsed = snapshot_from_dict(read_document(file_path))
    except ImportFormatError:
        logger.warning("Rejected import of %s", file_path, exc_info=True)
        raise
    snapshot = replace_all(db_path, user_id, parsed.terms, parsed.planned_modules)
    logger.info("Imported %d terms for %s from %s", len(snapshot.terms), user_id, file_path)
    return snapshot
