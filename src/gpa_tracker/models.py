"""Data classes for the academic record."""
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4


def new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Course:
    id: str
    name: str
    credits: int
    grade: str


@dataclass(frozen=True)
class Term:
    id: str
    name: str
    courses: tuple = ()
    gpa: float = 0.0
    total_credits: int = 0


@dataclass(frozen=True)
class PlannedModule:
    """A course entered before its grade is known. Never aggregated."""
    id: str
    name: str
    credits: int
    term_name: str
    grade: Optional[str] = None


@dataclass(frozen=True)
class GPASnapshot:
    terms: tuple = ()
    overall_gpa: float = 0.0
    total_credits: int = 0
    planned_modules: tuple = ()

    def find_term(self, term_id: str) -> Optional[Term]:
        return next((t for t in self.terms if t.id == term_id), None)

    def find_term_by_name(self, name: str) -> Optional[Term]:
        return next((t for t in self.terms if t.name == name), None)

    def find_planned_module(self, module_id: str) -> Optional[PlannedModule]:
        return next((m for m in self.planned_modules if m.id == module_id), None)
