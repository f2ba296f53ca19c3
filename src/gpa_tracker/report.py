"""Printable academic transcript rendered with rich."""
import io
import logging
import re
from datetime import date, datetime
from pathlib import Path

from rich import box
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape
from rich.text import Text

from gpa_tracker.classifications import (
    CLASSIFICATIONS, get_classification, get_classification_range, get_grade_color,
)
from gpa_tracker.grades import GRADE_POINTS, grade_point

logger = logging.getLogger(__name__)

REPORT_FORMATS = {"text": "txt", "html": "html"}
REPORT_WIDTH = 100


def _term_table(term) -> Table:
    classification = get_classification(term.gpa)
    table = Table(
        title=escape(term.name.upper()),
        caption=f"GPA: {term.gpa:.2f} | Credits: {term.total_credits} | {classification.name}",
        box=box.SIMPLE_HEAVY,
        expand=True,
    )
    table.add_column("Course Name", style="cyan")
    table.add_column("Credits", justify="right")
    table.add_column("Grade", justify="center")
    table.add_column("Points", justify="right")
    for course in term.courses:
        color = get_grade_color(course.grade)
        table.add_row(
            escape(course.name),
            str(course.credits),
            f"[bold {color}]{course.grade}[/bold {color}]",
            f"{course.credits * grade_point(course.grade):.1f}",
        )
    return table


def _standards_table() -> Table:
    table = Table(title="Grading Standards", box=box.SIMPLE, expand=True)
    table.add_column("Classification")
    table.add_column("GPA Range", justify="right")
    for classification in CLASSIFICATIONS:
        table.add_row(classification.name, get_classification_range(classification))
    return table


def _grade_point_table() -> Table:
    table = Table(title="Grade Points", box=box.SIMPLE)
    for grade in GRADE_POINTS:
        table.add_column(grade, justify="center")
    table.add_row(*(f"{points:.1f}" for points in GRADE_POINTS.values()))
    return table


def build_report(snapshot, student_name: str, generated_at: datetime | None = None) -> list:
    """Renderables for the transcript, in print order."""
    generated_at = generated_at or datetime.now()
    classification = get_classification(snapshot.overall_gpa)
    parts = [
        Panel(
            Text(f"Generated on {generated_at:%B %d, %Y}", justify="center"),
            title="ACADEMIC TRANSCRIPT", border_style="blue",
        ),
        Panel(
            f"Student Name: {escape(student_name)}\n"
            f"Total Semesters: {len(snapshot.terms)}\n"
            f"Report Generated: {generated_at:%Y-%m-%d %H:%M}",
            title="Student Information", border_style="cyan",
        ),
        Panel(
            f"[bold]Overall GPA: {snapshot.overall_gpa:.2f}[/bold]    "
            f"[bold]Total Credits: {snapshot.total_credits}[/bold]\n"
            f"Classification: [{classification.color}]{classification.name}[/{classification.color}]\n"
            f"[dim]{classification.description}[/dim]",
            title="Overall Performance Summary", border_style="blue",
        ),
        _standards_table(),
    ]
    parts.extend(_term_table(term) for term in snapshot.terms)
    parts.append(_grade_point_table())
    parts.append(Text(
        f"Generated by GPA Tracker | {generated_at:%Y-%m-%d %H:%M} | Confidential Academic Document",
        style="dim", justify="center",
    ))
    return parts


def render_report(snapshot, student_name: str, fmt: str = "text", generated_at: datetime | None = None) -> str:
    if fmt not in REPORT_FORMATS:
        raise ValueError(f"Unknown report format {fmt!r}; expected one of {', '.join(REPORT_FORMATS)}")
    console = Console(record=True, width=REPORT_WIDTH, file=io.StringIO())
    console.print(Group(*build_report(snapshot, student_name, generated_at)))
    if fmt == "html":
        return console.export_html(inline_styles=True)
    return console.export_text()


def report_filename(student_name: str, fmt: str = "text", today: date | None = None) -> str:
    safe_name = re.sub(r"[\s/\\]+", "_", student_name).strip("_.") or "Student"
    return f"{safe_name}_Academic_Transcript_{(today or date.today()).isoformat()}.{REPORT_FORMATS[fmt]}"


def save_report(snapshot, student_name: str, directory: str = ".", fmt: str = "text") -> Path:
    path = Path(directory) / report_filename(student_name, fmt)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(snapshot, student_name, fmt))
    logger.info("Saved %s report to %s", fmt, path)
    return path
