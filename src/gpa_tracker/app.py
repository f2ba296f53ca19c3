"""Interactive CLI application."""
import logging
import sqlite3
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from gpa_tracker.classifications import get_classification, get_gpa_status, get_gpa_status_color
from gpa_tracker.config import configure_logging, load_config
from gpa_tracker.db import init_db
from gpa_tracker.errors import GPATrackerError
from gpa_tracker.exporter import default_export_name, export_file, import_file
from gpa_tracker.goals import project_goal
from gpa_tracker.grades import GRADE_OPTIONS, MAX_GRADE_POINT
from gpa_tracker.planner import (
    add_planned_module, complete_planned_module, find_completed_course,
    get_planned_credits, list_planned_modules, remove_planned_module,
)
from gpa_tracker.records import (
    add_course, create_term, delete_course, delete_term, get_setting,
    load_snapshot, rename_term, set_setting, update_course,
)
from gpa_tracker.report import REPORT_FORMATS, save_report

logger = logging.getLogger(__name__)

console = Console()

CANCEL_WORDS = ("q", "menu")
KEEP = ""


class InputCancelled(Exception):
    """Raised when the user types 'q' or 'menu' at a prompt."""


def ask(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer is not None and answer.strip().lower() in CANCEL_WORDS:
        raise InputCancelled()
    return answer


def ask_int(prompt: str, **kwargs) -> int:
    while True:
        answer = ask(prompt, **kwargs)
        try:
            return int(answer)
        except (TypeError, ValueError):
            console.print("[red]Please enter a whole number.[/red]")


def ask_float(prompt: str, **kwargs) -> float:
    while True:
        answer = ask(prompt, **kwargs)
        try:
            return float(answer)
        except (TypeError, ValueError):
            console.print("[red]Please enter a number.[/red]")


def show_welcome(user_id: str):
    console.print(Panel(
        f"[bold]GPA Tracker[/bold]\n[dim]Profile: {escape(user_id)}[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("summary", "Overall GPA and standing"),
        ("terms", "List terms and courses"),
        ("add-term", "Create a term"),
        ("rename-term", "Rename a term"),
        ("delete-term", "Delete a term and its courses"),
        ("add-course", "Add a graded course"),
        ("edit-course", "Change a course"),
        ("delete-course", "Remove a course"),
        ("planned", "List planned modules"),
        ("plan-module", "Add a planned module"),
        ("grade-module", "Grade a planned module"),
        ("drop-module", "Remove a planned module"),
        ("goal", "GPA needed to hit a target"),
        ("export", "Save data to JSON/YAML"),
        ("import", "Load data from JSON/YAML"),
        ("report", "Write transcript report"),
        ("name", "Set student name"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def choose_term(snapshot, prompt: str = "Select term"):
    if not snapshot.terms:
        console.print("[yellow]No terms yet. Use 'add-term' first.[/yellow]")
        return None
    for i, term in enumerate(snapshot.terms, 1):
        console.print(f"  [cyan]{i}[/cyan]) {escape(term.name)}")
    index = ask_int(prompt, choices=[str(i) for i in range(1, len(snapshot.terms) + 1)])
    return snapshot.terms[index - 1]


def choose_course(term, prompt: str = "Select course"):
    if not term.courses:
        console.print("[yellow]This term has no courses.[/yellow]")
        return None
    for i, course in enumerate(term.courses, 1):
        console.print(f"  [cyan]{i}[/cyan]) {escape(course.name)} ({course.credits} cr, {course.grade})")
    index = ask_int(prompt, choices=[str(i) for i in range(1, len(term.courses) + 1)])
    return term.courses[index - 1]


def choose_module(modules, prompt: str = "Select module"):
    if not modules:
        console.print("[yellow]No planned modules.[/yellow]")
        return None
    for i, module in enumerate(modules, 1):
        console.print(f"  [cyan]{i}[/cyan]) {escape(module.name)} ({module.credits} cr, {escape(module.term_name)})")
    index = ask_int(prompt, choices=[str(i) for i in range(1, len(modules) + 1)])
    return modules[index - 1]


def cmd_summary(db_path: str, user_id: str):
    snapshot = load_snapshot(db_path, user_id)
    gpa = snapshot.overall_gpa
    color = get_gpa_status_color(gpa)
    classification = get_classification(gpa)
    console.print(Panel(
        f"Overall GPA: [bold {color}]{gpa:.2f}[/bold {color}] [{color}]{get_gpa_status(gpa)}[/{color}]\n"
        f"Total Credits: [bold]{snapshot.total_credits}[/bold]  |  "
        f"Terms: [bold]{len(snapshot.terms)}[/bold]  |  "
        f"Planned: [bold]{len(snapshot.planned_modules)}[/bold]\n"
        f"Classification: [{classification.color}]{classification.name}[/{classification.color}]",
        title="GPA Summary", border_style="blue",
    ))


def cmd_terms(db_path: str, user_id: str):
    snapshot = load_snapshot(db_path, user_id)
    if not snapshot.terms:
        console.print("[yellow]No terms yet. Use 'add-term' to start.[/yellow]")
        return
    for term in snapshot.terms:
        table = Table(title=f"{escape(term.name)}  (GPA {term.gpa:.2f}, {term.total_credits} credits)")
        table.add_column("Course", style="cyan")
        table.add_column("Credits", justify="right")
        table.add_column("Grade", justify="center")
        for course in term.courses:
            table.add_row(escape(course.name), str(course.credits), course.grade)
        console.print(table)


def cmd_add_term(db_path: str, user_id: str):
    name = ask("Term name")
    term = create_term(db_path, user_id, name)
    console.print(f"[green]Created term {escape(term.name)}.[/green]")


def cmd_rename_term(db_path: str, user_id: str):
    term = choose_term(load_snapshot(db_path, user_id))
    if term is None:
        return
    name = ask("New name", default=term.name)
    term = rename_term(db_path, user_id, term.id, name)
    console.print(f"[green]Renamed to {escape(term.name)}.[/green]")


def cmd_delete_term(db_path: str, user_id: str):
    term = choose_term(load_snapshot(db_path, user_id))
    if term is None:
        return
    if not Confirm.ask(f"Delete {escape(term.name)} and its {len(term.courses)} courses?", default=False):
        return
    snapshot = delete_term(db_path, user_id, term.id)
    console.print(f"[green]Deleted. Overall GPA now {snapshot.overall_gpa:.2f}.[/green]")


def cmd_add_course(db_path: str, user_id: str):
    term = choose_term(load_snapshot(db_path, user_id))
    if term is None:
        return
    name = ask("Course name")
    credits = ask_int("Credits")
    grade = ask("Grade", choices=list(GRADE_OPTIONS))
    add_course(db_path, user_id, term.id, name, credits, grade)
    updated = load_snapshot(db_path, user_id).find_term(term.id)
    console.print(f"[green]Added. {escape(updated.name)} GPA: {updated.gpa:.2f}[/green]")


def cmd_edit_course(db_path: str, user_id: str):
    term = choose_term(load_snapshot(db_path, user_id))
    if term is None:
        return
    course = choose_course(term)
    if course is None:
        return
    console.print("[dim]Press Enter to keep the current value.[/dim]")
    name = ask("Course name", default=KEEP, show_default=False)
    credits = ask("Credits", default=KEEP, show_default=False)
    grade = ask("Grade", choices=list(GRADE_OPTIONS), default=KEEP, show_default=False)
    update_course(
        db_path, user_id, course.id,
        name=name or None,
        credits=int(credits) if credits else None,
        grade=grade or None,
    )
    console.print("[green]Course updated.[/green]")


def cmd_delete_course(db_path: str, user_id: str):
    term = choose_term(load_snapshot(db_path, user_id))
    if term is None:
        return
    course = choose_course(term)
    if course is None:
        return
    delete_course(db_path, user_id, course.id)
    console.print(f"[green]Removed {escape(course.name)}.[/green]")


def cmd_planned(db_path: str, user_id: str):
    modules = list_planned_modules(db_path, user_id)
    if not modules:
        console.print("[yellow]No planned modules.[/yellow]")
        return
    table = Table(title="Planned Modules")
    table.add_column("Module", style="cyan")
    table.add_column("Credits", justify="right")
    table.add_column("Term")
    for module in modules:
        table.add_row(escape(module.name), str(module.credits), escape(module.term_name))
    console.print(table)
    console.print(f"  Pending credits: [bold]{sum(m.credits for m in modules)}[/bold]")


def cmd_plan_module(db_path: str, user_id: str):
    name = ask("Module name")
    credits = ask_int("Credits")
    term_name = ask("Term")
    add_planned_module(db_path, user_id, name, credits, term_name)
    console.print("[green]Module planned.[/green]")


def cmd_grade_module(db_path: str, user_id: str):
    module = choose_module(list_planned_modules(db_path, user_id))
    if module is None:
        return
    grade = ask("Grade", choices=list(GRADE_OPTIONS))
    snapshot = complete_planned_module(db_path, user_id, module.id, grade)
    course = find_completed_course(snapshot, module.id)
    console.print(
        f"[green]{escape(course.name)} recorded in {escape(module.term_name)}. "
        f"Overall GPA now {snapshot.overall_gpa:.2f}.[/green]"
    )


def cmd_drop_module(db_path: str, user_id: str):
    module = choose_module(list_planned_modules(db_path, user_id))
    if module is None:
        return
    remove_planned_module(db_path, user_id, module.id)
    console.print(f"[green]Removed {escape(module.name)}.[/green]")


def cmd_goal(db_path: str, user_id: str):
    snapshot = load_snapshot(db_path, user_id)
    console.print(f"Current GPA [bold]{snapshot.overall_gpa:.2f}[/bold] over [bold]{snapshot.total_credits}[/bold] credits")
    target = ask_float("Target GPA (0-4)")
    if not 0 <= target <= MAX_GRADE_POINT:
        console.print(f"[red]Target GPA must be between 0 and {MAX_GRADE_POINT:g}.[/red]")
        return
    planned = get_planned_credits(db_path, user_id)
    remaining = ask_int("Remaining credits", **({"default": str(planned)} if planned else {}))
    if remaining < 1:
        console.print("[red]Remaining credits must be at least 1.[/red]")
        return
    result = project_goal(snapshot, target, remaining)
    color = result["color"]
    console.print(Panel(
        f"Required GPA: [bold {color}]{result['required']:.2f}[/bold {color}]\n"
        f"[{color}]{result['label']}[/{color}]",
        title="GPA Goal Tracker", border_style=color,
    ))


def cmd_export(db_path: str, user_id: str):
    file_path = ask("Export path", default=default_export_name())
    result = export_file(db_path, user_id, file_path)
    console.print(f"[green]Saved {result['terms']} terms to {escape(result['filename'])}.[/green]")


def cmd_import(db_path: str, user_id: str):
    file_path = ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {escape(file_path)}[/red]")
        return
    if not Confirm.ask("This replaces all current data. Continue?", default=False):
        return
    snapshot = import_file(db_path, user_id, file_path)
    console.print(
        f"[green]Imported {len(snapshot.terms)} terms. "
        f"Overall GPA {snapshot.overall_gpa:.2f} over {snapshot.total_credits} credits.[/green]"
    )


def cmd_report(db_path: str, user_id: str):
    snapshot = load_snapshot(db_path, user_id)
    if not snapshot.terms:
        console.print("[yellow]Nothing to report yet.[/yellow]")
        return
    name = get_setting(db_path, user_id, "student_name") or ask("Student name")
    fmt = ask("Format", choices=list(REPORT_FORMATS), default="html")
    directory = ask("Directory", default=".")
    path = save_report(snapshot, name, directory, fmt)
    console.print(f"[green]Report written to {escape(str(path))}[/green]")


def cmd_name(db_path: str, user_id: str):
    current = get_setting(db_path, user_id, "student_name", "")
    name = ask("Student name", **({"default": current} if current else {}))
    set_setting(db_path, user_id, "student_name", name.strip())
    console.print("[green]Saved.[/green]")


COMMANDS = {
    "summary": cmd_summary,
    "terms": cmd_terms,
    "add-term": cmd_add_term,
    "rename-term": cmd_rename_term,
    "delete-term": cmd_delete_term,
    "add-course": cmd_add_course,
    "edit-course": cmd_edit_course,
    "delete-course": cmd_delete_course,
    "planned": cmd_planned,
    "plan-module": cmd_plan_module,
    "grade-module": cmd_grade_module,
    "drop-module": cmd_drop_module,
    "goal": cmd_goal,
    "export": cmd_export,
    "import": cmd_import,
    "report": cmd_report,
    "name": cmd_name,
}


def run_command(db_path: str, user_id: str, choice: str) -> bool:
    """Run one menu command. Returns False when the user asked to quit."""
    if choice in ("quit", "exit", "q"):
        console.print("[dim]Goodbye![/dim]")
        return False
    command = COMMANDS.get(choice)
    if command is None:
        console.print("[red]Unknown command. Try again.[/red]")
        return True
    try:
        command(db_path, user_id)
    except InputCancelled:
        console.print("[dim]Back to menu.[/dim]")
    except GPATrackerError as e:
        logger.warning("%s failed: %s", choice, e)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
    except ValueError as e:
        console.print(f"[red]Invalid input: {escape(str(e))}[/red]")
    except sqlite3.Error as e:
        logger.error("%s failed to save", choice, exc_info=True)
        console.print(f"[red]Failed to save: {escape(str(e))}. Please try again.[/red]")
    except OSError as e:
        logger.error("%s failed on file access", choice, exc_info=True)
        console.print(f"[red]File error: {escape(str(e))}[/red]")
    return True


def main():
    config = load_config()
    configure_logging(config.log_level)
    init_db(config.db_path)
    logger.info("Using database %s for profile %s", config.db_path, config.user_id)

    show_welcome(config.user_id)

    while True:
        show_menu()
        try:
            choice = Prompt.ask("\n[bold]>[/bold]", default="summary").strip().lower()
            if not run_command(config.db_path, config.user_id, choice):
                break
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")


if __name__ == "__main__":
    main()
