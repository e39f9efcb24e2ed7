"""CLI for the study planner.

Runs the scheduler against the persisted planner state and exports the
result, without the Streamlit front end.
"""

import sys
from datetime import UTC, date, datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Bootstrap must be imported after standard library imports
# but before studyplan imports to set up sys.path correctly
try:
    import cli.bootstrap
except ImportError:
    _project_root = Path(__file__).parent.parent
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

from studyplan.config.settings import settings
from studyplan.core.logger import setup_logger
from studyplan.export.gantt_workbook import default_workbook_filename, save_gantt_workbook
from studyplan.scheduling.errors import ScheduleInvariantError
from studyplan.scheduling.invariants import validate_schedule
from studyplan.scheduling.models import ScheduleResult
from studyplan.scheduling.scheduler import build_schedule
from studyplan.storage.config_store import (
    PlannerConfig,
    default_export_filename,
    export_config,
    import_config,
    load_config,
    save_config,
)
from studyplan.storage.errors import ConfigImportError

console = Console()

app = typer.Typer(
    name="studyplan",
    help="Study planner CLI - schedule courses onto daily study budgets",
    add_completion=False,
)

CONFIG_OPTION_HELP = "Planner state file (default: STUDYPLAN_DATA_FILE or ~/.studyplan/planner.json)"


def _setup_logging(debug: bool = False) -> None:
    """Set up logging with console output and, in debug mode, a per-run file.

    Args:
        debug: Enable debug logging level
    """
    log_level = "DEBUG" if debug else settings.log_level

    log_file = settings.log_file
    if debug and not log_file:
        logs_dir = Path("logs")
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        log_file = str(logs_dir / f"cli_{timestamp}.log")

    setup_logger(level=log_level, log_file=log_file)


def _run(config: PlannerConfig) -> ScheduleResult:
    return build_schedule(
        config.courses,
        config.day_limits,
        config.margin_of_error,
        start_date=config.start_date,
        max_days=settings.max_schedule_days,
    )


def _schedule_table(result: ScheduleResult) -> Table:
    table = Table(title="Study Plan", show_lines=False)
    table.add_column("Day", justify="right", style="dim")
    table.add_column("Date")
    table.add_column("Sections")
    table.add_column("Minutes", justify="right")

    for day in result.days:
        if day.sections:
            sections = ", ".join(f"{s.course_name} [{s.section_label}] ({s.duration}m)" for s in day.sections)
        else:
            sections = "[dim]Free Day[/dim]"
        table.add_row(str(day.day_index), f"{day.day_name.upper()} {day.date}", sections, str(day.total_duration))
    return table


def _summary_panel(result: ScheduleResult) -> Panel:
    if not result.days:
        return Panel(Text("Add courses to see your schedule.", style="yellow"), border_style="yellow")

    end = result.days[-1]
    summary = (
        f"End Date: {end.date} ({result.end_date:%Y-%m-%d}, {result.total_days} days, {result.total_minutes} minutes)"
    )
    if result.is_complete:
        return Panel(Text(summary, style="bold green"), border_style="green")
    return Panel(
        Text(summary, style="bold red"),
        subtitle=f"Stopped at the {settings.max_schedule_days}-day limit; check your daily limits",
        border_style="red",
    )


@app.command()
def schedule(
    config_path: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Calculate and print the schedule for the saved planner state."""
    _setup_logging(debug)
    config = load_config(config_path)
    result = _run(config)

    if result.days:
        console.print(_schedule_table(result))
    console.print(_summary_panel(result))


@app.command()
def check(
    config_path: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Verify the calculated schedule against capacity, conservation and order invariants."""
    _setup_logging()
    config = load_config(config_path)
    result = _run(config)

    try:
        validate_schedule(
            result.days,
            config.courses,
            config.day_limits,
            config.margin_of_error,
            is_complete=result.is_complete,
        )
    except ScheduleInvariantError as e:
        console.print(Panel(Text("Schedule is INVALID", style="bold red"), subtitle=e.code, border_style="red"))
        for detail in e.details:
            console.print(f"  [red]-[/red] {detail}")
        raise typer.Exit(1) from e

    if not result.is_complete:
        console.print(Panel(Text("Schedule incomplete", style="bold yellow"), subtitle="Day limit reached", border_style="yellow"))
        raise typer.Exit(2)

    console.print(Panel(Text("Schedule is valid", style="bold green"), subtitle=f"{result.total_days} days", border_style="green"))


@app.command("export-xlsx")
def export_xlsx(
    config_path: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    output: Path | None = typer.Option(None, "--output", "-o", help="Workbook path (default: CourseOptimizer_Schedule_<date>.xlsx)"),
) -> None:
    """Export the schedule as a Gantt progress workbook."""
    _setup_logging()
    config = load_config(config_path)
    result = _run(config)

    if not result.days:
        console.print("[yellow]Nothing to export: add courses first.[/yellow]")
        raise typer.Exit(1)

    path = output or Path(default_workbook_filename(date.today()))
    save_gantt_workbook(result.days, config.courses, path)
    console.print(f"[green]Workbook written to {path}[/green]")


@app.command("export-config")
def export_config_command(
    config_path: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    output: Path | None = typer.Option(None, "--output", "-o", help="Export path (default: course_optimizer_data_<date>.json)"),
) -> None:
    """Export courses, day limits, margin and start date as one JSON document."""
    _setup_logging()
    config = load_config(config_path)

    path = output or Path(default_export_filename(date.today()))
    path.write_text(export_config(config), encoding="utf-8")
    console.print(f"[green]Planner data exported to {path}[/green]")


@app.command("import-config")
def import_config_command(
    source: Path = typer.Argument(..., help="JSON export document to import"),
    config_path: Path | None = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
    yes: bool = typer.Option(False, "--yes", "-y", help="Overwrite without asking"),
) -> None:
    """Import a JSON export document, overwriting the saved planner state."""
    _setup_logging()
    current = load_config(config_path)

    try:
        text = source.read_text(encoding="utf-8")
        merged = import_config(text, current)
    except (OSError, ConfigImportError) as e:
        console.print(f"[red]Failed to import {source}: {e}[/red]")
        raise typer.Exit(1) from e

    if not yes and not typer.confirm("Importing data will overwrite your current schedule. Continue?"):
        console.print("[yellow]Import cancelled.[/yellow]")
        raise typer.Exit(1)

    path = save_config(merged, config_path)
    console.print(f"[green]Imported {len(merged.courses)} course(s) into {path}[/green]")


if __name__ == "__main__":
    app()
