"""CLI for the fitness plan engine.

Developer and operator CLI that runs the same service functions as the
HTTP layer against the configured database.
"""

from typing import NoReturn

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from app.catalog.loader import CatalogError, seed_catalog
from app.config.settings import settings
from app.core import random_source
from app.core.logger import setup_logger
from app.db.models import Base
from app.db.session import check_database_connection, get_engine
from app.plans.completion import mark_done
from app.plans.errors import PlanError
from app.plans.schedule_reader import get_schedule
from app.plans.scheduler import generate_plan
from app.plans.stats import get_stats
from app.plans.types import AssignmentView

console = Console()

app = typer.Typer(
    name="fitplan-cli",
    help="Fitness plan engine CLI - catalog seeding, plan generation and progress",
    add_completion=False,
)

DEFAULT_HOST = "127.0.0.1"


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=settings.log_file, compact=True)
    random_source.configure(settings.plan_random_seed)


def _fail(message: str, error: Exception) -> NoReturn:
    console.print(Panel(Text(message, style="bold red"), subtitle=str(error), border_style="red"))
    raise typer.Exit(1) from error


def _print_assignments(assignments: list[AssignmentView], title: str) -> None:
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Workout ID", justify="right")
    table.add_column("Title")
    table.add_column("Exercises", justify="right")
    table.add_column("Done")
    for item in assignments:
        table.add_row(
            item.scheduled_date.date().isoformat(),
            str(item.workout_id),
            item.title,
            str(len(item.exercises)),
            "yes" if item.is_done else "no",
        )
    console.print(table)


@app.command()
def server(
    host: str = typer.Option(DEFAULT_HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)


@app.command()
def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=get_engine())
    console.print("[green]Database tables created[/green]")


@app.command()
def check_db() -> None:
    """Verify the database connection works."""
    try:
        check_database_connection()
    except Exception as e:
        _fail("Database connection failed", e)
    console.print(Panel(Text("Database connection OK", style="bold green"), border_style="green"))


@app.command("seed-catalog")
def seed(
    path: str = typer.Option(settings.catalog_path, "--path", help="Catalog YAML file"),
) -> None:
    """Seed workout templates and exercises from a catalog file."""
    try:
        result = seed_catalog(path)
    except (CatalogError, PlanError) as e:
        _fail("Catalog seeding failed", e)
    console.print(
        f"[green]Workouts created: {result.workouts_created}, "
        f"skipped: {result.workouts_skipped}, exercises created: {result.exercises_created}[/green]"
    )


@app.command("generate-plan")
def plan(
    user_id: int = typer.Option(..., "--user-id", help="User ID"),
    months: int = typer.Option(
        settings.default_plan_months,
        "--months",
        min=1,
        max=settings.max_plan_months,
        help="Plan horizon in 4-week months",
    ),
    frequency: int = typer.Option(
        settings.default_frequency_per_week,
        "--frequency",
        min=1,
        max=settings.max_frequency_per_week,
        help="Sessions per week",
    ),
) -> None:
    """Regenerate a user's future plan."""
    try:
        created = generate_plan(user_id, months, frequency)
    except PlanError as e:
        _fail("Plan generation failed", e)
    _print_assignments(created, f"New plan for user {user_id}")


@app.command("mark-done")
def complete(
    user_id: int = typer.Option(..., "--user-id", help="User ID"),
    workout_id: int = typer.Option(..., "--workout-id", help="Workout template ID"),
    date: str = typer.Option(..., "--date", help="Scheduled day, e.g. 2026-02-07"),
) -> None:
    """Mark a scheduled workout as done."""
    try:
        mark_done(user_id, workout_id, date)
    except PlanError as e:
        _fail("Could not mark workout as done", e)
    console.print(f"[green]Workout {workout_id} on {date} marked as completed[/green]")


@app.command()
def schedule(user_id: int = typer.Option(..., "--user-id", help="User ID")) -> None:
    """Show a user's full schedule."""
    try:
        assignments = get_schedule(user_id)
    except PlanError as e:
        _fail("Could not load schedule", e)
    _print_assignments(assignments, f"Schedule for user {user_id}")


@app.command()
def stats(
    user_id: int = typer.Option(..., "--user-id", help="User ID"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show adherence stats for a user."""
    try:
        result = get_stats(user_id)
    except PlanError as e:
        _fail("Could not compute stats", e)

    if as_json:
        console.print_json(data=result.model_dump())
        return

    table = Table(title=f"Stats for user {user_id}", show_header=False)
    table.add_row("Workouts completed", str(result.total_workouts))
    table.add_row("Completion rate", f"{result.completion_rate}%")
    table.add_row("Exercises completed", str(result.total_exercises))
    table.add_row("Current streak", str(result.current_streak))
    table.add_row("Favorite workout", result.favorite_workout or "-")
    console.print(table)


if __name__ == "__main__":
    app()
