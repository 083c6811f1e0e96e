"""Shared Typer app object, shared option types, and store utility."""

from datetime import date, datetime, time
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config import Category
from ..io.history_store import TrainingStore, get_default_data_dir
from ..io.serializers import ValidationError, validate_category, validate_date
from . import views

# Shared --category option type used across all commands
CategoryOption = Annotated[
    str,
    typer.Option("--category", "-c", help="Movement category: push, pull or legs"),
]

DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Data directory (default: ~/.rep-ladder)"),
]

DateOption = Annotated[
    Optional[str],
    typer.Option("--date", help="Date (YYYY-MM-DD, default: today)"),
]

app = typer.Typer(
    name="rep-ladder",
    help="Daily bodyweight volume tracker: push, pull and legs rep targets that adapt.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> TrainingStore:
    """Get training store from path or default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return TrainingStore(data_dir)


def parse_category(value: str) -> Category:
    """Validate a --category value, exiting with an error message if unknown."""
    try:
        return validate_category(value)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def parse_day(value: str | None) -> date:
    """Validate a --date value (today when omitted)."""
    if value is None:
        return date.today()
    try:
        return validate_date(value)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def parse_timestamp(day: date, clock: str | None) -> datetime:
    """Combine a day with --time (HH:MM); the current time when omitted."""
    if clock is None:
        return datetime.combine(day, datetime.now().time().replace(microsecond=0))
    try:
        return datetime.combine(day, time.fromisoformat(clock))
    except ValueError:
        views.print_error(f"Invalid time: {clock}. Expected HH:MM")
        raise typer.Exit(1)
