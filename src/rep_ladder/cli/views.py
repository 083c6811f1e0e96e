"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of training data.
"""

from dataclasses import dataclass
from datetime import date

from rich.console import Console
from rich.table import Table

from ..core.config import (
    CONSISTENCY_MAX,
    FIRST_SET_PERFORMANCE_MAX,
    RPE_EFFICIENCY_MAX,
    TARGET_ACHIEVEMENT_MAX,
)
from ..core.daily_policy import DaySummary
from ..core.exercises.base import ExerciseVariation
from ..core.models import (
    DailyAdjustment,
    DailyPrescription,
    LoggedSet,
    RecoveryScoreBreakdown,
    VolumeAdjustment,
)

console = Console()


@dataclass
class StatusRow:
    """One category line of the status table."""

    category: str
    exercise_name: str
    target: int | None
    done_today: int
    sets_today: int
    max_effort: int | None
    prescription: DailyPrescription | None


def _fmt_rpe(rpe: int | None) -> str:
    return str(rpe) if rpe is not None else "-"


def format_sets_table(sets: list[LoggedSet], names: dict[str, str]) -> Table:
    """
    Format logged sets as a Rich table.

    Args:
        sets: Sets in display order
        names: Exercise id -> display name

    Returns:
        Rich Table object
    """
    table = Table(title="Logged Sets", show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Time", style="dim")
    table.add_column("Exercise")
    table.add_column("Set", justify="right")
    table.add_column("Reps", justify="right", style="bold")
    table.add_column("RPE", justify="right")
    table.add_column("Note", style="magenta")

    for i, s in enumerate(sets, 1):
        table.add_row(
            str(i),
            s.day.isoformat(),
            s.logged_at.strftime("%H:%M"),
            names.get(s.exercise_id or "", s.exercise_id or "-"),
            str(s.set_number),
            str(s.reps),
            _fmt_rpe(s.rpe),
            "max effort" if s.is_max_effort else "",
        )

    return table


def print_history(sets: list[LoggedSet], names: dict[str, str]) -> None:
    """Print a category's set history to console."""
    if not sets:
        console.print("[yellow]No sets recorded yet.[/yellow]")
        return

    console.print(format_sets_table(sets, names))


def print_catalog(ladders: dict[str, list[ExerciseVariation]]) -> None:
    """Print one difficulty ladder per category."""
    for category, ladder in ladders.items():
        table = Table(title=f"{category.capitalize()} ladder", show_header=True, header_style="bold cyan")
        table.add_column("Level", justify="right")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Standard", justify="center")

        for v in ladder:
            table.add_row(
                str(v.difficulty),
                v.id,
                v.name,
                "[green]yes[/green]" if v.is_standard else "[dim]no[/dim]",
            )
        console.print(table)


def print_adjustment(
    category: str,
    day: date,
    previous_target: int,
    adjustment: DailyAdjustment,
    new_target: int,
    cap_relaxed: bool,
    yesterday: DaySummary | None = None,
) -> None:
    """Print the outcome of a daily adjustment."""
    console.print()
    console.print(f"[bold]Daily adjustment: {category} ({day.isoformat()})[/bold]")
    console.print(f"  Yesterday's target: {previous_target}")
    if yesterday is not None and yesterday.has_training_sets:
        console.print(
            f"  Yesterday: {yesterday.total_reps} reps in {yesterday.sets_count} sets, "
            f"avg RPE {yesterday.avg_rpe:.1f}"
        )
        if yesterday.two_sets_at_least_9:
            console.print("  [yellow]Two or more sets at RPE 9+ yesterday[/yellow]")
    if adjustment.delta > 0:
        console.print(f"  Change: [green]+{adjustment.delta}[/green] ({adjustment.reason})")
    else:
        console.print(f"  Change: [yellow]hold[/yellow] ({adjustment.reason})")
    if cap_relaxed:
        console.print("  [dim]Fatigue cap relaxed by a recent easy day[/dim]")
    console.print(f"  Today's target: [bold cyan]{new_target}[/bold cyan]")
    console.print()


def print_review(
    category: str,
    week_start: date,
    week_end: date,
    breakdown: RecoveryScoreBreakdown,
    rating: tuple[str, str],
    current_target: int,
    adjustment: VolumeAdjustment,
    description: str,
) -> None:
    """Print a weekly recovery review."""
    table = Table(
        title=f"Weekly review: {category} ({week_start.isoformat()} to {week_end.isoformat()})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Component")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Max", justify="right", style="dim")

    table.add_row("First-set performance", str(breakdown.first_set_performance), str(FIRST_SET_PERFORMANCE_MAX))
    table.add_row("RPE efficiency", str(breakdown.rpe_efficiency), str(RPE_EFFICIENCY_MAX))
    table.add_row("Target achievement", str(breakdown.target_achievement), str(TARGET_ACHIEVEMENT_MAX))
    table.add_row("Consistency", str(breakdown.consistency), str(CONSISTENCY_MAX))
    table.add_row("[bold]Total[/bold]", f"[bold]{breakdown.total}[/bold]", "100")
    console.print(table)

    name, note = rating
    console.print(f"Rating: [bold]{name}[/bold] - {note}")
    console.print(f"Volume: {description}")
    console.print(
        f"Daily target: {current_target} -> [bold cyan]{adjustment.new_target}[/bold cyan]"
    )


def print_status(rows: list[StatusRow], day: date, readiness: int | None) -> None:
    """Print today's targets and prescriptions for every configured category."""
    if not rows:
        console.print("[yellow]No movements configured. Run 'init' first.[/yellow]")
        return

    title = f"Status for {day.isoformat()}"
    if readiness is not None:
        title += f" (readiness {readiness})"
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Category", style="cyan")
    table.add_column("Exercise")
    table.add_column("Target", justify="right")
    table.add_column("Done", justify="right", style="bold")
    table.add_column("Sets", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Plan", style="green")

    for row in rows:
        if row.target is None:
            done = str(row.done_today)
        elif row.done_today >= row.target:
            done = f"[green]{row.done_today}[/green]"
        else:
            done = f"[yellow]{row.done_today}[/yellow]"
        plan = "-"
        if row.prescription is not None:
            p = row.prescription
            plan = f"{p.sets}x{p.reps_per_set} @RPE {p.target_rpe}"
        table.add_row(
            row.category,
            row.exercise_name,
            str(row.target) if row.target is not None else "-",
            done,
            str(row.sets_today),
            str(row.max_effort) if row.max_effort is not None else "-",
            plan,
        )

    console.print(table)


def print_next_set(
    total_today: int,
    target: int | None,
    predicted_reps: int,
    suggested_rpe: int,
    sets_left: int | None,
) -> None:
    """Print progress toward today's target and a prediction for the next set."""
    if target is None:
        console.print(f"Today: {total_today} reps")
    else:
        console.print(f"Today: {total_today}/{target} reps")
    if target is not None and total_today >= target:
        console.print("[green]Target reached for today.[/green]")
        return
    line = f"Next set: ~{predicted_reps} reps @RPE {suggested_rpe}"
    if sets_left is not None:
        line += f" (about {sets_left} more set{'s' if sets_left != 1 else ''})"
    console.print(f"[dim]{line}[/dim]")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
