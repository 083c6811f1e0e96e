"""Session commands: init, log-set, history, delete-set."""

import json
from typing import Annotated, Optional

import typer

from ...core.adaptation import should_auto_progress
from ...core.exercises.registry import get_catalog, get_variation
from ...core.metrics import calculate_initial_daily_target, day_total_reps, training_sets
from ...core.models import DailyTarget, Movement
from ...core.predictions import (
    average_reps_per_set,
    estimate_sets_to_target,
    predict_reps,
    previous_day_first_set,
    suggest_rpe,
)
from ...core.rotation import next_exercise_for_category
from ...core.targets import effective_target
from ...io.history_store import TrainingStore
from ...io.serializers import ValidationError, logged_set_to_dict, validate_rpe
from .. import views
from ..app import (
    CategoryOption,
    DataDirOption,
    DateOption,
    app,
    get_store,
    parse_category,
    parse_day,
    parse_timestamp,
)


def _exercise_names(category) -> dict[str, str]:
    return {v.id: v.name for v in get_catalog(category)}


def _load_movements_or_exit(store: TrainingStore, category) -> list[Movement]:
    try:
        movements = store.load_movements(category)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if not movements:
        views.print_error(f"No {category} movement configured. Run 'init' first.")
        raise typer.Exit(1)
    return movements


@app.command()
def init(
    category: CategoryOption,
    exercise: Annotated[
        str,
        typer.Option("--exercise", "-e", help="Exercise ID from the catalog (see 'catalog')"),
    ],
    max_effort: Annotated[
        int,
        typer.Option("--max-effort", "-m", help="Reps in a recent max-effort set", min=0),
    ],
    date: DateOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Configure an exercise for a category.

    The first exercise of a category seeds the daily target at 80% of the
    max-effort reps. Further exercises join the category's rotation.
    """
    cat = parse_category(category)
    day = parse_day(date)
    try:
        variation = get_variation(cat, exercise)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_dir)
    store.init()
    try:
        existing = store.load_movements(cat)
        current = store.get_movement(cat, variation.id)
        has_target = bool(store.load_targets(cat))
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if current is not None:
        current.max_effort_reps = max_effort
        current.max_effort_date = day
        store.upsert_movement(current)
        views.print_success(f"Updated {variation.name}: max effort {max_effort} reps")
    else:
        order = max((m.rotation_order for m in existing), default=0) + 1
        store.upsert_movement(
            Movement(
                category=cat,
                exercise_id=variation.id,
                max_effort_reps=max_effort,
                max_effort_date=day,
                rotation_order=order,
            )
        )
        views.print_success(f"Added {variation.name} to {cat} (rotation #{order})")

    if not has_target:
        target = calculate_initial_daily_target(max_effort)
        store.append_target(cat, DailyTarget(date=day, target=target, source="initial"))
        views.print_info(f"Daily {cat} target starts at {target} reps")

    views.console.print(f"[dim]Data directory: {store.data_dir}[/dim]")


@app.command("log-set")
def log_set(
    category: CategoryOption,
    reps: Annotated[int, typer.Option("--reps", "-r", help="Reps completed", min=1)],
    rpe: Annotated[
        Optional[int],
        typer.Option("--rpe", help="Rate of perceived exertion (1-10)"),
    ] = None,
    max_effort: Annotated[
        bool,
        typer.Option("--max-effort", help="Mark as a max-effort test"),
    ] = False,
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Exercise ID (default: rotation pick)"),
    ] = None,
    date: DateOption = None,
    clock: Annotated[
        Optional[str],
        typer.Option("--time", help="Time of day (HH:MM, default: now)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Log one completed set.

    A max-effort test updates the exercise's benchmark, resets the daily
    target to 80% of it, and may move a scaled exercise up to the next
    harder variation.
    """
    cat = parse_category(category)
    day = parse_day(date)
    logged_at = parse_timestamp(day, clock)
    try:
        rpe = validate_rpe(rpe)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_dir)
    movements = _load_movements_or_exit(store, cat)
    sets_today = store.sets_on(cat, day)

    if exercise is not None:
        movement = next((m for m in movements if m.exercise_id == exercise), None)
        if movement is None:
            views.print_error(f"'{exercise}' is not configured for {cat}. Run 'init' to add it.")
            raise typer.Exit(1)
    elif sets_today and sets_today[0].exercise_id:
        # Stay on the exercise already started today
        movement = next(
            (m for m in movements if m.exercise_id == sets_today[0].exercise_id),
            movements[0],
        )
    else:
        movement = next_exercise_for_category(movements)
        assert movement is not None

    if rpe is None and not max_effort:
        views.print_warning("No RPE given: the set counts as taken to failure")

    logged = store.append_set(cat, movement.exercise_id, reps, rpe, logged_at, max_effort)
    movement.last_used_date = day
    names = _exercise_names(cat)
    name = names.get(movement.exercise_id, movement.exercise_id)
    views.print_success(f"Logged {cat} set {logged.set_number}: {reps} reps of {name}")

    if max_effort:
        old_id = movement.exercise_id
        movement.max_effort_reps = reps
        movement.max_effort_date = day
        target = calculate_initial_daily_target(reps)
        store.append_target(cat, DailyTarget(date=day, target=target, source="initial"))
        views.print_info(f"New max effort: daily {cat} target reset to {target} reps")
        nxt = should_auto_progress(get_variation(cat, old_id), reps, cat)
        if nxt is not None and store.get_movement(cat, nxt.id) is not None:
            # Harder variation already rotates here; retire the outgrown one
            store.remove_movement(cat, old_id)
            views.print_success(
                f"{reps} reps: {name} retired, {nxt.name} is already in the {cat} rotation"
            )
            return
        if nxt is not None:
            movement.exercise_id = nxt.id
            views.print_success(f"{reps} reps: progressing from {name} to {nxt.name}")
        store.upsert_movement(movement, replaces=old_id)
        return

    store.upsert_movement(movement)

    all_sets = store.load_sets(cat)
    today_training = training_sets(s for s in all_sets if s.day == day)
    target = effective_target(store.load_targets(cat), day)
    total = day_total_reps(today_training)
    predicted = predict_reps(
        today_training,
        movement.max_effort_reps or 0,
        previous_day_first_set(training_sets(all_sets), day),
    )
    sets_left = None
    suggested = suggest_rpe(total, target or 0, len(today_training) + 1)
    if target is not None:
        sets_left = estimate_sets_to_target(total, target, average_reps_per_set(today_training))
    views.print_next_set(total, target, predicted, suggested, sets_left)


@app.command()
def history(
    category: CategoryOption,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Show a category's logged sets.

    The # column is the ID used by 'delete-set'.
    """
    cat = parse_category(category)
    store = get_store(data_dir)
    try:
        sets = store.load_sets(cat)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        output = [dict(logged_set_to_dict(s), id=i) for i, s in enumerate(sets, 1)]
        print(json.dumps(output, indent=2))
        return

    views.print_history(sets, _exercise_names(cat))


@app.command("delete-set")
def delete_set(
    category: CategoryOption,
    index: Annotated[
        int,
        typer.Option("--index", "-i", help="Set ID to delete (see # column in history)"),
    ],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Remove a logged set by its ID.

    Use 'history' to see set IDs in the # column.
    """
    cat = parse_category(category)
    store = get_store(data_dir)

    try:
        sets = store.load_sets(cat)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not sets:
        views.print_error(f"No {cat} sets recorded.")
        raise typer.Exit(1)

    if index < 1 or index > len(sets):
        views.print_error(f"Set ID must be between 1 and {len(sets)}")
        raise typer.Exit(1)

    target = sets[index - 1]
    views.console.print(
        f"Set to delete: [bold]{target.day.isoformat()}[/bold] "
        f"set {target.set_number}, {target.reps} reps"
    )

    if not force and not views.confirm_action("Delete this set?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_set_at(cat, index - 1)
    views.print_success(f"Deleted set #{index}: {target.day.isoformat()} ({target.reps} reps)")
