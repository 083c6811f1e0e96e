"""Progression commands: adjust (daily), review (weekly), status."""

import json
from datetime import date as date_cls, timedelta
from typing import Annotated, Optional

import typer

from ...core.adaptation import suggest_volume_adjustment, volume_adjustment_description
from ...core.config import (
    ALL_CATEGORIES,
    DEFAULT_READINESS,
    PINNED_TARGET_SOURCES,
    REASON_TARGET_SET,
)
from ...core.daily_policy import (
    apply_daily_adjustment,
    is_cap_relaxed,
    suggest_daily_target_delta,
    summarize_day,
)
from ...core.exercises.registry import find_variation, previous_easier_variation
from ...core.metrics import daily_prescription, day_total_reps, training_sets
from ...core.models import DailyAdjustment, DailyTarget, Movement, WeeklyData
from ...core.recovery import (
    calculate_recovery_score,
    recovery_score_rating,
    sets_in_window,
    week_window,
)
from ...core.rotation import next_exercise_for_category
from ...core.targets import effective_target, effective_target_entry
from ...io.serializers import ValidationError, validate_readiness
from .. import views
from ..app import (
    CategoryOption,
    DataDirOption,
    DateOption,
    app,
    get_store,
    parse_category,
    parse_day,
)

ReadinessOption = Annotated[
    Optional[int],
    typer.Option("--readiness", help="How ready you feel today, 1 (poor) to 5 (great)"),
]


def _check_readiness(readiness: int | None) -> int | None:
    try:
        return validate_readiness(readiness)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def _latest_tested(movements: list[Movement]) -> Movement | None:
    tested = [m for m in movements if m.max_effort_reps is not None]
    if not tested:
        return None
    return max(tested, key=lambda m: m.max_effort_date or date_cls.min)


def current_max_effort(movements: list[Movement]) -> int:
    """Most recent max-effort benchmark among a category's movements (0 if none)."""
    latest = _latest_tested(movements)
    if latest is None:
        return 0
    return latest.max_effort_reps or 0


@app.command()
def adjust(
    category: CategoryOption,
    date: DateOption = None,
    readiness: ReadinessOption = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the change without saving it"),
    ] = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Set today's target from yesterday's sets.

    Increases are saved as a new target entry dated today. Holds write
    nothing, so running the command twice gives the same result. A target
    already set today by a max-effort test or weekly review is kept.
    """
    cat = parse_category(category)
    day = parse_day(date)
    readiness = _check_readiness(readiness)
    store = get_store(data_dir)

    try:
        all_sets = store.load_sets(cat)
        ledger = store.load_targets(cat)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    yesterday = day - timedelta(days=1)
    sets_y = [s for s in all_sets if s.day == yesterday]
    summary = summarize_day(sets_y)
    pinned = effective_target_entry(ledger, day)
    if pinned is not None and pinned.date == day and pinned.source in PINNED_TARGET_SOURCES:
        # A max-effort reset or weekly review already set today's target
        current = pinned.target
        cap_relaxed = False
        adj = DailyAdjustment(delta=0, reason=REASON_TARGET_SET)
        new_target = current
    else:
        current = effective_target(ledger, yesterday)
        if current is None:
            current = effective_target(ledger, day)
        if current is None:
            views.print_error(f"No {cat} target yet. Run 'init' first.")
            raise typer.Exit(1)

        sets_y2 = [s for s in all_sets if s.day == day - timedelta(days=2)]
        cap_relaxed = is_cap_relaxed(sets_y, sets_y2)
        adj = suggest_daily_target_delta(sets_y, current, cap_relaxed, cat, readiness)
        new_target = apply_daily_adjustment(current, adj)

    applied = False
    if adj.delta > 0 and not dry_run:
        store.append_target(cat, DailyTarget(date=day, target=new_target, source="daily"))
        applied = True

    if json_out:
        print(json.dumps({
            "category": cat.value,
            "date": day.isoformat(),
            "previous_target": current,
            "delta": adj.delta,
            "reason": adj.reason,
            "new_target": new_target,
            "cap_relaxed": cap_relaxed,
            "applied": applied,
            "yesterday": {
                "sets": summary.sets_count,
                "total_reps": summary.total_reps,
                "avg_rpe": round(summary.avg_rpe, 1),
                "hard": summary.two_sets_at_least_9,
            },
        }, indent=2))
        return

    views.print_adjustment(cat.value, day, current, adj, new_target, cap_relaxed, summary)
    if dry_run and adj.delta > 0:
        views.print_info("Dry run: target not saved.")


@app.command()
def review(
    category: CategoryOption,
    week_start: Annotated[
        str,
        typer.Option("--week-start", "-w", help="First day of the 7-day window (YYYY-MM-DD)"),
    ],
    apply: Annotated[
        bool,
        typer.Option("--apply", help="Save the new target for the following day"),
    ] = False,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Score a week's recovery and suggest the next daily target.

    With --apply the new target is saved, starting the day after the window.
    """
    cat = parse_category(category)
    start = parse_day(week_start)
    start, end = week_window(start)
    store = get_store(data_dir)

    try:
        movements = store.load_movements(cat)
        all_sets = store.load_sets(cat)
        ledger = store.load_targets(cat)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    current = effective_target(ledger, start)
    if current is None:
        current = effective_target(ledger, end)
    if current is None:
        views.print_error(f"No {cat} target for that week. Run 'init' first.")
        raise typer.Exit(1)

    week_sets = training_sets(sets_in_window(all_sets, start, end))
    data = WeeklyData(
        sets=week_sets,
        daily_target=current,
        max_effort_reps=current_max_effort(movements),
    )
    breakdown = calculate_recovery_score(data)
    rating = recovery_score_rating(breakdown.total)
    adjustment = suggest_volume_adjustment(breakdown.total, current)
    description = volume_adjustment_description(adjustment.percentage)
    easier = None
    if adjustment.percentage < 0:
        latest = _latest_tested(movements)
        if latest is not None:
            easier = previous_easier_variation(cat, latest.exercise_id)

    if apply:
        store.append_target(
            cat,
            DailyTarget(date=end + timedelta(days=1), target=adjustment.new_target, source="weekly"),
        )

    if json_out:
        print(json.dumps({
            "category": cat.value,
            "week_start": start.isoformat(),
            "week_end": end.isoformat(),
            "score": breakdown.to_dict(),
            "rating": rating[0],
            "current_target": current,
            "percentage": adjustment.percentage,
            "new_target": adjustment.new_target,
            "applied": apply,
            "easier_variation": easier.id if easier else None,
        }, indent=2))
        return

    views.print_review(cat.value, start, end, breakdown, rating, current, adjustment, description)
    if easier is not None:
        views.print_info(f"Struggling this week? {easier.name} is one step easier.")
    if apply:
        views.print_success(
            f"New {cat} target {adjustment.new_target} from {(end + timedelta(days=1)).isoformat()}"
        )


@app.command()
def status(
    date: DateOption = None,
    readiness: ReadinessOption = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show today's target, progress and suggested sets for each category."""
    day = parse_day(date)
    readiness = _check_readiness(readiness)
    store = get_store(data_dir)

    rows: list[views.StatusRow] = []
    try:
        for cat in ALL_CATEGORIES:
            movements = store.load_movements(cat)
            if not movements:
                continue
            today = training_sets(s for s in store.load_sets(cat) if s.day == day)
            if today and today[0].exercise_id:
                exercise_id = today[0].exercise_id
            else:
                exercise_id = next_exercise_for_category(movements).exercise_id  # type: ignore[union-attr]
            variation = find_variation(exercise_id)
            max_effort = current_max_effort(movements)
            rows.append(views.StatusRow(
                category=cat.value,
                exercise_name=variation.name if variation else exercise_id,
                target=effective_target(store.load_targets(cat), day),
                done_today=day_total_reps(today),
                sets_today=len(today),
                max_effort=max_effort or None,
                prescription=daily_prescription(readiness or DEFAULT_READINESS, max_effort) if max_effort else None,
            ))
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_status(rows, day, readiness)
