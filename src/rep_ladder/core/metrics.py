"""
Pure metric computation functions.

Per-set conversions (RPE -> reps in reserve -> implied max), the initial
daily target, the readiness-based daily prescription, and the day-grouping
helpers shared by the daily policy and the weekly scorer.
"""

import math
from datetime import date
from typing import Iterable, Sequence

from .config import (
    INITIAL_TARGET_PERCENTAGE,
    MISSING_RPE_AS,
    READINESS_FALLBACK_PLAN,
    READINESS_PLANS,
    RIR_MAX,
    RPE_MAX,
)
from .models import DailyPrescription, LoggedSet


def reps_in_reserve_from_rpe(rpe: int | float | None, is_max_effort: bool) -> int:
    """
    Estimate reps in reserve from RPE.

    RIR = clip(10 - RPE, 0, 9)

    A max-effort set has no reserve by definition. A missing RPE is read
    conservatively as no reserve either.

    Args:
        rpe: Rate of perceived exertion (1-10) or None
        is_max_effort: Whether the set was a max-effort test

    Returns:
        Reps in reserve (0 to 9)
    """
    if is_max_effort:
        return 0
    if rpe is None or isinstance(rpe, bool) or not isinstance(rpe, (int, float)):
        return 0
    if math.isnan(rpe):
        return 0
    return int(max(0, min(RIR_MAX, RPE_MAX - rpe)))


def compute_set_metrics(
    reps: int,
    rpe: int | None,
    is_max_effort: bool = False,
) -> tuple[int, int]:
    """
    Compute (reps in reserve, implied max reps) for one set.

    Args:
        reps: Reps performed
        rpe: Reported RPE or None
        is_max_effort: Whether the set was a max-effort test

    Returns:
        Tuple (rir, implied_max_reps)
    """
    rir = reps_in_reserve_from_rpe(rpe, is_max_effort)
    return rir, max(0, reps + rir)


def implied_max_from_set(reps: int, rpe: int | None, is_max_effort: bool = False) -> int:
    """
    Estimated one-set max implied by a (possibly sub-maximal) set.

    implied = max(0, reps + RIR)
    """
    _, implied = compute_set_metrics(reps, rpe, is_max_effort)
    return implied


def best_implied_max(sets: Iterable[LoggedSet]) -> int | None:
    """
    Highest implied max across a collection of sets.

    Max-effort sets are not filtered out; callers filter if they need to.

    Returns:
        Best implied max, or None for an empty collection
    """
    best: int | None = None
    for s in sets:
        implied = implied_max_from_set(s.reps, s.rpe, s.is_max_effort)
        if best is None or implied > best:
            best = implied
    return best


def calculate_initial_daily_target(max_effort_reps: int) -> int:
    """
    Initial daily target from a max-effort benchmark.

    target = floor(0.8 * max_effort_reps)
    """
    return math.floor(max_effort_reps * INITIAL_TARGET_PERCENTAGE)


def reps_for_target_rpe(max_effort_reps: int, target_rpe: int) -> int:
    """
    Reps for one set aimed at a target RPE, given the current max.

    reps = max(1, floor(max - clip(10 - RPE, 0, 9)))
    """
    rir = max(0, min(RIR_MAX, RPE_MAX - target_rpe))
    return max(1, math.floor(max_effort_reps - rir))


def daily_prescription(readiness: int | None, max_effort_reps: int) -> DailyPrescription:
    """
    Map today's readiness (1-5) to a set count, target RPE and reps per set.

    Unknown or missing readiness gets the most conservative plan.
    """
    sets, target_rpe = READINESS_PLANS.get(readiness, READINESS_FALLBACK_PLAN)  # type: ignore[arg-type]
    return DailyPrescription(
        sets=sets,
        target_rpe=target_rpe,
        reps_per_set=reps_for_target_rpe(max_effort_reps, target_rpe),
    )


# ---------------------------------------------------------------------------
# Day helpers
# ---------------------------------------------------------------------------

def effective_rpe(s: LoggedSet) -> int:
    """RPE used by threshold rules; a missing value counts as failure."""
    return s.rpe if s.rpe is not None else MISSING_RPE_AS


def training_sets(sets: Iterable[LoggedSet]) -> list[LoggedSet]:
    """Non-max-effort sets ordered by set number."""
    return sorted((s for s in sets if not s.is_max_effort), key=lambda s: s.set_number)


def group_sets_by_day(sets: Iterable[LoggedSet]) -> dict[date, list[LoggedSet]]:
    """
    Group sets by calendar day.

    Returns:
        Dict {date: [sets sorted by set_number]} in ascending date order
    """
    by_day: dict[date, list[LoggedSet]] = {}
    for s in sets:
        by_day.setdefault(s.day, []).append(s)
    return {
        day: sorted(day_sets, key=lambda s: s.set_number)
        for day, day_sets in sorted(by_day.items())
    }


def first_set_of_day(sets: Sequence[LoggedSet]) -> LoggedSet | None:
    """Lowest set_number set of a day, or None if the day is empty."""
    if not sets:
        return None
    return min(sets, key=lambda s: s.set_number)


def day_total_reps(sets: Iterable[LoggedSet]) -> int:
    """Sum of reps across sets."""
    return sum(s.reps for s in sets)
