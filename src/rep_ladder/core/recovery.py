"""
Weekly recovery score.

Four sub-scores over one category's 7-day window:

  first-set performance  0-40   avg first-set reps vs max effort
  RPE efficiency         0-30   share of sets in the RPE 6-8 band
  target achievement     0-20   share of training days reaching the target
  consistency            0-10   number of distinct training days

Days are calendar days of the sets' local timestamps.
"""

import math
from datetime import date, timedelta
from typing import Iterable, Sequence

from .config import (
    CONSISTENCY_THRESHOLDS,
    DAYS_IN_WEEK,
    FIRST_SET_FLOOR_POINTS,
    FIRST_SET_THRESHOLDS,
    FRACTION_FALLBACK_SCALE,
    OPTIMAL_RPE_MAX,
    OPTIMAL_RPE_MIN,
    RECOVERY_RATINGS,
    RPE_EFFICIENCY_THRESHOLDS,
    TARGET_ACHIEVEMENT_THRESHOLDS,
)
from .metrics import day_total_reps, first_set_of_day, group_sets_by_day
from .models import LoggedSet, RecoveryScoreBreakdown, WeeklyData


def _fraction_points(
    pct: float,
    thresholds: Sequence[tuple[float, int]],
) -> int:
    """Points for the first threshold pct reaches, else floor(pct * 20)."""
    for minimum, points in thresholds:
        if pct >= minimum:
            return points
    return math.floor(pct * FRACTION_FALLBACK_SCALE)


def first_set_performance_score(sets: Sequence[LoggedSet], max_effort_reps: int) -> int:
    """
    First-set performance (max 40).

    Average the first set of each training day and compare it to the
    max-effort benchmark. No training days scores 0; a missing benchmark
    scores the floor.
    """
    by_day = group_sets_by_day(sets)
    first_sets = [first_set_of_day(day_sets) for day_sets in by_day.values()]
    first_sets = [s for s in first_sets if s is not None]
    if not first_sets:
        return 0

    avg_first = sum(s.reps for s in first_sets) / len(first_sets)
    pct = avg_first / max_effort_reps if max_effort_reps > 0 else 0.0

    for minimum, points in FIRST_SET_THRESHOLDS:
        if pct >= minimum:
            return points
    return FIRST_SET_FLOOR_POINTS


def rpe_efficiency_score(sets: Sequence[LoggedSet]) -> int:
    """RPE efficiency (max 30): share of sets with RPE in [6, 8]."""
    if not sets:
        return 0
    optimal = sum(
        1 for s in sets
        if s.rpe is not None and OPTIMAL_RPE_MIN <= s.rpe <= OPTIMAL_RPE_MAX
    )
    return _fraction_points(optimal / len(sets), RPE_EFFICIENCY_THRESHOLDS)


def target_achievement_score(sets: Sequence[LoggedSet], daily_target: int) -> int:
    """Target achievement (max 20): share of training days with total reps >= target."""
    by_day = group_sets_by_day(sets)
    if not by_day:
        return 0
    met = sum(1 for day_sets in by_day.values() if day_total_reps(day_sets) >= daily_target)
    return _fraction_points(met / len(by_day), TARGET_ACHIEVEMENT_THRESHOLDS)


def consistency_score(sets: Iterable[LoggedSet]) -> int:
    """Consistency (max 10) from the count of distinct training days."""
    days = len({s.day for s in sets})
    for minimum, points in CONSISTENCY_THRESHOLDS:
        if days >= minimum:
            return points
    return 0


def calculate_recovery_score(data: WeeklyData) -> RecoveryScoreBreakdown:
    """
    Compute the weekly recovery breakdown.

    Args:
        data: One category's sets for one 7-day window, plus the week's
            daily target and the movement's max-effort reps

    Returns:
        RecoveryScoreBreakdown (total in 0-100)
    """
    sets = list(data.sets)
    return RecoveryScoreBreakdown(
        first_set_performance=first_set_performance_score(sets, data.max_effort_reps),
        rpe_efficiency=rpe_efficiency_score(sets),
        target_achievement=target_achievement_score(sets, data.daily_target),
        consistency=consistency_score(sets),
    )


def recovery_score_rating(total: int) -> tuple[str, str]:
    """
    Human-readable rating for a recovery total.

    Returns:
        Tuple (rating, description)
    """
    for minimum, rating, description in RECOVERY_RATINGS:
        if total >= minimum:
            return rating, description
    _, rating, description = RECOVERY_RATINGS[-1]
    return rating, description


def week_window(week_start: date) -> tuple[date, date]:
    """Inclusive first and last day of the 7-day window starting at week_start."""
    return week_start, week_start + timedelta(days=DAYS_IN_WEEK - 1)


def sets_in_window(sets: Iterable[LoggedSet], start: date, end: date) -> list[LoggedSet]:
    """Sets whose calendar day falls within [start, end]."""
    return [s for s in sets if start <= s.day <= end]
