"""
Set-by-set predictions used while a workout is being logged.

First set of the day: the previous training day's first set, or 80% of
the max-effort benchmark. Each later set: the previous set minus 3 reps.
"""

import math
from datetime import date
from typing import Sequence

from .config import DEFAULT_REPS_PER_SET, FIRST_SET_PERCENTAGE, SET_DECREMENT
from .metrics import first_set_of_day, group_sets_by_day
from .models import LoggedSet


def predict_reps(
    sets_today: Sequence[LoggedSet],
    max_effort_reps: int,
    previous_day_first_set: int | None = None,
) -> int:
    """
    Predict reps for the next set.

    Args:
        sets_today: Sets already logged today, in set order
        max_effort_reps: Current max-effort benchmark
        previous_day_first_set: First-set reps of the previous training day

    Returns:
        Predicted reps (>= 1 after the first set)
    """
    if not sets_today:
        if previous_day_first_set:
            return previous_day_first_set
        return math.floor(max_effort_reps * FIRST_SET_PERCENTAGE)

    last = max(sets_today, key=lambda s: s.set_number)
    return max(1, last.reps - SET_DECREMENT)


def previous_day_first_set(all_sets: Sequence[LoggedSet], today: date) -> int | None:
    """First-set reps of the most recent training day before today."""
    by_day = group_sets_by_day(s for s in all_sets if s.day < today)
    if not by_day:
        return None
    last_day = max(by_day)
    first = first_set_of_day(by_day[last_day])
    return first.reps if first is not None else None


def suggest_rpe(current_reps: int, target_reps: int, set_number: int) -> int:
    """
    Suggested RPE for the next set.

    Past the target: 8 within the first two sets, 9 after. Otherwise the
    first set aims for 7, and later sets move up to 8 once 85% of the
    target is done.
    """
    if current_reps >= target_reps:
        return 8 if set_number <= 2 else 9
    if set_number == 1:
        return 7
    if target_reps > 0 and current_reps / target_reps >= 0.85:
        return 8
    return 7


def estimate_sets_to_target(
    current_reps: int,
    target_reps: int,
    average_reps_per_set: int = DEFAULT_REPS_PER_SET,
) -> int:
    """Sets still needed to reach target at the given average."""
    remaining = max(0, target_reps - current_reps)
    if average_reps_per_set <= 0:
        return remaining
    return math.ceil(remaining / average_reps_per_set)


def average_reps_per_set(sets_today: Sequence[LoggedSet]) -> int:
    """Rounded average reps per set today (10 when nothing is logged yet)."""
    if not sets_today:
        return DEFAULT_REPS_PER_SET
    return round(sum(s.reps for s in sets_today) / len(sets_today))
