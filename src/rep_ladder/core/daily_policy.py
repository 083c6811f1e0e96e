"""
Daily adjustment policy: decide tomorrow's target change from yesterday's sets.

Increases need two things: the target was reached, and it was reached
without grinding. Three opening sets at RPE >= 8 close the fatigue cap;
one clearly easy day (first three sets at RPE <= 6) within the last two
days opens it again.
"""

from dataclasses import dataclass
from typing import Sequence

from .config import (
    CAP_RELAX_RPE_MAX,
    CAP_RPE_MIN,
    CAP_SET_COUNT,
    CATEGORY_STEPS,
    DEFAULT_READINESS,
    EASY_MAX_RPE,
    EASY_MAX_SETS,
    LOW_READINESS_MAX,
    MANAGEABLE_MAX_RPE,
    MANAGEABLE_MAX_SETS,
    MIN_TARGET,
    REASON_CAP_ACTIVE,
    REASON_EASY,
    REASON_HOLD,
    REASON_LOW_READINESS,
    REASON_MANAGEABLE,
    REASON_NO_TRAINING,
    REASON_NOT_REACHED,
    REASON_TRIVIAL,
    TRIVIAL_MAX_RPE,
    TRIVIAL_MAX_SETS,
    Category,
    as_category,
)
from .metrics import effective_rpe, training_sets
from .models import DailyAdjustment, LoggedSet


@dataclass(frozen=True)
class DaySummary:
    """Summary of one day's training (non-max-effort) sets."""

    has_training_sets: bool
    total_reps: int
    avg_rpe: float
    first_set_reps: int | None
    first_set_rpe: int | None
    sets_count: int
    top3_all_at_least_8: bool
    top3_all_at_most_6: bool
    two_sets_at_least_9: bool


def summarize_day(sets: Sequence[LoggedSet]) -> DaySummary:
    """
    Summarize one day's sets, ignoring max-effort tests.

    RPE averages only use sets that reported an RPE. The top-3 flags need
    at least three training sets; a missing RPE never counts as easy.
    """
    ordered = training_sets(sets)
    if not ordered:
        return DaySummary(
            has_training_sets=False,
            total_reps=0,
            avg_rpe=0.0,
            first_set_reps=None,
            first_set_rpe=None,
            sets_count=0,
            top3_all_at_least_8=False,
            top3_all_at_most_6=False,
            two_sets_at_least_9=False,
        )

    rated = [s.rpe for s in ordered if s.rpe is not None]
    top3 = ordered[:CAP_SET_COUNT]
    full_top3 = len(top3) == CAP_SET_COUNT

    return DaySummary(
        has_training_sets=True,
        total_reps=sum(s.reps for s in ordered),
        avg_rpe=sum(rated) / len(rated) if rated else 0.0,
        first_set_reps=ordered[0].reps,
        first_set_rpe=ordered[0].rpe,
        sets_count=len(ordered),
        top3_all_at_least_8=full_top3 and all(effective_rpe(s) >= CAP_RPE_MIN for s in top3),
        top3_all_at_most_6=full_top3
        and all(s.rpe is not None and s.rpe <= CAP_RELAX_RPE_MAX for s in top3),
        two_sets_at_least_9=sum(1 for s in ordered if effective_rpe(s) >= 9) >= 2,
    )


def _sets_to_reach(ordered: list[LoggedSet], target: int) -> tuple[list[LoggedSet], bool]:
    """
    Walk sets in order until the running total reaches target.

    Returns:
        Tuple (sets used, whether target was reached)
    """
    used: list[LoggedSet] = []
    total = 0
    for s in ordered:
        if total >= target:
            break
        used.append(s)
        total += s.reps
    return used, total >= target


def suggest_daily_target_delta(
    sets_yesterday: Sequence[LoggedSet],
    current_target: int,
    cap_relaxed: bool,
    category: Category | str,
    readiness_score: int | None = None,
) -> DailyAdjustment:
    """
    Suggest the change to tomorrow's target from yesterday's sets.

    Order of checks (first hit wins):
    1. Low readiness (<= 2): hold. Never decreases.
    2. No training sets (rest day or max-effort only): hold.
    3. Target not reached: hold.
    4. Fatigue cap active (first three sets RPE >= 8) and not relaxed: hold.
    5. Tiers, most generous first, with category step sizes:
       - trivially easy: 1 set, RPE <= 5
       - easy: <= 2 sets, max RPE <= 6
       - manageable: <= 3 sets, max RPE <= 7
    6. Otherwise hold, including a zero target reached with no sets.

    Args:
        sets_yesterday: All of yesterday's sets for one category
        current_target: Target that applied yesterday
        cap_relaxed: Result of is_cap_relaxed for the preceding days
        category: "push", "pull" or "legs"
        readiness_score: Today's readiness 1-5; None means 3

    Returns:
        DailyAdjustment with delta >= 0 and a reason
    """
    steps = CATEGORY_STEPS[as_category(category)]
    readiness = readiness_score if readiness_score is not None else DEFAULT_READINESS

    if readiness <= LOW_READINESS_MAX:
        return DailyAdjustment(delta=0, reason=REASON_LOW_READINESS)

    ordered = training_sets(sets_yesterday)
    if not ordered:
        return DailyAdjustment(delta=0, reason=REASON_NO_TRAINING)

    used, reached = _sets_to_reach(ordered, current_target)
    if not reached:
        return DailyAdjustment(delta=0, reason=REASON_NOT_REACHED)

    cap_active = summarize_day(ordered).top3_all_at_least_8
    if cap_active and not cap_relaxed:
        return DailyAdjustment(delta=0, reason=REASON_CAP_ACTIVE)

    sets_used = len(used)
    # A target of 0 is reached before any set; no tier applies
    if sets_used == 0:
        return DailyAdjustment(delta=0, reason=REASON_HOLD)
    max_rpe_used = max(effective_rpe(s) for s in used)

    if sets_used <= TRIVIAL_MAX_SETS and max_rpe_used <= TRIVIAL_MAX_RPE:
        return DailyAdjustment(delta=steps.trivial, reason=REASON_TRIVIAL)
    if sets_used <= EASY_MAX_SETS and max_rpe_used <= EASY_MAX_RPE:
        return DailyAdjustment(delta=steps.easy, reason=REASON_EASY)
    if sets_used <= MANAGEABLE_MAX_SETS and max_rpe_used <= MANAGEABLE_MAX_RPE:
        return DailyAdjustment(delta=steps.manageable, reason=REASON_MANAGEABLE)

    return DailyAdjustment(delta=0, reason=REASON_HOLD)


def is_cap_relaxed(
    sets_yesterday: Sequence[LoggedSet],
    sets_day_minus_2: Sequence[LoggedSet] | None = None,
) -> bool:
    """
    Whether the fatigue cap is lifted.

    True if yesterday, or failing that the day before, opened with three
    training sets all at RPE <= 6. Nothing older than two days is consulted.
    """
    if summarize_day(sets_yesterday).top3_all_at_most_6:
        return True
    if sets_day_minus_2:
        return summarize_day(sets_day_minus_2).top3_all_at_most_6
    return False


def apply_daily_adjustment(current_target: int, adjustment: DailyAdjustment) -> int:
    """Next target after applying an adjustment (never below 1)."""
    return max(MIN_TARGET, current_target + adjustment.delta)
