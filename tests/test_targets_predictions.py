"""
Tests for the target ledger, set predictions and exercise rotation.
"""

from datetime import date, datetime, time

import pytest

from rep_ladder.core.models import DailyTarget, LoggedSet, Movement
from rep_ladder.core.predictions import (
    average_reps_per_set,
    estimate_sets_to_target,
    predict_reps,
    previous_day_first_set,
    suggest_rpe,
)
from rep_ladder.core.rotation import next_exercise_for_category
from rep_ladder.core.targets import append_target, effective_target, effective_target_entry


def _set(reps: int, set_number: int, day: date, rpe: int | None = 7) -> LoggedSet:
    return LoggedSet(
        reps=reps,
        rpe=rpe,
        set_number=set_number,
        logged_at=datetime.combine(day, time(9, set_number)),
    )


LEDGER = [
    DailyTarget(date(2026, 3, 1), 20, "initial"),
    DailyTarget(date(2026, 3, 5), 23, "daily"),
]


# ===========================================================================
# targets.py
# ===========================================================================

class TestEffectiveTarget:
    def test_before_first_entry(self):
        assert effective_target(LEDGER, date(2026, 2, 28)) is None

    def test_on_entry_date(self):
        assert effective_target(LEDGER, date(2026, 3, 1)) == 20
        assert effective_target(LEDGER, date(2026, 3, 5)) == 23

    def test_between_entries(self):
        assert effective_target(LEDGER, date(2026, 3, 4)) == 20

    def test_after_last_entry(self):
        assert effective_target(LEDGER, date(2026, 4, 1)) == 23

    def test_order_independent(self):
        assert effective_target(list(reversed(LEDGER)), date(2026, 3, 6)) == 23

    def test_entry_lookup(self):
        entry = effective_target_entry(LEDGER, date(2026, 3, 2))
        assert entry is not None and entry.source == "initial"

    def test_empty(self):
        assert effective_target([], date(2026, 3, 1)) is None


class TestAppendTarget:
    def test_adds_in_date_order(self):
        ledger = append_target(LEDGER, DailyTarget(date(2026, 3, 3), 21, "daily"))
        assert [e.target for e in ledger] == [20, 21, 23]

    def test_same_date_replaces(self):
        ledger = append_target(LEDGER, DailyTarget(date(2026, 3, 5), 30, "manual"))
        assert len(ledger) == 2
        assert effective_target(ledger, date(2026, 3, 5)) == 30

    def test_earlier_dates_unaffected(self):
        ledger = append_target(LEDGER, DailyTarget(date(2026, 3, 10), 40, "weekly"))
        assert effective_target(ledger, date(2026, 3, 9)) == 23

    def test_input_not_modified(self):
        original = list(LEDGER)
        append_target(LEDGER, DailyTarget(date(2026, 3, 5), 30))
        assert LEDGER == original

    def test_negative_target_rejected(self):
        with pytest.raises(ValueError):
            DailyTarget(date(2026, 3, 5), -1)


# ===========================================================================
# predictions.py
# ===========================================================================

class TestPredictReps:
    def test_first_set_repeats_previous_day(self):
        assert predict_reps([], 20, previous_day_first_set=15) == 15

    def test_first_set_from_max_effort(self):
        assert predict_reps([], 20) == 16

    def test_later_set_drops_three(self):
        today = [_set(12, 1, date(2026, 3, 2))]
        assert predict_reps(today, 20, 15) == 9

    def test_never_below_one(self):
        today = [_set(10, 1, date(2026, 3, 2)), _set(2, 2, date(2026, 3, 2))]
        assert predict_reps(today, 20) == 1


class TestPreviousDayFirstSet:
    SETS = [
        _set(14, 1, date(2026, 3, 1)),
        _set(9, 2, date(2026, 3, 1)),
        _set(16, 1, date(2026, 3, 2)),
    ]

    def test_latest_earlier_day(self):
        assert previous_day_first_set(self.SETS, date(2026, 3, 3)) == 16

    def test_ignores_today(self):
        assert previous_day_first_set(self.SETS, date(2026, 3, 2)) == 14

    def test_no_history(self):
        assert previous_day_first_set(self.SETS, date(2026, 3, 1)) is None


class TestSuggestRpe:
    @pytest.mark.parametrize(
        "current,target,set_number,expected",
        [
            (25, 20, 1, 8),
            (25, 20, 3, 9),
            (0, 20, 1, 7),
            (17, 20, 2, 8),
            (10, 20, 2, 7),
        ],
    )
    def test_values(self, current, target, set_number, expected):
        assert suggest_rpe(current, target, set_number) == expected


class TestSetEstimates:
    def test_sets_to_target(self):
        assert estimate_sets_to_target(12, 30, 6) == 3

    def test_already_reached(self):
        assert estimate_sets_to_target(30, 30) == 0

    def test_zero_average(self):
        assert estimate_sets_to_target(7, 30, 0) == 23

    def test_average_reps_per_set(self):
        day = date(2026, 3, 2)
        assert average_reps_per_set([]) == 10
        assert average_reps_per_set([_set(12, 1, day), _set(8, 2, day)]) == 10
        assert average_reps_per_set([_set(12, 1, day), _set(9, 2, day), _set(7, 3, day)]) == 9


# ===========================================================================
# rotation.py
# ===========================================================================

class TestRotation:
    def test_no_movements(self):
        assert next_exercise_for_category([]) is None

    def test_single_movement(self):
        m = Movement("push", "knee-pushups", last_used_date=date(2026, 3, 1))
        assert next_exercise_for_category([m]) is m

    def test_unused_first(self):
        used = Movement("pull", "incline-rows", rotation_order=1, last_used_date=date(2026, 3, 1))
        fresh = Movement("pull", "australian-pullups", rotation_order=2)
        assert next_exercise_for_category([used, fresh]) is fresh

    def test_least_recently_used(self):
        a = Movement("legs", "chair-squat", rotation_order=1, last_used_date=date(2026, 3, 2))
        b = Movement("legs", "horse-stance", rotation_order=2, last_used_date=date(2026, 3, 1))
        assert next_exercise_for_category([a, b]) is b

    def test_tie_breaks_on_rotation_order(self):
        a = Movement("legs", "chair-squat", rotation_order=2)
        b = Movement("legs", "horse-stance", rotation_order=1)
        assert next_exercise_for_category([a, b]) is b
