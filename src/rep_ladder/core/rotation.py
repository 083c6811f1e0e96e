"""Exercise rotation within a category."""

from datetime import date
from typing import Sequence

from .models import Movement


def next_exercise_for_category(movements: Sequence[Movement]) -> Movement | None:
    """
    Pick the movement to train next among a category's active exercises.

    A single exercise is always chosen. Otherwise exercises never used come
    first (by rotation_order), then the one used longest ago.
    """
    if not movements:
        return None
    if len(movements) == 1:
        return movements[0]

    def key(m: Movement) -> tuple[int, date, int]:
        if m.last_used_date is None:
            return (0, date.min, m.rotation_order)
        return (1, m.last_used_date, m.rotation_order)

    return min(movements, key=key)
