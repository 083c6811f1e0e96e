"""
Daily target ledger lookups.

A movement's targets form an append-only, date-keyed history. The
effective target on a day is the latest entry dated on or before it. A
new entry for an existing date supersedes that date's entry only.
"""

from datetime import date
from typing import Iterable

from .models import DailyTarget


def effective_target_entry(history: Iterable[DailyTarget], query_date: date) -> DailyTarget | None:
    """Latest ledger entry with date <= query_date, or None."""
    best: DailyTarget | None = None
    for entry in history:
        if entry.date <= query_date and (best is None or entry.date >= best.date):
            best = entry
    return best


def effective_target(history: Iterable[DailyTarget], query_date: date) -> int | None:
    """
    Target in effect on query_date.

    Args:
        history: Ledger entries for one movement (any order)
        query_date: Day to resolve

    Returns:
        Target reps, or None if no entry applies yet
    """
    entry = effective_target_entry(history, query_date)
    return entry.target if entry is not None else None


def append_target(history: Iterable[DailyTarget], entry: DailyTarget) -> list[DailyTarget]:
    """
    Return a new ledger with entry added.

    An existing entry on the same date is replaced; the result is sorted
    by date. The input is not modified.
    """
    kept = [e for e in history if e.date != entry.date]
    kept.append(entry)
    kept.sort(key=lambda e: e.date)
    return kept
