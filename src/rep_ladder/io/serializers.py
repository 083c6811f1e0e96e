"""
JSON serialization for training data models.

Handles conversion between dataclasses and JSON-compatible dicts, and
the field validators shared with the CLI.
"""

import json
import re
from datetime import date, datetime
from typing import Any

from ..core.config import RPE_MAX, RPE_MIN, Category, as_category
from ..core.models import DailyTarget, LoggedSet, Movement


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> date:
    """
    Parse an ISO date string.

    Args:
        date_str: Date string to validate

    Returns:
        Parsed date

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e


def validate_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp (YYYY-MM-DDTHH:MM[:SS])."""
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timestamp: {value!r}") from e


def validate_category(value: str) -> Category:
    """
    Validate a movement category.

    Raises:
        ValidationError: If category is unknown
    """
    try:
        return as_category(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def validate_rpe(value: Any) -> int | None:
    """Validate an optional RPE (1-10)."""
    if value is None:
        return None
    try:
        rpe = int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid rpe: {value!r}") from e
    if not RPE_MIN <= rpe <= RPE_MAX:
        raise ValidationError(f"rpe must be between {RPE_MIN} and {RPE_MAX}, got {rpe}")
    return rpe


def validate_readiness(value: int | None) -> int | None:
    """Validate an optional readiness score (1-5)."""
    if value is None:
        return None
    if not 1 <= value <= 5:
        raise ValidationError(f"readiness must be between 1 and 5, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def logged_set_to_dict(s: LoggedSet) -> dict[str, Any]:
    """
    Convert LoggedSet to JSON-compatible dict.

    ``rpe`` is omitted for max-effort sets that did not report one.
    """
    d: dict[str, Any] = {
        "category": s.category.value if s.category is not None else None,
        "exercise_id": s.exercise_id,
        "logged_at": s.logged_at.isoformat(timespec="seconds"),
        "set_number": s.set_number,
        "reps": s.reps,
    }
    if s.rpe is not None:
        d["rpe"] = s.rpe
    if s.is_max_effort:
        d["is_max_effort"] = True
    return d


def dict_to_logged_set(data: dict[str, Any]) -> LoggedSet:
    """
    Convert dict to LoggedSet.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        reps = int(data["reps"])
        set_number = int(data["set_number"])
        logged_at = validate_timestamp(data["logged_at"])
    except KeyError as e:
        raise ValidationError(f"Missing field in set record: {e}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set record: {e}") from e

    validate_positive(reps, "reps")
    validate_positive(set_number, "set_number")
    category = data.get("category")

    return LoggedSet(
        reps=reps,
        rpe=validate_rpe(data.get("rpe")),
        set_number=set_number,
        logged_at=logged_at,
        is_max_effort=bool(data.get("is_max_effort", False)),
        category=validate_category(category) if category is not None else None,
        exercise_id=data.get("exercise_id"),
    )


def daily_target_to_dict(entry: DailyTarget, category: Category) -> dict[str, Any]:
    """Convert a ledger entry (with its category) to a JSON-compatible dict."""
    return {
        "category": category.value,
        "date": entry.date.isoformat(),
        "target": entry.target,
        "source": entry.source,
    }


def dict_to_daily_target(data: dict[str, Any]) -> tuple[Category, DailyTarget]:
    """
    Convert dict to (category, DailyTarget).

    Raises:
        ValidationError: If data is invalid
    """
    try:
        category = validate_category(data["category"])
        entry_date = validate_date(data["date"])
        target = int(data["target"])
    except KeyError as e:
        raise ValidationError(f"Missing field in target record: {e}") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid target record: {e}") from e

    validate_non_negative(target, "target")
    source = data.get("source", "manual")
    if source not in ("initial", "daily", "weekly", "manual"):
        raise ValidationError(f"Invalid target source: {source!r}")

    return category, DailyTarget(date=entry_date, target=target, source=source)


def movement_to_dict(m: Movement) -> dict[str, Any]:
    """Convert Movement to JSON-compatible dict."""
    return {
        "category": m.category.value,
        "exercise_id": m.exercise_id,
        "max_effort_reps": m.max_effort_reps,
        "max_effort_date": m.max_effort_date.isoformat() if m.max_effort_date else None,
        "rotation_order": m.rotation_order,
        "last_used_date": m.last_used_date.isoformat() if m.last_used_date else None,
    }


def dict_to_movement(data: dict[str, Any]) -> Movement:
    """
    Convert dict to Movement.

    Raises:
        ValidationError: If data is invalid
    """
    if not data.get("exercise_id"):
        raise ValidationError("Movement record is missing exercise_id")

    max_effort = data.get("max_effort_reps")
    if max_effort is not None:
        validate_non_negative(max_effort, "max_effort_reps")
    me_date = data.get("max_effort_date")
    last_used = data.get("last_used_date")

    return Movement(
        category=validate_category(data.get("category", "")),
        exercise_id=str(data["exercise_id"]),
        max_effort_reps=int(max_effort) if max_effort is not None else None,
        max_effort_date=validate_date(me_date) if me_date else None,
        rotation_order=int(data.get("rotation_order", 1)),
        last_used_date=validate_date(last_used) if last_used else None,
    )


def to_json_line(data: dict[str, Any]) -> str:
    """Serialize a record to a single compact JSON line."""
    return json.dumps(data, separators=(",", ":"))

