"""
Data models for rep-ladder.

Core dataclasses for logged sets, the target ledger, movements, and the
value results returned by the progression engine. Inputs validate
themselves on construction; engine results are frozen.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from .config import RPE_MAX, RPE_MIN, Category, as_category

TargetSource = Literal["initial", "daily", "weekly", "manual"]


@dataclass
class LoggedSet:
    """
    One completed set of an exercise.

    ``rpe`` may be None for max-effort tests (or when not reported).
    ``set_number`` is the 1-based ordinal within the owning training day.
    """

    reps: int
    rpe: int | None
    set_number: int
    logged_at: datetime
    is_max_effort: bool = False
    category: Category | None = None
    exercise_id: str | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 1:
            raise ValueError("reps must be at least 1")
        if self.set_number < 1:
            raise ValueError("set_number must be >= 1")
        if self.rpe is not None and not (RPE_MIN <= self.rpe <= RPE_MAX):
            raise ValueError(f"rpe must be between {RPE_MIN} and {RPE_MAX}, got {self.rpe}")
        if self.category is not None:
            self.category = as_category(self.category)

    @property
    def day(self) -> date:
        """Calendar day (of the local timestamp) this set belongs to."""
        return self.logged_at.date()


@dataclass(frozen=True)
class DailyTarget:
    """
    One entry of the append-only target ledger for a movement.

    The effective target for a date is the latest entry with date <= that day.
    """

    date: date
    target: int
    source: TargetSource = "manual"

    def __post_init__(self) -> None:
        if self.target < 0:
            raise ValueError("target must be non-negative")
        if self.source not in ("initial", "daily", "weekly", "manual"):
            raise ValueError(f"Invalid target source: {self.source}")


@dataclass
class Movement:
    """
    A user's configured exercise for one category.

    The category never changes once the movement exists; the exercise and
    the max-effort benchmark move with each new test or auto-progression.
    """

    category: Category
    exercise_id: str
    max_effort_reps: int | None = None
    max_effort_date: date | None = None
    rotation_order: int = 1
    last_used_date: date | None = None

    def __post_init__(self) -> None:
        """Validate movement data."""
        self.category = as_category(self.category)
        if not self.exercise_id:
            raise ValueError("exercise_id must be a non-empty string")
        if self.max_effort_reps is not None and self.max_effort_reps < 0:
            raise ValueError("max_effort_reps must be non-negative")
        if self.rotation_order < 0:
            raise ValueError("rotation_order must be non-negative")


@dataclass(frozen=True)
class DailyAdjustment:
    """Change to apply to the next day's target, with a short reason."""

    delta: int
    reason: str


@dataclass(frozen=True)
class RecoveryScoreBreakdown:
    """Weekly recovery assessment: four sub-scores summing to a 0-100 total."""

    first_set_performance: int
    rpe_efficiency: int
    target_achievement: int
    consistency: int

    @property
    def total(self) -> int:
        return (
            self.first_set_performance
            + self.rpe_efficiency
            + self.target_achievement
            + self.consistency
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "first_set_performance": self.first_set_performance,
            "rpe_efficiency": self.rpe_efficiency,
            "target_achievement": self.target_achievement,
            "consistency": self.consistency,
            "total": self.total,
        }


@dataclass(frozen=True)
class VolumeAdjustment:
    """Weekly change: fractional percentage and the resulting target."""

    percentage: float
    new_target: int


@dataclass(frozen=True)
class DailyPrescription:
    """How many sets at what RPE today, and the reps each set should aim for."""

    sets: int
    target_rpe: int
    reps_per_set: int

    @property
    def total_reps(self) -> int:
        return self.sets * self.reps_per_set


@dataclass
class WeeklyData:
    """
    Input to the weekly recovery scorer.

    ``sets`` must be a single category's sets for a single 7-day window.
    """

    sets: list[LoggedSet] = field(default_factory=list)
    daily_target: int = 0
    max_effort_reps: int = 0
