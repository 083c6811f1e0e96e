"""
Policy constants for the volume-progression engine.

All thresholds and step sizes are centralized here. They are fixed policy,
not per-user settings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final


class Category(str, Enum):
    """Movement category a user trains daily."""

    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"

    def __str__(self) -> str:
        return self.value


ALL_CATEGORIES: Final[tuple[Category, ...]] = (Category.PUSH, Category.PULL, Category.LEGS)


def as_category(value: "Category | str") -> Category:
    """Normalise a category name or member to a Category."""
    if isinstance(value, Category):
        return value
    try:
        return Category(str(value).strip().lower())
    except ValueError as e:
        valid = ", ".join(c.value for c in ALL_CATEGORIES)
        raise ValueError(f"Unknown category '{value}'. Valid: {valid}") from e


# =============================================================================
# RPE / RIR
# =============================================================================

RPE_MIN: Final[int] = 1
RPE_MAX: Final[int] = 10
RIR_MAX: Final[int] = 9  # RIR = 10 - RPE, clipped to [0, 9]

# Missing RPE is read as a set taken to failure (0 reps in reserve)
MISSING_RPE_AS: Final[int] = 10

# =============================================================================
# INITIAL TARGET
# =============================================================================

INITIAL_TARGET_PERCENTAGE: Final[float] = 0.8  # daily target = 80% of max effort

# =============================================================================
# DAILY ADJUSTMENT POLICY
# =============================================================================

DEFAULT_READINESS: Final[int] = 3
LOW_READINESS_MAX: Final[int] = 2  # readiness <= this holds the target

CAP_SET_COUNT: Final[int] = 3  # first N training sets inspected by the cap
CAP_RPE_MIN: Final[int] = 8  # cap active when first N sets all >= this
CAP_RELAX_RPE_MAX: Final[int] = 6  # cap relaxed when first N sets all <= this

TRIVIAL_MAX_SETS: Final[int] = 1
TRIVIAL_MAX_RPE: Final[int] = 5
EASY_MAX_SETS: Final[int] = 2
EASY_MAX_RPE: Final[int] = 6
MANAGEABLE_MAX_SETS: Final[int] = 3
MANAGEABLE_MAX_RPE: Final[int] = 7

REASON_NO_TRAINING: Final[str] = "max-effort only or no training sets"
REASON_LOW_READINESS: Final[str] = "low readiness"
REASON_NOT_REACHED: Final[str] = "target not reached"
REASON_CAP_ACTIVE: Final[str] = "cap active (3xRPE>=8)"
REASON_TRIVIAL: Final[str] = "trivially easy"
REASON_EASY: Final[str] = "easy"
REASON_MANAGEABLE: Final[str] = "manageable"
REASON_HOLD: Final[str] = "fatiguing or many sets"
REASON_TARGET_SET: Final[str] = "target already set for the day"

# Ledger sources that fix a day's target; daily adjustment never overwrites them
PINNED_TARGET_SOURCES: Final[tuple[str, ...]] = ("initial", "weekly")


@dataclass(frozen=True)
class StepSizes:
    """Target increase for each daily tier of one category."""

    trivial: int
    easy: int
    manageable: int


CATEGORY_STEPS: Final[dict[Category, StepSizes]] = {
    Category.LEGS: StepSizes(trivial=5, easy=3, manageable=2),
    Category.PUSH: StepSizes(trivial=3, easy=2, manageable=1),
    Category.PULL: StepSizes(trivial=2, easy=1, manageable=1),
}

# =============================================================================
# WEEKLY RECOVERY SCORE
# =============================================================================

FIRST_SET_PERFORMANCE_MAX: Final[int] = 40
RPE_EFFICIENCY_MAX: Final[int] = 30
TARGET_ACHIEVEMENT_MAX: Final[int] = 20
CONSISTENCY_MAX: Final[int] = 10

# (min fraction of max effort, points), checked top-down
FIRST_SET_THRESHOLDS: Final[tuple[tuple[float, int], ...]] = (
    (0.85, 40),
    (0.75, 35),
    (0.65, 28),
    (0.55, 20),
    (0.45, 12),
)
FIRST_SET_FLOOR_POINTS: Final[int] = 5

OPTIMAL_RPE_MIN: Final[int] = 6
OPTIMAL_RPE_MAX: Final[int] = 8

RPE_EFFICIENCY_THRESHOLDS: Final[tuple[tuple[float, int], ...]] = (
    (0.9, 30),
    (0.8, 26),
    (0.7, 22),
    (0.6, 18),
    (0.5, 14),
    (0.4, 10),
)

TARGET_ACHIEVEMENT_THRESHOLDS: Final[tuple[tuple[float, int], ...]] = (
    (0.95, 20),
    (0.85, 18),
    (0.75, 16),
    (0.65, 14),
    (0.5, 11),
)

# Below the last threshold both fractional scores fall back to floor(pct * 20)
FRACTION_FALLBACK_SCALE: Final[int] = 20

# (min distinct training days, points)
CONSISTENCY_THRESHOLDS: Final[tuple[tuple[int, int], ...]] = (
    (6, 10),
    (5, 8),
    (4, 6),
    (3, 4),
    (2, 2),
    (1, 1),
)

DAYS_IN_WEEK: Final[int] = 7

# (min score, rating, description)
RECOVERY_RATINGS: Final[tuple[tuple[int, str, str], ...]] = (
    (85, "Excellent", "Outstanding recovery and performance!"),
    (70, "Very Good", "Great recovery, keep it up!"),
    (55, "Good", "Solid progress and recovery."),
    (40, "Fair", "Recovery is adequate, room for improvement."),
    (20, "Needs Improvement", "Focus on recovery and consistency."),
    (0, "Poor", "Prioritize recovery and reduce volume."),
)

# =============================================================================
# WEEKLY VOLUME ADJUSTMENT
# =============================================================================

# (min recovery score, fractional change), checked top-down
VOLUME_ADJUSTMENT_THRESHOLDS: Final[tuple[tuple[int, float], ...]] = (
    (85, 0.25),
    (70, 0.15),
    (55, 0.10),
    (40, 0.05),
    (20, 0.0),
)
DELOAD_ADJUSTMENT: Final[float] = -0.125
MIN_TARGET: Final[int] = 1

# =============================================================================
# AUTO-PROGRESSION
# =============================================================================

AUTO_PROGRESSION_THRESHOLD: Final[int] = 20  # max effort must exceed this

# =============================================================================
# PRESCRIPTION AND REP PREDICTION
# =============================================================================

# readiness -> (sets, target RPE); anything else falls back to READINESS_FALLBACK_PLAN
READINESS_PLANS: Final[dict[int, tuple[int, int]]] = {
    5: (3, 8),
    4: (2, 8),
    3: (1, 8),
    2: (1, 6),
    1: (1, 4),
}
READINESS_FALLBACK_PLAN: Final[tuple[int, int]] = (1, 4)

FIRST_SET_PERCENTAGE: Final[float] = 0.8  # first set of a fresh day
SET_DECREMENT: Final[int] = 3  # each later set predicted 3 reps lower
DEFAULT_REPS_PER_SET: Final[int] = 10
