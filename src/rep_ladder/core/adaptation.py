"""
Adaptation rules: weekly volume adjustment and exercise auto-progression.

The weekly adjuster maps a recovery total to a percentage change of the
daily target. Auto-progression swaps a scaled (non-standard) exercise for
the next harder variation once a max-effort test passes 20 reps.
"""

import math

from .config import (
    AUTO_PROGRESSION_THRESHOLD,
    DELOAD_ADJUSTMENT,
    MIN_TARGET,
    VOLUME_ADJUSTMENT_THRESHOLDS,
    Category,
)
from .exercises.base import ExerciseVariation
from .exercises.registry import next_harder_variation
from .models import VolumeAdjustment


def volume_percentage_for_score(total: int) -> float:
    """
    Percentage change for a recovery total.

    >=85: +25%, >=70: +15%, >=55: +10%, >=40: +5%, >=20: 0%, else -12.5%
    """
    for minimum, percentage in VOLUME_ADJUSTMENT_THRESHOLDS:
        if total >= minimum:
            return percentage
    return DELOAD_ADJUSTMENT


def suggest_volume_adjustment(total: int, current_target: int) -> VolumeAdjustment:
    """
    Suggest next week's target from the recovery total.

    new_target = max(1, floor(current_target * (1 + percentage)))

    Args:
        total: Weekly recovery score (0-100)
        current_target: Daily target in effect this week

    Returns:
        VolumeAdjustment with the percentage and the new target
    """
    percentage = volume_percentage_for_score(total)
    new_target = max(MIN_TARGET, math.floor(current_target * (1 + percentage)))
    return VolumeAdjustment(percentage=percentage, new_target=new_target)


def volume_adjustment_description(percentage: float) -> str:
    """Short description of a weekly volume change."""
    if percentage >= 0.25:
        return "Increase by 25% - Excellent recovery!"
    if percentage >= 0.15:
        return "Increase by 15% - Great progress!"
    if percentage >= 0.1:
        return "Increase by 10% - Good work!"
    if percentage >= 0.05:
        return "Increase by 5% - Steady gains!"
    if percentage == 0:
        return "Maintain current volume"
    if percentage <= DELOAD_ADJUSTMENT:
        return "Decrease by 12.5% - Focus on recovery"
    return "Adjust volume"


def should_auto_progress(
    exercise: ExerciseVariation,
    last_max_effort: int,
    category: Category | str,
) -> ExerciseVariation | None:
    """
    Decide whether to move on to a harder variation after a max-effort test.

    Standard movements never auto-swap, and the test must exceed 20 reps.

    Args:
        exercise: Variation currently trained
        last_max_effort: Reps achieved in the latest max-effort test
        category: Category the exercise belongs to

    Returns:
        Next harder variation in the category, or None
    """
    if exercise.is_standard:
        return None
    if last_max_effort <= AUTO_PROGRESSION_THRESHOLD:
        return None
    return next_harder_variation(category, exercise.id)
