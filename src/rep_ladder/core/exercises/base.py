"""
Base type for the exercise catalog.

ExerciseVariation is one named variation in a category's difficulty
ladder. Standard variations are canonical, unscaled movements; the rest
are assistance/progression variants that can auto-progress.
"""

from dataclasses import dataclass, field

from ..config import Category


@dataclass(frozen=True)
class ExerciseVariation:
    """One rung of a category's difficulty ladder."""

    id: str                  # e.g. "knee-pushups"
    name: str                # e.g. "Knee Push-ups"
    difficulty: int          # ordinal rank within the category (1 = easiest)
    is_standard: bool        # False = scaled/assistance variant
    category: Category
    cues: tuple[str, ...] = field(default=(), compare=False)  # form cues for display
