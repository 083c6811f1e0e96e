"""
Exercise catalog for rep-ladder.

Each category (push, pull, legs) is a ladder of ExerciseVariation objects
ordered by difficulty.
"""

from .base import ExerciseVariation
from .registry import (
    EXERCISE_CATALOG,
    find_variation,
    get_catalog,
    get_variation,
    next_harder_variation,
    previous_easier_variation,
)

__all__ = [
    "ExerciseVariation",
    "EXERCISE_CATALOG",
    "find_variation",
    "get_catalog",
    "get_variation",
    "next_harder_variation",
    "previous_easier_variation",
]
