"""
Exercise catalog registry.

Holds one difficulty ladder per category, loaded from the bundled YAML
files at import time. If a ladder cannot be loaded a RuntimeError is
raised, since the engine cannot auto-progress without a catalog.

User overrides: place matching files in ``~/.rep-ladder/exercises/``.
"""

from ..config import ALL_CATEGORIES, Category, as_category
from .base import ExerciseVariation


def _build_catalog() -> dict[Category, list[ExerciseVariation]]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    missing = [c.value for c in ALL_CATEGORIES if not loaded or c not in loaded]
    if missing:
        raise RuntimeError(
            "rep-ladder: no exercise catalog could be loaded for "
            f"{', '.join(missing)}. Check that src/rep_ladder/exercises/*.yaml "
            "files are present and valid."
        )
    return loaded  # type: ignore[return-value]


EXERCISE_CATALOG: dict[Category, list[ExerciseVariation]] = _build_catalog()


def get_catalog(category: Category | str) -> list[ExerciseVariation]:
    """Return the category's variations ordered by difficulty (easiest first)."""
    return list(EXERCISE_CATALOG[as_category(category)])


def _index_of(ladder: list[ExerciseVariation], exercise_id: str) -> int:
    for i, v in enumerate(ladder):
        if v.id == exercise_id:
            return i
    return -1


def get_variation(category: Category | str, exercise_id: str) -> ExerciseVariation:
    """
    Return the variation with the given id in a category.

    Raises:
        ValueError: If the id is not in the category's ladder
    """
    ladder = get_catalog(category)
    idx = _index_of(ladder, exercise_id)
    if idx == -1:
        valid = ", ".join(v.id for v in ladder)
        raise ValueError(
            f"Unknown {as_category(category).value} exercise '{exercise_id}'. Valid IDs: {valid}"
        )
    return ladder[idx]


def find_variation(exercise_id: str) -> ExerciseVariation | None:
    """Look up a variation by id across all categories."""
    for ladder in EXERCISE_CATALOG.values():
        idx = _index_of(ladder, exercise_id)
        if idx != -1:
            return ladder[idx]
    return None


def next_harder_variation(category: Category | str, current_id: str) -> ExerciseVariation | None:
    """Next variation up the ladder, or None at the top or for an unknown id."""
    ladder = get_catalog(category)
    idx = _index_of(ladder, current_id)
    if idx == -1 or idx == len(ladder) - 1:
        return None
    return ladder[idx + 1]


def previous_easier_variation(category: Category | str, current_id: str) -> ExerciseVariation | None:
    """Next variation down the ladder, or None at the bottom or for an unknown id."""
    ladder = get_catalog(category)
    idx = _index_of(ladder, current_id)
    if idx <= 0:
        return None
    return ladder[idx - 1]
