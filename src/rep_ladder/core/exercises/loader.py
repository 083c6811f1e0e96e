"""
YAML → ExerciseVariation catalog loader.

Loads one difficulty ladder per category from the bundled
``src/rep_ladder/exercises/<category>.yaml`` files. Each file holds a
``category`` key and a ``variations`` list.

User overrides: place a file with the same name in
``~/.rep-ladder/exercises/``. Its variations are merged into the bundled
ladder by ``id``: matching ids have their fields overridden, new ids are
added. The merged ladder is re-sorted by difficulty.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    catalog = load_catalog_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..config import ALL_CATEGORIES, Category, as_category
from .base import ExerciseVariation

_REQUIRED_VARIATION_FIELDS: frozenset[str] = frozenset(
    {"id", "name", "difficulty", "is_standard"}
)


def variation_from_dict(d: dict, category: Category) -> ExerciseVariation:
    """Convert a raw dict (from YAML) to an ExerciseVariation.

    Raises ValueError if any required field is absent.
    """
    missing = _REQUIRED_VARIATION_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseVariation missing fields: {sorted(missing)}")
    return ExerciseVariation(
        id=str(d["id"]),
        name=str(d["name"]),
        difficulty=int(d["difficulty"]),
        is_standard=bool(d["is_standard"]),
        category=category,
        cues=tuple(str(c) for c in d.get("cues") or ()),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"rep-ladder: could not read {path} ({exc})", stacklevel=2)
        return {}


def _merge_by_id(base: list[dict], override: list[dict]) -> list[dict]:
    """Merge override variation dicts into base by id (non-destructive)."""
    merged: dict[str, dict] = {str(v.get("id")): dict(v) for v in base}
    for v in override:
        key = str(v.get("id"))
        merged[key] = {**merged.get(key, {}), **v}
    return list(merged.values())


def get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # loader.py lives at src/rep_ladder/core/exercises/loader.py
    candidate = Path(__file__).parent.parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def get_user_exercises_dir() -> Path | None:
    """Return ~/.rep-ladder/exercises/ if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".rep-ladder" / "exercises"
    return p if p.is_dir() else None


def load_ladder(
    category: Category,
    bundled_dir: Path | None,
    user_dir: Path | None = None,
) -> list[ExerciseVariation]:
    """
    Load one category's ladder, sorted by difficulty.

    Invalid entries are skipped with a warning.
    """
    raw: list[dict] = []
    if bundled_dir is not None:
        raw = list(_load_yaml_file(bundled_dir / f"{category.value}.yaml").get("variations") or [])
    if user_dir is not None:
        user_path = user_dir / f"{category.value}.yaml"
        if user_path.exists():
            user_raw = _load_yaml_file(user_path).get("variations") or []
            raw = _merge_by_id(raw, list(user_raw))

    ladder: list[ExerciseVariation] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            ladder.append(variation_from_dict(entry, category))
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"rep-ladder: skipping {category.value} variation {entry.get('id')!r}: {exc}",
                stacklevel=2,
            )
    ladder.sort(key=lambda v: v.difficulty)
    return ladder


def load_catalog_from_yaml(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> dict[Category, list[ExerciseVariation]] | None:
    """Return {category: ladder} from the bundled and user YAML files.

    Directories default to the bundled package data and
    ``~/.rep-ladder/exercises/``. Returns None (rather than raising) when
    no category could be loaded, so the registry decides how to fail.
    """
    if bundled_dir is None:
        bundled_dir = get_bundled_exercises_dir()
    if user_dir is None:
        user_dir = get_user_exercises_dir()
    if bundled_dir is None and user_dir is None:
        return None

    result: dict[Category, list[ExerciseVariation]] = {}
    for category in ALL_CATEGORIES:
        ladder = load_ladder(as_category(category), bundled_dir, user_dir)
        if ladder:
            result[category] = ladder
    return result if result else None
