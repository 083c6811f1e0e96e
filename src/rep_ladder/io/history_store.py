"""
File-based storage for movements, logged sets and the target ledger.

Layout of a data directory:
    movements.json   list of configured movements (pretty-printed JSON)
    sets.jsonl       one logged set per line
    targets.jsonl    one target ledger entry per line
"""

import json
from datetime import date, datetime
from pathlib import Path

from ..core.config import Category, as_category
from ..core.models import DailyTarget, LoggedSet, Movement
from ..core.targets import append_target
from .serializers import (
    ValidationError,
    daily_target_to_dict,
    dict_to_daily_target,
    dict_to_logged_set,
    dict_to_movement,
    logged_set_to_dict,
    movement_to_dict,
    to_json_line,
)


class TrainingStore:
    """
    Manages one user's training data in a directory.

    Sets and targets are kept in JSONL files and rewritten in full when a
    record is replaced or deleted. Movements live in a small JSON file.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the data files
        """
        self.data_dir = Path(data_dir)
        self.movements_path = self.data_dir / "movements.json"
        self.sets_path = self.data_dir / "sets.jsonl"
        self.targets_path = self.data_dir / "targets.jsonl"

    def exists(self) -> bool:
        """Check if the store has been initialized."""
        return self.movements_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty files if missing.

        Existing files are left untouched.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not self.movements_path.exists():
            self.movements_path.write_text("[]\n")
        for path in (self.sets_path, self.targets_path):
            if not path.exists():
                path.touch()

    def _require_init(self) -> None:
        if not self.exists():
            raise FileNotFoundError(
                f"No training data in {self.data_dir}. Run 'init' first."
            )

    # ------------------------------------------------------------------
    # Movements
    # ------------------------------------------------------------------

    def load_movements(self, category: Category | str | None = None) -> list[Movement]:
        """
        Load configured movements, optionally for one category.

        Returns:
            Movements sorted by (category, rotation_order)

        Raises:
            FileNotFoundError: If the store is not initialized
            ValidationError: If the file is malformed
        """
        self._require_init()
        try:
            with open(self.movements_path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {self.movements_path}: {e}") from e
        if not isinstance(data, list):
            raise ValidationError(f"{self.movements_path} must contain a JSON list")

        try:
            movements = [dict_to_movement(item) for item in data]
        except (ValueError, TypeError, AttributeError) as e:
            raise ValidationError(f"Invalid movement in {self.movements_path}: {e}") from e
        if category is not None:
            cat = as_category(category)
            movements = [m for m in movements if m.category == cat]
        movements.sort(key=lambda m: (m.category.value, m.rotation_order))
        return movements

    def save_movements(self, movements: list[Movement]) -> None:
        """Overwrite movements.json with the given movements."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.movements_path, "w") as f:
            json.dump([movement_to_dict(m) for m in movements], f, indent=2)
            f.write("\n")

    def get_movement(self, category: Category | str, exercise_id: str) -> Movement | None:
        """Find the movement for (category, exercise_id), or None."""
        for m in self.load_movements(category):
            if m.exercise_id == exercise_id:
                return m
        return None

    def upsert_movement(self, movement: Movement, replaces: str | None = None) -> None:
        """
        Insert or replace a movement.

        Args:
            movement: Movement to store
            replaces: Exercise id of the entry being replaced, when the
                exercise itself changed (auto-progression)
        """
        old_id = replaces or movement.exercise_id
        movements = self.load_movements()
        for i, m in enumerate(movements):
            if m.category == movement.category and m.exercise_id == old_id:
                movements[i] = movement
                break
        else:
            movements.append(movement)
        self.save_movements(movements)

    def remove_movement(self, category: Category | str, exercise_id: str) -> Movement:
        """
        Drop a movement from a category's rotation.

        Returns:
            The removed movement

        Raises:
            KeyError: If no such movement is configured
        """
        cat = as_category(category)
        movements = self.load_movements()
        for i, m in enumerate(movements):
            if m.category == cat and m.exercise_id == exercise_id:
                removed = movements.pop(i)
                self.save_movements(movements)
                return removed
        raise KeyError(f"{exercise_id} is not configured for {cat}")

    # ------------------------------------------------------------------
    # Sets
    # ------------------------------------------------------------------

    def load_sets(self, category: Category | str | None = None) -> list[LoggedSet]:
        """
        Load logged sets, optionally for one category.

        Returns:
            Sets sorted by (timestamp, set_number)

        Raises:
            FileNotFoundError: If the store is not initialized
            ValidationError: If a line cannot be parsed
        """
        self._require_init()
        sets = self._read_jsonl(self.sets_path, dict_to_logged_set)
        if category is not None:
            cat = as_category(category)
            sets = [s for s in sets if s.category == cat]
        sets.sort(key=lambda s: (s.logged_at, s.set_number))
        return sets

    def sets_on(self, category: Category | str, day: date) -> list[LoggedSet]:
        """One category's sets for a calendar day, in set order."""
        sets = [s for s in self.load_sets(category) if s.day == day]
        return sorted(sets, key=lambda s: s.set_number)

    def append_set(
        self,
        category: Category | str,
        exercise_id: str,
        reps: int,
        rpe: int | None,
        logged_at: datetime,
        is_max_effort: bool = False,
    ) -> LoggedSet:
        """
        Log a set, numbering it after the category's other sets that day.

        Returns:
            The stored LoggedSet
        """
        cat = as_category(category)
        set_number = len(self.sets_on(cat, logged_at.date())) + 1
        logged = LoggedSet(
            reps=reps,
            rpe=rpe,
            set_number=set_number,
            logged_at=logged_at,
            is_max_effort=is_max_effort,
            category=cat,
            exercise_id=exercise_id,
        )
        with open(self.sets_path, "a") as f:
            f.write(to_json_line(logged_set_to_dict(logged)) + "\n")
        return logged

    def delete_set_at(self, category: Category | str, index: int) -> LoggedSet:
        """
        Delete the set at a 0-based index of the category's sorted sets.

        Remaining sets on the same day are renumbered to stay contiguous.

        Raises:
            IndexError: If index is out of range
        """
        cat = as_category(category)
        all_sets = self.load_sets()
        mine = [s for s in all_sets if s.category == cat]
        if index < 0 or index >= len(mine):
            raise IndexError(f"Set index {index} out of range (0-{len(mine) - 1})")

        removed = mine[index]
        remaining = [s for s in all_sets if s is not removed]
        same_day = sorted(
            (s for s in remaining if s.category == cat and s.day == removed.day),
            key=lambda s: s.set_number,
        )
        for number, s in enumerate(same_day, 1):
            s.set_number = number

        with open(self.sets_path, "w") as f:
            for s in remaining:
                f.write(to_json_line(logged_set_to_dict(s)) + "\n")
        return removed

    # ------------------------------------------------------------------
    # Target ledger
    # ------------------------------------------------------------------

    def _load_all_targets(self) -> list[tuple[Category, DailyTarget]]:
        self._require_init()
        return self._read_jsonl(self.targets_path, dict_to_daily_target)

    def load_targets(self, category: Category | str) -> list[DailyTarget]:
        """One category's target ledger, sorted by date."""
        cat = as_category(category)
        entries = [entry for c, entry in self._load_all_targets() if c == cat]
        entries.sort(key=lambda e: e.date)
        return entries

    def append_target(self, category: Category | str, entry: DailyTarget) -> None:
        """
        Add a ledger entry for a category.

        An entry already dated on the same day is replaced.
        """
        cat = as_category(category)
        all_entries = self._load_all_targets()
        others = [(c, e) for c, e in all_entries if c != cat]
        mine = append_target((e for c, e in all_entries if c == cat), entry)

        with open(self.targets_path, "w") as f:
            for c, e in others + [(cat, e) for e in mine]:
                f.write(to_json_line(daily_target_to_dict(e, c)) + "\n")

    # ------------------------------------------------------------------

    @staticmethod
    def _read_jsonl(path: Path, parse):
        records = []
        with open(path, "r") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(parse(json.loads(line)))
                except (json.JSONDecodeError, ValidationError, ValueError) as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {path}: {e}"
                    ) from e
        return records


def get_default_data_dir() -> Path:
    """Default data directory: ~/.rep-ladder"""
    return Path.home() / ".rep-ladder"
