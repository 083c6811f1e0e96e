"""
Smoke tests for the rep-ladder CLI.

Each test works in its own temporary data directory and passes explicit
dates so results do not depend on the current day.
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rep_ladder.cli.main import app
from rep_ladder.io.history_store import TrainingStore


runner = CliRunner()


@pytest.fixture
def data_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "data"


def _invoke(data_dir: Path, *args: str):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


def _init(data_dir: Path, category="push", exercise="knee-pushups", max_effort="25"):
    result = _invoke(
        data_dir, "init",
        "--category", category,
        "--exercise", exercise,
        "--max-effort", max_effort,
        "--date", "2026-03-01",
    )
    assert result.exit_code == 0, result.output
    return result


def _log(data_dir: Path, reps: str, rpe: str | None, date: str, clock: str, *extra: str):
    args = ["log-set", "--category", "push", "--reps", reps, "--date", date, "--time", clock]
    if rpe is not None:
        args += ["--rpe", rpe]
    result = _invoke(data_dir, *args, *extra)
    assert result.exit_code == 0, result.output
    return result


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "log-set" in result.output

    def test_catalog_json(self):
        result = runner.invoke(app, ["catalog", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert set(data) == {"push", "pull", "legs"}
        assert data["push"][0]["id"] == "wall-pushups"

    def test_catalog_table(self):
        result = runner.invoke(app, ["catalog", "--category", "legs"])
        assert result.exit_code == 0
        assert "chair-squat" in result.output

    def test_init_creates_store_and_target(self, data_dir):
        _init(data_dir)
        store = TrainingStore(data_dir)
        assert store.exists()
        movements = store.load_movements("push")
        assert movements[0].exercise_id == "knee-pushups"
        assert movements[0].max_effort_reps == 25
        ledger = store.load_targets("push")
        assert [(e.target, e.source) for e in ledger] == [(20, "initial")]

    def test_second_exercise_joins_rotation(self, data_dir):
        _init(data_dir)
        _init(data_dir, exercise="incline-pushups", max_effort="30")
        movements = TrainingStore(data_dir).load_movements("push")
        assert [m.rotation_order for m in movements] == [1, 2]
        assert len(TrainingStore(data_dir).load_targets("push")) == 1

    def test_init_unknown_exercise(self, data_dir):
        result = _invoke(
            data_dir, "init", "--category", "push",
            "--exercise", "planche", "--max-effort", "5",
        )
        assert result.exit_code == 1

    def test_init_unknown_category(self, data_dir):
        result = _invoke(
            data_dir, "init", "--category", "core",
            "--exercise", "plank", "--max-effort", "5",
        )
        assert result.exit_code == 1

    def test_log_set_requires_init(self, data_dir):
        result = _invoke(data_dir, "log-set", "--category", "push", "--reps", "10", "--rpe", "7")
        assert result.exit_code == 1

    def test_log_set_rejects_bad_rpe(self, data_dir):
        _init(data_dir)
        result = _invoke(
            data_dir, "log-set", "--category", "push", "--reps", "10",
            "--rpe", "12", "--date", "2026-03-02",
        )
        assert result.exit_code == 1

    def test_log_set_numbers_sets(self, data_dir):
        _init(data_dir)
        _log(data_dir, "12", "7", "2026-03-02", "08:00")
        _log(data_dir, "9", "8", "2026-03-02", "12:00")
        sets = TrainingStore(data_dir).load_sets("push")
        assert [(s.reps, s.set_number) for s in sets] == [(12, 1), (9, 2)]
        assert sets[0].exercise_id == "knee-pushups"

    def test_max_effort_auto_progresses(self, data_dir):
        _init(data_dir, max_effort="15")
        _log(data_dir, "21", None, "2026-03-02", "08:00", "--max-effort")
        movement = TrainingStore(data_dir).load_movements("push")[0]
        assert movement.exercise_id == "regular-pushups"
        assert movement.max_effort_reps == 21
        ledger = TrainingStore(data_dir).load_targets("push")
        assert (ledger[-1].target, ledger[-1].source) == (16, "initial")

    def test_progression_into_configured_exercise_retires_old_one(self, data_dir):
        _init(data_dir, max_effort="15")
        _init(data_dir, exercise="regular-pushups", max_effort="10")
        _log(data_dir, "25", None, "2026-03-02", "08:00", "--max-effort", "--exercise", "knee-pushups")
        movements = TrainingStore(data_dir).load_movements("push")
        assert [(m.exercise_id, m.max_effort_reps) for m in movements] == [("regular-pushups", 10)]

        result = _invoke(
            data_dir, "log-set", "--category", "push", "--reps", "8", "--rpe", "7",
            "--date", "2026-03-03", "--exercise", "regular-pushups",
        )
        assert result.exit_code == 0, result.output

    def test_log_set_rejects_zero_reps(self, data_dir):
        _init(data_dir)
        result = _invoke(
            data_dir, "log-set", "--category", "push", "--reps", "0",
            "--rpe", "7", "--date", "2026-03-02",
        )
        assert result.exit_code != 0
        assert TrainingStore(data_dir).load_sets("push") == []

    def test_max_effort_at_threshold_keeps_exercise(self, data_dir):
        _init(data_dir, max_effort="15")
        _log(data_dir, "20", None, "2026-03-02", "08:00", "--max-effort")
        movement = TrainingStore(data_dir).load_movements("push")[0]
        assert movement.exercise_id == "knee-pushups"
        assert movement.max_effort_reps == 20


class TestProgression:
    """Daily and weekly adjustment through the CLI."""

    def test_trivially_easy_day_raises_target(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")

        result = _invoke(data_dir, "adjust", "--category", "push", "--date", "2026-03-03", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["previous_target"] == 20
        assert data["delta"] == 3
        assert data["reason"] == "trivially easy"
        assert data["new_target"] == 23
        assert data["applied"] is True

        ledger = TrainingStore(data_dir).load_targets("push")
        assert ledger[-1].target == 23
        assert ledger[-1].source == "daily"

    def test_adjust_twice_is_stable(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")
        args = ("adjust", "--category", "push", "--date", "2026-03-03", "--json")
        first = json.loads(_invoke(data_dir, *args).output)
        second = json.loads(_invoke(data_dir, *args).output)
        assert first["new_target"] == second["new_target"] == 23
        assert len(TrainingStore(data_dir).load_targets("push")) == 2

    def test_dry_run_does_not_save(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")
        result = _invoke(
            data_dir, "adjust", "--category", "push",
            "--date", "2026-03-03", "--dry-run", "--json",
        )
        assert json.loads(result.output)["applied"] is False
        assert len(TrainingStore(data_dir).load_targets("push")) == 1

    def test_low_readiness_holds(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")
        result = _invoke(
            data_dir, "adjust", "--category", "push",
            "--date", "2026-03-03", "--readiness", "1", "--json",
        )
        data = json.loads(result.output)
        assert data["delta"] == 0
        assert data["reason"] == "low readiness"

    def test_readiness_out_of_range(self, data_dir):
        _init(data_dir)
        result = _invoke(data_dir, "adjust", "--category", "push", "--readiness", "6")
        assert result.exit_code == 1

    def test_adjust_table_output(self, data_dir):
        _init(data_dir)
        result = _invoke(data_dir, "adjust", "--category", "push", "--date", "2026-03-03")
        assert result.exit_code == 0
        assert "hold" in result.output

    def test_weekly_review(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")
        result = _invoke(
            data_dir, "review", "--category", "push",
            "--week-start", "2026-03-02", "--apply", "--json",
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        # first set 22/25 = 0.88 -> 40; RPE 5 outside band -> 0;
        # target met on 1 of 1 days -> 20; one day -> 1
        assert data["score"] == {
            "first_set_performance": 40,
            "rpe_efficiency": 0,
            "target_achievement": 20,
            "consistency": 1,
            "total": 61,
        }
        assert data["percentage"] == 0.10
        assert data["new_target"] == 22

        ledger = TrainingStore(data_dir).load_targets("push")
        assert ledger[-1].date.isoformat() == "2026-03-09"
        assert ledger[-1].source == "weekly"

    def test_adjust_keeps_weekly_target(self, data_dir):
        _init(data_dir)
        for day in range(2, 9):
            _log(data_dir, "22", "7", f"2026-03-0{day}", "08:00")
        review = _invoke(
            data_dir, "review", "--category", "push",
            "--week-start", "2026-03-02", "--apply", "--json",
        )
        weekly_target = json.loads(review.output)["new_target"]

        result = _invoke(data_dir, "adjust", "--category", "push", "--date", "2026-03-09", "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["delta"] == 0
        assert data["reason"] == "target already set for the day"
        assert data["new_target"] == weekly_target
        assert data["applied"] is False

        ledger = TrainingStore(data_dir).load_targets("push")
        assert (ledger[-1].target, ledger[-1].source) == (weekly_target, "weekly")

    def test_adjust_keeps_max_effort_reset(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")
        _log(data_dir, "30", None, "2026-03-03", "07:00", "--max-effort")
        result = _invoke(data_dir, "adjust", "--category", "push", "--date", "2026-03-03", "--json")
        data = json.loads(result.output)
        assert data["new_target"] == 24
        assert data["applied"] is False

        ledger = TrainingStore(data_dir).load_targets("push")
        assert (ledger[-1].target, ledger[-1].source) == (24, "initial")

    def test_adjust_reports_yesterday(self, data_dir):
        _init(data_dir)
        _log(data_dir, "12", "9", "2026-03-02", "08:00")
        _log(data_dir, "10", "9", "2026-03-02", "12:00")
        result = _invoke(data_dir, "adjust", "--category", "push", "--date", "2026-03-03", "--json")
        data = json.loads(result.output)
        assert data["delta"] == 0
        assert data["yesterday"] == {"sets": 2, "total_reps": 22, "avg_rpe": 9.0, "hard": True}

    def test_poor_week_suggests_easier_variation(self, data_dir):
        _init(data_dir)
        result = _invoke(
            data_dir, "review", "--category", "push", "--week-start", "2026-03-02", "--json",
        )
        data = json.loads(result.output)
        assert data["score"]["total"] == 0
        assert data["percentage"] == -0.125
        assert data["easier_variation"] == "incline-pushups"

    def test_good_week_has_no_easier_variation(self, data_dir):
        _init(data_dir)
        _log(data_dir, "22", "5", "2026-03-02", "08:00")
        result = _invoke(
            data_dir, "review", "--category", "push", "--week-start", "2026-03-02", "--json",
        )
        assert json.loads(result.output)["easier_variation"] is None

    def test_review_table_output(self, data_dir):
        _init(data_dir)
        result = _invoke(data_dir, "review", "--category", "push", "--week-start", "2026-03-02")
        assert result.exit_code == 0
        assert "Total" in result.output

    def test_status(self, data_dir):
        _init(data_dir)
        _init(data_dir, category="legs", exercise="chair-squat", max_effort="40")
        _log(data_dir, "12", "7", "2026-03-02", "08:00")
        result = _invoke(data_dir, "status", "--date", "2026-03-02", "--readiness", "4")
        assert result.exit_code == 0, result.output
        assert "push" in result.output
        assert "legs" in result.output

    def test_status_requires_init(self, data_dir):
        result = _invoke(data_dir, "status")
        assert result.exit_code == 1


class TestHistory:
    def test_history_json(self, data_dir):
        _init(data_dir)
        _log(data_dir, "12", "7", "2026-03-02", "08:00")
        _log(data_dir, "25", None, "2026-03-03", "08:00", "--max-effort")
        result = _invoke(data_dir, "history", "--category", "push", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [d["id"] for d in data] == [1, 2]
        assert data[1]["is_max_effort"] is True
        assert "rpe" not in data[1]

    def test_history_empty(self, data_dir):
        _init(data_dir)
        result = _invoke(data_dir, "history", "--category", "pull")
        assert result.exit_code == 0
        assert "No sets recorded" in result.output

    def test_delete_set(self, data_dir):
        _init(data_dir)
        _log(data_dir, "12", "7", "2026-03-02", "08:00")
        _log(data_dir, "9", "8", "2026-03-02", "09:00")
        result = _invoke(data_dir, "delete-set", "--category", "push", "--index", "1", "--force")
        assert result.exit_code == 0, result.output
        sets = TrainingStore(data_dir).load_sets("push")
        assert [(s.reps, s.set_number) for s in sets] == [(9, 1)]

    def test_delete_set_cancelled(self, data_dir):
        _init(data_dir)
        _log(data_dir, "12", "7", "2026-03-02", "08:00")
        result = runner.invoke(
            app,
            ["delete-set", "--category", "push", "--index", "1", "--data-dir", str(data_dir)],
            input="n\n",
        )
        assert result.exit_code == 0
        assert len(TrainingStore(data_dir).load_sets("push")) == 1

    def test_delete_set_out_of_range(self, data_dir):
        _init(data_dir)
        _log(data_dir, "12", "7", "2026-03-02", "08:00")
        result = _invoke(data_dir, "delete-set", "--category", "push", "--index", "5", "--force")
        assert result.exit_code == 1
