"""
Minimal smoke tests for the rest-recovery CLI.

Tests basic functionality:
- App runs and shows help
- Recovery payloads are recomputed (table and JSON)
- Rest durations are classified
- Rest timer payloads are displayed
- Bad input exits with an error
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from rest_recovery.cli.main import app


runner = CliRunner()

NOW = "2026-03-10T12:00:00Z"


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user config files out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("REST_RECOVERY_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def recovery_file(tmp_path) -> Path:
    path = tmp_path / "recovery.json"
    path.write_text(json.dumps({
        "recovery_status": {
            "chest": {
                "fatigue_score": "7.0",
                "total_sets": 10,
                "recovery_hours": 48,
                "source_timestamp": "2026-03-09T12:00:00Z",
            },
            "hamstrings": {
                "fatigue_score": 3,
                "total_sets": 4,
                "recovery_hours": 24,
                "source_timestamp": "2026-03-08T12:00:00Z",
            },
        },
        "cns_recovery": {
            "cns_load": 40,
            "recovery_hours": 24,
            "source_timestamp": "2026-03-10T06:00:00Z",
        },
        "is_pro": True,
    }))
    return path


@pytest.fixture
def timer_file(tmp_path) -> Path:
    path = tmp_path / "timer.json"
    path.write_text(json.dumps({
        "last_set_timestamp": "2026-03-10T11:55:00Z",
        "last_exercise_category": "compound",
        "elapsed_seconds": 310,
        "is_paused": False,
    }))
    return path


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "recovery" in result.output

    def test_recovery_table(self, recovery_file):
        result = runner.invoke(app, ["recovery", str(recovery_file), "--now", NOW])
        assert result.exit_code == 0
        assert "Recovered:" in result.output
        assert "Chest" in result.output
        assert "CNS" in result.output
        assert "50%" in result.output

    def test_recovery_json(self, recovery_file):
        result = runner.invoke(app, ["recovery", str(recovery_file), "--now", NOW, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["recovery_status"]["chest"]["recovery_percentage"] == pytest.approx(50.0)
        assert data["recovery_status"]["hamstrings"]["is_recovered"] is True
        assert data["cns_recovery"]["recovery_percentage"] == pytest.approx(25.0)
        assert data["summary"]["recovered"] == 1
        assert data["summary"]["recovering"] == 1
        assert data["summary"]["ready"] == 1

    def test_recovery_without_cns(self, recovery_file):
        result = runner.invoke(
            app, ["recovery", str(recovery_file), "--now", NOW, "--json", "--no-cns"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["cns_recovery"] is None

    def test_recovery_missing_file(self, tmp_path):
        result = runner.invoke(app, ["recovery", str(tmp_path / "nope.json")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_recovery_invalid_json(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        result = runner.invoke(app, ["recovery", str(bad)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_invalid_now(self, recovery_file):
        result = runner.invoke(app, ["recovery", str(recovery_file), "--now", "tomorrow"])
        assert result.exit_code != 0

    def test_rest_status_approaching(self):
        result = runner.invoke(app, ["rest-status", "--elapsed", "90", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["elapsed_seconds"] == 90
        assert data["rest_status"]["zone"] == "approaching"
        assert data["rest_status"]["goal"] == 180

    def test_rest_status_minutes_isolation(self):
        result = runner.invoke(
            app, ["rest-status", "--elapsed", "1:40", "--category", "isolation", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["rest_status"]["zone"] == "ready"

    def test_rest_status_text(self):
        result = runner.invoke(app, ["rest-status", "--elapsed", "310"])
        assert result.exit_code == 0
        assert "5:10" in result.output

    def test_timer_overdue_json(self, timer_file):
        result = runner.invoke(app, ["timer", str(timer_file), "--now", NOW, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["elapsed_seconds"] == 310
        assert data["rest_status"]["zone"] == "overdue"

    def test_timer_text(self, timer_file):
        result = runner.invoke(app, ["timer", str(timer_file), "--now", NOW])
        assert result.exit_code == 0
        assert "5:10" in result.output

    def test_timer_idle(self, tmp_path):
        path = tmp_path / "idle.json"
        path.write_text(json.dumps({"last_set_timestamp": None, "elapsed_seconds": 0, "is_paused": False}))
        result = runner.invoke(app, ["timer", str(path), "--now", NOW])
        assert result.exit_code == 0
        assert "No rest timer running" in result.output

    def test_timer_watch_single_tick(self, timer_file):
        result = runner.invoke(app, ["timer", str(timer_file), "--now", NOW, "--watch", "--ticks", "1"])
        assert result.exit_code == 0
        assert "5:1" in result.output

    def test_thresholds(self):
        result = runner.invoke(app, ["thresholds", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["rest_thresholds"]["compound"] == {"goal": 180.0, "max_goal": 300.0}
        assert set(data["zone_styles"]) == {"early", "approaching", "ready", "overdue"}
