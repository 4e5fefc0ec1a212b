"""Tests for CLI commands."""

from __future__ import annotations

import time
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from horizon.cli import app
from horizon.models import Phase, TimerSnapshot
from horizon.store import TIMER_KEY, JsonFileStore

runner = CliRunner()


@pytest.fixture(autouse=True)
def _use_tmp_paths(tmp_path: Path):
    """Redirect all CLI tests to a temporary state file and database."""
    db_path = tmp_path / "test.db"
    state_file = tmp_path / "state.json"
    with patch("horizon.config.get_db_path", return_value=db_path), patch(
        "horizon.config._STATE_FILE", state_file
    ):
        yield


class TestStatus:
    def test_default_status(self) -> None:
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Focus" in result.output
        assert "25:00" in result.output
        assert "idle" in result.output


class TestStartPause:
    def test_start(self) -> None:
        result = runner.invoke(app, ["start"])
        assert result.exit_code == 0
        assert "Focus started" in result.output
        status = runner.invoke(app, ["status"])
        assert "running" in status.output

    def test_start_twice(self) -> None:
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["start"])
        assert result.exit_code == 0
        assert "already running" in result.output

    def test_pause(self) -> None:
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["pause"])
        assert result.exit_code == 0
        assert "Paused" in result.output

    def test_pause_idle(self) -> None:
        result = runner.invoke(app, ["pause"])
        assert result.exit_code == 0
        assert "not running" in result.output


class TestResetSwitch:
    def test_switch(self) -> None:
        result = runner.invoke(app, ["switch", "short_break"])
        assert result.exit_code == 0
        assert "Short break" in result.output
        assert "05:00" in result.output

    def test_switch_invalid_phase(self) -> None:
        result = runner.invoke(app, ["switch", "lunch"])
        assert result.exit_code != 0

    def test_reset(self) -> None:
        runner.invoke(app, ["start"])
        result = runner.invoke(app, ["reset"])
        assert result.exit_code == 0
        assert "Timer reset" in result.output
        assert "idle" in result.output


class TestRun:
    def test_run_no_start_when_idle(self) -> None:
        result = runner.invoke(app, ["run", "--no-start"])
        assert result.exit_code == 0
        assert "not running" in result.output

    @patch("horizon.cli.run_with_progress", return_value=True)
    def test_run_starts_timer(self, mock_run) -> None:
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        mock_run.assert_called_once()
        engine = mock_run.call_args[0][0]
        assert engine.is_running

    @patch("horizon.cli.run_with_progress", return_value=False)
    def test_run_detached(self, _mock_run) -> None:
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        assert "Detached" in result.output


class TestSettings:
    def test_show_default(self) -> None:
        result = runner.invoke(app, ["settings", "--show"])
        assert result.exit_code == 0
        assert "Work: 25 min" in result.output
        assert "Sessions before long break: 4" in result.output

    def test_no_flags_shows(self) -> None:
        result = runner.invoke(app, ["settings"])
        assert result.exit_code == 0
        assert "Short break: 5 min" in result.output

    def test_half_minute_work(self) -> None:
        result = runner.invoke(app, ["settings", "--work", "0.5"])
        assert result.exit_code == 0
        assert "Settings saved" in result.output
        status = runner.invoke(app, ["status"])
        assert "00:30" in status.output

    def test_no_leading_zero(self) -> None:
        runner.invoke(app, ["settings", "--work", "0.5", "--no-leading-zero"])
        status = runner.invoke(app, ["status"])
        assert "0:30" in status.output
        assert "00:30" not in status.output

    def test_flags_and_sound(self) -> None:
        result = runner.invoke(app, ["settings", "--auto-start", "--sound", "voice"])
        assert result.exit_code == 0
        assert "Auto-start next phase: on" in result.output
        assert "Sound: voice" in result.output

    def test_invalid_work(self) -> None:
        result = runner.invoke(app, ["settings", "--work", "0"])
        assert result.exit_code == 1
        assert "Invalid work_minutes" in result.output
        shown = runner.invoke(app, ["settings", "--show"])
        assert "Work: 25 min" in shown.output

    def test_invalid_sessions(self) -> None:
        result = runner.invoke(app, ["settings", "--sessions", "100"])
        assert result.exit_code == 1
        assert "sessions_before_long" in result.output


class TestHistory:
    def test_empty(self) -> None:
        result = runner.invoke(app, ["history"])
        assert result.exit_code == 0
        assert "No sessions yet" in result.output

    def test_chart(self, tmp_path: Path) -> None:
        chart = tmp_path / "week.png"
        result = runner.invoke(app, ["history", "--chart", str(chart)])
        assert result.exit_code == 0
        assert chart.exists()

    def test_summary(self) -> None:
        result = runner.invoke(app, ["summary"])
        assert result.exit_code == 0
        assert "Summary" in result.output


class TestResume:
    def test_elapsed_phase_is_logged_on_next_command(self, tmp_path: Path) -> None:
        now = time.time()
        snap = TimerSnapshot(
            phase=Phase.WORK,
            total_seconds=1500,
            remaining_seconds=1200,
            running=True,
            end_timestamp=now - 5,
            started_at=now - 1505,
        )
        JsonFileStore(tmp_path / "state.json").set(TIMER_KEY, snap.model_dump_json())

        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert "Short break" in result.output
        assert "Focus sessions this cycle: 1" in result.output

        history = runner.invoke(app, ["history"])
        assert "Focus" in history.output
        assert "25:05" in history.output
