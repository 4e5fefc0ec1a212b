"""Tests for terminal formatting."""

from __future__ import annotations

from datetime import date, datetime

from rich.console import Console

from horizon import display
from horizon.models import CueKind, DailyTotals, HistorySummary, Phase, SessionRecord, TimerSnapshot


class TestFormatClock:
    def test_leading_zero(self) -> None:
        assert display.format_clock(65) == "01:05"
        assert display.format_clock(1500) == "25:00"

    def test_without_leading_zero(self) -> None:
        assert display.format_clock(65, leading_zero=False) == "1:05"
        assert display.format_clock(1500, leading_zero=False) == "25:00"

    def test_negative_clamps(self) -> None:
        assert display.format_clock(-3) == "00:00"

    def test_long_durations(self) -> None:
        assert display.format_clock(999 * 60) == "999:00"


def _capture(monkeypatch) -> Console:
    console = Console(record=True, width=100)
    monkeypatch.setattr(display, "console", console)
    return console


class TestPrinting:
    def test_snapshot_panel(self, monkeypatch) -> None:
        console = _capture(monkeypatch)
        snap = TimerSnapshot(phase=Phase.SHORT_BREAK, total_seconds=300, remaining_seconds=120)
        display.print_snapshot(snap)
        out = console.export_text()
        assert "Short break" in out
        assert "02:00" in out
        assert "paused" in out

    def test_session_list_empty(self, monkeypatch) -> None:
        console = _capture(monkeypatch)
        display.print_session_list([])
        assert "No sessions yet." in console.export_text()

    def test_session_list(self, monkeypatch) -> None:
        console = _capture(monkeypatch)
        rec = SessionRecord(
            id="x",
            phase=Phase.WORK,
            started_at=datetime(2024, 5, 1, 9, 0),
            ended_at=datetime(2024, 5, 1, 9, 25),
            duration_seconds=1500,
            auto_started=True,
            date=date(2024, 5, 1),
        )
        display.print_session_list([rec])
        out = console.export_text()
        assert "2024-05-01" in out
        assert "Focus" in out
        assert "25:00" in out

    def test_summary(self, monkeypatch) -> None:
        console = _capture(monkeypatch)
        summary = HistorySummary(
            today=DailyTotals(date=date.today(), focus_sessions=3, focus_seconds=4500),
            streak_days=1,
        )
        display.print_summary(summary)
        out = console.export_text()
        assert "Focus sessions today: 3" in out
        assert "1 day" in out

    def test_cue_and_transition(self, monkeypatch) -> None:
        console = _capture(monkeypatch)
        display.print_cue(CueKind.FOCUS_BEGIN, "voice-focus-begin")
        display.print_transition("FOCUS")
        out = console.export_text()
        assert "focus-begin" in out
        assert "voice-focus-begin" in out
        assert "FOCUS" in out
