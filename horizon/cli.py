"""Horizon CLI -- a pomodoro timer that keeps counting while you are away."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

import typer

from horizon import charts, config, db, display
from horizon.cues import ConsoleDispatcher
from horizon.engine import TimerEngine
from horizon.errors import ConfigError
from horizon.models import Configuration, Phase, SoundMode
from horizon.recorder import SqliteRecorder
from horizon.timer import run_with_progress

app = typer.Typer(
    name="horizon",
    help="A pomodoro timer that keeps counting while you are away.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log engine activity"),
) -> None:
    """Work in focused intervals with short and long breaks."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s"
        )


def _engine() -> tuple[TimerEngine, sqlite3.Connection]:
    """Rehydrate the engine and let any phase that ran out while away finish."""
    conn = db.get_connection()
    engine = TimerEngine(config.default_store(), recorder=SqliteRecorder(conn))
    engine.dispatcher = ConsoleDispatcher(engine.config.sound_mode, pause=0)
    asyncio.run(engine.resume())
    return engine, conn


def _show(engine: TimerEngine) -> None:
    display.print_snapshot(
        engine.snapshot(), leading_zero=engine.config.leading_zero, state=engine.mode.value
    )


# ---------------------------------------------------------------------------
# Timer commands
# ---------------------------------------------------------------------------


@app.command()
def start() -> None:
    """Start or continue the current phase."""
    engine, conn = _engine()
    if engine.start():
        display.print_success(f"{display.phase_name(engine.phase)} started.")
    else:
        display.print_info("The timer is already running.")
    _show(engine)
    conn.close()


@app.command()
def pause() -> None:
    """Pause the countdown."""
    engine, conn = _engine()
    if engine.pause():
        display.print_success("Paused.")
    else:
        display.print_info("The timer is not running.")
    _show(engine)
    conn.close()


@app.command()
def reset() -> None:
    """Rewind the current phase and start the cycle over."""
    engine, conn = _engine()
    engine.reset()
    display.print_success("Timer reset.")
    _show(engine)
    conn.close()


@app.command()
def switch(
    phase: Phase = typer.Argument(..., help="work, short_break or long_break"),
) -> None:
    """Switch to another phase (the current session is not logged)."""
    engine, conn = _engine()
    engine.switch_phase(phase)
    display.print_success(f"Switched to {display.phase_name(phase)}.")
    _show(engine)
    conn.close()


@app.command()
def status() -> None:
    """Show the current phase and time left."""
    engine, conn = _engine()
    _show(engine)
    conn.close()


@app.command()
def run(
    no_start: bool = typer.Option(
        False, "--no-start", help="Only follow a timer that is already running"
    ),
) -> None:
    """Follow the countdown in the foreground, chaining auto-started phases."""
    engine, conn = _engine()
    if not engine.is_running and not no_start:
        engine.start()
    if not engine.is_running:
        display.print_info("The timer is not running. Use `horizon start`.")
        _show(engine)
        conn.close()
        return

    engine.dispatcher = ConsoleDispatcher(engine.config.sound_mode)
    completed = run_with_progress(engine)
    if not completed:
        display.print_warning("Detached. The timer keeps running in the background.")
    _show(engine)
    conn.close()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def _print_settings(cfg: Configuration) -> None:
    display.print_info(f"Work: {cfg.work_minutes:g} min")
    display.print_info(f"Short break: {cfg.short_break_minutes:g} min")
    display.print_info(f"Long break: {cfg.long_break_minutes:g} min")
    display.print_info(f"Sessions before long break: {cfg.sessions_before_long}")
    display.print_info(f"Auto-start next phase: {'on' if cfg.auto_start_next else 'off'}")
    display.print_info(
        f"Auto-continue after break: {'on' if cfg.auto_continue_after_break else 'off'}"
    )
    display.print_info(f"Sound: {cfg.sound_mode.value}")
    display.print_info(f"Leading zero: {'on' if cfg.leading_zero else 'off'}")


@app.command()
def settings(
    work: Optional[float] = typer.Option(None, "--work", help="Focus length in minutes"),
    short: Optional[float] = typer.Option(None, "--short", help="Short break in minutes"),
    long: Optional[float] = typer.Option(None, "--long", help="Long break in minutes"),
    sessions: Optional[int] = typer.Option(
        None, "--sessions", help="Focus sessions before a long break"
    ),
    auto_start: Optional[bool] = typer.Option(
        None, "--auto-start/--no-auto-start", help="Start every next phase automatically"
    ),
    auto_continue: Optional[bool] = typer.Option(
        None, "--auto-continue/--no-auto-continue", help="Start focus automatically after breaks"
    ),
    sound: Optional[SoundMode] = typer.Option(None, "--sound", help="none, default or voice"),
    leading_zero: Optional[bool] = typer.Option(
        None, "--leading-zero/--no-leading-zero", help="Pad minutes with a zero"
    ),
    show: bool = typer.Option(False, "--show", help="Show current settings"),
) -> None:
    """View or change interval lengths and behaviour. Saving restarts the cycle."""
    changes: dict[str, Any] = {
        "work_minutes": work,
        "short_break_minutes": short,
        "long_break_minutes": long,
        "sessions_before_long": sessions,
        "auto_start_next": auto_start,
        "auto_continue_after_break": auto_continue,
        "sound_mode": sound,
        "leading_zero": leading_zero,
    }
    changes = {k: v for k, v in changes.items() if v is not None}

    engine, conn = _engine()
    if show or not changes:
        _print_settings(engine.config)
        conn.close()
        return

    candidate = {**engine.config.model_dump(), **changes}
    try:
        new = engine.update_settings(candidate)
    except ConfigError as exc:
        display.print_warning(f"Invalid {exc.field}: {exc.message}")
        conn.close()
        raise typer.Exit(1)
    if new is None:
        display.print_warning("A phase transition is in progress. Try again in a moment.")
        conn.close()
        raise typer.Exit(1)
    display.print_success("Settings saved.")
    _print_settings(new)
    conn.close()


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


@app.command()
def history(
    phase: Optional[Phase] = typer.Option(None, "--phase", "-p", help="Only this phase"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of sessions to show"),
    chart: Optional[Path] = typer.Option(
        None, "--chart", help="Also save a PNG chart of the last 7 days here"
    ),
) -> None:
    """List completed sessions."""
    conn = db.get_connection()
    records = db.list_sessions(conn, phase=phase, limit=limit)
    display.print_session_list(records)
    if chart is not None:
        saved = charts.save_focus_chart(db.get_recent_totals(conn, days=7), chart)
        if saved is not None:
            display.print_success(f"Chart saved to {saved}")
    conn.close()


@app.command()
def summary() -> None:
    """See how your day and week are going."""
    conn = db.get_connection()
    display.print_summary(db.get_summary(conn))
    conn.close()
