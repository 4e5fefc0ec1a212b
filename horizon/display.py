"""Rich terminal formatting helpers."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table
from rich.text import Text

from horizon.models import CueKind, HistorySummary, Phase, SessionRecord, TimerSnapshot

console = Console()

_PHASE_NAME: dict[Phase, str] = {
    Phase.WORK: "Focus",
    Phase.SHORT_BREAK: "Short break",
    Phase.LONG_BREAK: "Long break",
}

_PHASE_STYLE: dict[Phase, str] = {
    Phase.WORK: "bold magenta",
    Phase.SHORT_BREAK: "cyan",
    Phase.LONG_BREAK: "bold cyan",
}


def phase_name(phase: Phase) -> str:
    return _PHASE_NAME[phase]


def format_clock(seconds: int, leading_zero: bool = True) -> str:
    """``MM:SS``; minutes are only zero-padded when *leading_zero* is set."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    mm = f"{minutes:02d}" if leading_zero else str(minutes)
    return f"{mm}:{secs:02d}"


def print_snapshot(snap: TimerSnapshot, leading_zero: bool = True, state: str = "") -> None:
    """Print the timer status panel."""
    if not state:
        if snap.running:
            state = "running"
        elif snap.remaining_seconds < snap.total_seconds:
            state = "paused"
        else:
            state = "idle"
    lines: list[str] = [
        f"[{_PHASE_STYLE[snap.phase]}]{phase_name(snap.phase)}[/]",
        f"Time left: [bold]{format_clock(snap.remaining_seconds, leading_zero)}[/bold]"
        f" of {format_clock(snap.total_seconds, leading_zero)}",
        f"State: {state}",
        f"Focus sessions this cycle: {snap.focus_count}",
    ]
    console.print(Panel("\n".join(lines), title="Timer", border_style="magenta"))


def print_session_list(records: list[SessionRecord], title: str = "History") -> None:
    """Print completed sessions in a table."""
    if not records:
        console.print(Panel("No sessions yet.", title=title, border_style="dim"))
        return

    table = Table(box=None, pad_edge=False)
    table.add_column("date")
    table.add_column("phase")
    table.add_column("started")
    table.add_column("length", justify="right")
    table.add_column("auto")

    for r in records:
        table.add_row(
            r.date.isoformat(),
            phase_name(r.phase),
            r.started_at.strftime("%H:%M"),
            format_clock(r.duration_seconds),
            "yes" if r.auto_started else "",
            style=_PHASE_STYLE[r.phase],
        )

    console.print(Panel(table, title=title, border_style="blue"))


def print_summary(summary: HistorySummary) -> None:
    """Print the history dashboard."""
    today = summary.today
    lines: list[str] = [
        f"Focus sessions today: {today.focus_sessions}",
        f"Focus time today: {today.focus_minutes} min",
        f"Break time today: {today.break_minutes} min",
        "",
        f"This week: {summary.week_focus_sessions} sessions, {summary.week_focus_minutes} min focused",
        f"Streak: {summary.streak_days} day{'s' if summary.streak_days != 1 else ''}",
    ]
    console.print(Panel("\n".join(lines), title="Summary", border_style="green"))


def print_cue(kind: CueKind, sound: Optional[str]) -> None:
    """Announce a cue: ring the bell and name the sound that would play."""
    console.print("\a", end="")
    detail = f" ({sound})" if sound else ""
    console.print(f"[dim]♪ {kind.value}{detail}[/dim]")


def print_transition(label: str) -> None:
    """Show the phase transition label in a centred panel."""
    text = Text(label, justify="center", style="bold")
    console.print(Panel(text, border_style="magenta", padding=(1, 4)))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]{message}[/blue]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]{message}[/yellow]")


def create_timer_progress() -> Progress:
    """Create a Rich progress bar for the countdown."""
    return Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TextColumn("{task.fields[clock]}"),
        console=console,
    )
