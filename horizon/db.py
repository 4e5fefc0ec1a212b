"""SQLite session history. All public functions return Pydantic models."""

from __future__ import annotations

import sqlite3
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional

from horizon import config
from horizon.models import DailyTotals, HistorySummary, Phase, SessionRecord

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sessions (
    id               TEXT    PRIMARY KEY,
    phase            TEXT    NOT NULL,
    started_at       TEXT    NOT NULL,
    ended_at         TEXT    NOT NULL,
    duration_seconds INTEGER NOT NULL,
    auto_started     INTEGER NOT NULL DEFAULT 0,
    date             TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_sessions_date ON sessions(date);
"""


def get_connection(db_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = db_path or config.get_db_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def _row_to_session(row: sqlite3.Row) -> SessionRecord:
    """Convert a database row to a SessionRecord model."""
    return SessionRecord(
        id=row["id"],
        phase=Phase(row["phase"]),
        started_at=datetime.fromisoformat(row["started_at"]),
        ended_at=datetime.fromisoformat(row["ended_at"]),
        duration_seconds=row["duration_seconds"],
        auto_started=bool(row["auto_started"]),
        date=date.fromisoformat(row["date"]),
    )


def log_session(conn: sqlite3.Connection, record: SessionRecord) -> SessionRecord:
    """Append a completed session to the history."""
    conn.execute(
        "INSERT INTO sessions (id, phase, started_at, ended_at, duration_seconds, "
        "auto_started, date) VALUES (?, ?, ?, ?, ?, ?, ?)",
        (
            record.id,
            record.phase.value,
            record.started_at.isoformat(),
            record.ended_at.isoformat(),
            record.duration_seconds,
            int(record.auto_started),
            record.date.isoformat(),
        ),
    )
    conn.commit()
    return record


def list_sessions(
    conn: sqlite3.Connection,
    phase: Optional[Phase] = None,
    limit: int = 20,
) -> list[SessionRecord]:
    """List completed sessions, most recent first."""
    query = "SELECT * FROM sessions"
    params: list[str | int] = []
    if phase is not None:
        query += " WHERE phase = ?"
        params.append(phase.value)
    query += " ORDER BY ended_at DESC LIMIT ?"
    params.append(limit)
    rows = conn.execute(query, params).fetchall()
    return [_row_to_session(r) for r in rows]


# ---------------------------------------------------------------------------
# Daily totals & summary
# ---------------------------------------------------------------------------


def get_daily_totals(conn: sqlite3.Connection, for_date: date) -> DailyTotals:
    """Totals for one day, zeros if nothing was completed."""
    row = conn.execute(
        """SELECT
               COALESCE(SUM(CASE WHEN phase = ? THEN 1 ELSE 0 END), 0) AS fs,
               COALESCE(SUM(CASE WHEN phase = ? THEN duration_seconds ELSE 0 END), 0) AS fsec,
               COALESCE(SUM(CASE WHEN phase != ? THEN duration_seconds ELSE 0 END), 0) AS bsec
           FROM sessions WHERE date = ?""",
        (Phase.WORK.value, Phase.WORK.value, Phase.WORK.value, for_date.isoformat()),
    ).fetchone()
    return DailyTotals(
        date=for_date,
        focus_sessions=row["fs"],
        focus_seconds=row["fsec"],
        break_seconds=row["bsec"],
    )


def get_recent_totals(conn: sqlite3.Connection, days: int = 7) -> list[DailyTotals]:
    """Daily totals for the last *days* days, oldest first, including empty days."""
    today = date.today()
    return [
        get_daily_totals(conn, today - timedelta(days=offset))
        for offset in range(days - 1, -1, -1)
    ]


def _focus_streak(conn: sqlite3.Connection, today: Optional[date] = None) -> int:
    """Days in a row with focus work, counted back from *today* (or yesterday if today is empty)."""
    today = today or date.today()
    rows = conn.execute(
        "SELECT DISTINCT date FROM sessions WHERE phase = ? AND date <= ? ORDER BY date DESC",
        (Phase.WORK.value, today.isoformat()),
    )
    streak = 0
    expected = today
    for row in rows:
        day = date.fromisoformat(row["date"])
        if streak == 0 and day == today - timedelta(days=1):
            expected = day
        if day != expected:
            break
        streak += 1
        expected = day - timedelta(days=1)
    return streak


def get_summary(conn: sqlite3.Connection) -> HistorySummary:
    """Build the history summary for today and the current week."""
    today = get_daily_totals(conn, date.today())

    week_start = date.today() - timedelta(days=date.today().weekday())
    row = conn.execute(
        "SELECT COUNT(*) AS n, COALESCE(SUM(duration_seconds), 0) AS sec "
        "FROM sessions WHERE phase = ? AND date >= ?",
        (Phase.WORK.value, week_start.isoformat()),
    ).fetchone()

    return HistorySummary(
        today=today,
        week_focus_sessions=row["n"],
        week_focus_seconds=row["sec"],
        streak_days=_focus_streak(conn),
    )
