"""Sinks for completed sessions."""

from __future__ import annotations

import sqlite3
from typing import Protocol

from horizon import db
from horizon.models import SessionRecord


class SessionRecorder(Protocol):
    def record(self, entry: SessionRecord) -> None: ...


class SqliteRecorder:
    """Appends every completed session to the history database."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def record(self, entry: SessionRecord) -> None:
        db.log_session(self.conn, entry)


class MemoryRecorder:
    """Keeps records in a list."""

    def __init__(self) -> None:
        self.records: list[SessionRecord] = []

    def record(self, entry: SessionRecord) -> None:
        self.records.append(entry)
