"""Pydantic models for settings, timer state and session history."""

from __future__ import annotations

import enum
import math
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Phase(str, enum.Enum):
    """The three kinds of interval in a pomodoro cycle."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not Phase.WORK


class SoundMode(str, enum.Enum):
    """How phase boundaries are announced."""

    NONE = "none"
    DEFAULT = "default"
    VOICE = "voice"


class CueKind(str, enum.Enum):
    """Audio/visual events emitted at phase boundaries."""

    FOCUS_BEGIN = "focus-begin"
    FOCUS_ENDED = "focus-ended"
    SHORT_BEGIN = "short-begin"
    SHORT_ENDED = "short-ended"
    LONG_BEGIN = "long-begin"
    LONG_ENDED = "long-ended"


_BEGIN_CUES: dict[Phase, CueKind] = {
    Phase.WORK: CueKind.FOCUS_BEGIN,
    Phase.SHORT_BREAK: CueKind.SHORT_BEGIN,
    Phase.LONG_BREAK: CueKind.LONG_BEGIN,
}

_ENDED_CUES: dict[Phase, CueKind] = {
    Phase.WORK: CueKind.FOCUS_ENDED,
    Phase.SHORT_BREAK: CueKind.SHORT_ENDED,
    Phase.LONG_BREAK: CueKind.LONG_ENDED,
}


def begin_cue(phase: Phase) -> CueKind:
    return _BEGIN_CUES[phase]


def ended_cue(phase: Phase) -> CueKind:
    return _ENDED_CUES[phase]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class Configuration(BaseModel):
    """Interval lengths and behaviour flags (persisted under the ``settings`` key)."""

    model_config = ConfigDict(frozen=True)

    work_minutes: float = Field(default=25, gt=0, le=999, allow_inf_nan=False)
    short_break_minutes: float = Field(default=5, gt=0, le=999, allow_inf_nan=False)
    long_break_minutes: float = Field(default=15, gt=0, le=999, allow_inf_nan=False)
    sessions_before_long: int = Field(default=4, ge=1, le=99)
    auto_start_next: bool = False
    auto_continue_after_break: bool = False
    sound_mode: SoundMode = SoundMode.DEFAULT
    leading_zero: bool = True

    @field_validator(
        "work_minutes",
        "short_break_minutes",
        "long_break_minutes",
        "sessions_before_long",
        mode="before",
    )
    @classmethod
    def _not_boolean(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number, not a boolean")
        return value

    @field_validator("work_minutes", "short_break_minutes", "long_break_minutes")
    @classmethod
    def _two_decimals(cls, value: float) -> float:
        if round(value, 2) != value:
            raise ValueError("must have at most 2 decimal places")
        return value

    def minutes_for(self, phase: Phase) -> float:
        if phase is Phase.WORK:
            return self.work_minutes
        if phase is Phase.SHORT_BREAK:
            return self.short_break_minutes
        return self.long_break_minutes

    def duration_seconds(self, phase: Phase) -> int:
        """Length of *phase* in whole seconds (never less than one)."""
        return max(1, round_half_up(self.minutes_for(phase) * 60))


class TimerSnapshot(BaseModel):
    """Everything needed to rebuild the engine after a restart."""

    phase: Phase = Phase.WORK
    total_seconds: int = Field(gt=0)
    remaining_seconds: int = Field(ge=0)
    running: bool = False
    end_timestamp: Optional[float] = Field(default=None, allow_inf_nan=False)  # epoch seconds
    started_at: Optional[float] = Field(default=None, allow_inf_nan=False)
    focus_count: int = Field(default=0, ge=0)
    last_start_was_auto: bool = False

    @model_validator(mode="after")
    def _check_invariants(self) -> TimerSnapshot:
        if self.running and self.end_timestamp is None:
            raise ValueError("a running snapshot needs an end_timestamp")
        if self.remaining_seconds > self.total_seconds:
            raise ValueError("remaining_seconds exceeds total_seconds")
        return self


class SessionRecord(BaseModel):
    """A completed (not aborted) phase handed to the session recorder."""

    id: str
    phase: Phase
    started_at: datetime
    ended_at: datetime
    duration_seconds: int = Field(ge=0)
    auto_started: bool = False
    date: date

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60


class DailyTotals(BaseModel):
    """Aggregated completed sessions for one calendar day."""

    date: date
    focus_sessions: int = Field(default=0, ge=0)
    focus_seconds: int = Field(default=0, ge=0)
    break_seconds: int = Field(default=0, ge=0)

    @property
    def focus_minutes(self) -> int:
        return self.focus_seconds // 60

    @property
    def break_minutes(self) -> int:
        return self.break_seconds // 60


class HistorySummary(BaseModel):
    """Dashboard data for the summary command."""

    today: DailyTotals
    week_focus_sessions: int = Field(default=0, ge=0)
    week_focus_seconds: int = Field(default=0, ge=0)
    streak_days: int = Field(default=0, ge=0)

    @property
    def week_focus_minutes(self) -> int:
        return self.week_focus_seconds // 60
