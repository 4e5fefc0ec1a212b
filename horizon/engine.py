"""Pomodoro timer engine: countdown, phase transitions and persistence.

The engine never decrements a counter. While running it only remembers the
absolute ``end_timestamp`` and recomputes the remaining time from the wall
clock on every tick, so sleep, suspension or a slow event loop cannot make
the display drift from real elapsed time.

All state lives in one :class:`~horizon.models.TimerSnapshot` owned by a
:class:`TimerEngine`; it is written to the store after every change and
read back once when the engine is created.
"""

from __future__ import annotations

import enum
import logging
import time
import uuid
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from horizon.config import apply_config, load_config, validate_config
from horizon.cues import Dispatcher, NullDispatcher, choose_cue
from horizon.errors import StoreError
from horizon.models import (
    Configuration,
    CueKind,
    Phase,
    SessionRecord,
    SoundMode,
    TimerSnapshot,
    begin_cue,
    round_half_up,
)
from horizon.recorder import SessionRecorder
from horizon.scheduler import advance, transition_label, will_auto_start
from horizon.store import TIMER_KEY, Store

log = logging.getLogger(__name__)


class EngineState(str, enum.Enum):
    """Coarse engine state."""

    IDLE = "idle"
    RUNNING = "running"
    TRANSITIONING = "transitioning"


class TimerEngine:
    """Owns the countdown and drives work/break sequencing.

    Commands (:meth:`start`, :meth:`pause`, :meth:`reset`,
    :meth:`switch_phase`, :meth:`apply_configuration`) run to completion and
    return ``True`` when they changed something. While a phase transition is
    being handed to the dispatcher every command is rejected.
    """

    def __init__(
        self,
        store: Store,
        recorder: Optional[SessionRecorder] = None,
        dispatcher: Optional[Dispatcher] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self.recorder = recorder
        self.dispatcher: Dispatcher = dispatcher or NullDispatcher()
        self._clock = clock
        self.config = load_config(store)
        self._mode = EngineState.IDLE
        total = self.config.duration_seconds(Phase.WORK)
        self.state = TimerSnapshot(phase=Phase.WORK, total_seconds=total, remaining_seconds=total)
        self._rehydrate()

    # ----- Introspection -----

    @property
    def mode(self) -> EngineState:
        return self._mode

    @property
    def is_running(self) -> bool:
        return self._mode is EngineState.RUNNING

    @property
    def is_transitioning(self) -> bool:
        return self._mode is EngineState.TRANSITIONING

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def remaining_seconds(self) -> int:
        return self.state.remaining_seconds

    @property
    def total_seconds(self) -> int:
        return self.state.total_seconds

    @property
    def focus_count(self) -> int:
        return self.state.focus_count

    def snapshot(self) -> TimerSnapshot:
        return self.state.model_copy()

    # ----- Commands -----

    def start(self, suppress_begin_signal: bool = False, is_auto: bool = False) -> bool:
        """Start (or continue) the countdown of the active phase."""
        if self._busy("start"):
            return False
        if self._mode is EngineState.RUNNING:
            return False
        now = self._clock()
        s = self.state
        s.end_timestamp = now + s.remaining_seconds
        s.started_at = now
        s.last_start_was_auto = is_auto
        s.running = True
        self._mode = EngineState.RUNNING
        log.info(
            "Started %s: remaining=%ss auto=%s", s.phase.value, s.remaining_seconds, is_auto
        )
        if not suppress_begin_signal:
            self._emit(begin_cue(s.phase))
        self._persist()
        return True

    def pause(self) -> bool:
        if self._busy("pause"):
            return False
        if self._mode is not EngineState.RUNNING:
            return False
        self._stop()
        log.info("Paused %s: remaining=%ss", self.state.phase.value, self.state.remaining_seconds)
        self._persist()
        return True

    def reset(self) -> bool:
        """Rewind the active phase and restart the cycle. An unfinished session is discarded."""
        if self._busy("reset"):
            return False
        self._stop()
        s = self.state
        s.remaining_seconds = s.total_seconds
        s.focus_count = 0
        log.info("Reset %s to %ss", s.phase.value, s.total_seconds)
        self._persist()
        return True

    def switch_phase(self, target: Phase) -> bool:
        """Manually select *target*. No cue, no auto-start, no session record."""
        if self._busy("switch"):
            return False
        self._stop()
        self._load_phase(target)
        log.info("Switched to %s (%ss)", target.value, self.state.total_seconds)
        self._persist()
        return True

    def apply_configuration(self, config: Configuration) -> bool:
        """Adopt *config*: restart the cycle and reload the active phase length."""
        if self._busy("apply settings"):
            return False
        self.config = config
        s = self.state
        s.focus_count = 0
        s.total_seconds = config.duration_seconds(s.phase)
        if self._mode is EngineState.RUNNING:
            now = self._clock()
            assert s.end_timestamp is not None
            if s.end_timestamp - now > s.total_seconds:
                s.end_timestamp = now + s.total_seconds
            s.remaining_seconds = self._remaining_at(now)
        else:
            s.remaining_seconds = s.total_seconds
        log.info("Applied settings; %s is now %ss", s.phase.value, s.total_seconds)
        self._persist()
        return True

    def update_settings(
        self, candidate: Union[Configuration, Mapping[str, Any]]
    ) -> Optional[Configuration]:
        """Validate, persist and apply new settings.

        Raises :class:`~horizon.errors.ConfigError` for an invalid candidate,
        leaving both storage and the engine untouched. Returns ``None`` when
        the engine is mid-transition.
        """
        config = validate_config(candidate)
        if self._busy("apply settings"):
            return None
        apply_config(self.store, config)
        self.apply_configuration(config)
        return config

    # ----- Ticking -----

    async def tick(self) -> None:
        """Recompute the remaining time; run the expiry protocol when it hits zero."""
        if self._mode is not EngineState.RUNNING:
            return
        now = self._clock()
        self.state.remaining_seconds = self._remaining_at(now)
        self._persist()
        if self.state.remaining_seconds <= 0:
            await self._expire(now)

    async def resume(self) -> None:
        """First tick after a restart; an already elapsed phase expires right away."""
        if self._mode is EngineState.RUNNING:
            log.info(
                "Resuming %s with %ss left", self.state.phase.value, self.state.remaining_seconds
            )
        await self.tick()

    async def _expire(self, now: float) -> None:
        s = self.state
        self._mode = EngineState.TRANSITIONING
        s.running = False
        s.end_timestamp = None

        prev = s.phase
        self._record(prev, now)
        nxt, s.focus_count = advance(prev, s.focus_count, self.config.sessions_before_long)
        auto = will_auto_start(self.config, prev)
        cue = choose_cue(prev, nxt, auto)
        log.info(
            "%s finished; next %s (focus_count=%d auto_start=%s)",
            prev.value,
            nxt.value,
            s.focus_count,
            auto,
        )
        self._emit(cue.kind)

        try:
            await self.dispatcher.transition(transition_label(nxt))
        except Exception:
            log.exception("Transition to %s failed; advancing anyway", nxt.value)

        self._mode = EngineState.IDLE
        self._load_phase(nxt)
        self._persist()
        if auto:
            self.start(suppress_begin_signal=True, is_auto=True)

    # ----- Internals -----

    def _busy(self, command: str) -> bool:
        if self._mode is EngineState.TRANSITIONING:
            log.warning("Ignoring %s during a phase transition.", command)
            return True
        return False

    def _stop(self) -> None:
        s = self.state
        s.running = False
        s.end_timestamp = None
        self._mode = EngineState.IDLE

    def _load_phase(self, phase: Phase) -> None:
        s = self.state
        s.phase = phase
        s.total_seconds = self.config.duration_seconds(phase)
        s.remaining_seconds = s.total_seconds
        s.started_at = None
        s.last_start_was_auto = False

    def _remaining_at(self, now: float, snap: Optional[TimerSnapshot] = None) -> int:
        s = snap or self.state
        if s.end_timestamp is None:
            return s.remaining_seconds
        remaining = round_half_up(s.end_timestamp - now)
        return max(0, min(s.total_seconds, remaining))

    def _emit(self, kind: CueKind) -> None:
        if self.config.sound_mode is SoundMode.NONE:
            return
        try:
            self.dispatcher.signal(kind)
        except Exception:
            log.exception("Cue %s could not be dispatched", kind.value)

    def _record(self, phase: Phase, ended: float) -> None:
        s = self.state
        started = s.started_at
        if started is None:
            started = ended - (s.total_seconds - s.remaining_seconds)
        ended_at = datetime.fromtimestamp(ended)
        entry = SessionRecord(
            id=uuid.uuid4().hex,
            phase=phase,
            started_at=datetime.fromtimestamp(started),
            ended_at=ended_at,
            duration_seconds=max(0, round_half_up(ended - started)),
            auto_started=s.last_start_was_auto,
            date=ended_at.date(),
        )
        s.started_at = None
        s.last_start_was_auto = False
        if self.recorder is None:
            return
        try:
            self.recorder.record(entry)
        except Exception:
            log.exception("Could not record %s session %s", phase.value, entry.id)

    def _persist(self) -> None:
        try:
            self.store.set(TIMER_KEY, self.state.model_dump_json())
        except StoreError as exc:
            log.warning("Could not save timer state: %s", exc)

    def _rehydrate(self) -> None:
        try:
            raw = self.store.get(TIMER_KEY)
        except StoreError as exc:
            log.warning("Could not read timer state, starting fresh: %s", exc)
            return
        if raw is None:
            return
        try:
            snap = TimerSnapshot.model_validate_json(raw)
        except ValidationError as exc:
            log.warning("Stored timer state is invalid, starting fresh: %s", exc)
            return
        if snap.running:
            snap.remaining_seconds = self._remaining_at(self._clock(), snap)
            self._mode = EngineState.RUNNING
        self.state = snap
