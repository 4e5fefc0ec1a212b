"""Audio/visual cues at phase boundaries.

The engine decides *which* cue fires; a :class:`Dispatcher` decides what
that looks and sounds like. Only one cue is chosen per expiry, in
:func:`choose_cue`.
"""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass
from typing import Optional, Protocol

from horizon.models import CueKind, Phase, SoundMode, begin_cue, ended_cue

_VOICE_KEYS: dict[CueKind, str] = {
    CueKind.FOCUS_BEGIN: "voice-focus-begin",
    CueKind.FOCUS_ENDED: "voice-focus-ended",
    CueKind.SHORT_BEGIN: "voice-short-break-begin",
    CueKind.SHORT_ENDED: "voice-short-break-ended",
    CueKind.LONG_BEGIN: "voice-long-break-begin",
    CueKind.LONG_ENDED: "voice-long-break-ended",
}


class CueTiming(str, enum.Enum):
    """Whether a cue announces the next phase or closes the previous one."""

    BEGIN_NEXT = "begin-next"
    ENDED_PREV = "ended-prev"


@dataclass(frozen=True)
class CueChoice:
    """The single cue to emit for one expiry."""

    timing: CueTiming
    phase: Phase
    kind: CueKind


def choose_cue(prev: Phase, nxt: Phase, auto_start: bool) -> CueChoice:
    """Begin cue of *nxt* when it will auto-start, else the ended cue of *prev*."""
    if auto_start:
        return CueChoice(CueTiming.BEGIN_NEXT, nxt, begin_cue(nxt))
    return CueChoice(CueTiming.ENDED_PREV, prev, ended_cue(prev))


def sound_key(kind: CueKind, mode: SoundMode) -> Optional[str]:
    """Name of the sound resource for *kind* in *mode* (None when silent)."""
    if mode is SoundMode.NONE:
        return None
    if mode is SoundMode.DEFAULT:
        return "default"
    return _VOICE_KEYS[kind]


class Dispatcher(Protocol):
    """Receives cues and runs the phase transition hand-off."""

    def signal(self, kind: CueKind) -> None: ...

    async def transition(self, label: str) -> None: ...


class NullDispatcher:
    """Accepts every cue and finishes transitions immediately."""

    def signal(self, kind: CueKind) -> None:
        pass

    async def transition(self, label: str) -> None:
        return None


class ConsoleDispatcher:
    """Rings the terminal bell and shows the transition label in a panel."""

    def __init__(self, sound_mode: SoundMode = SoundMode.DEFAULT, pause: float = 1.2) -> None:
        self.sound_mode = sound_mode
        self.pause = pause

    def signal(self, kind: CueKind) -> None:
        from horizon.display import print_cue

        print_cue(kind, sound_key(kind, self.sound_mode))

    async def transition(self, label: str) -> None:
        from horizon.display import print_transition

        print_transition(label)
        if self.pause > 0:
            await asyncio.sleep(self.pause)
