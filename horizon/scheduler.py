"""Phase sequencing: which interval follows which."""

from __future__ import annotations

from horizon.models import Configuration, Phase


def next_phase(prev: Phase, focus_count: int, sessions_before_long: int) -> Phase:
    """Phase that follows *prev*.

    *focus_count* is the counter value after a completed work phase has been
    counted; it is ignored when *prev* is a break.
    """
    if prev is Phase.WORK:
        if focus_count % sessions_before_long == 0:
            return Phase.LONG_BREAK
        return Phase.SHORT_BREAK
    return Phase.WORK


def advance(prev: Phase, focus_count: int, sessions_before_long: int) -> tuple[Phase, int]:
    """Return ``(next_phase, new_focus_count)`` after *prev* completes."""
    if prev is Phase.WORK:
        focus_count += 1
    elif prev is Phase.LONG_BREAK:
        focus_count = 0
    return next_phase(prev, focus_count, sessions_before_long), focus_count


def will_auto_start(config: Configuration, prev: Phase) -> bool:
    """Whether the phase after *prev* starts without user input."""
    return config.auto_start_next or (config.auto_continue_after_break and prev.is_break)


def transition_label(phase: Phase) -> str:
    return "FOCUS" if phase is Phase.WORK else "BREAK"
