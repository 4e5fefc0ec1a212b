"""Foreground countdown loop that drives the engine."""

from __future__ import annotations

import asyncio
from typing import Callable, Optional

from horizon.display import create_timer_progress, format_clock, phase_name
from horizon.engine import TimerEngine
from horizon.models import TimerSnapshot

TICK_INTERVAL = 0.18  # seconds


async def run_timer(
    engine: TimerEngine,
    interval: float = TICK_INTERVAL,
    on_tick: Optional[Callable[[TimerSnapshot], None]] = None,
) -> None:
    """Tick *engine* until it stops running.

    Auto-started phases keep the loop going; a phase that waits for a
    manual start ends it.
    """
    await engine.resume()
    while engine.is_running:
        if on_tick is not None:
            on_tick(engine.snapshot())
        await asyncio.sleep(interval)
        await engine.tick()
    if on_tick is not None:
        on_tick(engine.snapshot())


def run_with_progress(engine: TimerEngine, interval: float = TICK_INTERVAL) -> bool:
    """Run the engine with a Rich progress bar. Returns False if interrupted."""
    progress = create_timer_progress()
    leading_zero = engine.config.leading_zero
    bar = progress.add_task("", total=1, clock="")

    def _update(snap: TimerSnapshot) -> None:
        progress.update(
            bar,
            description=phase_name(snap.phase),
            total=snap.total_seconds,
            completed=snap.total_seconds - snap.remaining_seconds,
            clock=format_clock(snap.remaining_seconds, leading_zero),
        )

    try:
        with progress:
            asyncio.run(run_timer(engine, interval=interval, on_tick=_update))
    except KeyboardInterrupt:
        return False
    return True
