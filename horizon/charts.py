"""Matplotlib charts for session history.

All figures use a dark theme.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from PIL import Image

from horizon.models import DailyTotals

# -- Palette ---------------------------------------------------------------
_BG = "#14101f"
_FG = "#e0e0e0"
_FOCUS = "#9b59ff"
_BREAK = (0.42, 0.62, 0.71, 0.55)
_GRID = "#444444"


def _render(fig: Figure) -> Image.Image:
    """Rasterise *fig* on an Agg canvas and return it as an RGB image."""
    fig.tight_layout()
    canvas = FigureCanvasAgg(fig)
    canvas.draw()
    rgba = np.asarray(canvas.buffer_rgba())
    return Image.fromarray(rgba).convert("RGB")


def focus_chart(
    totals: list[DailyTotals],
    *,
    title: str = "Focus minutes per day",
    size: tuple[int, int] = (560, 260),
    dpi: int = 100,
) -> Optional[Image.Image]:
    """Stacked bar chart of focus and break minutes per day.

    Returns *None* when *totals* is empty.
    """
    if not totals:
        return None
    totals = sorted(totals, key=lambda t: t.date)

    x = np.arange(len(totals))
    focus = np.array([t.focus_seconds / 60 for t in totals])
    breaks = np.array([t.break_seconds / 60 for t in totals])

    fig_w, fig_h = size[0] / dpi, size[1] / dpi
    fig = Figure(figsize=(fig_w, fig_h), dpi=dpi, facecolor=_BG)
    ax = fig.add_subplot(111)
    ax.set_facecolor(_BG)

    ax.bar(x, focus, color=_FOCUS, width=0.6, label="focus")
    ax.bar(x, breaks, bottom=focus, color=_BREAK, width=0.6, label="break")

    ax.set_xticks(x)
    ax.set_xticklabels([t.date.strftime("%a %d") for t in totals], color=_FG, fontsize=8)
    ax.set_ylabel("Minutes", color=_FG, fontsize=9)
    ax.set_title(title, color=_FG, fontsize=11, fontweight="bold")

    ax.tick_params(colors=_FG, labelsize=8)
    ax.spines["bottom"].set_color(_GRID)
    ax.spines["left"].set_color(_GRID)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.yaxis.grid(color=_GRID, linewidth=0.5)
    ax.set_axisbelow(True)
    legend = ax.legend(frameon=False, fontsize=8)
    for text in legend.get_texts():
        text.set_color(_FG)

    return _render(fig)


def save_focus_chart(totals: list[DailyTotals], path: Path) -> Optional[Path]:
    """Render :func:`focus_chart` to a PNG file. Returns None if there is nothing to draw."""
    img = focus_chart(totals)
    if img is None:
        return None
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    img.save(path, format="PNG")
    return path
