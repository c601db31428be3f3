"""Matplotlib-based rendering and animation of a Galton board."""

from __future__ import annotations

import time
from typing import Any, Callable

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.collections import LineCollection

from ..simulation.board import GaltonBoard
from ..simulation.geometry import BoardLayout
from ..simulation.stats import StatsView

PATH_COLOR = (1.0, 0.2, 0.2)
BACKGROUND = "#333333"


class BoardRenderer:
    """Draws pins, traversal density, the latest path and the histogram."""

    def __init__(self, board: GaltonBoard, layout: BoardLayout | None = None) -> None:
        self.board = board
        self.layout = layout or BoardLayout(row_count=board.row_count)
        self._min_frame_time = 1.0 / 60.0
        self._last_draw = -np.inf

    def _pin_positions(self) -> tuple[np.ndarray, np.ndarray]:
        pts = [
            pos
            for row in range(self.board.row_count + 1)
            for pos in self.layout.row_positions(row)
        ]
        xs, ys = zip(*pts)
        return np.array(xs), np.array(ys)

    def _segment_collection(self, stats: StatsView) -> LineCollection:
        lines = []
        colors = []
        for row, a, b, alpha in stats.segments():
            lines.append(self.layout.segment(row, a, b))
            colors.append((1.0, 1.0, 1.0, min(alpha, 1.0)))
        return LineCollection(lines, colors=colors, linewidths=3, zorder=1)

    def _path_line(self, stats: StatsView) -> tuple[list[float], list[float]]:
        if stats.total_paths == 0:
            return [], []
        pins = stats.last_path + [stats.last_bin]
        pts = [self.layout.pin_position(row, pin) for row, pin in enumerate(pins)]
        xs, ys = zip(*pts)
        return list(xs), list(ys)

    def render(
        self,
        *,
        title: str = "Galton Board",
        show_expected: bool = True,
        ax: Any = None,
    ) -> Any:
        """Draw the current board state onto *ax* (created if ``None``)."""
        if ax is None:
            _fig, ax = plt.subplots(1, 1, figsize=(12, 7))
        ax.clear()
        stats = self.board.stats()
        layout = self.layout

        ax.set_facecolor(BACKGROUND)
        ax.add_collection(self._segment_collection(stats))

        xs, ys = self._pin_positions()
        ax.scatter(xs, ys, s=layout.pin_radius * 4, c="white", zorder=2)

        px, py = self._path_line(stats)
        if px:
            ax.plot(px, py, color=PATH_COLOR, linewidth=3, zorder=3)

        hist = stats.histogram()
        base = layout.histogram_base_y
        for i, count in enumerate(hist.bins):
            h = layout.bar_height(int(count), hist.maximum)
            color = PATH_COLOR if i == stats.last_bin else "white"
            ax.bar(layout.bin_x(i), -h, width=layout.bar_width, bottom=base,
                   color=color, zorder=2)

        if show_expected and stats.total_paths:
            expected = stats.expected_histogram()
            heights = [layout.bar_height(e, hist.maximum) for e in expected]
            bx = [layout.bin_x(i) for i in range(len(expected))]
            ax.plot(bx, [base - h for h in heights], color="#60a5fa",
                    linewidth=1.5, linestyle="--", zorder=4)

        ax.set_xlim(0, layout.width)
        ax.set_ylim(layout.height, 0)
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])
        ax.set_title(f"{title} — {stats.total_paths} paths")
        return ax

    def advance(self, now: float, ax: Any) -> bool:
        """Tick the board to *now* and redraw unless the last redraw was
        too recent.  Returns whether a redraw happened."""
        self.board.tick(now)
        if now - self._last_draw < self._min_frame_time:
            return False
        self._last_draw = now
        self.render(ax=ax)
        return True

    def animate(
        self,
        num_frames: int | None = None,
        *,
        interval_ms: int = 16,
        max_fps: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> FuncAnimation:
        """Animate the board, using matplotlib's timer as the frame source.

        Every frame delivers ``clock()`` to :meth:`GaltonBoard.tick`.
        Redraws are skipped when frames arrive faster than *max_fps*;
        the simulation still advances on every frame.
        """
        fig, ax = plt.subplots(1, 1, figsize=(12, 7))
        fig.patch.set_facecolor(BACKGROUND)
        self.board.tick(clock())
        self._min_frame_time = 1.0 / max_fps

        def update(frame: int) -> Any:
            self.advance(clock(), ax)
            return ()

        return FuncAnimation(fig, update, frames=num_frames,
                             interval=interval_ms, blit=False,
                             cache_frame_data=False)
