"""Board geometry: where pins, edges and histogram bars go.

Canvas coordinates, y pointing down.  Row ``row_count`` is the bin row.
"""

from __future__ import annotations

from dataclasses import dataclass

WIDTH = 1920.0
HEIGHT = 1080.0
PIN_RADIUS = 7.0
PIN_INTERVAL = 40.0


@dataclass(frozen=True)
class BoardLayout:
    row_count: int = 15
    width: float = WIDTH
    height: float = HEIGHT
    pin_radius: float = PIN_RADIUS
    pin_interval: float = PIN_INTERVAL

    @property
    def pins_start_y(self) -> float:
        return self.pin_interval

    @property
    def histogram_base_y(self) -> float:
        return self.height - self.pin_interval

    @property
    def histogram_top_y(self) -> float:
        return self.pins_start_y + self.row_count * self.pin_interval

    @property
    def bar_width(self) -> float:
        return self.pin_interval / 2

    def pin_position(self, row: int, index: int) -> tuple[float, float]:
        x = self.width / 2 - (row / 2) * self.pin_interval + index * self.pin_interval
        y = self.pin_interval * row + self.pins_start_y
        return x, y

    def row_positions(self, row: int) -> list[tuple[float, float]]:
        return [self.pin_position(row, i) for i in range(row + 1)]

    def segment(
        self, row: int, pin_a: int, pin_b: int,
    ) -> tuple[tuple[float, float], tuple[float, float]]:
        """Endpoints of the edge from ``(row, pin_a)`` to ``(row + 1, pin_b)``."""
        return self.pin_position(row, pin_a), self.pin_position(row + 1, pin_b)

    def bin_x(self, index: int) -> float:
        return self.pin_position(self.row_count, index)[0]

    def bar_height(self, count: int, maximum: int) -> float:
        """Bar length in pixels, scaled so the fullest bin fills the gap
        between the histogram base and the last pin row."""
        if maximum <= 0:
            return 0.0
        return (count / maximum) * (self.histogram_base_y - self.histogram_top_y)
