"""Pin field: the triangular grid of per-pin left/right counters.

Row ``i`` holds ``i + 1`` pin slots.  Counters live in two square
``uint64`` arrays indexed ``[row, pin]``; slots with ``pin > row`` are
outside the triangle and stay zero forever.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import InvalidConfiguration


@dataclass(frozen=True)
class PinCounts:
    """How many particles bounced left / right off one pin."""

    times_left: int = 0
    times_right: int = 0


class PinField:
    """Accumulated traversal statistics of a board with ``row_count`` rows."""

    def __init__(self, row_count: int) -> None:
        if row_count < 1:
            raise InvalidConfiguration(f"row_count must be >= 1, got {row_count}")
        self.row_count = row_count
        self.times_left = np.zeros((row_count, row_count), dtype=np.uint64)
        self.times_right = np.zeros((row_count, row_count), dtype=np.uint64)
        self.total_paths = 0
        self.last_path: list[int] = [0] * row_count
        self.last_bin: int | None = None

    def _check_slot(self, row: int, pin_index: int) -> None:
        assert 0 <= row < self.row_count, f"row {row} outside 0..{self.row_count - 1}"
        assert 0 <= pin_index <= row, f"pin {pin_index} outside row {row}"

    def record_choice(self, row: int, pin_index: int, went_left: bool) -> None:
        """Count one particle leaving pin ``(row, pin_index)``."""
        self._check_slot(row, pin_index)
        if went_left:
            self.times_left[row, pin_index] += 1
        else:
            self.times_right[row, pin_index] += 1

    def counts(self, row: int, pin_index: int) -> PinCounts:
        self._check_slot(row, pin_index)
        return PinCounts(
            times_left=int(self.times_left[row, pin_index]),
            times_right=int(self.times_right[row, pin_index]),
        )

    def row_totals(self) -> np.ndarray:
        """Per-row sum of left and right counts."""
        return (self.times_left.sum(axis=1) + self.times_right.sum(axis=1)).astype(np.uint64)

    def reset(self) -> None:
        """Zero every counter; ``row_count`` is kept."""
        self.times_left.fill(0)
        self.times_right.fill(0)
        self.total_paths = 0
        self.last_path = [0] * self.row_count
        self.last_bin = None

    def copy(self) -> PinField:
        clone = PinField(self.row_count)
        clone.times_left = self.times_left.copy()
        clone.times_right = self.times_right.copy()
        clone.total_paths = self.total_paths
        clone.last_path = list(self.last_path)
        clone.last_bin = self.last_bin
        return clone

    def __repr__(self) -> str:
        return f"PinField(row_count={self.row_count}, total_paths={self.total_paths})"
