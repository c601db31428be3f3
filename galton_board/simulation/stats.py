"""Presentation-ready statistics derived from a pin field.

Nothing here mutates the field.  Take a snapshot first if the board is
being ticked from another thread (see :meth:`GaltonBoard.stats`).
"""

from __future__ import annotations

import math
from typing import Iterator, NamedTuple

import numpy as np
import pandas as pd

from ..core.pin_field import PinField


class Histogram(NamedTuple):
    bins: np.ndarray  # shape (row_count + 1,), uint64
    maximum: int


def binomial_pmf(n: int) -> np.ndarray:
    """Probability of landing in each of the ``n + 1`` bins of a fair board."""
    coefs = np.array([math.comb(n, k) for k in range(n + 1)], dtype=float)
    return coefs / 2.0 ** n


class StatsView:
    """Read-only view over a :class:`PinField`."""

    def __init__(self, field: PinField) -> None:
        self.field = field

    @property
    def row_count(self) -> int:
        return self.field.row_count

    @property
    def total_paths(self) -> int:
        return self.field.total_paths

    @property
    def last_path(self) -> list[int]:
        return list(self.field.last_path)

    @property
    def last_bin(self) -> int | None:
        return self.field.last_bin

    def segment_alpha(self, row: int, pin_a: int, pin_b: int) -> float:
        """Fraction of all paths that travelled from ``(row, pin_a)`` to
        ``(row + 1, pin_b)``.

        ``pin_b == pin_a`` is the left edge, ``pin_b == pin_a + 1`` the
        right one.  Returns 0.0 before any path has been simulated.
        """
        assert pin_b in (pin_a, pin_a + 1), f"pins {pin_a} and {pin_b} are not adjacent"
        counts = self.field.counts(row, pin_a)
        count = counts.times_left if pin_b == pin_a else counts.times_right
        return count / max(self.field.total_paths, 1)

    def segments(self) -> Iterator[tuple[int, int, int, float]]:
        """Yield ``(row, pin_a, pin_b, alpha)`` for every edge of the board."""
        for row in range(self.row_count):
            for pin in range(row + 1):
                yield row, pin, pin, self.segment_alpha(row, pin, pin)
                yield row, pin, pin + 1, self.segment_alpha(row, pin, pin + 1)

    def histogram(self) -> Histogram:
        """Bin totals at the bottom of the board plus their maximum.

        Bin ``i`` collects right bounces from pin ``i - 1`` and left bounces
        from pin ``i`` of the last row.
        """
        last = self.row_count - 1
        left = self.field.times_left[last, : self.row_count]
        right = self.field.times_right[last, : self.row_count]
        bins = np.zeros(self.row_count + 1, dtype=np.uint64)
        bins[:-1] += left
        bins[1:] += right
        return Histogram(bins=bins, maximum=int(bins.max()))

    def expected_histogram(self) -> np.ndarray:
        """Binomial expectation for the current number of paths."""
        return self.total_paths * binomial_pmf(self.row_count)

    def histogram_frame(self) -> pd.DataFrame:
        hist = self.histogram()
        counts = hist.bins.astype(np.int64)
        return pd.DataFrame({
            "bin": np.arange(self.row_count + 1),
            "count": counts,
            "expected": self.expected_histogram(),
            "share": counts / max(self.total_paths, 1),
        })
