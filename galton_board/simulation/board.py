"""The board aggregate: one lock around all shared simulation state.

Ticks from a frame source and events from an input source may arrive on
different threads.  :class:`GaltonBoard` is the only object that touches
the pin field, simulator and scheduler, and every public method holds the
same lock, so a batch never interleaves with a reset or a rate change.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from ..core.choices import ChoiceSource, random_choices
from ..core.config import BoardConfig, CatchUpPolicy, parse_rate
from ..core.errors import InvalidConfiguration
from ..core.pin_field import PinField
from .path_simulator import PathSimulator
from .scheduler import UpdateScheduler
from .stats import StatsView

logger = logging.getLogger(__name__)


# ── Input events ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Reset:
    """Clear all statistics and the scheduler's accumulated time."""


@dataclass(frozen=True)
class SetRate:
    """Change the animation speed; ``value`` is validated on receipt."""

    value: Any


InputEvent = Union[Reset, SetRate]


class GaltonBoard:
    """Pin field, simulator and scheduler behind a single lock."""

    def __init__(
        self,
        row_count: int = 15,
        rate: float = 15.0,
        batch_size: int = 1,
        policy: CatchUpPolicy = CatchUpPolicy.DRAIN,
        choices: ChoiceSource | None = None,
        max_batches_per_tick: int = 100,
    ) -> None:
        self._lock = threading.Lock()
        self._field = PinField(row_count)
        self._simulator = PathSimulator(self._field, choices)
        self._scheduler = UpdateScheduler(
            self._simulator.simulate_batch, rate, batch_size, policy,
            max_batches_per_tick,
        )

    @classmethod
    def from_config(
        cls,
        config: BoardConfig,
        rng: np.random.Generator | None = None,
        choices: ChoiceSource | None = None,
    ) -> GaltonBoard:
        if choices is None:
            choices = random_choices(rng or np.random.default_rng(config.seed))
        return cls(
            row_count=config.row_count,
            rate=config.rate,
            batch_size=config.batch_size,
            policy=config.policy,
            choices=choices,
            max_batches_per_tick=config.max_batches_per_tick,
        )

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def row_count(self) -> int:
        return self._field.row_count

    @property
    def rate(self) -> float:
        with self._lock:
            return self._scheduler.rate

    @property
    def batch_size(self) -> int:
        return self._scheduler.batch_size

    @property
    def total_paths(self) -> int:
        with self._lock:
            return self._field.total_paths

    # ------------------------------------------------------------------
    # Frame source side
    # ------------------------------------------------------------------

    def tick(self, now: float) -> int:
        """Deliver a frame timestamp (seconds); returns batches simulated."""
        with self._lock:
            return self._scheduler.tick(now)

    def resume(self, now: float) -> None:
        """Restart the clock at *now*, dropping time elapsed while paused."""
        with self._lock:
            self._scheduler.start(now)
            self._scheduler.reset()

    def run(self, num_paths: int) -> None:
        """Simulate *num_paths* particles right away, bypassing the clock."""
        with self._lock:
            self._simulator.simulate_batch(num_paths)

    # ------------------------------------------------------------------
    # Input source side
    # ------------------------------------------------------------------

    def reset(self) -> None:
        with self._lock:
            self._field.reset()
            self._scheduler.reset()
        logger.info("Board reset (%d rows)", self.row_count)

    def set_rate(self, value: Any) -> float:
        """Change the rate or raise :class:`InvalidConfiguration`."""
        rate = parse_rate(value)
        with self._lock:
            self._scheduler.set_rate(rate)
        logger.info("Rate set to %g batches/s", rate)
        return rate

    def handle(self, event: InputEvent) -> bool:
        """Apply an input event.  Returns ``False`` if it was rejected."""
        if isinstance(event, Reset):
            self.reset()
            return True
        if isinstance(event, SetRate):
            try:
                self.set_rate(event.value)
            except InvalidConfiguration as exc:
                logger.warning("Ignoring rate change: %s", exc)
                return False
            return True
        raise TypeError(f"unknown input event {event!r}")

    # ------------------------------------------------------------------
    # Renderer side
    # ------------------------------------------------------------------

    def snapshot(self) -> PinField:
        """Copy of the pin field taken under the lock."""
        with self._lock:
            return self._field.copy()

    def stats(self) -> StatsView:
        return StatsView(self.snapshot())
