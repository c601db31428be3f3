"""Update scheduler — decouples simulation cadence from frame cadence.

The frame source calls :meth:`UpdateScheduler.tick` with a monotonic
timestamp in seconds whenever it gets around to it.  Elapsed time is
accumulated and converted into batches at ``rate`` batches per second, so
the board fills at the same speed whether the display refreshes at 10 Hz or
144 Hz.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable

from ..core.config import CatchUpPolicy, parse_rate
from ..core.errors import InvalidConfiguration

logger = logging.getLogger(__name__)


class UpdateScheduler:
    """Turns elapsed time into calls of ``step(batch_size)``.

    Parameters
    ----------
    step:
        Callable run once per triggered update, normally
        :meth:`PathSimulator.simulate_batch`.
    rate:
        Triggered updates per second.  Must be positive and finite.
    policy:
        ``DRAIN`` runs every batch the accumulated time pays for; ``ONCE``
        runs at most one per tick and carries the rest forward.
    max_batches_per_tick:
        Upper bound on batches a single tick may run under ``DRAIN``.  Time
        owed beyond the cap is dropped, so one tick never runs longer than
        ``max_batches_per_tick * batch_size`` paths however large the rate
        or the stall.
    """

    def __init__(
        self,
        step: Callable[[int], Any],
        rate: float,
        batch_size: int = 1,
        policy: CatchUpPolicy = CatchUpPolicy.DRAIN,
        max_batches_per_tick: int = 100,
    ) -> None:
        if batch_size < 1:
            raise InvalidConfiguration(f"batch_size must be >= 1, got {batch_size}")
        if max_batches_per_tick < 1:
            raise InvalidConfiguration(
                f"max_batches_per_tick must be >= 1, got {max_batches_per_tick}"
            )
        self.step = step
        self.rate = parse_rate(rate)
        self.batch_size = batch_size
        self.policy = CatchUpPolicy(policy)
        self.max_batches_per_tick = max_batches_per_tick
        self.accumulated_time = 0.0
        self.previous_now: float | None = None

    @property
    def interval(self) -> float:
        """Seconds of accumulated time consumed per batch."""
        return 1.0 / self.rate

    def start(self, now: float) -> None:
        self.previous_now = now

    def tick(self, now: float) -> int:
        """Advance the clock to *now*; return the number of batches run."""
        if self.previous_now is None:
            self.previous_now = now
            return 0

        dt = now - self.previous_now
        if dt < 0:
            logger.debug("Clock went backwards by %.6fs; clamping to 0", -dt)
            dt = 0.0
        self.accumulated_time += dt
        self.previous_now = now

        interval = self.interval
        batches = 0
        while self.accumulated_time >= interval:
            self.accumulated_time -= interval
            self.step(self.batch_size)
            batches += 1
            if self.policy is CatchUpPolicy.ONCE:
                break
            if batches >= self.max_batches_per_tick:
                if self.accumulated_time >= interval:
                    skipped = int(self.accumulated_time // interval)
                    self.accumulated_time = math.fmod(self.accumulated_time, interval)
                    logger.debug("Tick capped at %d batches; dropped %d",
                                 batches, skipped)
                break
        if batches > 1:
            logger.debug("Caught up %d batches in one tick", batches)
        return batches

    def set_rate(self, rate: Any) -> float:
        """Replace the rate; invalid values raise and leave it unchanged."""
        self.rate = parse_rate(rate)
        return self.rate

    def reset(self) -> None:
        """Drop any accumulated time.  ``previous_now`` is kept."""
        self.accumulated_time = 0.0
