"""Board configuration, input parsing and logging setup."""

from __future__ import annotations

import enum
import logging
import math
import os
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import InvalidConfiguration

LOG_FORMAT = "%(levelname)s: %(message)s"


class CatchUpPolicy(str, enum.Enum):
    """How many batches a single tick may trigger after a stall."""

    DRAIN = "drain"  # run every batch the accumulated time allows
    ONCE = "once"  # at most one batch per tick, carry the remainder


def parse_rate(value: Any) -> float:
    """Validate an animation speed coming from the outside world.

    Accepts numbers and numeric strings.  Returns the rate as a float or
    raises :class:`InvalidConfiguration` if it is malformed, non-finite or
    not strictly positive.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidConfiguration(f"rate must be a number, got {value!r}")
    try:
        rate = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"rate must be a number, got {value!r}") from exc
    if not math.isfinite(rate) or rate <= 0.0:
        raise InvalidConfiguration(f"rate must be positive and finite, got {value!r}")
    return rate


@dataclass(frozen=True)
class BoardConfig:
    """Construction-time constants for a board.

    None of these change while the board runs, except that ``rate`` is only
    the *initial* animation speed.
    """

    row_count: int = 15
    rate: float = 15.0
    batch_size: int = 1
    policy: CatchUpPolicy = CatchUpPolicy.DRAIN
    max_fps: float = 60.0
    max_batches_per_tick: int = 100
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.row_count < 1:
            raise InvalidConfiguration(f"row_count must be >= 1, got {self.row_count}")
        if self.batch_size < 1:
            raise InvalidConfiguration(f"batch_size must be >= 1, got {self.batch_size}")
        if self.max_batches_per_tick < 1:
            raise InvalidConfiguration(
                f"max_batches_per_tick must be >= 1, got {self.max_batches_per_tick}"
            )
        parse_rate(self.rate)
        if not math.isfinite(self.max_fps) or self.max_fps <= 0:
            raise InvalidConfiguration(f"max_fps must be positive, got {self.max_fps}")
        # Normalise plain strings ("drain", "once") to the enum.
        try:
            object.__setattr__(self, "policy", CatchUpPolicy(self.policy))
        except ValueError as exc:
            raise InvalidConfiguration(f"unknown catch-up policy {self.policy!r}") from exc

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BoardConfig:
        """Build a config from ``GALTON_*`` environment variables.

        Unset variables fall back to the dataclass defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}
        try:
            if "GALTON_ROW_COUNT" in env:
                kwargs["row_count"] = int(env["GALTON_ROW_COUNT"])
            if "GALTON_BATCH_SIZE" in env:
                kwargs["batch_size"] = int(env["GALTON_BATCH_SIZE"])
            if "GALTON_SEED" in env:
                kwargs["seed"] = int(env["GALTON_SEED"])
            if "GALTON_MAX_BATCHES" in env:
                kwargs["max_batches_per_tick"] = int(env["GALTON_MAX_BATCHES"])
        except ValueError as exc:
            raise InvalidConfiguration(str(exc)) from exc
        if "GALTON_RATE" in env:
            kwargs["rate"] = parse_rate(env["GALTON_RATE"])
        if "GALTON_POLICY" in env:
            kwargs["policy"] = env["GALTON_POLICY"].strip().lower()
        return cls(**kwargs)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
