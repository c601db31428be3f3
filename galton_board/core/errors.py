"""Error types raised at the configuration boundary."""

from __future__ import annotations


class InvalidConfiguration(ValueError):
    """A configuration value or user input was rejected.

    Raised for non-positive or non-finite rates, malformed numeric input and
    out-of-range board parameters.  The simulation state is left unchanged.
    """
