"""Path simulator — drops particles through the pin field."""

from __future__ import annotations

from ..core.choices import ChoiceSource, random_choices
from ..core.pin_field import PinField


class PathSimulator:
    """Advances particles through a :class:`PinField`.

    Every row is a decision point, including the last one: its decision
    picks the bin the particle lands in.
    """

    def __init__(self, field: PinField, choices: ChoiceSource | None = None) -> None:
        self.field = field
        self.choices = choices or random_choices()

    def simulate_path(self) -> tuple[int, ...]:
        """Simulate one particle and return the pin it hit in each row."""
        field = self.field
        # Draw every decision before touching the counters so a failing
        # choice source leaves the field as it was.
        decisions = [self.choices() for _ in range(field.row_count)]
        current_pin = 0
        for row, went_left in enumerate(decisions):
            field.record_choice(row, current_pin, went_left)
            # Pre-move index: the pin the particle decided at.
            field.last_path[row] = current_pin
            if not went_left:
                current_pin += 1
        field.last_bin = current_pin
        field.total_paths += 1
        return tuple(field.last_path)

    def simulate_batch(self, n: int) -> int:
        """Simulate *n* particles; ``last_path`` keeps only the last one."""
        assert n >= 0, f"batch size must be non-negative, got {n}"
        for _ in range(n):
            self.simulate_path()
        return n
