"""Sources of left/right decisions.

A choice source is any zero-argument callable returning ``True`` for "left".
"""

from __future__ import annotations

from typing import Callable, Iterable

import numpy as np

ChoiceSource = Callable[[], bool]


def random_choices(rng: np.random.Generator | None = None) -> ChoiceSource:
    """Fair, independent coin flips drawn from a numpy generator."""
    rng = rng or np.random.default_rng()

    def draw() -> bool:
        return bool(rng.random() < 0.5)

    return draw


class ScriptedChoices:
    """Replay a fixed sequence of decisions.

    Items may be booleans (``True`` = left) or the strings ``"L"`` / ``"R"``;
    strings such as ``"LRL"`` are split into single characters.
    """

    def __init__(self, sequence: Iterable[bool | str]) -> None:
        self._choices: list[bool] = []
        for item in sequence:
            if isinstance(item, str):
                self._choices.extend(self._parse(ch) for ch in item)
            else:
                self._choices.append(bool(item))
        self._position = 0

    @staticmethod
    def _parse(ch: str) -> bool:
        ch = ch.upper()
        if ch not in ("L", "R"):
            raise ValueError(f"expected 'L' or 'R', got {ch!r}")
        return ch == "L"

    @property
    def remaining(self) -> int:
        return len(self._choices) - self._position

    def __call__(self) -> bool:
        if self._position >= len(self._choices):
            raise RuntimeError("scripted choice sequence exhausted")
        choice = self._choices[self._position]
        self._position += 1
        return choice
