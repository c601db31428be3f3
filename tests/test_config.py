"""Tests for configuration and input parsing."""

from __future__ import annotations

import math

import pytest

from galton_board.core.config import BoardConfig, CatchUpPolicy, parse_rate
from galton_board.core.errors import InvalidConfiguration


class TestParseRate:
    @pytest.mark.parametrize("value, expected", [(1, 1.0), (15.5, 15.5), ("50", 50.0), (" 2.5 ", 2.5)])
    def test_accepts_positive_numbers(self, value, expected):
        """Positive numbers and numeric strings parse to floats."""
        assert parse_rate(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "-2", "abc", "", None, True, math.inf, math.nan, [1]])
    def test_rejects_bad_input(self, value):
        """Zero, negatives, non-finite and non-numeric values are refused."""
        with pytest.raises(InvalidConfiguration):
            parse_rate(value)

    def test_error_is_a_value_error(self):
        """Callers catching ValueError also catch bad rates."""
        with pytest.raises(ValueError):
            parse_rate("nope")


class TestBoardConfig:
    def test_defaults(self):
        """Defaults describe a 15-row board draining one path per batch."""
        cfg = BoardConfig()
        assert cfg.row_count == 15
        assert cfg.batch_size == 1
        assert cfg.policy is CatchUpPolicy.DRAIN
        assert cfg.max_batches_per_tick == 100

    @pytest.mark.parametrize("kwargs", [
        {"row_count": 0},
        {"batch_size": 0},
        {"rate": -1.0},
        {"max_fps": 0.0},
        {"max_batches_per_tick": 0},
        {"policy": "sometimes"},
    ])
    def test_invalid_values(self, kwargs):
        """Each out-of-range field is rejected at construction."""
        with pytest.raises(InvalidConfiguration):
            BoardConfig(**kwargs)

    def test_policy_string_normalised(self):
        """Policy names are turned into the enum."""
        assert BoardConfig(policy="once").policy is CatchUpPolicy.ONCE

    def test_from_env(self):
        """Every GALTON_* variable lands in its field."""
        cfg = BoardConfig.from_env({
            "GALTON_ROW_COUNT": "16",
            "GALTON_RATE": "1",
            "GALTON_BATCH_SIZE": "50",
            "GALTON_POLICY": "ONCE",
            "GALTON_SEED": "42",
            "GALTON_MAX_BATCHES": "7",
        })
        assert cfg == BoardConfig(row_count=16, rate=1.0, batch_size=50,
                                  policy=CatchUpPolicy.ONCE, seed=42,
                                  max_batches_per_tick=7)

    def test_from_env_defaults(self):
        """An empty environment gives the default config."""
        assert BoardConfig.from_env({}) == BoardConfig()

    @pytest.mark.parametrize("name", ["GALTON_ROW_COUNT", "GALTON_MAX_BATCHES"])
    def test_from_env_bad_int(self, name):
        """Non-integer values for integer settings are rejected."""
        with pytest.raises(InvalidConfiguration):
            BoardConfig.from_env({name: "many"})
