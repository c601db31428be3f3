"""Tests for the locked board aggregate and its input events."""

from __future__ import annotations

import threading

import numpy as np
import pytest

from galton_board.core.choices import ScriptedChoices
from galton_board.core.config import BoardConfig
from galton_board.core.errors import InvalidConfiguration
from galton_board.simulation.board import GaltonBoard, Reset, SetRate


def _board(**kwargs) -> GaltonBoard:
    kwargs.setdefault("row_count", 6)
    kwargs.setdefault("rate", 4.0)
    return GaltonBoard.from_config(BoardConfig(**kwargs),
                                   rng=np.random.default_rng(0))


class TestTicks:
    def test_tick_runs_batches(self):
        """Two intervals of elapsed time run two batches of five."""
        board = _board(batch_size=5)
        board.tick(0.0)
        assert board.tick(0.5) == 2
        assert board.total_paths == 10

    def test_resume_discards_paused_time(self):
        """Time spent paused is neither simulated nor carried over."""
        board = _board()
        board.tick(0.0)
        board.tick(0.125)
        board.resume(60.0)
        assert board.tick(60.125) == 0
        assert board.total_paths == 0

    def test_run_bypasses_clock(self):
        """run() simulates the requested paths without any ticks."""
        board = _board()
        board.run(25)
        assert board.total_paths == 25

    def test_once_policy_from_config(self):
        """The catch-up policy is taken from the config."""
        board = _board(policy="once")
        board.tick(0.0)
        assert board.tick(1.0) == 1


class TestTickCap:
    def test_huge_rate_is_bounded_per_tick(self):
        """A rate of 1e12 still runs at most the default cap per tick."""
        board = _board(batch_size=2)
        board.tick(0.0)
        assert board.handle(SetRate("1e12")) is True
        assert board.tick(0.1) == 100
        assert board.total_paths == 200

    def test_cap_from_config(self):
        """max_batches_per_tick flows from the config to the scheduler."""
        board = _board(max_batches_per_tick=3)
        board.tick(0.0)
        assert board.tick(3600.0) == 3
        assert board.total_paths == 3

    def test_reset_not_starved_by_huge_rate(self):
        """A reset gets the lock promptly while a ticker runs at 1e12/s."""
        board = _board(row_count=4, rate=1e12)
        board.tick(0.0)
        stop = threading.Event()

        def ticker() -> None:
            t = 0.0
            while not stop.is_set():
                t += 0.05
                board.tick(t)

        thread = threading.Thread(target=ticker)
        thread.start()
        try:
            resetter = threading.Thread(target=board.handle, args=(Reset(),))
            resetter.start()
            resetter.join(timeout=5.0)
            assert not resetter.is_alive()
        finally:
            stop.set()
            thread.join()


class TestEvents:
    def test_reset_event(self):
        """Reset zeroes the counters and the path count."""
        board = _board()
        board.run(10)
        assert board.handle(Reset()) is True
        snap = board.snapshot()
        assert snap.total_paths == 0
        assert int(snap.times_left.sum() + snap.times_right.sum()) == 0

    def test_reset_clears_accumulator(self):
        """Time owed before a reset is forgotten."""
        board = _board()
        board.tick(0.0)
        board.tick(0.125)
        board.handle(Reset())
        assert board.tick(0.25) == 0

    def test_set_rate_event(self):
        """A numeric string is accepted as a rate."""
        board = _board()
        assert board.handle(SetRate("8")) is True
        assert board.rate == 8.0

    @pytest.mark.parametrize("bad", [-1, 0, "abc", "", float("nan"), None, True])
    def test_invalid_rate_rejected_and_logged(self, bad, caplog):
        """Bad rates are logged, ignored, and the old rate keeps ticking."""
        board = _board(rate=4.0)
        board.tick(0.0)
        assert board.handle(SetRate(bad)) is False
        assert board.rate == 4.0
        assert "Ignoring rate change" in caplog.text
        assert board.tick(0.25) == 1

    def test_set_rate_raises_directly(self):
        """Calling set_rate() directly surfaces the error."""
        board = _board()
        with pytest.raises(InvalidConfiguration):
            board.set_rate(-3)

    def test_unknown_event(self):
        """Anything other than Reset or SetRate is a TypeError."""
        with pytest.raises(TypeError):
            _board().handle("reset")


class TestSnapshots:
    def test_snapshot_is_a_copy(self):
        """Later batches do not show up in an earlier snapshot."""
        board = _board()
        board.run(3)
        snap = board.snapshot()
        board.run(3)
        assert snap.total_paths == 3
        assert board.total_paths == 6

    def test_scripted_board(self):
        """A scripted board lands where the script says."""
        board = GaltonBoard(row_count=3, rate=1.0, choices=ScriptedChoices("LRL"))
        board.run(1)
        stats = board.stats()
        assert stats.last_path == [0, 0, 1]
        assert stats.histogram().bins.tolist() == [0, 1, 0, 0]


class TestConcurrency:
    def test_ticks_and_resets_never_tear(self):
        """Concurrent resets must never expose a half-applied batch."""
        board = _board(row_count=8, rate=1000.0, batch_size=20)
        board.tick(0.0)
        stop = threading.Event()
        errors: list[str] = []

        def ticker() -> None:
            t = 0.0
            while not stop.is_set():
                t += 0.01
                board.tick(t)

        def resetter() -> None:
            while not stop.is_set():
                board.handle(Reset())
                board.handle(SetRate(500.0))

        threads = [threading.Thread(target=ticker), threading.Thread(target=resetter)]
        for t in threads:
            t.start()
        for _ in range(200):
            snap = board.snapshot()
            totals = snap.row_totals()
            if any(int(x) != snap.total_paths for x in totals):
                errors.append(f"torn state: {totals} vs {snap.total_paths}")
            if snap.total_paths % 20:
                errors.append(f"partial batch: {snap.total_paths}")
        stop.set()
        for t in threads:
            t.join()
        assert errors == []
