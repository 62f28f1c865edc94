"""Tests for ManualScheduler."""

import pytest

from gambit.game.scheduling import ManualScheduler


class TestCallLater:
    def test_fires_once_when_due(self) -> None:
        sched = ManualScheduler()
        fired: list[int] = []
        sched.call_later(100, lambda: fired.append(sched.now_ms()))
        sched.advance(99)
        assert fired == []
        sched.advance(1)
        assert fired == [100]
        sched.advance(1000)
        assert fired == [100]

    def test_cancel(self) -> None:
        sched = ManualScheduler()
        fired: list[bool] = []
        handle = sched.call_later(10, lambda: fired.append(True))
        assert handle.active
        handle.cancel()
        assert not handle.active
        sched.advance(50)
        assert fired == []

    def test_same_instant_fires_in_order(self) -> None:
        sched = ManualScheduler()
        order: list[str] = []
        sched.call_later(5, lambda: order.append("a"))
        sched.call_later(5, lambda: order.append("b"))
        sched.advance(5)
        assert order == ["a", "b"]


class TestCallRepeating:
    def test_repeats_until_cancelled(self) -> None:
        sched = ManualScheduler()
        stamps: list[int] = []
        handle = sched.call_repeating(100, lambda: stamps.append(sched.now_ms()))
        sched.advance(350)
        assert stamps == [100, 200, 300]
        handle.cancel()
        sched.advance(500)
        assert len(stamps) == 3
        assert sched.pending == 0

    def test_callback_can_cancel_itself(self) -> None:
        sched = ManualScheduler()
        calls: list[int] = []
        handle = sched.call_repeating(10, lambda: (calls.append(1), handle.cancel()))
        sched.advance(100)
        assert calls == [1]

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            ManualScheduler().call_repeating(0, lambda: None)


class TestTime:
    def test_advance_moves_clock(self) -> None:
        sched = ManualScheduler(start_ms=1_000)
        sched.advance(250)
        assert sched.now_ms() == 1_250

    def test_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError):
            ManualScheduler().advance(-1)

    def test_timer_scheduled_inside_callback_fires_in_same_advance(self) -> None:
        sched = ManualScheduler()
        fired: list[int] = []
        sched.call_later(
            10, lambda: sched.call_later(10, lambda: fired.append(sched.now_ms()))
        )
        sched.advance(30)
        assert fired == [20]
