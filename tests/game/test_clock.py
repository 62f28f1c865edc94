"""Tests for Clock."""

from gambit.game.clock import Clock
from gambit.game.scheduling import ManualScheduler


def _clock(
    initial_ms: int = 300_000,
) -> tuple[Clock, ManualScheduler, list[int], list[bool]]:
    sched = ManualScheduler()
    ticks: list[int] = []
    timeouts: list[bool] = []
    clock = Clock(
        initial_ms,
        sched,
        on_tick=ticks.append,
        on_timeout=lambda: timeouts.append(True),
    )
    return clock, sched, ticks, timeouts


class TestClockBasics:
    def test_initial_remaining(self) -> None:
        clock, *_ = _clock()
        assert clock.remaining_ms == 300_000
        assert not clock.is_running

    def test_start_sets_running(self) -> None:
        clock, *_ = _clock()
        clock.start()
        assert clock.is_running

    def test_stop_pauses(self) -> None:
        clock, sched, _, _ = _clock()
        clock.start()
        sched.advance(500)
        clock.stop()
        sched.advance(10_000)
        assert not clock.is_running
        assert clock.remaining_ms == 299_500

    def test_stop_is_idempotent(self) -> None:
        clock, *_ = _clock()
        clock.stop()
        clock.stop()
        assert clock.remaining_ms == 300_000

    def test_ticks_every_100ms(self) -> None:
        clock, sched, ticks, _ = _clock()
        clock.start()
        sched.advance(350)
        assert ticks == [299_900, 299_800, 299_700]

    def test_stop_consumes_partial_interval(self) -> None:
        clock, sched, _, _ = _clock()
        clock.start()
        sched.advance(150)
        clock.stop()
        assert clock.remaining_ms == 299_850

    def test_restart_does_not_double_tick(self) -> None:
        clock, sched, ticks, _ = _clock()
        clock.start()
        clock.start()
        assert sched.pending == 1
        sched.advance(100)
        assert ticks == [299_900]

    def test_stop_between_ticks_uses_time_source(self) -> None:
        clock, sched, _, _ = _clock()
        clock.start()
        sched.advance(99)
        assert clock.remaining_ms == 300_000
        sched.advance(151)
        assert clock.remaining_ms == 299_800
        clock.stop()
        assert clock.remaining_ms == 299_750

    def test_set_remaining_while_running_restarts_measurement(self) -> None:
        clock, sched, _, _ = _clock()
        clock.start()
        sched.advance(50)
        clock.set_remaining(1_000)
        sched.advance(50)
        assert clock.remaining_ms == 950


class TestClockIncrement:
    def test_increment_adds_milliseconds(self) -> None:
        clock, _, ticks, _ = _clock(10_000)
        clock.add_increment(2)
        clock.add_increment(2)
        assert clock.remaining_ms == 14_000
        assert ticks == [12_000, 14_000]

    def test_zero_increment_is_noop(self) -> None:
        clock, _, ticks, _ = _clock(10_000)
        clock.add_increment(0)
        assert clock.remaining_ms == 10_000
        assert ticks == []


class TestClockTimeout:
    def test_timeout_fires_once_and_stops(self) -> None:
        clock, sched, ticks, timeouts = _clock(250)
        clock.start()
        sched.advance(300)
        assert timeouts == [True]
        assert clock.remaining_ms == 0
        assert clock.timed_out
        assert not clock.is_running
        assert ticks[-1] == 0
        sched.advance(1_000)
        assert timeouts == [True]

    def test_restart_after_timeout_does_not_fire_again(self) -> None:
        clock, sched, _, timeouts = _clock(100)
        clock.start()
        sched.advance(100)
        assert timeouts == [True]
        clock.start()
        sched.advance(500)
        assert timeouts == [True]
        assert not clock.is_running

    def test_reset_rearms_timeout(self) -> None:
        clock, sched, _, timeouts = _clock(100)
        clock.start()
        sched.advance(100)
        clock.reset()
        assert clock.remaining_ms == 100
        assert not clock.timed_out
        clock.start()
        sched.advance(100)
        assert timeouts == [True, True]

    def test_remaining_never_negative(self) -> None:
        clock, sched, _, _ = _clock(50)
        clock.start()
        sched.advance(100)
        assert clock.remaining_ms == 0


class TestClockReset:
    def test_reset_restores_initial(self) -> None:
        clock, sched, _, _ = _clock(60_000)
        clock.start()
        sched.advance(5_000)
        clock.reset()
        assert not clock.is_running
        assert clock.remaining_ms == 60_000

    def test_reset_with_new_allotment(self) -> None:
        clock, *_ = _clock(60_000)
        clock.reset(180_000)
        assert clock.initial_ms == 180_000
        assert clock.remaining_ms == 180_000
