"""Chess clocks with Fischer increment support.

:class:`Clock` is one player's countdown. :class:`ClockCoordinator` owns the
two clocks of a session and guarantees that at most one of them is running.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from gambit.core.enums import Color
from gambit.game.interfaces import TimeControl
from gambit.game.scheduling import IScheduler, TimerHandle

_LOGGER = logging.getLogger(__name__)

TickCallback = Callable[[int], None]  # remaining ms
TimeoutCallback = Callable[[], None]

ClockTickCallback = Callable[[Color, int], None]  # color, remaining ms
ClockTimeoutCallback = Callable[[Color], None]


class Clock:
    """A single countdown timer.

    While running, the clock wakes up every :attr:`TICK_INTERVAL_MS` and
    subtracts the time actually elapsed on the scheduler's time source, so
    late ticks do not make the clock run slow.
    """

    TICK_INTERVAL_MS = 100

    __slots__ = (
        "_scheduler",
        "_initial_ms",
        "_remaining",
        "_last_tick",
        "_timer",
        "_timed_out",
        "_on_tick",
        "_on_timeout",
    )

    def __init__(
        self,
        initial_ms: int,
        scheduler: IScheduler,
        *,
        on_tick: TickCallback | None = None,
        on_timeout: TimeoutCallback | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._initial_ms = initial_ms
        self._remaining = initial_ms
        self._last_tick = 0
        self._timer: TimerHandle | None = None
        self._timed_out = False
        self._on_tick = on_tick
        self._on_timeout = on_timeout

    # ── Control ──────────────────────────────────────────────────────────

    def start(self) -> None:
        self.stop()
        self._last_tick = self._scheduler.now_ms()
        self._timer = self._scheduler.call_repeating(self.TICK_INTERVAL_MS, self._tick)

    def stop(self) -> None:
        if self._timer is None:
            return
        self._consume_elapsed()
        self._timer.cancel()
        self._timer = None

    def add_increment(self, seconds: int) -> None:
        if seconds == 0:
            return
        self._remaining += seconds * 1000
        self._emit_tick()

    def reset(self, initial_ms: int | None = None) -> None:
        """Stop and restore the initial allotment (optionally a new one)."""
        self.stop()
        if initial_ms is not None:
            self._initial_ms = initial_ms
        self._remaining = self._initial_ms
        self._timed_out = False
        self._emit_tick()

    def set_remaining(self, milliseconds: int) -> None:
        """Overwrite remaining time (used when restoring a snapshot)."""
        self._remaining = max(0, milliseconds)
        self._timed_out = False
        if self._timer is not None:
            self._last_tick = self._scheduler.now_ms()

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def remaining_ms(self) -> int:
        return self._remaining

    @property
    def initial_ms(self) -> int:
        return self._initial_ms

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    # ── Internal ─────────────────────────────────────────────────────────

    def _consume_elapsed(self) -> None:
        now = self._scheduler.now_ms()
        elapsed = now - self._last_tick
        self._last_tick = now
        self._remaining = max(0, self._remaining - elapsed)

    def _tick(self) -> None:
        if self._timer is None:
            return
        self._consume_elapsed()
        if self._remaining > 0 or self._timed_out:
            self._emit_tick()
            if self._remaining <= 0:
                self.stop()
            return

        # First tick to observe an empty clock: stop, then notify once.
        self._timed_out = True
        self.stop()
        self._emit_tick()
        if self._on_timeout is not None:
            self._on_timeout()

    def _emit_tick(self) -> None:
        if self._on_tick is not None:
            self._on_tick(self._remaining)


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Both remaining times plus the running side, for undo/navigation."""

    white_ms: int
    black_ms: int
    active_color: Color | None


@dataclass
class ClockEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_tick: list[ClockTickCallback] = field(default_factory=list)
    on_timeout: list[ClockTimeoutCallback] = field(default_factory=list)


class ClockCoordinator:
    """Owns both players' clocks; at most one runs at any instant."""

    __slots__ = ("_time_control", "_clocks", "events")

    def __init__(self, time_control: TimeControl, scheduler: IScheduler) -> None:
        self._time_control = time_control
        self.events = ClockEvents()
        self._clocks: dict[Color, Clock] = {
            color: Clock(
                time_control.initial_ms,
                scheduler,
                on_tick=self._make_tick_handler(color),
                on_timeout=self._make_timeout_handler(color),
            )
            for color in Color
        }

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def time_control(self) -> TimeControl:
        return self._time_control

    @property
    def active_color(self) -> Color | None:
        for color, clock in self._clocks.items():
            if clock.is_running:
                return color
        return None

    def clock(self, color: Color) -> Clock:
        return self._clocks[color]

    def remaining(self, color: Color) -> int:
        return self._clocks[color].remaining_ms

    def is_running(self, color: Color) -> bool:
        return self._clocks[color].is_running

    # ── Turn protocol ────────────────────────────────────────────────────

    def start(self, color: Color) -> None:
        """Stop the other side's clock, then start *color*'s."""
        self._clocks[color.opposite].stop()
        self._clocks[color].start()

    def switch(self, from_color: Color, to_color: Color) -> None:
        """Hand the move over: stop, credit the mover's increment, start."""
        self._clocks[from_color].stop()
        self._clocks[from_color].add_increment(self._time_control.increment_seconds)
        self.start(to_color)

    def stop_all(self) -> None:
        for clock in self._clocks.values():
            clock.stop()

    def set_time_control(self, time_control: TimeControl) -> None:
        self.stop_all()
        self._time_control = time_control
        for clock in self._clocks.values():
            clock.reset(time_control.initial_ms)

    def reset(self) -> None:
        for clock in self._clocks.values():
            clock.reset()

    # ── Snapshots ────────────────────────────────────────────────────────

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            white_ms=self.remaining(Color.WHITE),
            black_ms=self.remaining(Color.BLACK),
            active_color=self.active_color,
        )

    def restore(self, snapshot: ClockSnapshot, *, resume: bool = True) -> None:
        """Restore times; restart the recorded side's clock if *resume*."""
        self.stop_all()
        self._clocks[Color.WHITE].set_remaining(snapshot.white_ms)
        self._clocks[Color.BLACK].set_remaining(snapshot.black_ms)
        if resume and snapshot.active_color is not None:
            self.start(snapshot.active_color)

    # ── Internal ─────────────────────────────────────────────────────────

    def _make_tick_handler(self, color: Color) -> TickCallback:
        def handler(remaining: int) -> None:
            for cb in self.events.on_tick:
                cb(color, remaining)

        return handler

    def _make_timeout_handler(self, color: Color) -> TimeoutCallback:
        def handler() -> None:
            self.stop_all()
            _LOGGER.info("%s flag fell", color)
            for cb in self.events.on_timeout:
                cb(color)

        return handler
