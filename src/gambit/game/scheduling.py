"""Timer scheduling for the single-threaded session model.

Everything that happens "later" (clock ticks, simulated engine thinking)
goes through an :class:`IScheduler`. Production code runs on the Qt event
loop (:class:`gambit.game.qt_bridge.QtScheduler`); tests and headless
simulations use :class:`ManualScheduler`, whose time only moves when
:meth:`ManualScheduler.advance` is called.
"""

from __future__ import annotations

import heapq
import itertools
from abc import ABC, abstractmethod
from collections.abc import Callable

TimerCallback = Callable[[], None]


class TimerHandle(ABC):
    """A scheduled callback that can be cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent any further invocation. Idempotent."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """``True`` while the callback may still fire."""


class IScheduler(ABC):
    """Timer source and time source in one."""

    @abstractmethod
    def now_ms(self) -> int:
        """Monotonic time in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        """Run *callback* once, *delay_ms* from now."""

    @abstractmethod
    def call_repeating(
        self, interval_ms: int, callback: TimerCallback
    ) -> TimerHandle:
        """Run *callback* every *interval_ms* until cancelled."""


class _ManualTimer(TimerHandle):
    __slots__ = ("callback", "interval_ms", "due_ms", "_active")

    def __init__(
        self, callback: TimerCallback, due_ms: int, interval_ms: int | None
    ) -> None:
        self.callback = callback
        self.due_ms = due_ms
        self.interval_ms = interval_ms
        self._active = True

    def cancel(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class ManualScheduler(IScheduler):
    """Deterministic scheduler driven by simulated time.

    Timers due at the same instant fire in scheduling order. A callback may
    schedule or cancel other timers; newly due timers fire within the same
    :meth:`advance` call.
    """

    __slots__ = ("_now", "_queue", "_seq")

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._queue: list[tuple[int, int, _ManualTimer]] = []
        self._seq = itertools.count()

    def now_ms(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        return self._push(_ManualTimer(callback, self._now + max(0, delay_ms), None))

    def call_repeating(
        self, interval_ms: int, callback: TimerCallback
    ) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        return self._push(
            _ManualTimer(callback, self._now + interval_ms, interval_ms)
        )

    @property
    def pending(self) -> int:
        """Number of timers that may still fire."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def advance(self, ms: int) -> None:
        """Move simulated time forward by *ms*, firing every timer due."""
        if ms < 0:
            raise ValueError("cannot move time backwards")
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._now = due
            if timer.interval_ms is None:
                timer.cancel()
            else:
                timer.due_ms = due + timer.interval_ms
                heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
            timer.callback()
        self._now = target

    def run_pending(self) -> None:
        """Fire timers already due at the current instant."""
        self.advance(0)

    def _push(self, timer: _ManualTimer) -> _ManualTimer:
        heapq.heappush(self._queue, (timer.due_ms, next(self._seq), timer))
        return timer
