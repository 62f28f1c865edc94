"""Qt bridge: run sessions on the Qt event loop and expose events as signals."""

from __future__ import annotations

import time
from collections.abc import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from gambit.core.enums import Color
from gambit.core.move import Move
from gambit.game.controller import GameController
from gambit.game.interfaces import GamePhase
from gambit.game.scheduling import IScheduler, TimerCallback, TimerHandle
from gambit.game.state import Session


class _QtTimerHandle(TimerHandle):
    __slots__ = ("_timer", "_release")

    def __init__(self, timer: QTimer, release: Callable[[QTimer], None]) -> None:
        self._timer: QTimer | None = timer
        self._release = release

    def cancel(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        timer.stop()
        self._release(timer)
        timer.deleteLater()

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.isActive()


class QtScheduler(IScheduler):
    """:class:`IScheduler` backed by ``QTimer`` on the calling thread's loop.

    Live timers are referenced here until cancelled or fired, so callers
    may drop their handles.
    """

    __slots__ = ("_parent", "_live")

    def __init__(self, parent: QObject | None = None) -> None:
        self._parent = parent
        self._live: set[QTimer] = set()

    def now_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000

    def call_later(self, delay_ms: int, callback: TimerCallback) -> TimerHandle:
        timer = self._make_timer()
        timer.setSingleShot(True)
        handle = _QtTimerHandle(timer, self._live.discard)

        def fire() -> None:
            handle.cancel()
            callback()

        timer.timeout.connect(fire)
        timer.start(max(0, delay_ms))
        return handle

    def call_repeating(
        self, interval_ms: int, callback: TimerCallback
    ) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        timer = self._make_timer()
        timer.setInterval(interval_ms)
        timer.timeout.connect(callback)
        timer.start()
        return _QtTimerHandle(timer, self._live.discard)

    @property
    def live_timers(self) -> int:
        return len(self._live)

    def _make_timer(self) -> QTimer:
        timer = QTimer(self._parent)
        self._live.add(timer)
        return timer


class SessionSignals(QObject):
    """Re-emits :class:`GameController` callbacks as Qt signals.

    Views connect to these instead of appending to ``controller.events``.
    """

    move_made = pyqtSignal(object)  # Move
    position_changed = pyqtSignal(str)  # fen
    phase_changed = pyqtSignal(object)  # GamePhase
    game_over = pyqtSignal(object, object)  # GamePhase, Color | None
    clock_ticked = pyqtSignal(object, int)  # Color, remaining ms
    thinking_changed = pyqtSignal(bool)
    suggestion_failed = pyqtSignal(str)

    def __init__(self, controller: GameController, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        events = controller.events
        events.on_move.append(self._on_move)
        events.on_position_changed.append(self.position_changed.emit)
        events.on_phase_changed.append(self.phase_changed.emit)
        events.on_game_over.append(self._on_game_over)
        events.on_clock_tick.append(self._on_clock_tick)
        events.on_thinking_changed.append(self.thinking_changed.emit)
        events.on_suggestion_error.append(self.suggestion_failed.emit)

    @property
    def controller(self) -> GameController:
        return self._controller

    def _on_move(self, move: Move, _session: Session) -> None:
        self.move_made.emit(move)

    def _on_game_over(self, phase: GamePhase, winner: Color | None) -> None:
        self.game_over.emit(phase, winner)

    def _on_clock_tick(self, color: Color, remaining: int) -> None:
        self.clock_ticked.emit(color, remaining)
