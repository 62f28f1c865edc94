"""GameController: the session coordinator.

Coordinates: MoveLedger, ClockCoordinator, rules oracle, move policy.
Emits events via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameStatus, PieceType
from gambit.core.move import Move, MoveRequest
from gambit.core.rules import STARTING_FEN, IRulesOracle, PositionStatus
from gambit.game.clock import ClockCoordinator
from gambit.game.interfaces import GamePhase, GameSettings, TimeControl
from gambit.game.ledger import MoveLedger
from gambit.game.scheduling import IScheduler
from gambit.game.state import Session, SuggestionToken

if TYPE_CHECKING:
    from gambit.engine.difficulty import DifficultyLevel
    from gambit.engine.policy import IMovePolicy

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, Session], None]
PositionCallback = Callable[[str], None]  # fen
PhaseCallback = Callable[[GamePhase], None]
GameOverCallback = Callable[[GamePhase, Color | None], None]  # phase, winner
ClockTickCallback = Callable[[Color, int], None]  # color, remaining ms
ThinkingCallback = Callable[[bool], None]
SuggestionErrorCallback = Callable[[str], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_position_changed: list[PositionCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_clock_tick: list[ClockTickCallback] = field(default_factory=list)
    on_thinking_changed: list[ThinkingCallback] = field(default_factory=list)
    on_suggestion_error: list[SuggestionErrorCallback] = field(default_factory=list)


_TERMINAL_FOR_STATUS: dict[GameStatus, GamePhase] = {
    GameStatus.CHECKMATE: GamePhase.CHECKMATE,
    GameStatus.STALEMATE: GamePhase.STALEMATE,
    GameStatus.THREEFOLD_REPETITION: GamePhase.DRAW,
    GameStatus.INSUFFICIENT_MATERIAL: GamePhase.DRAW,
    GameStatus.FIFTY_MOVE_RULE: GamePhase.DRAW,
    GameStatus.DRAW: GamePhase.DRAW,
}


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Runs one game at a time: validates moves, manages clocks, switches
    turns, asks the automated opponent to move, notifies listeners.

    Thread-safety: every method, timer callback and policy callback must run
    on the same thread (the scheduler's). Move application, ledger update
    and clock switch happen in one uninterrupted call.
    """

    __slots__ = (
        "_oracle",
        "_policy",
        "_scheduler",
        "_session",
        "_difficulty",
        "_request_seq",
        "_future",
        "events",
    )

    def __init__(
        self,
        oracle: IRulesOracle,
        policy: IMovePolicy,
        scheduler: IScheduler,
        settings: GameSettings | None = None,
    ) -> None:
        self._oracle = oracle
        self._policy = policy
        self._scheduler = scheduler
        self._request_seq = 0
        self._future: Future[str] | None = None
        self.events = GameEvents()
        settings = settings or GameSettings()
        self._difficulty = settings.difficulty
        self._session = self._build_session(settings)
        self._begin()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def session(self) -> Session:
        return self._session

    @property
    def settings(self) -> GameSettings:
        return self._session.settings

    @property
    def phase(self) -> GamePhase:
        return self._session.phase

    @property
    def status(self) -> GameStatus:
        return self._session.status

    @property
    def winner(self) -> Color | None:
        return self._session.winner

    @property
    def fen(self) -> str:
        return self._session.ledger.current_fen

    @property
    def moves(self) -> Sequence[Move]:
        return self._session.ledger.moves

    @property
    def current_index(self) -> int:
        return self._session.ledger.current_index

    @property
    def last_move(self) -> Move | None:
        return self._session.ledger.current_move

    @property
    def side_to_move(self) -> Color:
        return self._session.side_to_move

    @property
    def in_check(self) -> bool:
        return self._session.in_check

    @property
    def clocks(self) -> ClockCoordinator | None:
        return self._session.clocks

    @property
    def active_clock(self) -> Color | None:
        clocks = self._session.clocks
        return clocks.active_color if clocks is not None else None

    @property
    def difficulty(self) -> DifficultyLevel:
        return self._difficulty

    @property
    def is_thinking(self) -> bool:
        return self._session.pending is not None

    def remaining(self, color: Color) -> int | None:
        """Remaining milliseconds for *color*, ``None`` without a clock."""
        clocks = self._session.clocks
        return clocks.remaining(color) if clocks is not None else None

    def legal_destinations(self, square: str) -> set[str]:
        if self._session.phase != GamePhase.PLAYING:
            return set()
        return self._oracle.legal_destinations(square)

    # ── Session lifecycle ────────────────────────────────────────────────

    def new_game(self, settings: GameSettings | None = None) -> None:
        """Discard the current session and start a fresh one.

        Raises:
            ValueError: if ``settings.fen`` is not a valid position.
        """
        settings = settings or self._session.settings
        session = self._build_session(settings)
        self._abandon_session()
        self._difficulty = settings.difficulty
        self._session = session
        self._begin()

    def reset_game(self) -> None:
        """Start over with the current settings."""
        self.new_game(self._session.settings)

    def pause(self) -> bool:
        session = self._session
        if session.phase != GamePhase.PLAYING:
            return False
        self._cancel_suggestion()
        if session.clocks is not None:
            session.paused_clock = session.clocks.active_color
            session.clocks.stop_all()
        self._set_phase(GamePhase.PAUSED)
        return True

    def resume(self) -> bool:
        session = self._session
        if session.phase != GamePhase.PAUSED:
            return False
        self._set_phase(GamePhase.PLAYING)
        if session.clocks is not None and session.paused_clock is not None:
            session.clocks.start(session.paused_clock)
        session.paused_clock = None
        self._maybe_request_suggestion()
        return True

    def set_time_control(self, time_control: TimeControl) -> None:
        """Swap the time control. Clocks are reset and left stopped; the
        next move starts the opponent's clock.
        """
        session = self._session
        session.settings = dataclasses.replace(
            session.settings, time_control=time_control
        )
        session.clock_history.clear()
        session.paused_clock = None
        if not time_control.is_active:
            if session.clocks is not None:
                session.clocks.stop_all()
            session.clocks = None
            return
        if session.clocks is None:
            session.clocks = self._make_clocks(session, time_control)
        else:
            session.clocks.set_time_control(time_control)

    def set_difficulty(self, difficulty: DifficultyLevel) -> None:
        """Takes effect on the next suggestion request."""
        self._difficulty = difficulty
        self._session.settings = dataclasses.replace(
            self._session.settings, difficulty=difficulty
        )

    # ── Moves ────────────────────────────────────────────────────────────

    def submit_move(
        self,
        from_square: str,
        to_square: str,
        promotion: PieceType | None = None,
    ) -> bool:
        """Play a move for the side to move. Returns True if applied."""
        session = self._session
        if session.phase != GamePhase.PLAYING:
            _LOGGER.debug("Move %s%s rejected in %s", from_square, to_square, session.phase.name)
            return False
        if session.pending is not None:
            _LOGGER.debug("Move %s%s rejected: engine is thinking", from_square, to_square)
            return False
        return self._play(MoveRequest(from_square, to_square, promotion))

    def submit_uci(self, text: str) -> bool:
        """Like :meth:`submit_move`, from compact notation (``"e7e8q"``)."""
        try:
            request = MoveRequest.from_uci(text)
        except ValueError:
            _LOGGER.debug("Malformed move text %r", text)
            return False
        return self.submit_move(request.from_square, request.to_square, request.promotion)

    def undo(self) -> Move | None:
        """Take back the move at the cursor. Returns it, or None."""
        session = self._session
        if session.phase in (GamePhase.SETUP, GamePhase.PAUSED):
            return None
        index = session.ledger.current_index
        if index < 0:
            return None

        self._cancel_suggestion()
        removed = session.ledger.undo()
        snapshot = session.clock_history.get(index)
        session.forget_clock_history(index)
        self._refresh_position()

        if session.clocks is not None:
            if snapshot is not None:
                session.clocks.restore(
                    snapshot, resume=session.phase == GamePhase.PLAYING
                )
            elif session.phase == GamePhase.PLAYING:
                self._sync_clocks_to_turn()

        self._emit_position()
        self._maybe_request_suggestion()
        return removed

    def navigate_to(self, index: int) -> bool:
        """Show the position after move *index* (``-1`` = start).

        Out-of-range indices are a no-op returning ``False``. The clocks are
        left alone: browsing history does not change whose time is running.
        """
        session = self._session
        if session.phase in (GamePhase.SETUP, GamePhase.PAUSED):
            return False
        if not -1 <= index < len(session.ledger):
            return False

        self._cancel_suggestion()
        session.ledger.navigate_to(index)
        self._refresh_position()

        self._emit_position()
        self._maybe_request_suggestion()
        return True

    def request_engine_move(self) -> bool:
        """Ask the automated opponent again (e.g. after a failed request)."""
        self._maybe_request_suggestion()
        return self._session.pending is not None

    # ── Internal: move path ──────────────────────────────────────────────

    def _play(self, request: MoveRequest) -> bool:
        session = self._session
        ledger = session.ledger
        clocks = session.clocks
        mover = session.side_to_move
        first_ply = ledger.current_index < 0
        snapshot = clocks.snapshot() if clocks is not None else None

        move = self._oracle.apply_move(
            request.from_square, request.to_square, request.promotion
        )
        if move is None:
            _LOGGER.debug("Illegal move %s in %s", request, ledger.current_fen)
            return False

        ply = ledger.current_index + 1
        session.forget_clock_history(ply)
        if snapshot is not None:
            session.clock_history[ply] = snapshot
        ledger.record_move(move)

        if clocks is not None:
            if first_ply:
                clocks.start(mover.opposite)
            else:
                clocks.switch(mover, mover.opposite)

        status = self._refresh_position()

        for cb in self.events.on_move:
            cb(move, session)
        self._emit_position()

        if status.is_game_over:
            self._finish(status.game_status, mover if status.checkmate else None)
            return True

        self._maybe_request_suggestion()
        return True

    def _sync_clocks_to_turn(self) -> None:
        """Run the side to move's clock; none before the first move."""
        session = self._session
        if session.clocks is None:
            return
        if session.ledger.current_index < 0:
            session.clocks.stop_all()
        else:
            session.clocks.start(session.side_to_move)

    def _refresh_position(self) -> PositionStatus:
        status = self._oracle.status()
        self._session.side_to_move = self._oracle.turn
        self._session.in_check = status.in_check
        return status

    def _finish(self, status: GameStatus, winner: Color | None) -> None:
        session = self._session
        self._cancel_suggestion()
        if session.clocks is not None:
            session.clocks.stop_all()
        session.status = status
        session.winner = winner
        phase = _TERMINAL_FOR_STATUS.get(status, GamePhase.TIMEOUT)
        self._set_phase(phase)
        _LOGGER.info(
            "Game %s over: %s, winner %s", session.session_id, status.name, winner
        )
        for cb in self.events.on_game_over:
            cb(phase, winner)

    # ── Internal: automated opponent ─────────────────────────────────────

    def _maybe_request_suggestion(self) -> None:
        session = self._session
        if not session.is_engine_turn or session.pending is not None:
            return

        self._request_seq += 1
        token = SuggestionToken(
            request_id=self._request_seq,
            session_id=session.session_id,
            ply=session.ply_count,
            fen=self._oracle.fen,
        )
        session.pending = token
        self._emit_thinking(True)

        try:
            future = self._policy.propose(token.fen, self._difficulty)
        except Exception as exc:
            session.pending = None
            self._emit_thinking(False)
            self._report_suggestion_failure(str(exc) or type(exc).__name__)
            return

        self._future = future
        future.add_done_callback(lambda f: self._on_suggestion_done(token, f))

    def _on_suggestion_done(self, token: SuggestionToken, future: Future[str]) -> None:
        if future.cancelled():
            return
        session = self._session
        if session.pending != token:
            _LOGGER.debug("Discarding stale suggestion for request %d", token.request_id)
            return

        session.pending = None
        self._future = None
        self._emit_thinking(False)

        exc = future.exception()
        if exc is not None:
            self._report_suggestion_failure(str(exc) or type(exc).__name__)
            return

        text = future.result()
        try:
            request = MoveRequest.from_uci(text)
        except ValueError:
            self._report_suggestion_failure(f"Unparsable suggestion {text!r}")
            return
        if not self._play(request):
            self._report_suggestion_failure(f"Illegal suggestion {text!r}")

    def _cancel_suggestion(self) -> None:
        session = self._session
        future = self._future
        self._future = None
        if session.pending is None:
            return
        session.pending = None
        if future is not None:
            future.cancel()
        self._emit_thinking(False)

    def _report_suggestion_failure(self, message: str) -> None:
        _LOGGER.warning("Move suggestion failed: %s", message)
        for cb in self.events.on_suggestion_error:
            cb(message)

    # ── Internal: session construction ───────────────────────────────────

    def _build_session(self, settings: GameSettings) -> Session:
        if settings.fen == STARTING_FEN:
            self._oracle.reset()
        elif not self._oracle.load_position(settings.fen):
            raise ValueError(f"Invalid start position: {settings.fen!r}")

        ledger = MoveLedger(self._oracle, self._oracle.fen)
        session = Session(settings=settings, ledger=ledger, clocks=None)
        if settings.time_control.is_active:
            session.clocks = self._make_clocks(session, settings.time_control)
        return session

    def _make_clocks(self, session: Session, time_control: TimeControl) -> ClockCoordinator:
        clocks = ClockCoordinator(time_control, self._scheduler)
        clocks.events.on_tick.append(
            lambda color, ms: self._on_clock_tick(session, color, ms)
        )
        clocks.events.on_timeout.append(
            lambda color: self._on_clock_timeout(session, color)
        )
        return clocks

    def _begin(self) -> None:
        session = self._session
        status = self._refresh_position()
        _LOGGER.info(
            "Session %s started (%s, %s)",
            session.session_id,
            session.mode.name,
            session.settings.time_control,
        )
        self._set_phase(GamePhase.PLAYING)
        self._emit_position()
        if status.is_game_over:
            winner = session.side_to_move.opposite if status.checkmate else None
            self._finish(status.game_status, winner)
            return
        self._maybe_request_suggestion()

    def _abandon_session(self) -> None:
        session = self._session
        self._cancel_suggestion()
        if session.clocks is not None:
            session.clocks.stop_all()

    # ── Internal: clock callbacks ────────────────────────────────────────

    def _on_clock_tick(self, session: Session, color: Color, remaining: int) -> None:
        if session is not self._session:
            return
        for cb in self.events.on_clock_tick:
            cb(color, remaining)

    def _on_clock_timeout(self, session: Session, color: Color) -> None:
        # First effect wins: a game already decided ignores late flags.
        if session is not self._session or session.phase != GamePhase.PLAYING:
            return
        self._finish(GameStatus.TIMEOUT, color.opposite)

    # ── Internal: emitters ───────────────────────────────────────────────

    def _set_phase(self, phase: GamePhase) -> None:
        self._session.phase = phase
        for cb in self.events.on_phase_changed:
            cb(phase)

    def _emit_position(self) -> None:
        fen = self._session.ledger.current_fen
        for cb in self.events.on_position_changed:
            cb(fen)

    def _emit_thinking(self, thinking: bool) -> None:
        for cb in self.events.on_thinking_changed:
            cb(thinking)
