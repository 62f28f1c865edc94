"""Move suggestion policies for the automated opponent."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from concurrent.futures import Future

import chess

from gambit.engine.difficulty import DifficultyLevel
from gambit.game.scheduling import IScheduler

_LOGGER = logging.getLogger(__name__)


class NoLegalMovesError(RuntimeError):
    """The position handed to a policy has no legal move."""


class IMovePolicy(ABC):
    """Interface for an asynchronous move proposer."""

    @abstractmethod
    def propose(self, fen: str, difficulty: DifficultyLevel) -> Future[str]:
        """Start choosing a move for *fen*.

        The returned future resolves to a move in UCI notation, or fails
        (e.g. with :class:`NoLegalMovesError`). Callers may ``cancel()`` it
        once they lose interest; implementations should then skip the work.
        """


class RandomMovePolicy(IMovePolicy):
    """Plays a random legal move after a simulated thinking delay.

    At skill levels above 10 captures and checks are preferred when any
    exist; otherwise every legal move is equally likely.
    """

    __slots__ = ("_scheduler", "_rng")

    def __init__(
        self,
        scheduler: IScheduler,
        rng: random.Random | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._rng = rng or random.Random()

    def propose(self, fen: str, difficulty: DifficultyLevel) -> Future[str]:
        future: Future[str] = Future()
        handle = self._scheduler.call_later(
            difficulty.movetime_ms, lambda: self._resolve(future, fen, difficulty)
        )
        future.add_done_callback(lambda f: handle.cancel() if f.cancelled() else None)
        return future

    def choose(self, fen: str, difficulty: DifficultyLevel) -> str:
        """Pick a move for *fen* synchronously."""
        board = chess.Board(fen)
        legal = list(board.legal_moves)
        if not legal:
            raise NoLegalMovesError(f"No legal moves available in {fen}")

        pool = legal
        if difficulty.prefers_forcing_moves:
            forcing = [
                m for m in legal if board.is_capture(m) or board.gives_check(m)
            ]
            pool = forcing or legal
        return self._rng.choice(pool).uci()

    def _resolve(
        self, future: Future[str], fen: str, difficulty: DifficultyLevel
    ) -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            move = self.choose(fen, difficulty)
        except Exception as exc:
            _LOGGER.debug("Policy failed for %s: %s", fen, exc)
            future.set_exception(exc)
            return
        future.set_result(move)
