"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator
from concurrent.futures import Future

import pytest

from gambit.core.rules import ChessRulesOracle
from gambit.engine.difficulty import DifficultyLevel
from gambit.engine.policy import IMovePolicy
from gambit.game.controller import GameController
from gambit.game.interfaces import GameSettings
from gambit.game.scheduling import ManualScheduler

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


class UncancellableFuture(Future):
    """A future whose work cannot be aborted once requested."""

    def cancel(self) -> bool:
        return False


class ScriptedPolicy(IMovePolicy):
    """Records requests; the test decides when and how each one resolves."""

    def __init__(self, *, cancellable: bool = True) -> None:
        self.cancellable = cancellable
        self.requests: list[tuple[str, DifficultyLevel, Future[str]]] = []

    def propose(self, fen: str, difficulty: DifficultyLevel) -> Future[str]:
        future: Future[str] = Future() if self.cancellable else UncancellableFuture()
        self.requests.append((fen, difficulty, future))
        return future

    @property
    def last(self) -> Future[str]:
        return self.requests[-1][2]

    def reply(self, uci: str, index: int = -1) -> None:
        self.requests[index][2].set_result(uci)

    def fail(self, exc: BaseException, index: int = -1) -> None:
        self.requests[index][2].set_exception(exc)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def oracle() -> ChessRulesOracle:
    return ChessRulesOracle()


@pytest.fixture()
def policy() -> ScriptedPolicy:
    return ScriptedPolicy()


@pytest.fixture()
def make_controller(
    oracle: ChessRulesOracle,
    policy: ScriptedPolicy,
    scheduler: ManualScheduler,
) -> Callable[..., GameController]:
    """Factory: ``make_controller(**settings_fields)``."""

    def factory(**fields: object) -> GameController:
        return GameController(oracle, policy, scheduler, GameSettings(**fields))

    return factory


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for Qt bridge tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
