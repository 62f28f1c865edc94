"""Game management layer: controller, ledger, clocks, session state.

Quick start::

    from gambit.core import ChessRulesOracle
    from gambit.engine import RandomMovePolicy
    from gambit.game import GameController, GameSettings, ManualScheduler, TimeControl

    scheduler = ManualScheduler()
    ctrl = GameController(
        ChessRulesOracle(),
        RandomMovePolicy(scheduler),
        scheduler,
        GameSettings(time_control=TimeControl.blitz()),
    )
    ctrl.submit_move("e2", "e4")
"""

from gambit.game.clock import Clock, ClockCoordinator, ClockEvents, ClockSnapshot
from gambit.game.controller import GameController, GameEvents
from gambit.game.interfaces import (
    TIME_CONTROL_KEYS,
    GamePhase,
    GameSettings,
    TimeControl,
    format_time,
)
from gambit.game.ledger import MoveLedger
from gambit.game.scheduling import IScheduler, ManualScheduler, TimerHandle
from gambit.game.state import Session, SuggestionToken

__all__ = [
    # Settings / phases
    "GamePhase",
    "GameSettings",
    "TIME_CONTROL_KEYS",
    "TimeControl",
    "format_time",
    # Scheduling
    "IScheduler",
    "ManualScheduler",
    "TimerHandle",
    # Concrete
    "Clock",
    "ClockCoordinator",
    "ClockEvents",
    "ClockSnapshot",
    "GameController",
    "GameEvents",
    "MoveLedger",
    "Session",
    "SuggestionToken",
]
