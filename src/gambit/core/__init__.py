"""Core domain layer: enums, move records and the rules oracle.

Quick start::

    from gambit.core import ChessRulesOracle

    oracle = ChessRulesOracle()
    move = oracle.apply_move("e2", "e4")
    print(move.san, oracle.fen)
"""

from gambit.core.enums import Color, GameMode, GameStatus, MoveFlag, PieceType
from gambit.core.move import Move, MoveRequest
from gambit.core.rules import (
    STARTING_FEN,
    ChessRulesOracle,
    IRulesOracle,
    PositionStatus,
)

__all__ = [
    # Enums / flags
    "Color",
    "GameMode",
    "GameStatus",
    "MoveFlag",
    "PieceType",
    # Domain objects
    "Move",
    "MoveRequest",
    # Rules
    "STARTING_FEN",
    "ChessRulesOracle",
    "IRulesOracle",
    "PositionStatus",
]
