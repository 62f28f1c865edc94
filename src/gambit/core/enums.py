"""Core enumerations and flags for the chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


_PIECE_SYMBOLS = "pnbrqk"


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def symbol(self) -> str:
        """Lower-case one-letter symbol (``"q"`` for the queen)."""
        return _PIECE_SYMBOLS[self.value - 1]

    @classmethod
    def from_symbol(cls, symbol: str) -> PieceType:
        index = _PIECE_SYMBOLS.find(symbol.lower()) if len(symbol) == 1 else -1
        if index < 0:
            raise ValueError(f"Unknown piece symbol: {symbol!r}")
        return cls(index + 1)


class MoveFlag(IntFlag):
    """Special move classification. A move may carry several flags."""

    NONE = 0
    CAPTURE = 1
    DOUBLE_PAWN = 2
    EN_PASSANT = 4
    CASTLE_KINGSIDE = 8
    CASTLE_QUEENSIDE = 16
    PROMOTION = 32

    CASTLE = CASTLE_KINGSIDE | CASTLE_QUEENSIDE


class GameMode(IntEnum):
    """Who sits at the board."""

    LOCAL = 0  # human vs human
    ENGINE = 1  # human vs automated opponent


class GameStatus(IntEnum):
    """Detailed outcome of a position, as reported to the presentation layer."""

    PLAYING = 0
    CHECKMATE = auto()
    STALEMATE = auto()
    THREEFOLD_REPETITION = auto()
    INSUFFICIENT_MATERIAL = auto()
    FIFTY_MOVE_RULE = auto()
    DRAW = auto()
    TIMEOUT = auto()
