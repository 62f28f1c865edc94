"""Rules oracle: legality, move application and game-status detection.

The session layer never inspects a board itself. It only talks to an
:class:`IRulesOracle`, which mirrors a single board instance (including its
move stack, so repetition can be detected) and reports positions as FEN.
:class:`ChessRulesOracle` is the ``python-chess`` backed implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import chess

from gambit.core.enums import Color, GameStatus, MoveFlag, PieceType
from gambit.core.move import Move

STARTING_FEN = chess.STARTING_FEN


@dataclass(frozen=True, slots=True)
class PositionStatus:
    """Check and game-end flags for one position."""

    in_check: bool = False
    checkmate: bool = False
    stalemate: bool = False
    draw: bool = False
    insufficient_material: bool = False
    threefold_repetition: bool = False
    fifty_moves: bool = False

    @property
    def is_game_over(self) -> bool:
        return self.checkmate or self.draw

    @property
    def game_status(self) -> GameStatus:
        if self.checkmate:
            return GameStatus.CHECKMATE
        if self.stalemate:
            return GameStatus.STALEMATE
        if self.threefold_repetition:
            return GameStatus.THREEFOLD_REPETITION
        if self.insufficient_material:
            return GameStatus.INSUFFICIENT_MATERIAL
        if self.fifty_moves:
            return GameStatus.FIFTY_MOVE_RULE
        if self.draw:
            return GameStatus.DRAW
        return GameStatus.PLAYING


class IRulesOracle(ABC):
    """Interface for the chess rules collaborator."""

    @property
    @abstractmethod
    def fen(self) -> str:
        """FEN of the current position."""

    @property
    @abstractmethod
    def turn(self) -> Color:
        """Side to move in the current position."""

    @abstractmethod
    def apply_move(
        self,
        from_square: str,
        to_square: str,
        promotion: PieceType | None = None,
    ) -> Move | None:
        """Play a move on the current position.

        Returns the executed :class:`Move`, or ``None`` (position untouched)
        if the move is illegal or malformed.
        """

    @abstractmethod
    def status(self, fen: str | None = None) -> PositionStatus:
        """Status of *fen*, or of the current position (with its history)."""

    @abstractmethod
    def legal_destinations(self, square: str, fen: str | None = None) -> set[str]:
        """Squares the piece on *square* may legally move to."""

    @abstractmethod
    def reset(self) -> str:
        """Return to the standard initial position and return its FEN."""

    @abstractmethod
    def load_position(self, fen: str) -> bool:
        """Replace the current position. Returns ``False`` for invalid FEN."""


class ChessRulesOracle(IRulesOracle):
    """:class:`IRulesOracle` on top of :class:`chess.Board`."""

    __slots__ = ("_board",)

    def __init__(self, fen: str | None = None) -> None:
        self._board = chess.Board(fen or STARTING_FEN)

    # ── IRulesOracle implementation ──────────────────────────────────────

    @property
    def fen(self) -> str:
        return self._board.fen()

    @property
    def turn(self) -> Color:
        return _to_color(self._board.turn)

    def apply_move(
        self,
        from_square: str,
        to_square: str,
        promotion: PieceType | None = None,
    ) -> Move | None:
        board = self._board
        try:
            from_sq = chess.parse_square(from_square)
            to_sq = chess.parse_square(to_square)
        except ValueError:
            return None

        moving = board.piece_at(from_sq)
        if moving is None or moving.color != board.turn:
            return None

        promo = int(promotion) if promotion is not None else None
        if (
            promo is None
            and moving.piece_type == chess.PAWN
            and chess.square_rank(to_sq) in (0, 7)
        ):
            promo = chess.QUEEN  # auto-queen when the caller does not choose

        candidate = chess.Move(from_sq, to_sq, promotion=promo)
        if candidate not in board.legal_moves:
            return None

        fen_before = board.fen()
        san = board.san(candidate)
        flags, captured = _classify(board, candidate, moving.piece_type)
        board.push(candidate)

        return Move(
            from_square=chess.square_name(from_sq),
            to_square=chess.square_name(to_sq),
            color=_to_color(moving.color),
            piece=PieceType(moving.piece_type),
            flags=flags,
            san=san,
            lan=candidate.uci(),
            fen_before=fen_before,
            fen_after=board.fen(),
            captured=captured,
            promotion=PieceType(promo) if promo is not None else None,
        )

    def status(self, fen: str | None = None) -> PositionStatus:
        board = self._board if fen is None else chess.Board(fen)
        stalemate = board.is_stalemate()
        insufficient = board.is_insufficient_material()
        threefold = board.is_repetition(3)
        fifty = board.halfmove_clock >= 100 and not board.is_checkmate()
        return PositionStatus(
            in_check=board.is_check(),
            checkmate=board.is_checkmate(),
            stalemate=stalemate,
            draw=stalemate or insufficient or threefold or fifty,
            insufficient_material=insufficient,
            threefold_repetition=threefold,
            fifty_moves=fifty,
        )

    def legal_destinations(self, square: str, fen: str | None = None) -> set[str]:
        board = self._board if fen is None else chess.Board(fen)
        try:
            from_sq = chess.parse_square(square)
        except ValueError:
            return set()
        return {
            chess.square_name(move.to_square)
            for move in board.legal_moves
            if move.from_square == from_sq
        }

    def reset(self) -> str:
        self._board.reset()
        return self._board.fen()

    def load_position(self, fen: str) -> bool:
        try:
            board = chess.Board(fen)
        except ValueError:
            return False
        if not board.is_valid():
            return False
        self._board = board
        return True


def _to_color(turn: chess.Color) -> Color:
    return Color.WHITE if turn == chess.WHITE else Color.BLACK


def _classify(
    board: chess.Board,
    move: chess.Move,
    piece_type: chess.PieceType,
) -> tuple[MoveFlag, PieceType | None]:
    """Flags and captured piece of *move*, evaluated before it is pushed."""
    flags = MoveFlag.NONE
    captured: PieceType | None = None

    if board.is_en_passant(move):
        flags |= MoveFlag.CAPTURE | MoveFlag.EN_PASSANT
        captured = PieceType.PAWN
    elif board.is_capture(move):
        flags |= MoveFlag.CAPTURE
        target = board.piece_at(move.to_square)
        if target is not None:
            captured = PieceType(target.piece_type)

    if board.is_kingside_castling(move):
        flags |= MoveFlag.CASTLE_KINGSIDE
    elif board.is_queenside_castling(move):
        flags |= MoveFlag.CASTLE_QUEENSIDE

    if move.promotion is not None:
        flags |= MoveFlag.PROMOTION

    if (
        piece_type == chess.PAWN
        and abs(chess.square_rank(move.to_square) - chess.square_rank(move.from_square))
        == 2
    ):
        flags |= MoveFlag.DOUBLE_PAWN

    return flags, captured
