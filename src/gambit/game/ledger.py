"""Move ledger: executed moves plus a cursor into them.

The displayed position is never stored on its own: it is whatever the rules
oracle holds after replaying ``moves[0..current_index]`` from the start
position. Every mutation here keeps the oracle in step with the cursor.
"""

from __future__ import annotations

from collections.abc import Sequence

from gambit.core.move import Move
from gambit.core.rules import STARTING_FEN, IRulesOracle


class MoveLedger:
    """Append-only-with-truncation move list with replay navigation.

    ``current_index`` is ``-1`` at the start position, otherwise the index of
    the last move applied to the displayed position.
    """

    __slots__ = ("_oracle", "_start_fen", "_moves", "_index")

    def __init__(self, oracle: IRulesOracle, start_fen: str = STARTING_FEN) -> None:
        self._oracle = oracle
        self._start_fen = start_fen
        self._moves: list[Move] = []
        self._index = -1

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def moves(self) -> Sequence[Move]:
        return tuple(self._moves)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_move(self) -> Move | None:
        return self._moves[self._index] if self._index >= 0 else None

    @property
    def start_fen(self) -> str:
        return self._start_fen

    @property
    def current_fen(self) -> str:
        move = self.current_move
        return move.fen_after if move is not None else self._start_fen

    @property
    def is_at_end(self) -> bool:
        return self._index == len(self._moves) - 1

    def __len__(self) -> int:
        return len(self._moves)

    # ── Mutation ─────────────────────────────────────────────────────────

    def record_move(self, move: Move) -> int:
        """Append *move* after the cursor, discarding any rewound future."""
        del self._moves[self._index + 1 :]
        self._moves.append(move)
        self._index = len(self._moves) - 1
        return self._index

    def undo(self) -> Move | None:
        """Drop the move at the cursor. Returns ``None`` at the start."""
        if self._index < 0:
            return None
        removed = self._moves[self._index]
        del self._moves[self._index :]
        self.navigate_to(self._index - 1)
        return removed

    def navigate_to(self, index: int) -> bool:
        """Rebuild the position after move *index* by replay.

        Out-of-range indices are ignored and return ``False``.
        """
        if index < -1 or index >= len(self._moves):
            return False
        self._rewind()
        for move in self._moves[: index + 1]:
            request = move.request
            replayed = self._oracle.apply_move(
                request.from_square, request.to_square, request.promotion
            )
            if replayed is None:
                raise RuntimeError(f"Ledger move {move.lan} no longer replays")
        self._index = index
        return True

    # ── Internal ─────────────────────────────────────────────────────────

    def _rewind(self) -> None:
        if self._start_fen == STARTING_FEN:
            self._oracle.reset()
        elif not self._oracle.load_position(self._start_fen):
            raise RuntimeError(f"Start position rejected: {self._start_fen}")
