"""Move value objects."""

from __future__ import annotations

import re
from dataclasses import dataclass

from gambit.core.enums import Color, MoveFlag, PieceType

_UCI_RE = re.compile(r"^([a-h][1-8])([a-h][1-8])([nbrq])?$")


@dataclass(frozen=True, slots=True)
class MoveRequest:
    """A candidate move as typed by a human or proposed by an engine."""

    from_square: str
    to_square: str
    promotion: PieceType | None = None

    @classmethod
    def from_uci(cls, text: str) -> MoveRequest:
        """Parse compact notation such as ``"e2e4"`` or ``"e7e8q"``."""
        match = _UCI_RE.match(text.strip().lower())
        if match is None:
            raise ValueError(f"Malformed UCI move: {text!r}")
        from_sq, to_sq, promo = match.groups()
        return cls(from_sq, to_sq, PieceType.from_symbol(promo) if promo else None)

    @property
    def uci(self) -> str:
        base = f"{self.from_square}{self.to_square}"
        if self.promotion is not None:
            base += self.promotion.symbol
        return base

    def __str__(self) -> str:
        return self.uci


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable record of one executed ply.

    Only the rules oracle creates these, after a successful application.
    """

    from_square: str
    to_square: str
    color: Color
    piece: PieceType
    flags: MoveFlag
    san: str
    lan: str
    fen_before: str
    fen_after: str
    captured: PieceType | None = None
    promotion: PieceType | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return self.san

    @property
    def is_capture(self) -> bool:
        return bool(self.flags & MoveFlag.CAPTURE)

    @property
    def request(self) -> MoveRequest:
        """The request that reproduces this move on ``fen_before``."""
        return MoveRequest(self.from_square, self.to_square, self.promotion)
