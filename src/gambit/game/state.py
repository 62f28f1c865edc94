"""Session aggregate: everything one game owns."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gambit.core.enums import Color, GameMode, GameStatus
from gambit.game.interfaces import GamePhase, GameSettings

if TYPE_CHECKING:
    from gambit.game.clock import ClockCoordinator, ClockSnapshot
    from gambit.game.ledger import MoveLedger


@dataclass(frozen=True, slots=True)
class SuggestionToken:
    """Identifies one outstanding move-suggestion request."""

    request_id: int
    session_id: str
    ply: int
    fen: str


@dataclass
class Session:
    """A single game: ledger, clocks and lifecycle.

    Built by :class:`~gambit.game.controller.GameController` on every new
    game and never recycled. This is a plain data holder; the controller is
    the only thing that mutates it.
    """

    settings: GameSettings
    ledger: MoveLedger
    clocks: ClockCoordinator | None
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    phase: GamePhase = GamePhase.SETUP
    status: GameStatus = GameStatus.PLAYING
    winner: Color | None = None
    side_to_move: Color = Color.WHITE
    in_check: bool = False
    pending: SuggestionToken | None = None
    paused_clock: Color | None = None
    # ply index -> clock state just before that move was played
    clock_history: dict[int, ClockSnapshot] = field(default_factory=dict)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def mode(self) -> GameMode:
        return self.settings.mode

    @property
    def engine_color(self) -> Color | None:
        if self.settings.mode != GameMode.ENGINE:
            return None
        return self.settings.engine_color

    @property
    def is_game_over(self) -> bool:
        return self.phase.is_terminal

    @property
    def is_engine_turn(self) -> bool:
        return (
            self.phase == GamePhase.PLAYING
            and self.engine_color is not None
            and self.side_to_move == self.engine_color
        )

    @property
    def ply_count(self) -> int:
        """Number of half-moves up to the cursor."""
        return self.ledger.current_index + 1

    def forget_clock_history(self, from_ply: int) -> None:
        """Drop snapshots of plies ``>= from_ply`` (they left the ledger)."""
        for ply in [p for p in self.clock_history if p >= from_ply]:
            del self.clock_history[ply]
