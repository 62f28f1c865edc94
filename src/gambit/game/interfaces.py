"""Value objects and phase definitions for the game layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto

from gambit.core.enums import Color, GameMode
from gambit.core.rules import STARTING_FEN
from gambit.engine.difficulty import DifficultyLevel

# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a game session."""

    SETUP = auto()
    PLAYING = auto()
    PAUSED = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW = auto()
    TIMEOUT = auto()

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_PHASES


_TERMINAL_PHASES = frozenset(
    {GamePhase.CHECKMATE, GamePhase.STALEMATE, GamePhase.DRAW, GamePhase.TIMEOUT}
)


# ── Time control presets ─────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class TimeControl:
    """Immutable time-control definition.

    Args:
        name: Display name.
        initial_seconds: Starting time per player.
        increment_seconds: Per-move increment (Fischer).
    """

    name: str
    initial_seconds: int
    increment_seconds: int = 0

    @property
    def is_active(self) -> bool:
        """``False`` for the reserved no-clock control."""
        return self.initial_seconds > 0

    @property
    def initial_ms(self) -> int:
        return self.initial_seconds * 1000

    # Common presets
    @classmethod
    def bullet(cls) -> TimeControl:
        return cls("Bullet", 60, 0)

    @classmethod
    def blitz(cls) -> TimeControl:
        return cls("Blitz", 180, 2)

    @classmethod
    def rapid(cls) -> TimeControl:
        return cls("Rapid", 600, 0)

    @classmethod
    def classical(cls) -> TimeControl:
        return cls("Classical", 1800, 0)

    @classmethod
    def fischer(cls) -> TimeControl:
        return cls("Fischer (5+3)", 300, 3)

    @classmethod
    def custom(cls, initial_seconds: int = 600, increment_seconds: int = 0) -> TimeControl:
        if initial_seconds <= 0 or increment_seconds < 0:
            raise ValueError("custom time control needs a positive allotment")
        return cls("Custom", initial_seconds, increment_seconds)

    @classmethod
    def none(cls) -> TimeControl:
        """No clock participates in the session."""
        return cls("No clock", 0, 0)

    @classmethod
    def preset(cls, key: str) -> TimeControl:
        """Look up a preset by key (``"bullet"``, ``"blitz"``, ...)."""
        factory = _PRESETS[key]
        return factory()

    def __str__(self) -> str:
        if not self.is_active:
            return self.name
        mins = self.initial_seconds // 60
        return f"{self.name} {mins}+{self.increment_seconds}"


_PRESETS = {
    "bullet": TimeControl.bullet,
    "blitz": TimeControl.blitz,
    "rapid": TimeControl.rapid,
    "classical": TimeControl.classical,
    "fischer": TimeControl.fischer,
    "custom": TimeControl.custom,
    "none": TimeControl.none,
}

TIME_CONTROL_KEYS = tuple(_PRESETS)


def format_time(milliseconds: int) -> str:
    """Format remaining time as ``M:SS``."""
    if milliseconds <= 0:
        return "0:00"
    total_seconds = milliseconds // 1000
    return f"{total_seconds // 60}:{total_seconds % 60:02d}"


# ── New game settings ────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class GameSettings:
    """Plain data describing how a new session is set up."""

    mode: GameMode = GameMode.LOCAL
    engine_color: Color = Color.BLACK
    time_control: TimeControl = field(default_factory=TimeControl.none)
    difficulty: DifficultyLevel = field(default_factory=DifficultyLevel.casual)
    fen: str = STARTING_FEN
