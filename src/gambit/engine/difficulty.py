"""Difficulty presets for the automated opponent."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DifficultyLevel:
    """How strong (and how slow) the automated opponent plays.

    Args:
        name: Display name.
        elo: Indicative rating.
        depth: Nominal search depth.
        movetime_ms: Simulated thinking time per move.
        skill_level: 0–20. Above 10 the opponent prefers forcing moves.
    """

    name: str
    elo: int
    depth: int
    movetime_ms: int
    skill_level: int

    @classmethod
    def beginner(cls) -> DifficultyLevel:
        return cls("Beginner", 800, 5, 100, 1)

    @classmethod
    def casual(cls) -> DifficultyLevel:
        return cls("Casual", 1200, 8, 500, 5)

    @classmethod
    def intermediate(cls) -> DifficultyLevel:
        return cls("Intermediate", 1600, 12, 1000, 10)

    @classmethod
    def advanced(cls) -> DifficultyLevel:
        return cls("Advanced", 2000, 16, 2000, 15)

    @classmethod
    def expert(cls) -> DifficultyLevel:
        return cls("Expert", 2400, 20, 3000, 20)

    @classmethod
    def preset(cls, key: str) -> DifficultyLevel:
        return _PRESETS[key]()

    @property
    def prefers_forcing_moves(self) -> bool:
        return self.skill_level > 10


_PRESETS = {
    "beginner": DifficultyLevel.beginner,
    "casual": DifficultyLevel.casual,
    "intermediate": DifficultyLevel.intermediate,
    "advanced": DifficultyLevel.advanced,
    "expert": DifficultyLevel.expert,
}

DIFFICULTY_KEYS = tuple(_PRESETS)
