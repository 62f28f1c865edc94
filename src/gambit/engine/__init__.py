"""Automated opponent: difficulty presets and move suggestion policies."""

from gambit.engine.difficulty import DIFFICULTY_KEYS, DifficultyLevel
from gambit.engine.policy import IMovePolicy, NoLegalMovesError, RandomMovePolicy

__all__ = [
    "DIFFICULTY_KEYS",
    "DifficultyLevel",
    "IMovePolicy",
    "NoLegalMovesError",
    "RandomMovePolicy",
]
