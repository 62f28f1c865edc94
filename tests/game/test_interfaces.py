"""Tests for game-layer value objects."""

import dataclasses

import pytest

from gambit.core.enums import Color, GameMode
from gambit.core.rules import STARTING_FEN
from gambit.engine.difficulty import DifficultyLevel
from gambit.game.interfaces import (
    TIME_CONTROL_KEYS,
    GamePhase,
    GameSettings,
    TimeControl,
    format_time,
)


class TestTimeControl:
    @pytest.mark.parametrize(
        ("key", "initial", "increment"),
        [
            ("bullet", 60, 0),
            ("blitz", 180, 2),
            ("rapid", 600, 0),
            ("classical", 1800, 0),
            ("fischer", 300, 3),
            ("custom", 600, 0),
            ("none", 0, 0),
        ],
    )
    def test_presets(self, key: str, initial: int, increment: int) -> None:
        tc = TimeControl.preset(key)
        assert tc.initial_seconds == initial
        assert tc.increment_seconds == increment

    def test_keys(self) -> None:
        assert set(TIME_CONTROL_KEYS) == {
            "bullet", "blitz", "rapid", "classical", "fischer", "custom", "none"
        }

    def test_unknown_preset(self) -> None:
        with pytest.raises(KeyError):
            TimeControl.preset("armageddon")

    def test_none_is_inactive(self) -> None:
        assert not TimeControl.none().is_active
        assert TimeControl.bullet().is_active

    def test_custom_validates(self) -> None:
        assert TimeControl.custom(90, 1).initial_ms == 90_000
        with pytest.raises(ValueError):
            TimeControl.custom(0)
        with pytest.raises(ValueError):
            TimeControl.custom(60, -1)

    def test_str(self) -> None:
        assert str(TimeControl.blitz()) == "Blitz 3+2"
        assert str(TimeControl.none()) == "No clock"


class TestFormatTime:
    @pytest.mark.parametrize(
        ("ms", "text"),
        [
            (0, "0:00"),
            (-500, "0:00"),
            (999, "0:00"),
            (59_999, "0:59"),
            (60_000, "1:00"),
            (605_000, "10:05"),
        ],
    )
    def test_format(self, ms: int, text: str) -> None:
        assert format_time(ms) == text


class TestGamePhase:
    def test_terminal_phases(self) -> None:
        terminal = {p for p in GamePhase if p.is_terminal}
        assert terminal == {
            GamePhase.CHECKMATE,
            GamePhase.STALEMATE,
            GamePhase.DRAW,
            GamePhase.TIMEOUT,
        }


class TestGameSettings:
    def test_defaults(self) -> None:
        settings = GameSettings()
        assert settings.mode == GameMode.LOCAL
        assert settings.engine_color == Color.BLACK
        assert not settings.time_control.is_active
        assert settings.difficulty == DifficultyLevel.casual()
        assert settings.fen == STARTING_FEN

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            GameSettings().mode = GameMode.ENGINE  # type: ignore[misc]
