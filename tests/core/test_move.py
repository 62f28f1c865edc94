"""Tests for move value objects and core enums."""

import dataclasses

import pytest

from gambit.core.enums import Color, MoveFlag, PieceType
from gambit.core.move import MoveRequest
from gambit.core.rules import ChessRulesOracle


class TestMoveRequest:
    def test_from_uci(self) -> None:
        req = MoveRequest.from_uci("e2e4")
        assert req == MoveRequest("e2", "e4")
        assert req.uci == "e2e4"

    def test_from_uci_with_promotion(self) -> None:
        req = MoveRequest.from_uci("E7E8Q")
        assert req.promotion == PieceType.QUEEN
        assert str(req) == "e7e8q"

    @pytest.mark.parametrize("text", ["", "e2", "e2e9", "e7e8k", "e2-e4", "0000"])
    def test_malformed(self, text: str) -> None:
        with pytest.raises(ValueError):
            MoveRequest.from_uci(text)


class TestMove:
    def test_immutable(self) -> None:
        move = ChessRulesOracle().apply_move("g1", "f3")
        assert move is not None
        with pytest.raises(dataclasses.FrozenInstanceError):
            move.san = "Nc3"  # type: ignore[misc]

    def test_request_roundtrip_replays(self) -> None:
        oracle = ChessRulesOracle()
        move = oracle.apply_move("g1", "f3")
        assert move is not None
        assert move.request == MoveRequest("g1", "f3")
        assert str(move) == "Nf3"
        assert not move.is_capture


class TestEnums:
    def test_color_opposite(self) -> None:
        assert Color.WHITE.opposite == Color.BLACK
        assert Color.BLACK.opposite == Color.WHITE
        assert str(Color.WHITE) == "white"

    def test_piece_symbols(self) -> None:
        assert PieceType.KNIGHT.symbol == "n"
        assert PieceType.from_symbol("Q") == PieceType.QUEEN
        with pytest.raises(ValueError):
            PieceType.from_symbol("x")

    def test_castle_mask(self) -> None:
        assert MoveFlag.CASTLE_KINGSIDE & MoveFlag.CASTLE
        assert not MoveFlag.CAPTURE & MoveFlag.CASTLE
