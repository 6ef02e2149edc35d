"""
Rules Normalizer - optional legality-aware parse

Narrow capability: parse(fen) -> NormalizedView, or raise
LegalityNormalizationFailure. Backed by python-chess.

The normalized view is a convenience for export only. The canonical
Position built by the editor is always the system of record.
"""

from dataclasses import dataclass

import chess

from board_model import Color
from errors import LegalityNormalizationFailure


@dataclass(frozen=True)
class NormalizedView:
    fen: str
    turn: Color
    castling: str
    en_passant: str
    is_check: bool = False

    def with_turn(self, turn: Color) -> str:
        """FEN text of this view with the turn field overwritten."""
        parts = self.fen.split(" ")
        parts[1] = turn.value
        return " ".join(parts)


class RulesNormalizer:
    """Capability interface. Subclasses implement parse()."""

    def parse(self, fen: str) -> NormalizedView:
        raise NotImplementedError


class NullNormalizer(RulesNormalizer):
    """Used when no rules library is wanted. Every parse fails."""

    def parse(self, fen: str) -> NormalizedView:
        raise LegalityNormalizationFailure("No rules library configured")


class ChessRulesNormalizer(RulesNormalizer):
    """
    python-chess backed normalizer.

    Rejects positions python-chess considers illegal (missing/extra kings,
    pawns on the back rank, side not to move in check, ...).
    """

    def parse(self, fen: str) -> NormalizedView:
        try:
            board = chess.Board(fen)
        except ValueError as e:
            raise LegalityNormalizationFailure(f"Unparsable FEN: {e}") from e

        status = board.status()
        if status != chess.STATUS_VALID:
            raise LegalityNormalizationFailure(f"Illegal position: {status!r}")

        return view_from_board(board)


def view_from_board(board: chess.Board) -> NormalizedView:
    fen = board.fen()
    parts = fen.split(" ")
    return NormalizedView(
        fen=fen,
        turn=Color.WHITE if board.turn == chess.WHITE else Color.BLACK,
        castling=parts[2],
        en_passant=parts[3],
        is_check=board.is_check(),
    )
