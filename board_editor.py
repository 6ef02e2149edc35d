"""
Board Editor - direct board mutation without chess rules

Pure edit functions take a Position and return a new one:
    place, remove, move, clear, reset, set_turn, toggle_castling

Edits never touch turn/castling/en passant/counters, except clear()
and reset() which restore defaults on purpose. Chess-illegal results
(two kings, no king, pawns on the back rank) are allowed.

BoardEditor wraps the pure functions and, after each edit, asks the
rules normalizer for a normalized view. If that parse changes the turn,
the turn is forced back and the parse retried; if it still fails, the
edit stands and there is simply no normalized view.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from board_model import (
    CASTLING_LETTERS,
    NO_CASTLING,
    Color,
    Piece,
    Position,
    Square,
    empty_position,
    starting_position,
    with_piece,
)
from errors import LegalityNormalizationFailure
from fen_codec import encode, normalize_castling
from logger import get_logger, log_edit
from rules_normalizer import ChessRulesNormalizer, NormalizedView, RulesNormalizer
import transforms


def place(position: Position, piece: Piece, square: Square) -> Position:
    """Put piece on square, replacing whatever was there."""
    return position.with_board(with_piece(position.board, square, piece))


def remove(position: Position, square: Square) -> Position:
    if position.piece_at(square) is None:
        return position
    return position.with_board(with_piece(position.board, square, None))


def move(position: Position, source: Square, target: Square) -> Tuple[Position, bool]:
    """
    Relocate the piece on source to target (overwriting target).

    Returns:
        (new_position, moved). moved is False when source is empty,
        in which case the position is returned unchanged.
    """
    piece = position.piece_at(source)
    if piece is None:
        return position, False
    if source == target:
        return position, True

    board = with_piece(position.board, target, piece)
    board = with_piece(board, source, None)
    return position.with_board(board), True


def clear() -> Position:
    return empty_position()


def reset() -> Position:
    return starting_position()


def set_turn(position: Position, turn: Color) -> Position:
    return position.with_turn(turn)


def toggle_castling(position: Position, right: str, enabled: bool) -> Position:
    """Add or remove one of K, Q, k, q. Idempotent."""
    if len(right) != 1 or right not in CASTLING_LETTERS:
        raise ValueError(f"Invalid castling right: {right!r}")

    current = "" if position.castling == NO_CASTLING else position.castling
    if enabled:
        current += right
    else:
        current = current.replace(right, "")
    return position.with_castling(normalize_castling(current))


@dataclass(frozen=True)
class EditResult:
    position: Position
    ok: bool = True
    message: str = ""
    normalized: Optional[NormalizedView] = None

    @property
    def fen(self) -> str:
        return encode(self.position)


class BoardEditor:
    """
    Applies edits and attaches a best-effort normalized view.

    Usage:
        editor = BoardEditor()
        result = editor.move(position, Square.from_name("e2"), Square.from_name("e4"))
        if result.ok:
            position = result.position
    """

    def __init__(self, normalizer: RulesNormalizer = None):
        self.normalizer = normalizer if normalizer is not None else ChessRulesNormalizer()

    def place(self, position: Position, piece: Piece, square: Square) -> EditResult:
        return self._finish(f"place {piece.symbol()}@{square}", place(position, piece, square))

    def remove(self, position: Position, square: Square) -> EditResult:
        return self._finish(f"remove {square}", remove(position, square))

    def move(self, position: Position, source: Square, target: Square) -> EditResult:
        new_position, moved = move(position, source, target)
        if not moved:
            return EditResult(position, ok=False, message="No piece to move",
                              normalized=self.normalize(position))
        return self._finish(f"move {source}-{target}", new_position)

    def clear(self) -> EditResult:
        return self._finish("clear", clear())

    def reset(self) -> EditResult:
        return self._finish("reset", reset())

    def set_turn(self, position: Position, turn: Color) -> EditResult:
        return self._finish(f"turn {turn.value}", set_turn(position, turn))

    def toggle_castling(self, position: Position, right: str, enabled: bool) -> EditResult:
        state = "on" if enabled else "off"
        return self._finish(f"castling {right} {state}", toggle_castling(position, right, enabled))

    def flip(self, position: Position) -> EditResult:
        return self._finish("flip", transforms.rotate_180(position))

    def swap_colors(self, position: Position) -> EditResult:
        return self._finish("swap colors", transforms.swap_colors(position))

    def normalize(self, position: Position) -> Optional[NormalizedView]:
        """
        Parse through the rules normalizer, keeping the canonical turn.

        Returns None when the position cannot be normalized.
        """
        logger = get_logger()
        try:
            view = self.normalizer.parse(encode(position))
        except LegalityNormalizationFailure as e:
            logger.debug(f"[NORMALIZE] skipped: {e}")
            return None

        if view.turn is position.turn:
            return view

        logger.debug(f"[NORMALIZE] turn changed to {view.turn.value}, restoring {position.turn.value}")
        try:
            view = self.normalizer.parse(view.with_turn(position.turn))
        except LegalityNormalizationFailure as e:
            logger.debug(f"[NORMALIZE] corrected FEN rejected: {e}")
            return None

        return view if view.turn is position.turn else None

    def _finish(self, operation: str, position: Position) -> EditResult:
        log_edit(operation, encode(position))
        return EditResult(position, normalized=self.normalize(position))
