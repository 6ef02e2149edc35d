"""
FEN Codec

decode(fen) -> Position, encode(Position) -> fen.

Decoding is lenient on the board field:
- digit runs past column 8 are clamped, extra characters ignored
- unrecognized letters are skipped
Shape errors (field count, rank count) and unusable metadata raise.
"""

import re

from board_model import (
    CASTLING_LETTERS,
    NO_CASTLING,
    NO_EN_PASSANT,
    Color,
    Piece,
    Position,
    board_from_rows,
)
from errors import MalformedBoard, MalformedFEN

EN_PASSANT_RE = re.compile(r"^[a-h][36]$")
COUNTER_RE = re.compile(r"^[0-9]+$")


def decode(fen: str) -> Position:
    """
    Parse a full 6-field FEN string.

    Raises:
        MalformedFEN: not exactly 6 fields, or bad turn / move counters
        MalformedBoard: board field does not have exactly 8 ranks
    """
    if not isinstance(fen, str):
        raise MalformedFEN(f"FEN must be a string, got {type(fen).__name__}")

    fields = fen.split()
    if len(fields) != 6:
        raise MalformedFEN(f"Expected 6 FEN fields, got {len(fields)}")

    board_field, turn_field, castling_field, ep_field, half_field, full_field = fields

    return Position(
        board=decode_board(board_field),
        turn=_decode_turn(turn_field),
        castling=normalize_castling(castling_field),
        en_passant=ep_field if EN_PASSANT_RE.match(ep_field) else NO_EN_PASSANT,
        halfmove_clock=_decode_counter(half_field, "halfmove clock"),
        fullmove_number=max(1, _decode_counter(full_field, "fullmove number")),
    )


def decode_board(board_field: str):
    ranks = board_field.split("/")
    if len(ranks) != 8:
        raise MalformedBoard(f"Expected 8 ranks, got {len(ranks)}")

    rows = []
    for rank_text in ranks:
        row = [None] * 8
        col = 0
        for char in rank_text:
            if col >= 8:
                break
            if char in "12345678":
                col = min(8, col + int(char))
                continue
            piece = Piece.from_symbol(char)
            if piece is None:
                continue
            row[col] = piece
            col += 1
        rows.append(row)

    return board_from_rows(rows)


def encode(position: Position) -> str:
    return " ".join([
        encode_board(position.board),
        position.turn.value,
        position.castling or NO_CASTLING,
        position.en_passant or NO_EN_PASSANT,
        str(position.halfmove_clock),
        str(position.fullmove_number),
    ])


def encode_board(board) -> str:
    fen_rows = []
    for row in board:
        empty_count = 0
        row_fen = ""
        for piece in row:
            if piece is None:
                empty_count += 1
            else:
                if empty_count > 0:
                    row_fen += str(empty_count)
                    empty_count = 0
                row_fen += piece.symbol()
        if empty_count > 0:
            row_fen += str(empty_count)
        fen_rows.append(row_fen)
    return "/".join(fen_rows)


def normalize_castling(castling: str) -> str:
    """Rights present in castling, in KQkq order. Anything else is dropped."""
    return "".join(c for c in CASTLING_LETTERS if c in castling) or NO_CASTLING


def _decode_turn(turn_field: str) -> Color:
    try:
        return Color(turn_field)
    except ValueError:
        raise MalformedFEN(f"Invalid turn field: {turn_field!r}") from None


def _decode_counter(text: str, label: str) -> int:
    if not COUNTER_RE.match(text):
        raise MalformedFEN(f"Invalid {label}: {text!r}")
    return int(text)
