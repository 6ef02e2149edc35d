"""
Board Transforms

rotate_180: view the same position from the opposite edge.
swap_colors: invert every piece's color in place.

Both swap castling letters (K<->k, Q<->q) and keep the turn.
Both are involutions.
"""

from board_model import COLUMNS, NO_CASTLING, NO_EN_PASSANT, Position, board_from_rows
from fen_codec import EN_PASSANT_RE


def rotate_180(position: Position) -> Position:
    rows = [list(reversed(row)) for row in reversed(position.board)]
    return Position(
        board=board_from_rows(rows),
        turn=position.turn,
        castling=swap_castling(position.castling),
        en_passant=rotate_en_passant(position.en_passant),
        halfmove_clock=position.halfmove_clock,
        fullmove_number=position.fullmove_number,
    )


def swap_colors(position: Position) -> Position:
    rows = [
        [piece.swapped() if piece is not None else None for piece in row]
        for row in position.board
    ]
    return Position(
        board=board_from_rows(rows),
        turn=position.turn,
        castling=swap_castling(position.castling),
        en_passant=position.en_passant,
        halfmove_clock=position.halfmove_clock,
        fullmove_number=position.fullmove_number,
    )


def swap_castling(castling: str) -> str:
    """KQkq -> kqKQ. Letter order is kept so applying twice is exact."""
    if not castling or castling == NO_CASTLING:
        return NO_CASTLING
    return castling.swapcase()


def rotate_en_passant(en_passant: str) -> str:
    """e3 -> d6: file mirrored (a<->h), rank becomes 9 - rank."""
    if not en_passant or not EN_PASSANT_RE.match(en_passant):
        return NO_EN_PASSANT
    file_index = COLUMNS.index(en_passant[0])
    rank = int(en_passant[1])
    return f"{COLUMNS[7 - file_index]}{9 - rank}"
