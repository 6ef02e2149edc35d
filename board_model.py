"""
Board Model - Pieces, Squares and Positions

Shared data model for every pipeline:
- Board: 8x8 tuple of optional Piece, row 0 = rank 8, col 0 = file a
- Position: Board + turn, castling, en passant and move counters

Positions are immutable values. Every edit returns a new Position.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple


COLUMNS = "abcdefgh"
ROWS = "12345678"


class Color(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def other(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def name_lower(self) -> str:
        return "white" if self is Color.WHITE else "black"


class PieceType(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


@dataclass(frozen=True)
class Piece:
    piece_type: PieceType
    color: Color

    def symbol(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        letter = self.piece_type.value
        return letter.upper() if self.color is Color.WHITE else letter

    def swapped(self) -> "Piece":
        return Piece(self.piece_type, self.color.other)

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Piece"]:
        """Parse a FEN letter. Returns None for anything unrecognized."""
        return PIECE_SYMBOLS.get(symbol)

    def __str__(self):
        return self.symbol()


PIECE_SYMBOLS = {
    (pt.value.upper() if color is Color.WHITE else pt.value): Piece(pt, color)
    for color in Color
    for pt in PieceType
}


@dataclass(frozen=True, order=True)
class Square:
    """
    One of the 64 squares.

    Two addressing schemes:
        (row, col): row 0 = rank 8, col 0 = file a
        (file, rank): 'a'..'h', 1..8

    Conversion: row = 8 - rank, col = file - 'a'
    """
    row: int
    col: int

    def __post_init__(self):
        if not (0 <= self.row < 8 and 0 <= self.col < 8):
            raise ValueError(f"Square out of range: row={self.row}, col={self.col}")

    @classmethod
    def from_file_rank(cls, file: str, rank: int) -> "Square":
        if len(file) != 1 or file not in COLUMNS:
            raise ValueError(f"Invalid file: {file!r}")
        if not 1 <= rank <= 8:
            raise ValueError(f"Invalid rank: {rank!r}")
        return cls(8 - rank, COLUMNS.index(file))

    @classmethod
    def from_name(cls, name: str) -> "Square":
        """Parse algebraic notation, e.g. 'e4'."""
        if not isinstance(name, str) or len(name) != 2 or name[1] not in ROWS:
            raise ValueError(f"Invalid square: {name!r}")
        return cls.from_file_rank(name[0], int(name[1]))

    @property
    def file(self) -> str:
        return COLUMNS[self.col]

    @property
    def rank(self) -> int:
        return 8 - self.row

    @property
    def name(self) -> str:
        return f"{self.file}{self.rank}"

    def rotated(self) -> "Square":
        """Same square seen from the opposite edge of the board."""
        return Square(7 - self.row, 7 - self.col)

    def __str__(self):
        return self.name


# Board: 8 rows of 8 optional pieces
Board = Tuple[Tuple[Optional[Piece], ...], ...]


def empty_board() -> Board:
    return tuple(tuple(None for _ in range(8)) for _ in range(8))


def board_from_rows(rows) -> Board:
    """Freeze a nested list into a Board. Must be exactly 8x8."""
    board = tuple(tuple(row) for row in rows)
    if len(board) != 8 or any(len(row) != 8 for row in board):
        raise ValueError("Board must be 8x8")
    return board


def with_piece(board: Board, square: Square, piece: Optional[Piece]) -> Board:
    """Return a copy of board with one square overwritten."""
    rows = [list(row) for row in board]
    rows[square.row][square.col] = piece
    return board_from_rows(rows)


def iter_pieces(board: Board):
    """Yield (square, piece) for every occupied square, FEN order."""
    for row in range(8):
        for col in range(8):
            piece = board[row][col]
            if piece is not None:
                yield Square(row, col), piece


def _starting_board() -> Board:
    back = [PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
            PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK]
    rows = [[None] * 8 for _ in range(8)]
    for col, pt in enumerate(back):
        rows[0][col] = Piece(pt, Color.BLACK)
        rows[7][col] = Piece(pt, Color.WHITE)
    for col in range(8):
        rows[1][col] = Piece(PieceType.PAWN, Color.BLACK)
        rows[6][col] = Piece(PieceType.PAWN, Color.WHITE)
    return board_from_rows(rows)


NO_CASTLING = "-"
NO_EN_PASSANT = "-"
CASTLING_LETTERS = "KQkq"


@dataclass(frozen=True)
class Position:
    board: Board
    turn: Color = Color.WHITE
    castling: str = NO_CASTLING
    en_passant: str = NO_EN_PASSANT
    halfmove_clock: int = 0
    fullmove_number: int = 1

    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.board[square.row][square.col]

    def with_board(self, board: Board) -> "Position":
        """Replace the pieces, keep every metadata field."""
        return replace(self, board=board)

    def with_turn(self, turn: Color) -> "Position":
        return replace(self, turn=turn)

    def with_castling(self, castling: str) -> "Position":
        return replace(self, castling=castling or NO_CASTLING)

    def count(self, piece: Piece) -> int:
        return sum(1 for _, p in iter_pieces(self.board) if p == piece)


def empty_position() -> Position:
    """All-empty board with default metadata (w, -, -, 0, 1)."""
    return Position(board=empty_board())


def starting_position() -> Position:
    return Position(board=_starting_board(), castling=CASTLING_LETTERS)


STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
EMPTY_FEN = "8/8/8/8/8/8/8/8 w - - 0 1"
