"""
Board Session - owner of the current position

The interactive layer talks only to this class. It holds the single
current Position, threads it through the editor and scanner, and turns
every failure into one advisory message instead of raising.
"""

import threading
from typing import Dict, List, Optional, Union

from board_editor import BoardEditor, EditResult
from board_model import Color, Piece, Position, Square
from errors import ChessScanError, MalformedFEN
from fen_codec import decode, encode
from grid_mapper import LABEL_TO_PIECE
from logger import get_logger, log_error
from rules_normalizer import NormalizedView
from scanner import ImageScanner
import analysis_links
import validator

SquareLike = Union[Square, str]
PieceLike = Union[Piece, str]


def parse_square(value: SquareLike) -> Square:
    if isinstance(value, Square):
        return value
    return Square.from_name(str(value).strip().lower())


def parse_piece(value: PieceLike) -> Piece:
    """
    Accepts a Piece, a FEN letter ('Q', 'n'), a color+letter pair
    ('wq', 'bn') or a detector-style label ('white-queen', 'b-knight').
    """
    if isinstance(value, Piece):
        return value
    text = str(value).strip()
    if len(text) == 1:
        piece = Piece.from_symbol(text)
    elif len(text) == 2 and text[0].lower() in "wb":
        letter = text[1].lower()
        piece = Piece.from_symbol(letter.upper() if text[0].lower() == "w" else letter)
    else:
        piece = LABEL_TO_PIECE.get(text.lower())
    if piece is None:
        raise ValueError(f"Unknown piece: {value!r}")
    return piece


def parse_color(value: Union[Color, str]) -> Color:
    if isinstance(value, Color):
        return value
    text = str(value).strip().lower()
    if text in ("w", "white"):
        return Color.WHITE
    if text in ("b", "black"):
        return Color.BLACK
    raise ValueError(f"Unknown color: {value!r}")


class BoardSession:
    """
    Usage:
        session = BoardSession(scanner=ImageScanner(VisionClient.from_settings()))
        session.scan("board.jpg")
        session.move("e2", "e4")
        if session.message:
            print(session.message)
        print(session.fen)
    """

    def __init__(self, editor: BoardEditor = None, scanner: Optional[ImageScanner] = None):
        self.editor = editor or BoardEditor()
        self.scanner = scanner
        self.board_lock = threading.RLock()

        start = self.editor.reset()
        self.position: Position = start.position
        self.normalized: Optional[NormalizedView] = start.normalized

        # Advisory slot: last user-facing error or notice
        self.message: Optional[str] = None
        self.warnings: List[str] = []

    @property
    def fen(self) -> str:
        return encode(self.position)

    # --- Board edits -------------------------------------------------

    def place(self, square: SquareLike, piece: PieceLike) -> bool:
        return self._edit(lambda p: self.editor.place(p, parse_piece(piece), parse_square(square)))

    def remove(self, square: SquareLike) -> bool:
        return self._edit(lambda p: self.editor.remove(p, parse_square(square)))

    def move(self, source: SquareLike, target: SquareLike) -> bool:
        return self._edit(lambda p: self.editor.move(p, parse_square(source), parse_square(target)))

    def clear(self) -> bool:
        return self._edit(lambda p: self.editor.clear())

    def reset(self) -> bool:
        return self._edit(lambda p: self.editor.reset())

    def flip(self) -> bool:
        return self._edit(self.editor.flip)

    def swap_colors(self) -> bool:
        return self._edit(self.editor.swap_colors)

    def set_turn(self, turn: Union[Color, str]) -> bool:
        return self._edit(lambda p: self.editor.set_turn(p, parse_color(turn)))

    def toggle_castling(self, right: str, enabled: bool) -> bool:
        return self._edit(lambda p: self.editor.toggle_castling(p, right, enabled))

    def load_fen(self, fen: str) -> bool:
        """Replace the position with a typed FEN. Keeps the old one on error."""
        with self.board_lock:
            self.message = None
            try:
                position = decode(fen)
            except MalformedFEN as e:
                get_logger().debug(f"[SESSION] Rejected FEN {fen!r}: {e}")
                self.message = e.user_message
                return False
            self._set(position, self.editor.normalize(position))
            return True

    # --- Scanning ----------------------------------------------------

    def scan(self, path: str) -> bool:
        """Scan an image file and, on success, replace the position."""
        with self.board_lock:
            self.message = None
            if self.scanner is None:
                self.message = "Scanning is not configured."
                return False
            try:
                position = self.scanner.scan_file(path)
            except ChessScanError as e:
                get_logger().info(f"[SCAN] {e}")
                self.message = e.user_message
                return False

            normalized = self.editor.normalize(position)
            self._set(position, normalized)
            if normalized is None:
                self.message = "Detected position may be invalid. Please verify the board."
            return True

    # --- Export ------------------------------------------------------

    def analysis_link(self, site: str) -> Optional[str]:
        """
        URL for one of analysis_links.LINK_BUILDERS, or None if refused.
        King-count problems are reported in self.warnings, not blocking.
        """
        with self.board_lock:
            self.message = None
            builder = analysis_links.LINK_BUILDERS.get(site)
            if builder is None:
                self.message = f"Unknown analysis site: {site}"
                return None

            self.warnings = validator.king_count_warnings(self.position)
            try:
                return builder(self.fen)
            except ChessScanError as e:
                log_error("Export refused", e)
                self.message = e.user_message
                return None

    def analysis_links(self) -> Dict[str, str]:
        links = {}
        for site in analysis_links.LINK_BUILDERS:
            url = self.analysis_link(site)
            if url is None:
                return {}
            links[site] = url
        return links

    # --- Internals ---------------------------------------------------

    def _edit(self, operation) -> bool:
        with self.board_lock:
            self.message = None
            try:
                result: EditResult = operation(self.position)
            except (ChessScanError, ValueError) as e:
                self.message = getattr(e, "user_message", None) or str(e)
                return False

            if not result.ok:
                self.message = result.message
                return False

            self._set(result.position, result.normalized)
            return True

    def _set(self, position: Position, normalized: Optional[NormalizedView]):
        self.position = position
        self.normalized = normalized
        self.warnings = []
