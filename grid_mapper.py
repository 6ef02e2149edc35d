"""
Grid Mapper - detections to board squares

Buckets object detections (pixel center, box, class label, confidence)
into the 8x8 grid. If two pieces land on the same square, the one with
strictly higher confidence wins; ties keep the first one seen.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from board_model import Color, Piece, PieceType, Position, empty_position, board_from_rows
from logger import get_logger

BOARD_MARGIN = 0.05  # board assumed to fill the central 90% of the frame

PIECE_NAMES = {
    "pawn": PieceType.PAWN,
    "knight": PieceType.KNIGHT,
    "bishop": PieceType.BISHOP,
    "rook": PieceType.ROOK,
    "queen": PieceType.QUEEN,
    "king": PieceType.KING,
}

COLOR_PREFIXES = {
    "white": Color.WHITE, "w": Color.WHITE,
    "black": Color.BLACK, "b": Color.BLACK,
}


def _build_label_table() -> Dict[str, Piece]:
    """'white-pawn' and 'w-pawn' style labels -> Piece. Checked at import."""
    table = {}
    for prefix, color in COLOR_PREFIXES.items():
        for name, piece_type in PIECE_NAMES.items():
            table[f"{prefix}-{name}"] = Piece(piece_type, color)

    if len(table) != len(COLOR_PREFIXES) * len(PIECE_NAMES):
        raise ValueError("Detector label table has duplicate labels")
    if len(set(table.values())) != 12:
        raise ValueError("Detector label table does not cover all 12 pieces")
    return table


LABEL_TO_PIECE = _build_label_table()


@dataclass(frozen=True)
class Detection:
    """One box from the vision model. x, y are the box center in pixels."""
    x: float
    y: float
    width: float
    height: float
    label: str
    confidence: float

    @property
    def piece(self) -> Optional[Piece]:
        return LABEL_TO_PIECE.get(self.label.lower())


@dataclass
class GridCell:
    row: int
    col: int
    piece: Optional[Piece] = None
    confidence: float = 0.0


@dataclass(frozen=True)
class BoardBounds:
    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        values = (self.min_x, self.min_y, self.width, self.height)
        return not all(math.isfinite(v) for v in values) or self.width <= 0 or self.height <= 0


def board_bounds(detections, image_width=None, image_height=None) -> BoardBounds:
    """
    Pixel rectangle of the board.

    With image dimensions: the image shrunk by a 5% margin on each side.
    A zero or negative dimension gives a degenerate rectangle.
    Without: the tight rectangle around every detection box.
    """
    if image_width is not None or image_height is not None:
        image_width = image_width or 0
        image_height = image_height or 0
        return BoardBounds(
            min_x=image_width * BOARD_MARGIN,
            min_y=image_height * BOARD_MARGIN,
            width=image_width * (1 - 2 * BOARD_MARGIN),
            height=image_height * (1 - 2 * BOARD_MARGIN),
        )

    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for det in detections:
        half_w = det.width / 2
        half_h = det.height / 2
        min_x = min(min_x, det.x - half_w)
        min_y = min(min_y, det.y - half_h)
        max_x = max(max_x, det.x + half_w)
        max_y = max(max_y, det.y + half_h)

    return BoardBounds(min_x, min_y, max_x - min_x, max_y - min_y)


def get_grid_cell(x: float, y: float, bounds: BoardBounds) -> Tuple[int, int]:
    """
    Pixel point -> (row, col), clamped to the board edge.
    row 0 = top of image = rank 8, col 0 = left = file a.
    """
    square_w = bounds.width / 8
    square_h = bounds.height / 8
    col = math.floor((x - bounds.min_x) / square_w)
    row = math.floor((y - bounds.min_y) / square_h)
    return max(0, min(7, row)), max(0, min(7, col))


def assign_cells(detections: Iterable[Detection], bounds: BoardBounds) -> Dict[Tuple[int, int], GridCell]:
    """
    Map detections to grid cells.
    If multiple pieces map to the same square, keeps the one with highest confidence.
    """
    logger = get_logger()
    cells = {}

    for det in detections:
        piece = det.piece
        if piece is None:
            logger.debug(f"[GRID] Unknown detector label ignored: {det.label!r}")
            continue
        if not (math.isfinite(det.x) and math.isfinite(det.y)):
            logger.debug(f"[GRID] Detection with non-finite center ignored: {det}")
            continue

        row, col = get_grid_cell(det.x, det.y, bounds)
        cell = cells.get((row, col))

        # Conflict resolution: strictly higher confidence replaces
        if cell is None or det.confidence > cell.confidence:
            cells[(row, col)] = GridCell(row, col, piece, det.confidence)

    return cells


def map_detections(detections, image_width=None, image_height=None) -> Position:
    """
    Build a Position from detections. Metadata is always the default
    (white to move, no castling, no en passant, 0, 1).

    Never raises on degenerate geometry: returns the empty board instead.
    """
    detections = list(detections)
    bounds = board_bounds(detections, image_width, image_height)
    if bounds.is_degenerate:
        get_logger().debug(f"[GRID] Degenerate board bounds {bounds}, returning empty board")
        return empty_position()

    rows = [[None] * 8 for _ in range(8)]
    for (row, col), cell in assign_cells(detections, bounds).items():
        rows[row][col] = cell.piece

    return empty_position().with_board(board_from_rows(rows))
