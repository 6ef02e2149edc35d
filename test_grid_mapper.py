"""
Tests for detection -> board mapping.
"""

import unittest

from board_model import Color, Piece, PieceType, Square, EMPTY_FEN, empty_position
from fen_codec import encode
from grid_mapper import (
    LABEL_TO_PIECE, BoardBounds, Detection, board_bounds, get_grid_cell, map_detections,
)


def det(x, y, label, confidence=0.9, size=50):
    return Detection(x=x, y=y, width=size, height=size, label=label, confidence=confidence)


class TestLabelTable(unittest.TestCase):
    def test_both_label_formats(self):
        self.assertEqual(LABEL_TO_PIECE["white-pawn"], Piece(PieceType.PAWN, Color.WHITE))
        self.assertEqual(LABEL_TO_PIECE["w-pawn"], Piece(PieceType.PAWN, Color.WHITE))
        self.assertEqual(LABEL_TO_PIECE["black-knight"], Piece(PieceType.KNIGHT, Color.BLACK))
        self.assertEqual(LABEL_TO_PIECE["b-knight"], Piece(PieceType.KNIGHT, Color.BLACK))
        self.assertEqual(len(set(LABEL_TO_PIECE.values())), 12)

    def test_case_insensitive(self):
        self.assertEqual(det(0, 0, "White-Queen").piece, Piece(PieceType.QUEEN, Color.WHITE))
        self.assertEqual(det(0, 0, "B-KING").piece, Piece(PieceType.KING, Color.BLACK))
        self.assertIsNone(det(0, 0, "bishop").piece)


class TestBounds(unittest.TestCase):
    def test_with_image_dimensions(self):
        bounds = board_bounds([], 1000, 800)
        self.assertAlmostEqual(bounds.min_x, 50)
        self.assertAlmostEqual(bounds.min_y, 40)
        self.assertAlmostEqual(bounds.width, 900)
        self.assertAlmostEqual(bounds.height, 720)

    def test_zero_dimensions_are_degenerate(self):
        bounds = board_bounds([det(100, 100, "w-pawn")], 0, 0)
        self.assertTrue(bounds.is_degenerate)

    def test_tight_box(self):
        bounds = board_bounds([det(100, 100, "w-pawn", size=20), det(500, 300, "b-pawn", size=40)])
        self.assertEqual(bounds, BoardBounds(90, 90, 430, 230))

    def test_grid_cell_clamped(self):
        bounds = BoardBounds(0, 0, 800, 800)
        self.assertEqual(get_grid_cell(50, 50, bounds), (0, 0))
        self.assertEqual(get_grid_cell(750, 750, bounds), (7, 7))
        self.assertEqual(get_grid_cell(-500, 2000, bounds), (7, 0))
        self.assertEqual(get_grid_cell(450, 150, bounds), (1, 4))


class TestMapDetections(unittest.TestCase):
    def test_basic_mapping(self):
        # 1000x1000 image: board from 50 to 950, squares 112.5 px
        detections = [
            det(100, 100, "black-rook"),    # a8
            det(900, 900, "white-king"),    # h1
            det(500, 500, "w-queen"),       # e4
        ]
        position = map_detections(detections, 1000, 1000)
        self.assertEqual(position.piece_at(Square.from_name("a8")), Piece(PieceType.ROOK, Color.BLACK))
        self.assertEqual(position.piece_at(Square.from_name("h1")), Piece(PieceType.KING, Color.WHITE))
        self.assertEqual(position.piece_at(Square.from_name("e4")), Piece(PieceType.QUEEN, Color.WHITE))

    def test_outside_board_lands_on_edge(self):
        position = map_detections([det(5, 995, "white-pawn")], 1000, 1000)
        self.assertEqual(position.piece_at(Square.from_name("a1")), Piece(PieceType.PAWN, Color.WHITE))

    def test_default_metadata(self):
        position = map_detections([det(500, 500, "w-queen")], 1000, 1000)
        self.assertEqual(encode(position).split()[1:], ["w", "-", "-", "0", "1"])

    def test_higher_confidence_wins(self):
        detections = [
            det(100, 100, "white-queen", confidence=0.5),
            det(110, 110, "black-rook", confidence=0.9),
        ]
        position = map_detections(detections, 1000, 1000)
        self.assertEqual(position.piece_at(Square.from_name("a8")), Piece(PieceType.ROOK, Color.BLACK))

        # Order reversed, same winner
        position = map_detections(list(reversed(detections)), 1000, 1000)
        self.assertEqual(position.piece_at(Square.from_name("a8")), Piece(PieceType.ROOK, Color.BLACK))

    def test_tie_keeps_first(self):
        detections = [
            det(100, 100, "white-queen", confidence=0.8),
            det(110, 110, "black-rook", confidence=0.8),
        ]
        position = map_detections(detections, 1000, 1000)
        self.assertEqual(position.piece_at(Square.from_name("a8")), Piece(PieceType.QUEEN, Color.WHITE))

    def test_unknown_label_ignored(self):
        position = map_detections([det(100, 100, "chessboard"), det(500, 500, "w-queen")], 1000, 1000)
        self.assertIsNone(position.piece_at(Square.from_name("a8")))
        self.assertEqual(position.count(Piece(PieceType.QUEEN, Color.WHITE)), 1)

    def test_no_detections_is_empty_board(self):
        self.assertEqual(map_detections([]), empty_position())
        self.assertEqual(encode(map_detections([], 0, 0)), EMPTY_FEN)

    def test_zero_image_size_is_empty_board(self):
        detections = [det(10, 10, "w-pawn", size=20), det(500, 500, "b-king", size=20)]
        self.assertEqual(encode(map_detections(detections, 0, 0)), EMPTY_FEN)
        self.assertEqual(encode(map_detections(detections, 0, 800)), EMPTY_FEN)
        self.assertEqual(encode(map_detections(detections, 1000, None)), EMPTY_FEN)

    def test_degenerate_bounds(self):
        # Zero-size box and no image size: zero-width board
        self.assertEqual(map_detections([det(100, 100, "w-pawn", size=0)]), empty_position())
        # Negative image size: negative board
        self.assertEqual(map_detections([det(100, 100, "w-pawn")], -100, -100), empty_position())

    def test_non_finite_center_ignored(self):
        detections = [det(float("nan"), 100, "w-pawn"), det(500, 500, "b-pawn")]
        position = map_detections(detections, 1000, 1000)
        self.assertEqual(position.count(Piece(PieceType.PAWN, Color.WHITE)), 0)
        self.assertEqual(position.count(Piece(PieceType.PAWN, Color.BLACK)), 1)

    def test_tight_bounds_without_image_size(self):
        # Two corner pieces define the board
        detections = [det(25, 25, "black-rook"), det(775, 775, "white-rook")]
        position = map_detections(detections)
        self.assertEqual(position.piece_at(Square.from_name("a8")), Piece(PieceType.ROOK, Color.BLACK))
        self.assertEqual(position.piece_at(Square.from_name("h1")), Piece(PieceType.ROOK, Color.WHITE))


if __name__ == '__main__':
    unittest.main()
