"""
Tests for ImageScanner: cooldown, validation, detection, mapping.
"""

import unittest
from unittest.mock import MagicMock

import cv2
import numpy as np

from board_model import Color, Piece, PieceType, Square
from errors import DetectionEmpty, DetectionServiceError, InvalidImage, RateLimited
from grid_mapper import Detection
from rate_limiter import CooldownLimiter
from scanner import ImageScanner
from test_rate_limiter import FakeClock


def png_bytes(size=100):
    _, buffer = cv2.imencode(".png", np.zeros((size, size, 3), dtype=np.uint8))
    return buffer.tobytes()


class TestImageScanner(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.last_error = None
        self.client.detect.return_value = [
            # 100x100 image: board 5..95, squares 11.25 px
            Detection(x=10, y=10, width=8, height=8, label="black-rook", confidence=0.9),
            Detection(x=90, y=90, width=8, height=8, label="white-king", confidence=0.8),
        ]
        self.clock = FakeClock()
        self.scanner = ImageScanner(self.client, CooldownLimiter(1.0, clock=self.clock))

    def test_scan_maps_pieces(self):
        position = self.scanner.scan_bytes(png_bytes(), "image/png")

        self.assertEqual(position.piece_at(Square.from_name("a8")), Piece(PieceType.ROOK, Color.BLACK))
        self.assertEqual(position.piece_at(Square.from_name("h1")), Piece(PieceType.KING, Color.WHITE))
        self.assertIs(position.turn, Color.WHITE)
        self.assertEqual(position.castling, "-")
        self.client.detect.assert_called_once()

    def test_second_scan_within_cooldown_rejected(self):
        self.scanner.scan_bytes(png_bytes(), "image/png")
        self.clock.now += 0.4

        with self.assertRaises(RateLimited) as ctx:
            self.scanner.scan_bytes(png_bytes(), "image/png")

        self.assertGreaterEqual(ctx.exception.wait_seconds, 0.59)
        self.assertEqual(self.client.detect.call_count, 1)

    def test_scan_after_cooldown(self):
        self.scanner.scan_bytes(png_bytes(), "image/png")
        self.clock.now += 1.5
        self.scanner.scan_bytes(png_bytes(), "image/png")
        self.assertEqual(self.client.detect.call_count, 2)

    def test_invalid_image_never_sent(self):
        with self.assertRaises(InvalidImage):
            self.scanner.scan_bytes(b"not an image", "image/png")
        self.client.detect.assert_not_called()

    def test_no_pieces(self):
        self.client.detect.return_value = []

        with self.assertRaises(DetectionEmpty) as ctx:
            self.scanner.scan_bytes(png_bytes(), "image/png")

        self.assertEqual(ctx.exception.user_message, "No pieces detected in image.")

    def test_service_error_becomes_detection_empty(self):
        self.client.detect.return_value = []
        self.client.last_error = DetectionServiceError("API error 500")

        with self.assertRaises(DetectionEmpty) as ctx:
            self.scanner.scan_bytes(png_bytes(), "image/png")

        self.assertEqual(ctx.exception.user_message, "Failed to process image. Please try again.")

    def test_scan_in_flight_rejected(self):
        self.scanner._in_flight.acquire()
        try:
            with self.assertRaises(RateLimited) as ctx:
                self.scanner.scan_bytes(png_bytes(), "image/png")
            self.assertEqual(ctx.exception.user_message,
                             "A scan is already in progress. Please wait for it to finish.")
            self.assertNotIn("second", ctx.exception.user_message)
        finally:
            self.scanner._in_flight.release()
        self.client.detect.assert_not_called()

    def test_scan_file_missing(self):
        with self.assertRaises(InvalidImage):
            self.scanner.scan_file("/nonexistent/board.png")


if __name__ == '__main__':
    unittest.main()
