import unittest

from board_model import Color, STARTING_FEN
from errors import LegalityNormalizationFailure
from rules_normalizer import ChessRulesNormalizer, NormalizedView, NullNormalizer


class TestChessRulesNormalizer(unittest.TestCase):
    def setUp(self):
        self.normalizer = ChessRulesNormalizer()

    def test_starting_position(self):
        view = self.normalizer.parse(STARTING_FEN)
        self.assertEqual(view.fen, STARTING_FEN)
        self.assertIs(view.turn, Color.WHITE)
        self.assertEqual(view.castling, "KQkq")
        self.assertEqual(view.en_passant, "-")
        self.assertFalse(view.is_check)

    def test_check_flag(self):
        view = self.normalizer.parse("4k3/8/8/8/8/8/8/4RK2 b - - 0 1")
        self.assertIs(view.turn, Color.BLACK)
        self.assertTrue(view.is_check)

    def test_two_kings_rejected(self):
        with self.assertRaises(LegalityNormalizationFailure):
            self.normalizer.parse("8/8/8/8/8/8/8/KK6 b - - 0 1")

    def test_kingless_rejected(self):
        with self.assertRaises(LegalityNormalizationFailure):
            self.normalizer.parse("8/8/8/8/8/8/8/8 w - - 0 1")

    def test_garbage_rejected(self):
        with self.assertRaises(LegalityNormalizationFailure):
            self.normalizer.parse("not a fen")


class TestNullNormalizer(unittest.TestCase):
    def test_always_fails(self):
        with self.assertRaises(LegalityNormalizationFailure):
            NullNormalizer().parse(STARTING_FEN)


class TestNormalizedView(unittest.TestCase):
    def test_with_turn(self):
        view = NormalizedView(fen=STARTING_FEN, turn=Color.WHITE, castling="KQkq", en_passant="-")
        self.assertEqual(view.with_turn(Color.BLACK),
                         "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR b KQkq - 0 1")


if __name__ == '__main__':
    unittest.main()
