import unittest

from analysis_links import (
    LINK_BUILDERS, chess_com_analysis_url, fen_path_segment, fen_tool_url,
    lichess_analysis_url, lichess_editor_url,
)
from board_model import STARTING_FEN
from errors import ExportRefused


class TestAnalysisLinks(unittest.TestCase):
    def test_lichess_path(self):
        self.assertEqual(
            lichess_analysis_url(STARTING_FEN),
            "https://lichess.org/analysis/rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR_w_KQkq_-_0_1",
        )
        self.assertTrue(lichess_editor_url(STARTING_FEN).startswith("https://lichess.org/editor/rnbqkbnr"))

    def test_en_passant_survives_path(self):
        segment = fen_path_segment("4k3/8/8/8/4P3/8/8/4K3 b - e3 0 1")
        self.assertEqual(segment, "4k3/8/8/8/4P3/8/8/4K3_b_-_e3_0_1")

    def test_query_encoding(self):
        url = chess_com_analysis_url(STARTING_FEN)
        self.assertTrue(url.startswith("https://www.chess.com/analysis?fen="))
        self.assertIn("rnbqkbnr%2Fpppppppp", url)
        self.assertIn("%20w%20KQkq%20-%200%201", url)
        self.assertNotIn(" ", url)

        self.assertTrue(fen_tool_url(STARTING_FEN).startswith("https://mutsuntsai.github.io/fen-tool/?fen="))

    def test_extra_whitespace_collapsed(self):
        self.assertEqual(fen_path_segment("8/8/8/8/8/8/8/8  w - -  0 1"), "8/8/8/8/8/8/8/8_w_-_-_0_1")

    def test_invalid_fen_refused(self):
        for builder in LINK_BUILDERS.values():
            with self.assertRaises(ExportRefused) as ctx:
                builder("8/8/8/8/8/8/8 w - - 0 1")
            self.assertEqual(ctx.exception.user_message, "Invalid FEN format. Cannot open analysis.")

    def test_too_long_refused(self):
        fen = "8/8/8/8/8/8/8/8 w - - 0 " + "1" * 200
        with self.assertRaises(ExportRefused) as ctx:
            lichess_analysis_url(fen)
        self.assertEqual(ctx.exception.user_message, "FEN string too long for analysis.")
        # Query links have no path limit
        self.assertIn("1111", chess_com_analysis_url(fen))

    def test_illegal_but_valid_allowed(self):
        url = lichess_analysis_url("8/8/8/8/8/8/8/KK6 w - - 0 1")
        self.assertTrue(url.endswith("KK6_w_-_-_0_1"))

    def test_builders(self):
        self.assertEqual(set(LINK_BUILDERS), {"lichess", "lichess-editor", "chesscom", "fentool"})


if __name__ == '__main__':
    unittest.main()
