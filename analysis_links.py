"""
Analysis Links

Builds URLs that open the current position on third-party sites.
The FEN must pass structural validation first; otherwise ExportRefused.
"""

import re
from urllib.parse import quote

from errors import ExportRefused
from validator import is_structurally_valid

LICHESS_ANALYSIS_URL = "https://lichess.org/analysis/"
LICHESS_EDITOR_URL = "https://lichess.org/editor/"
CHESS_COM_ANALYSIS_URL = "https://www.chess.com/analysis?fen="
FEN_TOOL_URL = "https://mutsuntsai.github.io/fen-tool/?fen="

MAX_PATH_FEN_LENGTH = 200
PATH_UNSAFE_RE = re.compile(r"[^rnbqkpRNBQKPa-h0-9/_w-]")


def fen_path_segment(fen: str) -> str:
    """
    FEN as a URL path segment: spaces become '_' and anything outside the
    board-notation alphabet is stripped.
    """
    _require_valid(fen)
    segment = PATH_UNSAFE_RE.sub("", "_".join(fen.split()))
    if len(segment) > MAX_PATH_FEN_LENGTH:
        raise ExportRefused(f"FEN path segment is {len(segment)} characters",
                            user_message="FEN string too long for analysis.")
    return segment


def fen_query_value(fen: str) -> str:
    """FEN percent-encoded for a query parameter."""
    _require_valid(fen)
    return quote(" ".join(fen.split()), safe="")


def lichess_analysis_url(fen: str) -> str:
    return LICHESS_ANALYSIS_URL + fen_path_segment(fen)


def lichess_editor_url(fen: str) -> str:
    return LICHESS_EDITOR_URL + fen_path_segment(fen)


def chess_com_analysis_url(fen: str) -> str:
    return CHESS_COM_ANALYSIS_URL + fen_query_value(fen)


def fen_tool_url(fen: str) -> str:
    return FEN_TOOL_URL + fen_query_value(fen)


LINK_BUILDERS = {
    "lichess": lichess_analysis_url,
    "lichess-editor": lichess_editor_url,
    "chesscom": chess_com_analysis_url,
    "fentool": fen_tool_url,
}


def _require_valid(fen: str):
    if not is_structurally_valid(fen):
        raise ExportRefused(f"Structurally invalid FEN: {fen!r}")
