"""
FEN Validator

Structural checks only (shape, character set, field syntax). Chess
legality is not checked: positions with two kings or no kings pass.
king_count_warnings() is advisory and never blocks anything.
"""

import re
from typing import List

from board_model import Color, Piece, PieceType, Position

RANK_RE = re.compile(r"^[rnbqkpRNBQKP1-8]+$")
CASTLING_RE = re.compile(r"^[KQkq]{1,4}$")
EN_PASSANT_RE = re.compile(r"^[a-h][36]$")
COUNTER_RE = re.compile(r"^[0-9]+$")


def is_structurally_valid(fen) -> bool:
    return not structural_errors(fen)


def structural_errors(fen) -> List[str]:
    """
    Return the first structural problem found, as a one-item list.
    An empty list means the FEN is valid. Checks run in FEN field order.
    """
    if not isinstance(fen, str):
        return ["FEN is not a string"]

    parts = fen.split()
    if len(parts) != 6:
        return [f"Expected 6 fields, got {len(parts)}"]

    ranks = parts[0].split("/")
    if len(ranks) != 8:
        return [f"Expected 8 ranks, got {len(ranks)}"]

    for index, rank in enumerate(ranks):
        if not RANK_RE.match(rank):
            return [f"Rank {8 - index} has invalid characters: {rank!r}"]
        width = sum(int(c) if c.isdigit() else 1 for c in rank)
        if width != 8:
            return [f"Rank {8 - index} has {width} squares (expected 8)"]

    turn, castling, en_passant, halfmove, fullmove = parts[1:]

    if turn not in ("w", "b"):
        return [f"Invalid turn: {turn!r}"]

    if castling != "-":
        if not CASTLING_RE.match(castling) or len(set(castling)) != len(castling):
            return [f"Invalid castling rights: {castling!r}"]

    if en_passant != "-" and not EN_PASSANT_RE.match(en_passant):
        return [f"Invalid en passant square: {en_passant!r}"]

    if not COUNTER_RE.match(halfmove) or not COUNTER_RE.match(fullmove):
        return [f"Invalid move counters: {halfmove!r} {fullmove!r}"]

    return []


def king_count_warnings(position: Position) -> List[str]:
    """Report missing or extra kings per color. Empty list = exactly one each."""
    warnings = []
    for color in (Color.WHITE, Color.BLACK):
        label = color.name_lower.capitalize()
        kings = position.count(Piece(PieceType.KING, color))
        if kings == 0:
            warnings.append(f"{label} is missing a king")
        elif kings > 1:
            warnings.append(f"{label} has {kings} kings (should be 1)")
    return warnings
