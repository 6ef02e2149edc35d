import cv2
import numpy as np

from board_model import COLUMNS, Color, Position, Square

LIGHT_SQUARE = (181, 217, 240)
DARK_SQUARE = (99, 136, 181)
LABEL_COLOR = (40, 40, 40)


class BoardRenderer:
    """
    Draws a Position as text (terminal) or as a BGR image (OpenCV window / file).

    flipped=True shows the board from Black's side.
    """
    def __init__(self, square_size=64, flipped=False):
        self.square_size = square_size
        self.flipped = flipped

    def render_text(self, position: Position) -> str:
        lines = []
        for display_row in range(8):
            row = self._to_board_index(display_row)
            cells = []
            for display_col in range(8):
                col = self._to_board_index(display_col)
                piece = position.board[row][col]
                cells.append(piece.symbol() if piece else ".")
            lines.append(f"{8 - row} " + " ".join(cells))

        files = COLUMNS[::-1] if self.flipped else COLUMNS
        lines.append("  " + " ".join(files))
        turn = "White" if position.turn is Color.WHITE else "Black"
        lines.append(f"{turn} to move | castling {position.castling} | en passant {position.en_passant}")
        return "\n".join(lines)

    def render_image(self, position: Position, highlights=None) -> np.ndarray:
        """
        Args:
            position: Position to draw
            highlights: Optional iterable of Square to mark

        Returns:
            BGR image of size 8*square_size
        """
        sq_size = self.square_size
        board_size = sq_size * 8
        vis = np.zeros((board_size, board_size, 3), dtype=np.uint8)

        marked = set(highlights or [])

        for display_row in range(8):
            for display_col in range(8):
                row = self._to_board_index(display_row)
                col = self._to_board_index(display_col)
                x1, y1 = display_col * sq_size, display_row * sq_size

                color = LIGHT_SQUARE if (row + col) % 2 == 0 else DARK_SQUARE
                cv2.rectangle(vis, (x1, y1), (x1 + sq_size, y1 + sq_size), color, -1)

                if Square(row, col) in marked:
                    cv2.rectangle(vis, (x1 + 2, y1 + 2), (x1 + sq_size - 3, y1 + sq_size - 3), (0, 200, 100), 2)

                piece = position.board[row][col]
                if piece:
                    self._draw_piece(vis, piece, x1 + sq_size // 2, y1 + sq_size // 2)

        self._draw_labels(vis)
        return vis

    def _draw_piece(self, vis, piece, cx, cy):
        sym = piece.symbol()
        scale = self.square_size / 54
        fg = (255, 255, 255) if piece.color is Color.WHITE else (0, 0, 0)
        bg = (0, 0, 0) if piece.color is Color.WHITE else (255, 255, 255)
        (w, h), _ = cv2.getTextSize(sym, cv2.FONT_HERSHEY_SIMPLEX, scale, 2)
        org = (cx - w // 2, cy + h // 2)
        cv2.putText(vis, sym, org, cv2.FONT_HERSHEY_SIMPLEX, scale, bg, 4)
        cv2.putText(vis, sym, org, cv2.FONT_HERSHEY_SIMPLEX, scale, fg, 2)

    def _draw_labels(self, vis):
        sq_size = self.square_size
        scale = sq_size / 160
        for i in range(8):
            index = self._to_board_index(i)
            file_label = COLUMNS[index]
            rank_label = str(8 - index)
            cv2.putText(vis, file_label, (i * sq_size + sq_size - 12, 8 * sq_size - 4),
                        cv2.FONT_HERSHEY_SIMPLEX, scale, LABEL_COLOR, 1)
            cv2.putText(vis, rank_label, (3, i * sq_size + 14),
                        cv2.FONT_HERSHEY_SIMPLEX, scale, LABEL_COLOR, 1)

    def _to_board_index(self, display_index):
        """Display slot -> board row/col, mirrored when viewing from Black."""
        return 7 - display_index if self.flipped else display_index
