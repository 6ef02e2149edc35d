"""
Chess Scan Errors

Every failure a user-facing operation can hit. Each carries a short
user_message that the session shows in its advisory slot.
"""

import math


class ChessScanError(Exception):
    """Base class. str(exc) is the detailed cause, user_message is for display."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, detail: str = "", user_message: str = None):
        super().__init__(detail or self.default_message)
        self.user_message = user_message or detail or self.default_message


class MalformedFEN(ChessScanError):
    default_message = "Invalid FEN format."


class MalformedBoard(MalformedFEN):
    default_message = "Invalid FEN board: expected 8 ranks."


class DetectionEmpty(ChessScanError):
    default_message = "No pieces detected in image."


class DetectionServiceError(ChessScanError):
    default_message = "Failed to detect chess pieces. Please try again."


class InvalidImage(ChessScanError):
    default_message = "Invalid image file."


class LegalityNormalizationFailure(ChessScanError):
    default_message = "Position is not legal chess."


class RateLimited(ChessScanError):
    def __init__(self, wait_seconds: float, detail: str = "", user_message: str = None):
        self.wait_seconds = max(0.0, wait_seconds)
        whole = max(1, math.ceil(self.wait_seconds))
        plural = "s" if whole > 1 else ""
        message = f"Please wait {whole} second{plural} before uploading another image."
        super().__init__(detail or message, user_message=user_message or message)


class ExportRefused(ChessScanError):
    default_message = "Invalid FEN format. Cannot open analysis."
