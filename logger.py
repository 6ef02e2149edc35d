"""
Chess Scan Logger

Centralized logging for scans, board edits, and vision API calls.
"""

import logging
import os
from datetime import datetime


def setup_logger(name: str = "chess_scan", log_path: str = None) -> logging.Logger:
    """
    Setup logger with console and file handlers.

    Args:
        name: Logger name
        log_path: Debug log file path (None or "" = no file)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers = []

    # Console handler (INFO level)
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console)

    # File handler (DEBUG level)
    if log_path:
        log_dir = os.path.dirname(os.path.abspath(log_path))
        os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.FileHandler(log_path, mode='a')
        file_handler.setLevel(logging.DEBUG)
        file_fmt = logging.Formatter(
            '%(asctime)s | %(levelname)-7s | %(message)s',
            datefmt='%H:%M:%S'
        )
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)

    return logger


# Global logger instance
_logger = None

def get_logger() -> logging.Logger:
    """Get or create the global logger."""
    global _logger
    if _logger is None:
        _logger = setup_logger(log_path=os.getenv("CHESS_SCAN_LOG_FILE"))
    return _logger


def log_scan(detections: int, status: str):
    """Log the outcome of an image scan."""
    logger = get_logger()
    logger.info(f"[SCAN] {status} ({detections} detections)")


def log_edit(operation: str, fen: str):
    """Log a board edit and the resulting FEN."""
    logger = get_logger()
    logger.debug(f"[EDIT] {operation}: {fen}")


def log_api(action: str, result: str, details: str = ""):
    """Log API call."""
    logger = get_logger()
    logger.debug(f"[API] {action}: {result} {details}")


def log_error(message: str, exc: Exception = None):
    """Log an error."""
    logger = get_logger()
    if exc:
        logger.error(f"[ERROR] {message}: {exc}")
    else:
        logger.error(f"[ERROR] {message}")


def log_session_start():
    """Log session start marker."""
    logger = get_logger()
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    logger.info(f"\n{'='*50}")
    logger.info(f"  Session started: {timestamp}")
    logger.info(f"{'='*50}")
