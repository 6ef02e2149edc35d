"""
Configuration

Settings come from the environment, after loading a .env file if present.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from logger import get_logger

DEFAULT_MODEL_ID = "chess-cfal9/4"
DEFAULT_API_URL = "https://detect.roboflow.com"
DEFAULT_COOLDOWN = 1.0
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    roboflow_api_key: Optional[str] = None
    roboflow_model_id: str = DEFAULT_MODEL_ID
    roboflow_api_url: str = DEFAULT_API_URL
    dev_mode: bool = False
    cooldown_seconds: float = DEFAULT_COOLDOWN
    timeout_seconds: float = DEFAULT_TIMEOUT
    log_file: Optional[str] = None


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        roboflow_api_key=os.getenv("ROBOFLOW_API_KEY") or None,
        roboflow_model_id=os.getenv("ROBOFLOW_MODEL_ID") or DEFAULT_MODEL_ID,
        roboflow_api_url=os.getenv("ROBOFLOW_API_URL") or DEFAULT_API_URL,
        dev_mode=_env_flag("CHESS_SCAN_DEV"),
        cooldown_seconds=_env_float("CHESS_SCAN_COOLDOWN", DEFAULT_COOLDOWN),
        timeout_seconds=_env_float("CHESS_SCAN_TIMEOUT", DEFAULT_TIMEOUT),
        log_file=os.getenv("CHESS_SCAN_LOG_FILE") or None,
    )


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        get_logger().warning(f"[CONFIG] {name}={raw!r} is not a number, using {default}")
        return default
    if value < 0:
        get_logger().warning(f"[CONFIG] {name}={raw!r} is negative, using {default}")
        return default
    return value
