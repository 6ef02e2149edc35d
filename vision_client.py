"""
Vision Client - Roboflow piece detection

Posts the image (PNG) to the hosted detection model over HTTPS and
returns validated detections. Service failures never propagate: they
are logged and an empty list is returned.
"""

import math
from typing import List, Optional

import cv2
import numpy as np
import requests

from config import DEFAULT_API_URL, DEFAULT_MODEL_ID, DEFAULT_TIMEOUT, Settings, load_settings
from errors import DetectionServiceError
from grid_mapper import Detection
from logger import get_logger, log_api, log_error


class VisionClient:
    """
    Client for the Roboflow hosted inference API.

    Usage:
        client = VisionClient.from_settings()
        detections = client.detect(pixels)
        if not detections and client.last_error:
            print(client.last_error.user_message)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_id: str = DEFAULT_MODEL_ID,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        dev_mode: bool = False,
    ):
        self.api_key = api_key
        self.model_id = model_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.dev_mode = dev_mode
        self.last_error: Optional[DetectionServiceError] = None

    @classmethod
    def from_settings(cls, settings: Settings = None) -> "VisionClient":
        settings = settings or load_settings()
        return cls(
            api_key=settings.roboflow_api_key,
            model_id=settings.roboflow_model_id,
            base_url=settings.roboflow_api_url,
            timeout=settings.timeout_seconds,
            dev_mode=settings.dev_mode,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model_id}"

    def detect(self, image: np.ndarray) -> List[Detection]:
        """
        Send one image and return its detections.

        Args:
            image: Decoded BGR image

        Returns:
            Validated detections; [] on any service failure
        """
        self.last_error = None
        try:
            payload = self._post_image(image)
        except DetectionServiceError as e:
            self.last_error = e
            if self.dev_mode:
                log_error("Detection error", e)
            else:
                log_error("Failed to detect chess pieces")
            return []

        detections = parse_predictions(payload)
        log_api("detect", "ok", f"{len(detections)} detections")
        return detections

    def _post_image(self, image: np.ndarray):
        if not self.api_key:
            raise DetectionServiceError(
                "ROBOFLOW_API_KEY environment variable is required. Please set it in your .env file.",
                user_message="API configuration error. Please contact the administrator.",
            )

        url = self.endpoint
        if not url.startswith("https://"):
            raise DetectionServiceError(f"API calls must use HTTPS, got {self.base_url!r}")

        success, buffer = cv2.imencode(".png", image)
        if not success:
            raise DetectionServiceError("Failed to encode image as PNG")

        try:
            response = requests.post(
                url,
                params={"api_key": self.api_key},
                files={"file": ("image.png", buffer.tobytes(), "image/png")},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DetectionServiceError(f"Request failed: {e}") from e

        if response.status_code != 200:
            raise DetectionServiceError(f"API error {response.status_code}: {response.text[:200]}")

        try:
            return response.json()
        except ValueError as e:
            raise DetectionServiceError("API response is not JSON") from e


def parse_predictions(payload) -> List[Detection]:
    """
    Accept a bare list of predictions or {"predictions": [...]}.
    Items failing validation are dropped, not fatal.
    """
    if isinstance(payload, list):
        raw = payload
    elif isinstance(payload, dict) and isinstance(payload.get("predictions"), list):
        raw = payload["predictions"]
    else:
        get_logger().debug(f"[API] Unexpected response shape: {type(payload).__name__}")
        return []

    detections = []
    for item in raw:
        det = _to_detection(item)
        if det is None:
            get_logger().debug(f"[API] Dropped invalid prediction: {item!r}")
            continue
        detections.append(det)
    return detections


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _to_detection(item) -> Optional[Detection]:
    if not isinstance(item, dict):
        return None

    fields = [item.get(k) for k in ("x", "y", "width", "height", "confidence")]
    if not all(_is_number(v) for v in fields):
        return None
    x, y, width, height, confidence = fields

    label = item.get("class")
    if not isinstance(label, str):
        return None
    if min(x, y, width, height) < 0 or not 0 <= confidence <= 1:
        return None

    return Detection(x=float(x), y=float(y), width=float(width), height=float(height),
                     label=label, confidence=float(confidence))
