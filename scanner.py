"""
Scanner - image to Position

Pipeline:
    cooldown check -> image validation -> vision API -> grid mapping

Only one scan may be in flight at a time; extra requests are rejected
like cooldown violations, never queued.
"""

import threading

from board_model import Position
from errors import DetectionEmpty, RateLimited
from grid_mapper import map_detections
from image_validation import ValidatedImage, read_image_file, validate_image
from logger import log_scan
from rate_limiter import CooldownLimiter
from vision_client import VisionClient


class ImageScanner:
    def __init__(self, client: VisionClient, limiter: CooldownLimiter = None):
        self.client = client
        self.limiter = limiter or CooldownLimiter()
        self._in_flight = threading.Lock()

    def scan_bytes(self, data: bytes, mime_type: str) -> Position:
        return self._run(lambda: validate_image(data, mime_type))

    def scan_file(self, path: str) -> Position:
        return self._run(lambda: read_image_file(path))

    def _run(self, load) -> Position:
        """
        Raises:
            RateLimited: cooldown active or another scan in flight
            InvalidImage: image failed validation (no request sent)
            DetectionEmpty: nothing detected, or the service failed
        """
        if not self._in_flight.acquire(blocking=False):
            raise RateLimited(0.0, "A scan is already in progress",
                              user_message="A scan is already in progress. Please wait for it to finish.")
        try:
            self.limiter.acquire()
            image = load()
            return self._detect(image)
        finally:
            self._in_flight.release()

    def _detect(self, image: ValidatedImage) -> Position:
        detections = self.client.detect(image.pixels)

        if not detections:
            if self.client.last_error is not None:
                log_scan(0, "service error")
                raise DetectionEmpty(
                    str(self.client.last_error),
                    user_message="Failed to process image. Please try again.",
                )
            log_scan(0, "no pieces")
            raise DetectionEmpty()

        position = map_detections(detections, image.width, image.height)
        log_scan(len(detections), "ok")
        return position
