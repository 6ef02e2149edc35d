"""
Image Validation

Checks an uploaded image before any network call:
1. size <= 10 MiB
2. declared MIME type is jpeg, png, gif or webp
3. leading bytes (magic number) match the declared type
4. decoded dimensions within [50, 5000] on both axes
"""

import mimetypes
from dataclasses import dataclass

import cv2
import numpy as np

from errors import InvalidImage

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MiB
MIN_DIMENSION = 50
MAX_DIMENSION = 5000

# Declared MIME type -> image family
ALLOWED_MIME_TYPES = {
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


@dataclass
class ValidatedImage:
    data: bytes
    mime_type: str
    width: int
    height: int
    pixels: np.ndarray  # decoded BGR image


def sniff_image_type(data: bytes):
    """Return 'jpeg', 'png', 'gif', 'webp' from the file signature, or None."""
    if data[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if data[:4] == b"\x89PNG":
        return "png"
    if data[:4] == b"GIF8":
        return "gif"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    return None


def guess_mime_type(path: str) -> str:
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type or "application/octet-stream"


def validate_image(data: bytes, mime_type: str) -> ValidatedImage:
    """
    Run all checks in order. Raises InvalidImage on the first failure.
    """
    if not data:
        raise InvalidImage("Image file is empty")

    if len(data) > MAX_FILE_SIZE:
        limit_mb = MAX_FILE_SIZE // (1024 * 1024)
        raise InvalidImage(f"File size must be less than {limit_mb}MB")

    declared = ALLOWED_MIME_TYPES.get((mime_type or "").lower())
    if declared is None:
        raise InvalidImage(
            f"Unsupported MIME type {mime_type!r}",
            user_message="Invalid file type. Please upload a JPEG, PNG, GIF, or WebP image.",
        )

    actual = sniff_image_type(data)
    if actual != declared:
        raise InvalidImage(
            f"Declared {declared}, content looks like {actual or 'unknown'}",
            user_message="Invalid image file. File content does not match declared type.",
        )

    pixels = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    if pixels is None:
        raise InvalidImage("Failed to load image")

    height, width = pixels.shape[:2]
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise InvalidImage(f"Image dimensions must be less than {MAX_DIMENSION}x{MAX_DIMENSION} pixels")
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise InvalidImage(f"Image dimensions must be at least {MIN_DIMENSION}x{MIN_DIMENSION} pixels")

    return ValidatedImage(data=data, mime_type=mime_type.lower(), width=width, height=height, pixels=pixels)


def read_image_file(path: str) -> ValidatedImage:
    """Read and validate an image file from disk."""
    try:
        with open(path, "rb") as f:
            data = f.read(MAX_FILE_SIZE + 1)
    except OSError as e:
        raise InvalidImage(f"Failed to read image file: {e}", user_message="Failed to read image file") from e
    return validate_image(data, guess_mime_type(path))
