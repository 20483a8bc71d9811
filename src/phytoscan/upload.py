"""Upload checks and image decoding.

Decoding is delegated to OpenCV; the result is always RGB or RGBA.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from phytoscan.errors import InvalidImage, InvalidUpload
from phytoscan.types import RasterImage

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def validate_upload(content_type: Optional[str], size: int) -> None:
    """Reject non-image content types and oversized payloads.

    Raises:
        InvalidUpload: If the upload must not reach the analyzer.
    """
    if not content_type or not content_type.startswith("image/"):
        raise InvalidUpload(f"Please upload an image file (got {content_type or 'unknown type'})")
    if size > MAX_UPLOAD_BYTES:
        raise InvalidUpload(
            f"Image file is too large ({size} bytes, max {MAX_UPLOAD_BYTES // (1024 * 1024)}MB)"
        )


def decode_image(data: bytes) -> RasterImage:
    """Decode encoded image bytes (JPEG, PNG, WebP, ...) into an RGB(A) raster.

    Raises:
        InvalidImage: If the bytes are empty or cannot be decoded.
    """
    buf = np.frombuffer(data, dtype=np.uint8)
    if buf.size == 0:
        raise InvalidImage("Image data is empty")

    decoded = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    if decoded is None:
        raise InvalidImage("Could not decode image data")

    # 16-bit PNG/TIFF -> 8-bit
    if decoded.dtype == np.uint16:
        decoded = (decoded >> 8).astype(np.uint8)

    if decoded.ndim == 2:
        rgb = cv2.cvtColor(decoded, cv2.COLOR_GRAY2RGB)
    elif decoded.shape[2] == 4:
        rgb = cv2.cvtColor(decoded, cv2.COLOR_BGRA2RGBA)
    else:
        rgb = cv2.cvtColor(decoded, cv2.COLOR_BGR2RGB)

    logger.debug("Decoded image %dx%d (%d channels)", rgb.shape[1], rgb.shape[0], rgb.shape[2])
    return RasterImage.from_array(rgb)


def load_image(path: str | Path) -> RasterImage:
    """Validate and decode an image file.

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidUpload: If the file is not an image or is too large.
        InvalidImage: If the file cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image file not found: {path}")
    content_type, _ = mimetypes.guess_type(path.name)
    validate_upload(content_type, path.stat().st_size)
    return decode_image(path.read_bytes())


__all__ = ["MAX_UPLOAD_BYTES", "validate_upload", "decode_image", "load_image"]
