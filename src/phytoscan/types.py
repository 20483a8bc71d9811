"""Core phytoscan data types: disease stages and raster images."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from phytoscan.errors import InvalidImage, InvalidInput

# RGB and RGBA
SUPPORTED_CHANNELS = (3, 4)

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


class DiseaseStage(str, Enum):
    """Classifier output vocabulary for Cercospora leaf spot staging."""

    H0 = "H0"  # healthy leaf
    N0 = "N0"  # not a leaf / nothing to diagnose
    E1 = "E1"  # early infection
    E2 = "E2"  # intermediate infection
    E3 = "E3"  # advanced infection

    @property
    def is_infected(self) -> bool:
        """True for the E1-E3 infection tiers."""
        return self not in (DiseaseStage.H0, DiseaseStage.N0)

    @classmethod
    def parse(cls, value: DiseaseStage | str) -> DiseaseStage:
        """Coerce a stage code (case-insensitive) into a DiseaseStage.

        Raises:
            InvalidInput: If the value is not one of the known codes.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        valid = ", ".join(s.value for s in cls)
        raise InvalidInput(f"Unknown disease stage {value!r} (expected one of {valid})")


@dataclass(frozen=True, eq=False)
class RasterImage:
    """A decoded image as a flat ``uint8`` pixel buffer.

    The buffer is row-major and interleaved (``H x W x C``).

    Attributes:
        width: Width in pixels.
        height: Height in pixels.
        channels: 3 (RGB) or 4 (RGBA).
        data: Flat pixel buffer of ``width * height * channels`` bytes.
    """

    width: int
    height: int
    channels: int
    data: PixelBuffer

    @classmethod
    def from_array(cls, array: np.ndarray) -> RasterImage:
        """Build a RasterImage from an ``(H, W, C)`` uint8 array."""
        arr = np.asarray(array)
        if arr.ndim != 3:
            raise InvalidImage(f"Expected an (H, W, C) array, got shape {arr.shape}")
        if arr.dtype != np.uint8:
            raise InvalidImage(f"Expected uint8 pixels, got {arr.dtype}")
        h, w, c = arr.shape
        return cls(width=w, height=h, channels=c, data=np.ascontiguousarray(arr).reshape(-1))

    @property
    def resolution(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return (self.width, self.height)

    def to_array(self) -> np.ndarray:
        """Validate the buffer and return it as an ``(H, W, C)`` array.

        Raises:
            InvalidImage: If a dimension is not positive, the channel count is
                unsupported, or the buffer length does not match.
        """
        w, h, c = self.width, self.height, self.channels
        if w <= 0 or h <= 0:
            raise InvalidImage(f"Image has empty dimensions: {w}x{h}")
        if c not in SUPPORTED_CHANNELS:
            raise InvalidImage(f"Unsupported channel count {c} (expected 3 or 4)")

        if isinstance(self.data, np.ndarray):
            if self.data.dtype != np.uint8:
                raise InvalidImage(f"Expected uint8 pixels, got {self.data.dtype}")
            buf = self.data.reshape(-1)
        else:
            buf = np.frombuffer(self.data, dtype=np.uint8)

        expected = w * h * c
        if buf.size != expected:
            raise InvalidImage(
                f"Pixel buffer has {buf.size} values, expected {expected} ({w}x{h}x{c})"
            )
        return buf.reshape(h, w, c)


__all__ = ["DiseaseStage", "RasterImage", "SUPPORTED_CHANNELS"]
