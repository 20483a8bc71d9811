"""Shared fixtures for phytoscan tests.

All images are synthetic numpy arrays — NO real photos needed.
"""

import numpy as np
import pytest

from phytoscan.types import RasterImage


@pytest.fixture
def make_image():
    """Factory fixture for uniform RGB images of a given gray level."""
    def _make(width: int = 400, height: int = 400, value: int = 128, channels: int = 3) -> RasterImage:
        arr = np.full((height, width, channels), value, dtype=np.uint8)
        return RasterImage.from_array(arr)
    return _make


@pytest.fixture
def gray_image(make_image):
    """400x400 uniform mid-gray (luma 128)."""
    return make_image(value=128)


@pytest.fixture
def split_image():
    """400x400 image: left half black, right half white."""
    arr = np.zeros((400, 400, 3), dtype=np.uint8)
    arr[:, 200:] = 255
    return RasterImage.from_array(arr)


@pytest.fixture
def noisy_array():
    """Deterministic random RGB array."""
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(320, 480, 3), dtype=np.uint8)


@pytest.fixture
def classifier_payload():
    """Classifier response shape for an intermediate infection."""
    return {
        "stage": "E2",
        "confidence": 0.91,
        "lesionCount": 12,
        "avgLesionSize": 3.5,
        "explanation": "Gray-centered circular lesions with dark margins.",
        "detectedSymptoms": ["Circular lesions", "Gray centers"],
        "visualEvidenceRegions": "Lower left quadrant",
    }
