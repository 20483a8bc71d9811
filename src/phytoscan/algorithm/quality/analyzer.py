"""Quality analyzer — leaf photo exposure and resolution assessment.

QualityAnalyzer is a pure function of pixel data: the same buffer always
yields the same ImageQuality. Poor quality is reported, never rejected;
only structurally invalid buffers raise InvalidImage.

Metrics:
  - avg_brightness: mean BT.601 luma of sampled pixels
  - luma_spread: max - min of region mean luma over a fixed grid
  - highlight_fraction: share of sampled pixels above the near-white cutoff
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import cv2
import numpy as np

from phytoscan.algorithm.quality.output import ImageQuality, QualityConfig
from phytoscan.types import RasterImage

logger = logging.getLogger(__name__)


# ── Metric functions ──


def _sample_stride(width: int, height: int, max_samples: int) -> int:
    """Fixed sampling stride so that about max_samples pixels are read."""
    total = width * height
    if max_samples <= 0 or total <= max_samples:
        return 1
    return int(math.ceil(math.sqrt(total / max_samples)))


def _luma(pixels: np.ndarray) -> np.ndarray:
    """Per-pixel luma (0.299 R + 0.587 G + 0.114 B) of an RGB/RGBA array."""
    code = cv2.COLOR_RGBA2GRAY if pixels.shape[2] == 4 else cv2.COLOR_RGB2GRAY
    return cv2.cvtColor(np.ascontiguousarray(pixels), code)


def _region_means(luma: np.ndarray, grid_size: int) -> np.ndarray:
    """Mean luma of each cell in a grid_size x grid_size partition.

    Cells that come out empty (image smaller than the grid) are skipped.
    """
    means = []
    for band in np.array_split(luma, grid_size, axis=0):
        for cell in np.array_split(band, grid_size, axis=1):
            if cell.size:
                means.append(float(cell.mean()))
    return np.asarray(means, dtype=np.float64)


def _luma_spread(luma: np.ndarray, grid_size: int) -> float:
    """Max minus min region mean. 0 for uniformly lit images."""
    means = _region_means(luma, grid_size)
    if means.size == 0:
        return 0.0
    return float(means.max() - means.min())


def _highlight_fraction(luma: np.ndarray, threshold: int) -> float:
    """Fraction of pixels strictly brighter than threshold."""
    if luma.size == 0:
        return 0.0
    return float(np.count_nonzero(luma > threshold) / luma.size)


class QualityAnalyzer:
    """Analyzer that assesses whether a leaf photo is usable.

    Stateless: one instance may be shared across threads.

    Args:
        config: Thresholds. Defaults to QualityConfig().
    """

    def __init__(self, config: Optional[QualityConfig] = None):
        self.config = config or QualityConfig()

    @property
    def name(self) -> str:
        return "leaf.quality"

    def assess(self, image: RasterImage) -> ImageQuality:
        """Compute the quality report for one image.

        Raises:
            InvalidImage: If the image buffer is malformed.
        """
        pixels = image.to_array()
        cfg = self.config
        width, height = image.width, image.height

        stride = _sample_stride(width, height, cfg.max_samples)
        luma = _luma(pixels[::stride, ::stride])

        avg = float(luma.mean())
        spread = _luma_spread(luma, cfg.grid_size)
        highlight = _highlight_fraction(luma, cfg.highlight_luma)

        quality = ImageQuality(
            avg_brightness=avg,
            is_too_dark=avg < cfg.dark_threshold,
            is_too_bright=avg > cfg.bright_threshold,
            has_shadows=spread > cfg.shadow_spread,
            has_overexposure=highlight > cfg.overexposure_fraction,
            resolution=(width, height),
            is_low_res=width < cfg.min_width or height < cfg.min_height,
            luma_spread=spread,
            highlight_fraction=highlight,
        )
        logger.debug(
            "%s %dx%d stride=%d: brightness=%.1f spread=%.1f highlight=%.3f issues=%s",
            self.name, width, height, stride, avg, spread, highlight,
            ",".join(quality.issues) or "none",
        )
        return quality


def assess(image: RasterImage, config: Optional[QualityConfig] = None) -> ImageQuality:
    """Shortcut for ``QualityAnalyzer(config).assess(image)``."""
    return QualityAnalyzer(config).assess(image)
