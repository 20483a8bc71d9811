"""Output and config types for the quality analyzer."""

from dataclasses import dataclass


@dataclass(frozen=True)
class QualityConfig:
    """Quality thresholds.

    Luma values are on the 0-255 scale.
    """

    # Resolution
    min_width: int = 300
    min_height: int = 300

    # Exposure (mean luma)
    dark_threshold: float = 50.0       # roughly the lower fifth of the range
    bright_threshold: float = 205.0    # roughly the upper fifth of the range

    # Shadows: max - min of region mean luma over a grid_size x grid_size grid
    grid_size: int = 3
    shadow_spread: float = 60.0

    # Overexposure: fraction of pixels brighter than highlight_luma
    highlight_luma: int = 240
    overexposure_fraction: float = 0.15

    # Large images are read with a fixed stride to keep about this many pixels
    max_samples: int = 250_000


@dataclass(frozen=True)
class ImageQuality:
    """Output from QualityAnalyzer.

    Attributes:
        avg_brightness: Mean luma of sampled pixels [0-255].
        is_too_dark: avg_brightness below the dark threshold.
        is_too_bright: avg_brightness above the bright threshold.
        has_shadows: Region luma spread above the shadow threshold.
        has_overexposure: Near-white pixel fraction above the threshold.
        resolution: (width, height) in pixels.
        is_low_res: Either dimension below the minimum.
        luma_spread: Max minus min region mean luma (measured).
        highlight_fraction: Fraction of near-white sampled pixels (measured).
    """

    avg_brightness: float = 0.0
    is_too_dark: bool = False
    is_too_bright: bool = False
    has_shadows: bool = False
    has_overexposure: bool = False
    resolution: tuple[int, int] = (0, 0)
    is_low_res: bool = False
    luma_spread: float = 0.0
    highlight_fraction: float = 0.0

    @property
    def issues(self) -> tuple[str, ...]:
        """Names of the defects present, in a fixed order."""
        flags = (
            ("too_dark", self.is_too_dark),
            ("too_bright", self.is_too_bright),
            ("shadows", self.has_shadows),
            ("overexposed", self.has_overexposure),
            ("low_res", self.is_low_res),
        )
        return tuple(name for name, present in flags if present)

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)


__all__ = ["QualityConfig", "ImageQuality"]
