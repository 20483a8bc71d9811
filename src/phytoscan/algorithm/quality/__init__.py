"""Quality analyzer module - pre-flight leaf photo assessment.

Analyzes a decoded image for usability defects:
- Resolution below the minimum usable size
- Under/over exposure from mean luma
- Uneven illumination (shadows) from region luma spread
- Blown-out highlights from the near-white pixel fraction
"""

from phytoscan.algorithm.quality.analyzer import QualityAnalyzer, assess
from phytoscan.algorithm.quality.output import ImageQuality, QualityConfig

__all__ = [
    "QualityAnalyzer",
    "ImageQuality",
    "QualityConfig",
    "assess",
]
