"""Severity scorer module - stage + lesion metrics to a 0-100 score.

Scores are banded by stage (E1 < E2 < E3, bands never overlap) and are
non-decreasing in lesion count and average lesion size within a stage.
Healthy (H0) and non-leaf (N0) results always score 0.
"""

from phytoscan.algorithm.severity.output import SeverityConfig, StageBand
from phytoscan.algorithm.severity.scorer import SeverityScorer, score

__all__ = [
    "SeverityScorer",
    "SeverityConfig",
    "StageBand",
    "score",
]
