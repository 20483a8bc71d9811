"""phytoscan - Cercospora leaf spot diagnosis for water spinach.

Checks whether a leaf photo is usable, turns the external classifier's
stage and lesion metrics into a reproducible severity score, and keeps a
bounded history of past diagnoses.

Quick Start:
    >>> from phytoscan import QualityAnalyzer, SeverityScorer, RasterImage
    >>> quality = QualityAnalyzer().assess(RasterImage.from_array(pixels))
    >>> print(quality.issues)
    >>> SeverityScorer().score("E2", lesion_count=12, avg_lesion_size=3.5)
    45
"""

from phytoscan.types import DiseaseStage, RasterImage
from phytoscan.errors import (
    PhytoscanError,
    InvalidImage,
    InvalidInput,
    InvalidUpload,
    ClassificationError,
)
from phytoscan.algorithm.quality import ImageQuality, QualityAnalyzer, QualityConfig
from phytoscan.algorithm.severity import SeverityConfig, SeverityScorer, StageBand
from phytoscan.knowledge import DISEASE_DATABASE, DiseaseInfo, TreatmentProtocol, get_disease
from phytoscan.result import AnalysisResult, ClassifierOutput, QualityIssues
from phytoscan.history import HistoryItem, HistoryLog
from phytoscan.persistence import save_history, load_history
from phytoscan.workflow import ScanWorkflow, assemble_result

__all__ = [
    "DiseaseStage",
    "RasterImage",
    "PhytoscanError",
    "InvalidImage",
    "InvalidInput",
    "InvalidUpload",
    "ClassificationError",
    "ImageQuality",
    "QualityAnalyzer",
    "QualityConfig",
    "SeverityConfig",
    "SeverityScorer",
    "StageBand",
    "DISEASE_DATABASE",
    "DiseaseInfo",
    "TreatmentProtocol",
    "get_disease",
    "AnalysisResult",
    "ClassifierOutput",
    "QualityIssues",
    "HistoryItem",
    "HistoryLog",
    "save_history",
    "load_history",
    "ScanWorkflow",
    "assemble_result",
]
