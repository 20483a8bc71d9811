"""Classifier output and analysis result records."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from phytoscan.algorithm.quality.output import ImageQuality
from phytoscan.errors import ClassificationError, InvalidInput
from phytoscan.knowledge import DiseaseInfo
from phytoscan.types import DiseaseStage

HIGH_CONFIDENCE = 85    # percent
MEDIUM_CONFIDENCE = 70  # percent

_MISSING = object()


def confidence_label(confidence: float) -> str:
    """Reliability label for a 0-1 classifier confidence."""
    percentage = round(confidence * 100)
    if percentage >= HIGH_CONFIDENCE:
        return "High Confidence"
    if percentage >= MEDIUM_CONFIDENCE:
        return "Medium Confidence"
    return "Low Confidence"


def _pick(payload: Mapping[str, Any], *keys: str, default: Any = _MISSING) -> Any:
    """First present key among camelCase/snake_case aliases."""
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    if default is _MISSING:
        raise ClassificationError(f"Classifier payload is missing '{keys[0]}'")
    return default


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ClassificationError(f"Classifier field '{name}' is not a finite number: {value!r}")
    if value < 0:
        raise ClassificationError(f"Classifier field '{name}' is negative: {value!r}")
    return float(value)


@dataclass(frozen=True)
class ClassifierOutput:
    """What the external vision classifier reports for one image."""

    stage: DiseaseStage
    confidence: float
    lesion_count: int = 0
    avg_lesion_size: float = 0.0
    explanation: str = ""
    symptoms: tuple[str, ...] = ()
    evidence_regions: str = ""

    def __post_init__(self):
        # frozen: stage codes given as strings are normalized in place
        object.__setattr__(self, "stage", DiseaseStage.parse(self.stage))

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ClassifierOutput:
        """Parse the classifier's JSON payload.

        Accepts the classifier's camelCase keys (``lesionCount``,
        ``avgLesionSize``, ``detectedSymptoms``, ``visualEvidenceRegions``)
        and their snake_case equivalents.

        Raises:
            ClassificationError: Unknown stage or malformed field.
        """
        if not isinstance(payload, Mapping):
            raise ClassificationError(f"Classifier payload must be an object, got {type(payload).__name__}")
        try:
            stage = DiseaseStage.parse(_pick(payload, "stage"))
        except InvalidInput as e:
            raise ClassificationError("Classifier returned an unknown stage", e) from e

        confidence = _number(_pick(payload, "confidence"), "confidence")
        if confidence > 1.0:
            raise ClassificationError(f"Classifier confidence must be in [0, 1], got {confidence}")

        symptoms = _pick(payload, "detectedSymptoms", "symptoms", "detected_symptoms", default=())
        if not isinstance(symptoms, (list, tuple)) or not all(isinstance(s, str) for s in symptoms):
            raise ClassificationError("Classifier symptoms must be a list of strings")

        return cls(
            stage=stage,
            confidence=confidence,
            lesion_count=int(round(_number(
                _pick(payload, "lesionCount", "lesion_count", default=0), "lesionCount",
            ))),
            avg_lesion_size=_number(
                _pick(payload, "avgLesionSize", "avg_lesion_size", default=0.0), "avgLesionSize",
            ),
            explanation=str(_pick(payload, "explanation", default="")),
            symptoms=tuple(symptoms),
            evidence_regions=str(_pick(
                payload, "visualEvidenceRegions", "evidenceRegions", "evidence_regions", default="",
            )),
        )


@dataclass(frozen=True)
class QualityIssues:
    """Quality flags attached to a result when at least one is set."""

    too_dark: bool = False
    shadows: bool = False
    low_res: bool = False
    overexposed: bool = False

    @classmethod
    def from_quality(cls, quality: Optional[ImageQuality]) -> Optional[QualityIssues]:
        """Issues for a quality report, or None when the photo is clean."""
        if quality is None:
            return None
        issues = cls(
            too_dark=quality.is_too_dark,
            shadows=quality.has_shadows,
            low_res=quality.is_low_res,
            overexposed=quality.has_overexposure,
        )
        if not (issues.too_dark or issues.shadows or issues.low_res or issues.overexposed):
            return None
        return issues


@dataclass(frozen=True)
class AnalysisResult:
    """One completed diagnosis.

    lesion_count and avg_lesion_size are always 0 for H0/N0 results.
    """

    stage: DiseaseStage
    confidence: float
    disease: DiseaseInfo
    lesion_count: int
    avg_lesion_size: float
    severity_score: int
    timestamp: datetime
    quality: Optional[ImageQuality] = None
    quality_issues: Optional[QualityIssues] = None
    explanation: str = ""
    detected_symptoms: tuple[str, ...] = field(default_factory=tuple)
    evidence_regions: str = ""

    @property
    def confidence_label(self) -> str:
        return confidence_label(self.confidence)

    def to_dict(self) -> dict:
        """JSON-serializable view."""
        issues = self.quality_issues
        return {
            "stage": self.stage.value,
            "disease_name": self.disease.name,
            "severity_level": self.disease.severity,
            "confidence": self.confidence,
            "confidence_label": self.confidence_label,
            "lesion_count": self.lesion_count,
            "avg_lesion_size": self.avg_lesion_size,
            "severity_score": self.severity_score,
            "timestamp": self.timestamp.isoformat(),
            "quality_issues": None if issues is None else {
                "too_dark": issues.too_dark,
                "shadows": issues.shadows,
                "low_res": issues.low_res,
                "overexposed": issues.overexposed,
            },
            "explanation": self.explanation,
            "detected_symptoms": list(self.detected_symptoms),
            "evidence_regions": self.evidence_regions,
        }


__all__ = [
    "ClassifierOutput",
    "QualityIssues",
    "AnalysisResult",
    "confidence_label",
]
