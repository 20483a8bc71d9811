"""Scan workflow: assess → classify → score → assemble → record.

    >>> workflow = ScanWorkflow(classifier=my_classifier, history=HistoryLog())
    >>> result = workflow.run(image)
    >>> print(result.disease.name, result.severity_score)

The classifier is any callable taking a RasterImage and returning either a
ClassifierOutput or the classifier's JSON payload as a mapping. Transport,
timeouts and retries around it are the caller's concern.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Union

from phytoscan.algorithm.quality import ImageQuality, QualityAnalyzer
from phytoscan.algorithm.severity import SeverityScorer
from phytoscan.errors import ClassificationError
from phytoscan.history import HistoryItem, HistoryLog
from phytoscan.knowledge import DISEASE_DATABASE
from phytoscan.result import AnalysisResult, ClassifierOutput, QualityIssues
from phytoscan.types import RasterImage

logger = logging.getLogger(__name__)

Classifier = Callable[[RasterImage], Union[ClassifierOutput, Mapping[str, Any]]]


def _now() -> datetime:
    return datetime.now().astimezone()


def assemble_result(
    output: ClassifierOutput,
    quality: Optional[ImageQuality],
    scorer: Optional[SeverityScorer] = None,
    timestamp: Optional[datetime] = None,
) -> AnalysisResult:
    """Join classifier output, quality report and severity into one result.

    H0/N0 results always carry zero lesion metrics, whatever the classifier
    reported; the severity is computed from the forced values.
    """
    scorer = scorer or SeverityScorer()
    if output.stage.is_infected:
        lesion_count, avg_lesion_size = output.lesion_count, output.avg_lesion_size
    else:
        lesion_count, avg_lesion_size = 0, 0.0

    return AnalysisResult(
        stage=output.stage,
        confidence=output.confidence,
        disease=DISEASE_DATABASE[output.stage],
        lesion_count=lesion_count,
        avg_lesion_size=avg_lesion_size,
        severity_score=scorer.score(output.stage, lesion_count, avg_lesion_size),
        timestamp=timestamp or _now(),
        quality=quality,
        quality_issues=QualityIssues.from_quality(quality),
        explanation=output.explanation,
        detected_symptoms=output.symptoms,
        evidence_regions=output.evidence_regions,
    )


class ScanWorkflow:
    """Runs one image through the full diagnosis pipeline.

    Args:
        classifier: External classification callable.
        analyzer: Quality analyzer. Defaults to QualityAnalyzer().
        scorer: Severity scorer. Defaults to SeverityScorer().
        history: Log to record completed scans in. Nothing is recorded if None.
        clock: Timestamp source for results.
    """

    def __init__(
        self,
        classifier: Classifier,
        analyzer: Optional[QualityAnalyzer] = None,
        scorer: Optional[SeverityScorer] = None,
        history: Optional[HistoryLog] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.classifier = classifier
        self.analyzer = analyzer or QualityAnalyzer()
        self.scorer = scorer or SeverityScorer()
        self.history = history
        self._clock = clock or _now

    def run(self, image: RasterImage) -> AnalysisResult:
        """Diagnose one image.

        Quality problems are logged and attached to the result but do not stop
        the scan. A failed classification leaves history untouched.

        Raises:
            InvalidImage: If the image buffer is malformed.
            ClassificationError: If the classifier fails or returns bad data.
        """
        quality = self.analyzer.assess(image)
        if quality.has_issues:
            logger.warning("Image quality issues: %s", ", ".join(quality.issues))

        output = self._classify(image)
        result = assemble_result(output, quality, self.scorer, self._clock())

        if self.history is not None:
            self.history.append(HistoryItem.from_result(result))

        logger.info(
            "Scan complete: stage=%s confidence=%.2f severity=%d",
            result.stage.value, result.confidence, result.severity_score,
        )
        return result

    def _classify(self, image: RasterImage) -> ClassifierOutput:
        try:
            raw = self.classifier(image)
        except ClassificationError:
            raise
        except Exception as e:
            logger.error("Classifier call failed: %s", e)
            raise ClassificationError("Classifier call failed", e) from e

        if isinstance(raw, ClassifierOutput):
            return raw
        return ClassifierOutput.from_dict(raw)


__all__ = ["Classifier", "ScanWorkflow", "assemble_result"]
