"""Tests for result assembly and the scan workflow."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from phytoscan.algorithm.quality import ImageQuality
from phytoscan.algorithm.severity import SeverityScorer
from phytoscan.errors import ClassificationError, InvalidImage, InvalidInput
from phytoscan.history import HistoryLog
from phytoscan.knowledge import DISEASE_DATABASE
from phytoscan.result import ClassifierOutput, QualityIssues, confidence_label
from phytoscan.types import DiseaseStage, RasterImage
from phytoscan.workflow import ScanWorkflow, assemble_result

FIXED_TIME = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def _output(stage="E2", lesion_count=12, avg_lesion_size=3.5, confidence=0.9):
    return ClassifierOutput(
        stage=DiseaseStage(stage),
        confidence=confidence,
        lesion_count=lesion_count,
        avg_lesion_size=avg_lesion_size,
    )


class TestClassifierOutput:
    def test_from_camel_case_payload(self, classifier_payload):
        output = ClassifierOutput.from_dict(classifier_payload)

        assert output.stage is DiseaseStage.E2
        assert output.confidence == pytest.approx(0.91)
        assert output.lesion_count == 12
        assert output.avg_lesion_size == pytest.approx(3.5)
        assert output.symptoms == ("Circular lesions", "Gray centers")
        assert output.evidence_regions == "Lower left quadrant"

    def test_from_snake_case_payload(self):
        output = ClassifierOutput.from_dict({
            "stage": "e1", "confidence": 0.8, "lesion_count": 3, "avg_lesion_size": 1.2,
        })
        assert output.stage is DiseaseStage.E1
        assert output.lesion_count == 3

    def test_defaults_for_optional_fields(self):
        output = ClassifierOutput.from_dict({"stage": "H0", "confidence": 0.99})
        assert output.lesion_count == 0
        assert output.avg_lesion_size == 0.0
        assert output.symptoms == ()
        assert output.evidence_regions == ""

    def test_unknown_stage(self):
        with pytest.raises(ClassificationError) as exc_info:
            ClassifierOutput.from_dict({"stage": "X9", "confidence": 0.5})
        assert exc_info.value.original_error is not None

    def test_missing_stage(self):
        with pytest.raises(ClassificationError, match="stage"):
            ClassifierOutput.from_dict({"confidence": 0.5})

    def test_confidence_out_of_range(self):
        with pytest.raises(ClassificationError):
            ClassifierOutput.from_dict({"stage": "E1", "confidence": 91})

    def test_negative_lesion_count(self):
        with pytest.raises(ClassificationError):
            ClassifierOutput.from_dict({"stage": "E1", "confidence": 0.5, "lesionCount": -2})

    @pytest.mark.parametrize("symptoms", ["spots", 5, {"spots": 1}, ["spots", 3]])
    def test_symptoms_must_be_list(self, symptoms):
        with pytest.raises(ClassificationError):
            ClassifierOutput.from_dict({"stage": "E1", "confidence": 0.5, "detectedSymptoms": symptoms})

    @pytest.mark.parametrize("field", ["lesionCount", "avgLesionSize", "confidence"])
    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_non_finite_numbers_rejected(self, field, value):
        payload = {"stage": "E2", "confidence": 0.5, field: value}
        with pytest.raises(ClassificationError, match=field):
            ClassifierOutput.from_dict(payload)

    def test_non_mapping_payload(self):
        with pytest.raises(ClassificationError):
            ClassifierOutput.from_dict(["E1"])

    def test_stage_code_coerced_on_construction(self):
        output = ClassifierOutput(stage="e2", confidence=0.9, lesion_count=12, avg_lesion_size=3.5)
        assert output.stage is DiseaseStage.E2
        assert assemble_result(output, None).severity_score == 45

    def test_unknown_stage_on_construction(self):
        with pytest.raises(InvalidInput):
            ClassifierOutput(stage="X9", confidence=0.9)


class TestConfidenceLabel:
    @pytest.mark.parametrize(
        "confidence,label",
        [
            (0.99, "High Confidence"),
            (0.85, "High Confidence"),
            (0.84, "Medium Confidence"),
            (0.70, "Medium Confidence"),
            (0.69, "Low Confidence"),
            (0.0, "Low Confidence"),
        ],
    )
    def test_thresholds(self, confidence, label):
        assert confidence_label(confidence) == label


class TestAssembleResult:
    def test_healthy_forces_zero_lesions(self):
        result = assemble_result(_output("H0", lesion_count=7, avg_lesion_size=4.2), None)

        assert result.lesion_count == 0
        assert result.avg_lesion_size == 0
        assert result.severity_score == 0
        assert result.disease is DISEASE_DATABASE[DiseaseStage.H0]

    def test_not_a_leaf_forces_zero_lesions(self):
        result = assemble_result(_output("N0", lesion_count=3, avg_lesion_size=1.0), None)
        assert result.lesion_count == 0
        assert result.avg_lesion_size == 0
        assert result.severity_score == 0

    def test_infected_keeps_lesions_and_scores(self):
        result = assemble_result(_output("E2", 12, 3.5), None, timestamp=FIXED_TIME)

        assert result.lesion_count == 12
        assert result.avg_lesion_size == pytest.approx(3.5)
        assert result.severity_score == SeverityScorer().score("E2", 12, 3.5)
        assert result.timestamp == FIXED_TIME

    def test_clean_quality_has_no_issues(self):
        quality = ImageQuality(avg_brightness=128.0, resolution=(800, 600))
        result = assemble_result(_output(), quality)
        assert result.quality is quality
        assert result.quality_issues is None

    def test_quality_issues_attached(self):
        quality = ImageQuality(avg_brightness=30.0, is_too_dark=True, resolution=(200, 200), is_low_res=True)
        result = assemble_result(_output(), quality)
        assert result.quality_issues == QualityIssues(too_dark=True, low_res=True)

    def test_to_dict(self):
        result = assemble_result(_output("E1", 2, 0.8, confidence=0.75), None, timestamp=FIXED_TIME)
        data = result.to_dict()
        assert data["stage"] == "E1"
        assert data["confidence_label"] == "Medium Confidence"
        assert data["timestamp"] == FIXED_TIME.isoformat()
        assert data["quality_issues"] is None


class TestScanWorkflow:
    def test_end_to_end_healthy_with_reported_lesions(self, gray_image):
        """Classifier says H0 but reports lesions: the result must show none."""
        history = HistoryLog()
        workflow = ScanWorkflow(
            classifier=lambda image: {"stage": "H0", "confidence": 0.97, "lesionCount": 9, "avgLesionSize": 2.5},
            history=history,
            clock=lambda: FIXED_TIME,
        )
        result = workflow.run(gray_image)

        assert result.stage is DiseaseStage.H0
        assert result.lesion_count == 0
        assert result.avg_lesion_size == 0
        assert result.severity_score == 0
        assert len(history) == 1
        assert history.latest.severity_score == 0

    def test_records_history_newest_first(self, gray_image, classifier_payload):
        history = HistoryLog()
        workflow = ScanWorkflow(classifier=lambda image: classifier_payload, history=history)

        workflow.run(gray_image)
        second = workflow.run(gray_image)

        assert len(history) == 2
        assert history.latest.timestamp == second.timestamp.isoformat()
        assert history.latest.disease_name == DISEASE_DATABASE[DiseaseStage.E2].name

    def test_accepts_classifier_output_instance(self, gray_image):
        workflow = ScanWorkflow(classifier=lambda image: _output("E3", 40, 6.0))
        result = workflow.run(gray_image)
        assert result.stage is DiseaseStage.E3
        assert 61 <= result.severity_score <= 100

    def test_poor_quality_does_not_stop_scan(self, make_image, classifier_payload):
        workflow = ScanWorkflow(classifier=lambda image: classifier_payload)
        result = workflow.run(make_image(width=120, height=120, value=15))

        assert result.quality.is_too_dark is True
        assert result.quality_issues.too_dark is True
        assert result.quality_issues.low_res is True

    def test_classifier_failure_leaves_history_untouched(self, gray_image):
        history = HistoryLog()
        classifier = MagicMock(side_effect=ConnectionError("network down"))
        workflow = ScanWorkflow(classifier=classifier, history=history)

        with pytest.raises(ClassificationError) as exc_info:
            workflow.run(gray_image)

        assert isinstance(exc_info.value.original_error, ConnectionError)
        assert len(history) == 0

    def test_malformed_payload_leaves_history_untouched(self, gray_image):
        history = HistoryLog()
        workflow = ScanWorkflow(classifier=lambda image: {"stage": "??"}, history=history)

        with pytest.raises(ClassificationError):
            workflow.run(gray_image)
        assert len(history) == 0

    def test_infinite_lesion_count_is_classification_error(self, gray_image):
        history = HistoryLog()
        workflow = ScanWorkflow(
            classifier=lambda image: {"stage": "E2", "confidence": 0.8, "lesionCount": float("inf")},
            history=history,
        )

        with pytest.raises(ClassificationError):
            workflow.run(gray_image)
        assert len(history) == 0

    def test_invalid_image_stops_before_classifier(self):
        classifier = MagicMock()
        workflow = ScanWorkflow(classifier=classifier, history=HistoryLog())

        with pytest.raises(InvalidImage):
            workflow.run(RasterImage(width=4, height=4, channels=3, data=bytes(10)))
        classifier.assert_not_called()

    def test_classifier_receives_image(self, gray_image, classifier_payload):
        classifier = MagicMock(return_value=classifier_payload)
        ScanWorkflow(classifier=classifier).run(gray_image)
        classifier.assert_called_once_with(gray_image)
