"""Staging encyclopedia for Cercospora leaf spot on water spinach.

Static reference text keyed by DiseaseStage. The mapping is read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from phytoscan.types import DiseaseStage

SEVERITY_LABELS = (
    "Healthy / No Disease",
    "Low Severity",
    "Medium Severity",
    "High Severity",
)


@dataclass(frozen=True)
class TreatmentProtocol:
    """Management steps grouped by category. Empty tuples are omitted on display."""

    immediate: tuple[str, ...]
    preventive: tuple[str, ...] = ()
    cultural: tuple[str, ...] = ()
    chemical: tuple[str, ...] = ()
    nutritional: tuple[str, ...] = ()
    recovery: tuple[str, ...] = ()
    photography_tips: tuple[str, ...] = ()
    tips: tuple[str, ...] = ()

    def sections(self) -> list[tuple[str, tuple[str, ...]]]:
        """Non-empty (category, steps) pairs in display order."""
        names = (
            "immediate", "preventive", "cultural", "chemical",
            "nutritional", "recovery", "photography_tips", "tips",
        )
        return [(name, getattr(self, name)) for name in names if getattr(self, name)]


@dataclass(frozen=True)
class DiseaseInfo:
    """Reference entry for one stage."""

    name: str
    severity: int  # 0-3, see SEVERITY_LABELS
    description: str
    symptoms: tuple[str, ...]
    biological_interpretation: str
    visual_description: str
    treatment: TreatmentProtocol
    lesion_size_range: Optional[str] = None
    prognosis: Optional[str] = None

    @property
    def severity_label(self) -> str:
        return severity_label(self.severity)


def severity_label(level: int) -> str:
    """Badge text for a 0-3 severity level. Unknown levels read as healthy."""
    if 0 <= level < len(SEVERITY_LABELS):
        return SEVERITY_LABELS[level]
    return SEVERITY_LABELS[0]


DISEASE_DATABASE: Mapping[DiseaseStage, DiseaseInfo] = MappingProxyType({
    DiseaseStage.H0: DiseaseInfo(
        name="Healthy Leaf",
        severity=0,
        description=(
            "No Cercospora lesions detected. The leaf blade is uniformly green "
            "with intact tissue and normal sheen."
        ),
        symptoms=(
            "Uniform green coloration",
            "No spots or necrotic tissue",
            "Smooth, turgid leaf blade",
        ),
        biological_interpretation=(
            "No visible fungal colonization. Latent infection cannot be ruled "
            "out during humid periods."
        ),
        visual_description="Even green surface without circular spots or chlorotic halos.",
        treatment=TreatmentProtocol(
            immediate=("No treatment required",),
            preventive=(
                "Keep plant spacing wide enough for airflow",
                "Water at the base in the morning so foliage dries quickly",
                "Scout the crop weekly after rain",
            ),
            tips=("Re-scan any leaf that develops small brown specks",),
        ),
        prognosis="Excellent. Maintain preventive practices.",
    ),
    DiseaseStage.N0: DiseaseInfo(
        name="No Leaf Detected",
        severity=0,
        description=(
            "The image does not show a water spinach leaf clearly enough to "
            "diagnose. Retake the photo."
        ),
        symptoms=("Subject is not a leaf or the leaf is out of frame",),
        biological_interpretation="No plant tissue available for assessment.",
        visual_description="Background, soil, hands, or a non-target plant fills the frame.",
        treatment=TreatmentProtocol(
            immediate=("Retake the photo with a single leaf filling most of the frame",),
            photography_tips=(
                "Use direct, natural sunlight",
                "Hold the camera 15-20 cm from the leaf",
                "Keep the leaf flat and clean",
                "Focus on the main lesion area",
            ),
        ),
    ),
    DiseaseStage.E1: DiseaseInfo(
        name="Early Cercospora Leaf Spot",
        severity=1,
        description=(
            "A few small circular spots with light centers are starting to form. "
            "Infection is localized and easily managed."
        ),
        symptoms=(
            "Few pinpoint to small brown spots",
            "Pale or grayish lesion centers",
            "Faint chlorotic halo around spots",
        ),
        biological_interpretation=(
            "Initial conidial infection through stomata with limited mycelial "
            "spread inside the leaf tissue."
        ),
        visual_description="Scattered spots under 2 mm, mostly on older leaves.",
        lesion_size_range="< 2 mm",
        treatment=TreatmentProtocol(
            immediate=(
                "Remove and destroy spotted leaves",
                "Avoid overhead irrigation",
            ),
            cultural=(
                "Increase spacing between plants",
                "Clear weeds that keep the canopy humid",
            ),
            nutritional=("Apply balanced fertilizer; avoid excess nitrogen",),
        ),
        prognosis="Good with prompt sanitation.",
    ),
    DiseaseStage.E2: DiseaseInfo(
        name="Intermediate Cercospora Leaf Spot",
        severity=2,
        description=(
            "Spots are larger and more numerous, with distinct gray centers and "
            "dark borders. Yield quality is affected."
        ),
        symptoms=(
            "Numerous circular lesions with gray-white centers",
            "Dark reddish-brown lesion margins",
            "Yellowing around clusters of spots",
        ),
        biological_interpretation=(
            "Active sporulation on lesion centers; secondary spread by rain "
            "splash and wind is likely."
        ),
        visual_description="Lesions of 2-5 mm spread across the leaf, some merging.",
        lesion_size_range="2-5 mm",
        treatment=TreatmentProtocol(
            immediate=(
                "Harvest or remove affected leaves and bag them",
                "Stop overhead watering",
            ),
            chemical=(
                "Apply a labeled protectant fungicide (e.g. copper-based or mancozeb)",
                "Respect the pre-harvest interval on the label",
            ),
            cultural=("Rotate away from Ipomoea crops for the next cycle",),
        ),
        prognosis="Fair. New growth can stay clean with treatment.",
    ),
    DiseaseStage.E3: DiseaseInfo(
        name="Advanced Cercospora Leaf Spot",
        severity=3,
        description=(
            "Large, coalescing necrotic lesions cover much of the leaf. Leaves "
            "yellow and drop; the crop is heavily affected."
        ),
        symptoms=(
            "Large necrotic patches from merged lesions",
            "Widespread leaf yellowing",
            "Shot-hole tissue and premature leaf drop",
        ),
        biological_interpretation=(
            "Extensive colonization and heavy spore load; surrounding plants "
            "are at high risk of infection."
        ),
        visual_description="Lesions over 5 mm, merging into blighted areas.",
        lesion_size_range="> 5 mm",
        treatment=TreatmentProtocol(
            immediate=(
                "Remove severely infected plants from the bed",
                "Do not compost infected material",
            ),
            chemical=(
                "Apply a systemic fungicide registered for leafy vegetables",
                "Alternate modes of action to limit resistance",
            ),
            recovery=(
                "Replant with clean cuttings in a new bed",
                "Disinfect tools after handling infected plants",
            ),
        ),
        prognosis="Poor for affected plants. Focus on protecting the rest of the crop.",
    ),
})


def get_disease(stage: DiseaseStage | str) -> DiseaseInfo:
    """Look up the reference entry for a stage or stage code.

    Raises:
        InvalidInput: If the stage code is unknown.
    """
    return DISEASE_DATABASE[DiseaseStage.parse(stage)]


__all__ = [
    "DISEASE_DATABASE",
    "DiseaseInfo",
    "TreatmentProtocol",
    "SEVERITY_LABELS",
    "severity_label",
    "get_disease",
]
