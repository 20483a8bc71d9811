"""Config types for the severity scorer."""

from dataclasses import dataclass, field

from phytoscan.types import DiseaseStage


@dataclass(frozen=True)
class StageBand:
    """Score band for one infection stage.

    A stage scores ``floor`` with no lesions and reaches ``ceiling`` once
    both the lesion count and the average size reach their references.
    """

    floor: int
    ceiling: int
    count_ref: float   # lesion count at which the count term saturates
    size_ref: float    # average lesion size (mm) at which the size term saturates


@dataclass(frozen=True)
class SeverityConfig:
    """Severity bands per infection stage.

    Raises:
        ValueError: If the bands overlap, are out of 0-100, or a reference
            value is not positive.
    """

    e1: StageBand = field(default_factory=lambda: StageBand(1, 25, count_ref=10, size_ref=2.0))
    e2: StageBand = field(default_factory=lambda: StageBand(26, 60, count_ref=30, size_ref=5.0))
    e3: StageBand = field(default_factory=lambda: StageBand(61, 100, count_ref=60, size_ref=10.0))
    count_weight: float = 0.5  # size term gets the remainder

    def __post_init__(self) -> None:
        bands = (self.e1, self.e2, self.e3)
        for band in bands:
            if not 0 <= band.floor <= band.ceiling <= 100:
                raise ValueError(f"Invalid severity band {band.floor}-{band.ceiling}")
            if band.count_ref <= 0 or band.size_ref <= 0:
                raise ValueError("Severity band references must be positive")
        for lower, upper in zip(bands, bands[1:]):
            if lower.ceiling >= upper.floor:
                raise ValueError(
                    f"Severity bands overlap: {lower.floor}-{lower.ceiling} "
                    f"and {upper.floor}-{upper.ceiling}"
                )
        if not 0.0 <= self.count_weight <= 1.0:
            raise ValueError(f"count_weight must be in [0, 1], got {self.count_weight}")

    def band_for(self, stage: DiseaseStage) -> StageBand:
        """Band of an infected stage. KeyError for H0/N0."""
        return {
            DiseaseStage.E1: self.e1,
            DiseaseStage.E2: self.e2,
            DiseaseStage.E3: self.e3,
        }[stage]


__all__ = ["StageBand", "SeverityConfig"]
