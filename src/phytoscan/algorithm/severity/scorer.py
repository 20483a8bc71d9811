"""Severity scorer — deterministic disease severity percentage.

score = floor + round((ceiling - floor) * progress)

progress = count_weight * min(count / count_ref, 1)
         + (1 - count_weight) * min(size / size_ref, 1)

Each term is clipped at 1, so a stage never crosses into the next band.
"""

from __future__ import annotations

import logging
import numbers
from typing import Optional

from phytoscan.algorithm.severity.output import SeverityConfig
from phytoscan.errors import InvalidInput
from phytoscan.types import DiseaseStage

logger = logging.getLogger(__name__)


def _check_lesion_inputs(lesion_count, avg_lesion_size) -> None:
    if isinstance(lesion_count, bool) or not isinstance(lesion_count, numbers.Integral):
        raise InvalidInput(f"lesion_count must be an integer, got {lesion_count!r}")
    if lesion_count < 0:
        raise InvalidInput(f"lesion_count must be >= 0, got {lesion_count}")
    if isinstance(avg_lesion_size, bool) or not isinstance(avg_lesion_size, numbers.Real):
        raise InvalidInput(f"avg_lesion_size must be a number, got {avg_lesion_size!r}")
    # NaN fails the comparison as well
    if not avg_lesion_size >= 0:
        raise InvalidInput(f"avg_lesion_size must be >= 0, got {avg_lesion_size}")


class SeverityScorer:
    """Converts a stage and lesion metrics into a 0-100 severity.

    Args:
        config: Stage bands. Defaults to SeverityConfig().
    """

    def __init__(self, config: Optional[SeverityConfig] = None):
        self.config = config or SeverityConfig()

    def score(
        self,
        stage: DiseaseStage | str,
        lesion_count: int,
        avg_lesion_size: float,
    ) -> int:
        """Score one diagnosis.

        Lesion inputs are validated for every stage but only used for E1-E3.

        Raises:
            InvalidInput: Unknown stage, negative or non-numeric lesion inputs.
        """
        stage = DiseaseStage.parse(stage)
        _check_lesion_inputs(lesion_count, avg_lesion_size)

        if not stage.is_infected:
            return 0

        cfg = self.config
        band = cfg.band_for(stage)
        # clip before dividing; arbitrarily large ints overflow float division
        count_term = min(lesion_count, band.count_ref) / band.count_ref
        size_term = min(avg_lesion_size, band.size_ref) / band.size_ref
        progress = cfg.count_weight * count_term + (1.0 - cfg.count_weight) * size_term

        result = band.floor + int(round((band.ceiling - band.floor) * progress))
        logger.debug(
            "severity %s count=%s size=%s progress=%.3f -> %d",
            stage.value, lesion_count, avg_lesion_size, progress, result,
        )
        return result


def score(
    stage: DiseaseStage | str,
    lesion_count: int,
    avg_lesion_size: float,
    config: Optional[SeverityConfig] = None,
) -> int:
    """Shortcut for ``SeverityScorer(config).score(...)``."""
    return SeverityScorer(config).score(stage, lesion_count, avg_lesion_size)
