"""Multiple-comparison correction of post-hoc p-values."""

import logging
from collections.abc import Iterable

from domain.schemas import CorrectionMethod, PairwiseTestResult, PValueMatrix
from infrastructure.engines.base import StatisticsEngine

logger = logging.getLogger(__name__)


def apply_correction(
    engine: StatisticsEngine,
    result: PairwiseTestResult,
    method: CorrectionMethod,
) -> PValueMatrix | None:
    """Correct the p-values of `result` with one method; None if the engine call fails."""
    try:
        return engine.adjust_p(result, method)
    except Exception:
        logger.exception("Correction %s failed for %s", method.value, result.method)
        return None


def apply_corrections(
    engine: StatisticsEngine,
    result: PairwiseTestResult,
    methods: Iterable[CorrectionMethod],
) -> PairwiseTestResult:
    """
    Return a copy of `result` with one corrected matrix per method.

    Failed corrections are logged and left out; the uncorrected p-values are kept as they are.
    """
    corrected: dict[CorrectionMethod, PValueMatrix] = {}
    for method in methods:
        matrix = apply_correction(engine, result, method)
        if matrix is not None:
            corrected[method] = matrix
    logger.debug("Applied %d corrections to %s", len(corrected), result.method)
    return result.with_corrections(corrected)
