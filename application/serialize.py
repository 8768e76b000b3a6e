"""Evaluation result serialization utilities."""

import logging
from pathlib import Path

from domain.results import EvaluationResults

logger = logging.getLogger(__name__)


def serialize_evaluation_results(results: EvaluationResults, path: Path) -> Path:
    """
    Write `results` as JSON. NaN p-values (unused triangle cells, failed tests) become null.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(results.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Saved evaluation results JSON: %s", path)
    return path
