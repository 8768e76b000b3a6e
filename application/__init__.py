"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the significance evaluation workflow.

This module exposes high-level entry points for evaluating and reporting model comparisons.
"""

from application.corrections import apply_correction, apply_corrections
from application.evaluation import (
    Evaluator,
    evaluate_groups,
    format_ordering,
    format_outcome,
    log_evaluation_summary,
    p_value_frame,
)
from application.serialize import serialize_evaluation_results

__all__ = [
    # Main workflows
    "Evaluator",
    "evaluate_groups",
    "log_evaluation_summary",
    # Corrections
    "apply_correction",
    "apply_corrections",
    # Reporting utilities
    "format_ordering",
    "format_outcome",
    "p_value_frame",
    "serialize_evaluation_results",
]
