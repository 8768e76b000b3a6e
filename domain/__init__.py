"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for test results and outcomes
- samples: Sample container, best-N selection, splitting
- policy: Which tests apply to a given evaluation
- significance: Significance graph and validated level ordering
- results: Aggregated evaluation results
"""

from domain.errors import (
    CyclicGraphError,
    InsufficientModelsError,
    MissingMeasureError,
    MissingSamplesError,
    UnknownTestError,
)
from domain.policy import TestSelection, select_tests
from domain.results import EvaluationResults, MeasureEvaluation, SignificanceLevels
from domain.schemas import (
    CorrectionMethod,
    OutcomeStatus,
    PairwiseTestResult,
    TestClass,
    TestOutcome,
    TestResult,
)

__all__ = [
    # Result schemas
    "TestResult",
    "PairwiseTestResult",
    "TestOutcome",
    "OutcomeStatus",
    "TestClass",
    "CorrectionMethod",
    # Policy
    "TestSelection",
    "select_tests",
    # Aggregates
    "EvaluationResults",
    "MeasureEvaluation",
    "SignificanceLevels",
    # Errors
    "InsufficientModelsError",
    "MissingSamplesError",
    "MissingMeasureError",
    "CyclicGraphError",
    "UnknownTestError",
]
