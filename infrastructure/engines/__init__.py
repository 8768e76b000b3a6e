"""
Statistics engines.

Implements the adapter pattern for statistical test backends:
- Scipy (scipy.stats, statsmodels, scikit-posthocs), imported on first use
- Mock (for testing)

All engines implement the StatisticsEngine interface; tests are resolved by identifier
into typed TestHandles before any data is evaluated.
"""

from infrastructure.engines.base import SHAPE_BY_TEST_CLASS, CallShape, StatisticsEngine, TestHandle
from infrastructure.engines.factory import engine_class, make_engine
from infrastructure.engines.mock import MockEngine

__all__ = [
    # Abstract base
    "StatisticsEngine",
    "TestHandle",
    "CallShape",
    "SHAPE_BY_TEST_CLASS",
    # Concrete implementations
    "MockEngine",
    # Factory (most commonly used)
    "engine_class",
    "make_engine",
]
