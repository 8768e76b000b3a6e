"""Mock statistics engine for testing."""

import logging
import math
from typing import Any

from domain.errors import UnknownTestError
from domain.schemas import CorrectionMethod, PairwiseTestResult, PValueMatrix, TestClass, TestResult
from infrastructure.config.models import RunConfig
from infrastructure.config.registry import ALLOWED_TESTS
from infrastructure.engines.base import SHAPE_BY_TEST_CLASS, CallShape, StatisticsEngine, TestHandle

logger = logging.getLogger(__name__)

_SHAPE_BY_NAME: dict[str, CallShape] = {
    name: SHAPE_BY_TEST_CLASS[test_class] for test_class, names in ALLOWED_TESTS.items() for name in names
}

_BASELINE_TESTS: frozenset[str] = (
    ALLOWED_TESTS[TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE]
    | ALLOWED_TESTS[TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC_BASELINE]
)


class MockEngine(StatisticsEngine):
    """
    Mock engine for testing without real computations.

    Fixtures map a test identifier to the result to return, an exception to raise, or None
    (no result). Tests without a fixture return `default_p` everywhere (baseline post-hoc
    tests fill column 0 only). Every call is recorded in `calls`.
    """

    def __init__(
        self,
        *,
        cfg: RunConfig | None = None,
        fixtures: dict[str, Any] | None = None,
        default_p: float = 0.01,
    ) -> None:
        """Initialize mock engine."""
        super().__init__(cfg=cfg)
        self.fixtures = fixtures or {}
        self.default_p = default_p
        self.calls: list[tuple[str, CallShape]] = []
        self.corrections_applied: list[CorrectionMethod] = []
        logger.info("Initialized Mock engine (no statistics will be computed)")

    def resolve(self, name: str, shape: CallShape) -> TestHandle:
        known = _SHAPE_BY_NAME.get(name)
        if known is None:
            raise UnknownTestError(f"MockEngine has no test {name!r}")
        if known is not shape:
            raise UnknownTestError(f"Test {name!r} has call shape {known.value}, expected {shape.value}")

        def call(*args: Any) -> Any:
            return self._invoke(name, self._respond, name, shape, *args)

        return TestHandle(name=name, shape=shape, call=call)

    def _respond(self, name: str, shape: CallShape, *args: Any) -> TestResult | PairwiseTestResult | None:
        self.calls.append((name, shape))

        if name in self.fixtures:
            fx = self.fixtures[name]
            if isinstance(fx, Exception):
                raise fx
            return fx

        if shape is CallShape.POST_HOC:
            size = len(args[0]) - 1
            p_value = [
                [
                    self.default_p if (j == 0 or (j <= i and name not in _BASELINE_TESTS)) else math.nan
                    for j in range(size)
                ]
                for i in range(size)
            ]
            return PairwiseTestResult(method=name, p_value=p_value, statistic=p_value)

        return TestResult(method=name, p_value=self.default_p, statistic=0.0)

    def _adjust_p(self, result: PairwiseTestResult, method: CorrectionMethod) -> PValueMatrix:
        # Bonferroni-style scaling regardless of method
        self.corrections_applied.append(method)
        n_cells = sum(1 for _, _, p in result.cells() if not math.isnan(p))
        return [[min(1.0, p * n_cells) if not math.isnan(p) else math.nan for p in row] for row in result.p_value]

    @property
    def called_tests(self) -> list[str]:
        return [name for name, _ in self.calls]
