"""Base interface for statistics engines."""

import functools
import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.errors import UnknownTestError
from domain.schemas import CorrectionMethod, PairwiseTestResult, PValueMatrix, TestClass
from infrastructure.config.models import Engine, RunConfig

logger = logging.getLogger(__name__)


class CallShape(str, Enum):
    """Argument/return shape of a test implementation."""

    TWO_SAMPLE = "two_sample"  # (x, y) -> TestResult
    MULTI_SAMPLE = "multi_sample"  # model-major matrix -> TestResult
    POST_HOC = "post_hoc"  # model-major matrix -> PairwiseTestResult
    CONTINGENCY = "contingency"  # 2x2 counts -> TestResult


SHAPE_BY_TEST_CLASS: dict[TestClass, CallShape] = {
    TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY: CallShape.CONTINGENCY,
    TestClass.TWO_SAMPLES_PARAMETRIC: CallShape.TWO_SAMPLE,
    TestClass.TWO_SAMPLES_NON_PARAMETRIC: CallShape.TWO_SAMPLE,
    TestClass.MULTIPLE_SAMPLES_PARAMETRIC: CallShape.MULTI_SAMPLE,
    TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC: CallShape.MULTI_SAMPLE,
    TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC: CallShape.POST_HOC,
    TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC: CallShape.POST_HOC,
    TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE: CallShape.POST_HOC,
    TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC_BASELINE: CallShape.POST_HOC,
}


def implements(name: str, shape: CallShape) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark an engine method as the implementation of test `name`."""

    def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        fn.__statistical_test__ = (name, shape)  # type: ignore[attr-defined]
        return fn

    return decorate


@dataclass(frozen=True)
class TestHandle:
    """A resolved test: calling it runs the implementation under the engine lock."""

    __test__ = False

    name: str
    shape: CallShape
    call: Callable[..., Any] = field(repr=False)

    def __call__(self, *args: Any) -> Any:
        return self.call(*args)


class StatisticsEngine(ABC):
    """
    Abstract base class for statistics engines.

    Engines own a session with an explicit lifecycle (open/close, or use as a context
    manager). Every test call and every correction runs under one lock, so a single
    instance can be shared.

    Concrete engines declare tests with @implements(...) and must implement:
    - _adjust_p(): p-value correction for a pairwise result
    """

    engine: Engine
    _tests: dict[str, tuple[CallShape, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        table: dict[str, tuple[CallShape, str]] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                declared = getattr(value, "__statistical_test__", None)
                if declared is not None:
                    name, shape = declared
                    table[name] = (shape, attr)
        cls._tests = table

    @classmethod
    def from_cfg(cls, cfg: RunConfig) -> "StatisticsEngine":
        return cls(cfg=cfg)

    def __init__(self, *, cfg: RunConfig | None = None) -> None:
        self.cfg = cfg
        self._lock = threading.Lock()
        self._is_open = False

    # ---- Lifecycle ----

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> "StatisticsEngine":
        with self._lock:
            if not self._is_open:
                self._open_session()
                self._is_open = True
                logger.info("Opened statistics engine %s", type(self).__name__)
        return self

    def close(self) -> None:
        with self._lock:
            if self._is_open:
                self._close_session()
                self._is_open = False
                logger.info("Closed statistics engine %s", type(self).__name__)

    def __enter__(self) -> "StatisticsEngine":
        return self.open()

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _open_session(self) -> None:
        """Hook for engines holding external resources."""

    def _close_session(self) -> None:
        """Hook for engines holding external resources."""

    # ---- Dispatch ----

    def available_tests(self) -> dict[str, CallShape]:
        return {name: shape for name, (shape, _) in self._tests.items()}

    def resolve(self, name: str, shape: CallShape) -> TestHandle:
        """
        Look up the implementation of test `name` with the expected call shape.

        Raises:
            UnknownTestError: If the engine has no such test, or it has a different shape.
        """
        entry = self._tests.get(name)
        if entry is None:
            raise UnknownTestError(
                f"Engine {type(self).__name__} has no test {name!r}. "
                f"Available: {sorted(self.available_tests())}"
            )
        impl_shape, attr = entry
        if impl_shape is not shape:
            raise UnknownTestError(
                f"Test {name!r} has call shape {impl_shape.value}, expected {shape.value}"
            )
        return TestHandle(name=name, shape=shape, call=functools.partial(self._invoke, name, getattr(self, attr)))

    def _invoke(self, name: str, fn: Callable[..., Any], *args: Any) -> Any:
        with self._lock:
            if not self._is_open:
                raise RuntimeError(f"Statistics engine is not open (calling {name})")
            logger.debug("Running test %s", name)
            return fn(*args)

    # ---- Corrections ----

    def adjust_p(self, result: PairwiseTestResult, method: CorrectionMethod) -> PValueMatrix:
        """Return corrected p-values with the same triangular shape as result.p_value."""
        with self._lock:
            if not self._is_open:
                raise RuntimeError(f"Statistics engine is not open (correcting with {method.value})")
            return self._adjust_p(result, method)

    @abstractmethod
    def _adjust_p(self, result: PairwiseTestResult, method: CorrectionMethod) -> PValueMatrix:
        raise NotImplementedError
