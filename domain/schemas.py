"""Pydantic models for statistical test results and outcomes."""

import math
from collections.abc import Iterator
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PValueMatrix = list[list[float]]


class TestClass(str, Enum):
    """Categories of hypothesis tests; each is configured with one test identifier."""

    __test__ = False

    TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY = "TwoSamplesNonParametricContingency"
    TWO_SAMPLES_PARAMETRIC = "TwoSamplesParametric"
    TWO_SAMPLES_NON_PARAMETRIC = "TwoSamplesNonParametric"
    MULTIPLE_SAMPLES_PARAMETRIC = "MultipleSamplesParametric"
    MULTIPLE_SAMPLES_NON_PARAMETRIC = "MultipleSamplesNonParametric"
    MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC = "MultipleSamplesParametricPosthoc"
    MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC = "MultipleSamplesNonParametricPostHoc"
    MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE = "MultipleSamplesParametricPosthocBaseline"
    MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC_BASELINE = "MultipleSamplesNonParametricPostHocBaseline"


class CorrectionMethod(str, Enum):
    """Multiple-comparison correction methods."""

    BONFERRONI = "bonferroni"
    HOLM = "holm"
    HOCHBERG = "hochberg"
    HOMMEL = "hommel"
    BH = "BH"
    BY = "BY"


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TestResult(BaseModel):
    """Result of an omnibus test: one p-value, one statistic, nested assumption checks."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    kind: Literal["omnibus"] = "omnibus"
    method: str
    parameters: dict[str, float] = Field(default_factory=dict)
    p_value: float
    statistic: float = float("nan")
    assumptions: dict[str, "TestResult"] = Field(
        default_factory=dict,
        description="Named assumption checks (e.g. normality per model), each itself a TestResult.",
    )

    @property
    def is_nan(self) -> bool:
        return math.isnan(self.p_value)


class PairwiseTestResult(BaseModel):
    """
    Result of a post-hoc test over N models.

    p_value is an (N-1)x(N-1) lower-triangular matrix: cell [i][j] with j <= i compares
    model j with model i+1. Cells with j > i are NaN and never read. Baseline (vs.-control)
    tests only fill column 0.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["pairwise"] = "pairwise"
    method: str
    parameters: dict[str, float] = Field(default_factory=dict)
    p_value: PValueMatrix
    statistic: PValueMatrix = Field(default_factory=list)
    requires_correction: bool = False
    corrections: dict[CorrectionMethod, PValueMatrix] = Field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.p_value)

    def cells(self) -> Iterator[tuple[int, int, float]]:
        """Yield (i, j, p) for every lower-triangular cell (j <= i), NaN cells included."""
        for i, row in enumerate(self.p_value):
            for j in range(min(i + 1, len(row))):
                yield i, j, row[j]

    @property
    def is_nan(self) -> bool:
        """True when no cell carries a usable p-value."""
        return all(math.isnan(p) for _, _, p in self.cells())

    def with_corrections(self, corrections: dict[CorrectionMethod, PValueMatrix]) -> "PairwiseTestResult":
        merged = {**self.corrections, **corrections}
        return self.model_copy(update={"corrections": merged})


class TestOutcome(BaseModel):
    """
    Outcome of one test invocation.

    A thrown engine error, a missing result, or a NaN p-value all end up as status=failed,
    so consumers only have to check one flag.
    """

    __test__ = False
    model_config = ConfigDict(frozen=True)

    method: str
    status: OutcomeStatus
    result: TestResult | PairwiseTestResult | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    @classmethod
    def success(cls, result: TestResult | PairwiseTestResult) -> "TestOutcome":
        return cls(method=result.method, status=OutcomeStatus.SUCCEEDED, result=result)

    @classmethod
    def failure(cls, method: str, error: str) -> "TestOutcome":
        return cls(method=method, status=OutcomeStatus.FAILED, error=error)

    @classmethod
    def from_result(cls, method: str, result: TestResult | PairwiseTestResult | None) -> "TestOutcome":
        """Fold a possibly-missing or NaN result into an outcome."""
        if result is None:
            return cls.failure(method, "no result returned")
        if result.is_nan:
            return cls(method=method, status=OutcomeStatus.FAILED, result=result, error="p-value is NaN")
        return cls.success(result)
