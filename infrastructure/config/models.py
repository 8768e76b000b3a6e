"""Configuration models (Pydantic classes)."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.results import SignificanceLevels
from domain.samples import IndependentVariable, PipelineKind
from domain.schemas import CorrectionMethod, TestClass

from .registry import ALLOWED_TESTS, OPTIONAL_TEST_CLASSES


class Engine(str, Enum):
    """Supported statistics engines."""

    SCIPY = "scipy"


def _default_tests() -> dict[TestClass, str]:
    return {
        TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY: "McNemar",
        TestClass.TWO_SAMPLES_PARAMETRIC: "DependentT",
        TestClass.TWO_SAMPLES_NON_PARAMETRIC: "WilcoxonSignedRank",
        TestClass.MULTIPLE_SAMPLES_PARAMETRIC: "RepeatedMeasuresOneWayANOVA",
        TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC: "Friedman",
        TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC: "Tukey",
        TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC: "Nemenyi",
        TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE: "Dunett",
        TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC_BASELINE: "PairwiseWilcoxonSignedRank",
    }


class StatsConfig(BaseModel):
    """
    Configuration for the statistical evaluation.

    Defaults match the reference experiment configuration.
    """

    tests: dict[TestClass, str] = Field(default_factory=_default_tests)
    corrections: list[CorrectionMethod] = Field(
        default_factory=lambda: [CorrectionMethod.BONFERRONI, CorrectionMethod.HOCHBERG, CorrectionMethod.HOLM]
    )
    significance: SignificanceLevels = Field(default_factory=SignificanceLevels)
    select_best_n: int = Field(default=10, ge=1)
    select_by_measure: str = "Weighted F-Measure"
    fix_independent_variable: IndependentVariable = IndependentVariable.FEATURE_SET

    @field_validator("tests")
    @classmethod
    def _validate_tests(cls, tests: dict[TestClass, str]) -> dict[TestClass, str]:
        missing = [tc.value for tc in TestClass if tc not in tests and tc not in OPTIONAL_TEST_CLASSES]
        if missing:
            raise ValueError(f"No test configured for test classes: {missing}")

        for test_class, name in tests.items():
            allowed = ALLOWED_TESTS[test_class]
            if name not in allowed:
                raise ValueError(
                    f"Test {name!r} is not allowed for {test_class.value}. Allowed: {sorted(allowed)}"
                )
        return tests

    @field_validator("corrections")
    @classmethod
    def _validate_corrections(cls, corrections: list[CorrectionMethod]) -> list[CorrectionMethod]:
        if not corrections:
            raise ValueError("At least one correction method must be configured")
        # Keep order, drop duplicates
        return list(dict.fromkeys(corrections))


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from experiment.yaml
    - Validated by the configuration loader
    - Consumed by the sample importer, the engine factory and the evaluator
    """

    engine: Engine = Field(default=Engine.SCIPY, description="Statistics engine backend to use.")
    samples_file_path: Path = Field(..., description="Path to the samples file (CSV or Excel).")
    separator: str = Field(default=";", description="Column separator for CSV sample files.")
    pipeline_kind: PipelineKind = Field(default=PipelineKind.CV, description="Sampling scheme of the samples.")
    n_folds: int | None = Field(default=None, ge=1)
    n_repetitions: int | None = Field(default=None, ge=1)

    output_root: Path = Field(default_factory=lambda: Path("outputs"))

    # Stats
    stats: StatsConfig = Field(default_factory=StatsConfig)

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        needs_folds = {
            PipelineKind.MULTIPLE_CV,
            PipelineKind.CV_DATASET_LVL,
            PipelineKind.MULTIPLE_CV_DATASET_LVL,
        }
        if self.pipeline_kind in needs_folds and self.n_folds is None:
            raise ValueError(f"n_folds is required for pipeline_kind={self.pipeline_kind.value}")
        if self.pipeline_kind is PipelineKind.MULTIPLE_CV_DATASET_LVL and self.n_repetitions is None:
            raise ValueError(f"n_repetitions is required for pipeline_kind={self.pipeline_kind.value}")
        if len(self.separator) != 1:
            raise ValueError(f"separator must be a single character, got {self.separator!r}")
        return self
