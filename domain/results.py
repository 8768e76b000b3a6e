"""Aggregated evaluation results consumed by report renderers."""

from pydantic import BaseModel, Field, model_validator

from domain.policy import TestSelection
from domain.samples.data import SampleData
from domain.schemas import TestOutcome
from domain.significance.ordering import SignificanceOrdering


class SignificanceLevels(BaseModel):
    """p-value thresholds used to annotate and gate results; high is the strictest."""

    low: float = Field(default=0.1, ge=0.0, le=1.0)
    medium: float = Field(default=0.05, ge=0.0, le=1.0)
    high: float = Field(default=0.01, gt=0.0, le=1.0)

    @model_validator(mode="after")
    def _validate_order(self) -> "SignificanceLevels":
        if not (self.high <= self.medium <= self.low):
            raise ValueError(
                f"Significance levels must satisfy high <= medium <= low, got "
                f"high={self.high}, medium={self.medium}, low={self.low}"
            )
        return self

    def stars(self, p_value: float) -> str:
        """Annotation for a p-value: '***' (high), '**' (medium), '*' (low) or ''."""
        if p_value <= self.high:
            return "***"
        if p_value <= self.medium:
            return "**"
        if p_value <= self.low:
            return "*"
        return ""


class MeasureEvaluation(BaseModel):
    """Outcomes for one performance measure; post-hoc slots stay None when not run."""

    parametric: TestOutcome | None = None
    non_parametric: TestOutcome | None = None
    post_hoc_parametric: TestOutcome | None = None
    post_hoc_non_parametric: TestOutcome | None = None
    ordering_parametric: SignificanceOrdering | None = None
    ordering_non_parametric: SignificanceOrdering | None = None


class EvaluationResults(BaseModel):
    """Everything one evaluation run produced, keyed by measure."""

    sample_data: SampleData
    significance: SignificanceLevels
    is_baseline_evaluation: bool
    selection: TestSelection
    measures: dict[str, MeasureEvaluation] = Field(default_factory=dict)
