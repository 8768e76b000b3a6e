"""Sample container passed through selection, splitting and evaluation."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_SAMPLES_PER_MODEL = 5


class PipelineKind(str, Enum):
    """Sampling scheme the performance values come from."""

    CV = "CV"
    MULTIPLE_CV = "MULTIPLE_CV"
    CV_DATASET_LVL = "CV_DATASET_LVL"
    MULTIPLE_CV_DATASET_LVL = "MULTIPLE_CV_DATASET_LVL"
    TRAIN_TEST_DATASET_LVL = "TRAIN_TEST_DATASET_LVL"


class ModelKey(BaseModel):
    """A model identity: classifier plus feature set."""

    model_config = ConfigDict(frozen=True)

    classifier: str
    feature_set: str

    @property
    def label(self) -> str:
        return f"{self.classifier}; {self.feature_set}"


class DatasetPair(BaseModel):
    """Train/test dataset names; test is None when both are the same dataset."""

    model_config = ConfigDict(frozen=True)

    train: str
    test: str | None = None


class SampleData(BaseModel):
    """
    Per-measure, per-model performance samples with model metadata.

    - samples[measure][model_index] is the sample vector of one model.
    - sample_averages[measure][model_index] is its mean (derived when not given).
    - model_metadata[model_index] identifies the model.
    - baseline_models lists models flagged as baseline; with a single baseline it sits at index 0.

    Treated as immutable: selection and splitting return new instances.
    """

    samples: dict[str, list[list[float]]]
    sample_averages: dict[str, list[float]] = Field(default_factory=dict)
    model_metadata: list[ModelKey]
    dataset_names: list[DatasetPair] = Field(default_factory=list)
    baseline_models: list[ModelKey] = Field(default_factory=list)
    contingency_matrix: list[list[int]] | None = None
    pipeline_kind: PipelineKind = PipelineKind.CV
    n_folds: int = 1
    n_repetitions: int = 1

    @model_validator(mode="after")
    def _validate(self) -> "SampleData":
        n_models = len(self.model_metadata)

        for measure, per_model in self.samples.items():
            if len(per_model) != n_models:
                raise ValueError(
                    f"Measure '{measure}' has samples for {len(per_model)} models, expected {n_models}"
                )
            sizes = {len(s) for s in per_model}
            if len(sizes) > 1:
                raise ValueError(f"Models are not represented by the same number of samples for '{measure}': {sorted(sizes)}")
            if sizes and min(sizes) < MIN_SAMPLES_PER_MODEL:
                raise ValueError(
                    f"At least {MIN_SAMPLES_PER_MODEL} samples are needed per model and measure "
                    f"('{measure}' has {min(sizes)})"
                )

        # Averages are derived for every measure that was not given one explicitly
        for measure, per_model in self.samples.items():
            if measure not in self.sample_averages:
                self.sample_averages[measure] = [sum(s) / len(s) for s in per_model]

        for measure, averages in self.sample_averages.items():
            if len(averages) != n_models:
                raise ValueError(f"Averages for '{measure}' cover {len(averages)} models, expected {n_models}")

        if self.contingency_matrix is not None:
            if len(self.contingency_matrix) != 2 or any(len(row) != 2 for row in self.contingency_matrix):
                raise ValueError("contingency_matrix must be 2x2")

        unknown = [m for m in self.baseline_models if m not in self.model_metadata]
        if unknown:
            raise ValueError(f"Baseline models not present in model_metadata: {unknown}")

        return self

    @property
    def model_count(self) -> int:
        return len(self.model_metadata)

    @property
    def measures(self) -> list[str]:
        return list(self.samples.keys())

    @property
    def is_baseline_evaluation(self) -> bool:
        return bool(self.baseline_models)

    @property
    def baseline_indices(self) -> list[int]:
        return [self.model_metadata.index(m) for m in self.baseline_models]

    def without_models(self, indices: set[int]) -> "SampleData":
        """Return a copy with the given model indices removed from every parallel structure."""
        keep = [i for i in range(self.model_count) if i not in indices]
        return self._select(keep, baseline_models=[m for m in self.baseline_models if self.model_metadata.index(m) in keep])

    def with_first(self, index: int) -> "SampleData":
        """Return a copy where model `index` is moved to position 0 and the rest keep their order."""
        order = [index] + [i for i in range(self.model_count) if i != index]
        return self._select(order, baseline_models=list(self.baseline_models))

    def _select(self, order: list[int], *, baseline_models: list[ModelKey]) -> "SampleData":
        return SampleData(
            samples={m: [list(v[i]) for i in order] for m, v in self.samples.items()},
            sample_averages={m: [v[i] for i in order] for m, v in self.sample_averages.items()},
            model_metadata=[self.model_metadata[i] for i in order],
            dataset_names=list(self.dataset_names),
            baseline_models=baseline_models,
            contingency_matrix=self.contingency_matrix,
            pipeline_kind=self.pipeline_kind,
            n_folds=self.n_folds,
            n_repetitions=self.n_repetitions,
        )
