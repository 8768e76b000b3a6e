"""Interpretation of tabular performance results into SampleData."""

import logging

import pandas as pd

from domain.samples import DatasetPair, ModelKey, PipelineKind, SampleData, select_best_models
from domain.samples.data import MIN_SAMPLES_PER_MODEL
from infrastructure.config.models import RunConfig

logger = logging.getLogger(__name__)

# Positional columns of a samples file
SAMPLE_COLUMNS = ["Train", "Test", "Classifier", "FeatureSet", "Measure", "Value", "IsBaseline"]
AGGREGATED_CLASSIFIER = "Aggregated"


def _dataset_name(raw: str) -> str:
    return str(raw).strip().split(".")[0]


def _normalize(df: pd.DataFrame) -> pd.DataFrame:
    if df.shape[1] < len(SAMPLE_COLUMNS):
        raise ValueError(
            f"Samples table needs {len(SAMPLE_COLUMNS)} columns {SAMPLE_COLUMNS}, got {df.shape[1]}"
        )
    out = df.iloc[:, : len(SAMPLE_COLUMNS)].copy()
    out.columns = SAMPLE_COLUMNS
    out = out.dropna(how="all")

    for col in ["Train", "Test", "Classifier", "FeatureSet", "Measure"]:
        out[col] = out[col].astype(str).str.strip()
    out.loc[out["Classifier"] == "0", "Classifier"] = AGGREGATED_CLASSIFIER
    out["Value"] = pd.to_numeric(out["Value"], errors="raise")
    out["IsBaseline"] = pd.to_numeric(out["IsBaseline"], errors="coerce").fillna(0).astype(int) == 1
    return out


def _resolve_folds(cfg: RunConfig, datasets: list[DatasetPair], n_samples: int) -> tuple[int, int]:
    """Return (n_folds, n_repetitions) for the pipeline kind, checking its dataset rules."""
    kind = cfg.pipeline_kind

    if kind in (PipelineKind.CV, PipelineKind.MULTIPLE_CV):
        if len(datasets) > 1:
            raise ValueError(f"More than one dataset specified for single-domain cross-validation: {datasets}")
        if datasets and datasets[0].test is not None:
            raise ValueError("Training and test dataset must be the same for cross-validation")

    if kind is PipelineKind.CV:
        return n_samples, 1
    if kind is PipelineKind.MULTIPLE_CV:
        return int(cfg.n_folds or 1), n_samples
    if kind is PipelineKind.CV_DATASET_LVL:
        return int(cfg.n_folds or 1), 1
    if kind is PipelineKind.MULTIPLE_CV_DATASET_LVL:
        return int(cfg.n_folds or 1), int(cfg.n_repetitions or 1)
    return 1, 1


def interpret_table(df: pd.DataFrame, cfg: RunConfig) -> SampleData:
    """
    Turn a long-format results table into SampleData.

    Expected columns (by position): train dataset, test dataset, classifier, feature set,
    measure, value, baseline flag (1 = baseline). Models are (classifier, feature set) pairs
    in first-appearance order. Rows are ordered by train/test dataset before samples are
    collected, so sample k of every model refers to the same dataset.

    A single baseline model is moved to index 0; the result is then reduced to the best
    `select_best_n` models.

    Raises:
        ValueError: If the table is empty, sample counts are too small or uneven, or the
            datasets do not fit the pipeline kind.
    """
    rows = _normalize(df)
    if rows.empty:
        raise ValueError("Samples table contains no data rows")

    logger.info("Extracting samples and metadata from %d rows.", len(rows))

    models: list[ModelKey] = []
    baseline_models: list[ModelKey] = []
    measures: list[str] = []
    for row in rows.itertuples(index=False):
        model = ModelKey(classifier=row.Classifier, feature_set=row.FeatureSet)
        if model not in models:
            models.append(model)
            if row.IsBaseline:
                baseline_models.append(model)
        if row.Measure not in measures:
            measures.append(row.Measure)

    # Order samples by dataset (case-insensitive, stable)
    rows = rows.sort_values(
        ["Train", "Test"],
        key=lambda s: s.str.lower(),
        kind="stable",
    )

    datasets: list[DatasetPair] = []
    for train, test in zip(rows["Train"], rows["Test"]):
        train_name, test_name = _dataset_name(train), _dataset_name(test)
        pair = DatasetPair(train=train_name, test=None if train_name == test_name else test_name)
        if pair not in datasets:
            datasets.append(pair)

    samples: dict[str, list[list[float]]] = {m: [[] for _ in models] for m in measures}
    for row in rows.itertuples(index=False):
        model_index = models.index(ModelKey(classifier=row.Classifier, feature_set=row.FeatureSet))
        samples[row.Measure][model_index].append(float(row.Value))

    for measure, per_model in samples.items():
        counts = {len(s) for s in per_model}
        if min(counts) < MIN_SAMPLES_PER_MODEL:
            raise ValueError(
                f"At least {MIN_SAMPLES_PER_MODEL} samples are needed per model and measure "
                f"('{measure}' has {min(counts)})"
            )
        if len(counts) > 1:
            raise ValueError(f"Different models are not represented by the same number of samples ('{measure}')")

    n_samples = len(samples[measures[0]][0])
    n_folds, n_repetitions = _resolve_folds(cfg, datasets, n_samples)

    sample_data = SampleData(
        samples=samples,
        model_metadata=models,
        dataset_names=datasets,
        baseline_models=baseline_models,
        pipeline_kind=cfg.pipeline_kind,
        n_folds=n_folds,
        n_repetitions=n_repetitions,
    )

    if len(baseline_models) == 1:
        sample_data = sample_data.with_first(models.index(baseline_models[0]))

    logger.info(
        "Imported %d models, %d measures, %d datasets (pipeline=%s, folds=%d, repetitions=%d).",
        len(models),
        len(measures),
        len(datasets),
        cfg.pipeline_kind.value,
        n_folds,
        n_repetitions,
    )

    return select_best_models(sample_data, cfg.stats.select_best_n, cfg.stats.select_by_measure)
