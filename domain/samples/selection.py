"""Best-N model selection by a ranking measure."""

import logging

from domain.errors import MissingMeasureError
from domain.samples.data import SampleData

logger = logging.getLogger(__name__)

AVERAGED_PREFIX = "Averaged "


def ranking_averages(sample_data: SampleData, measure: str) -> list[float]:
    """
    Return per-model averages for `measure`, falling back to "Averaged <measure>".

    Raises:
        MissingMeasureError: If neither key exists in the sample averages.
    """
    averages = sample_data.sample_averages.get(measure)
    if averages is None:
        averages = sample_data.sample_averages.get(AVERAGED_PREFIX + measure)
    if averages is None:
        raise MissingMeasureError(measure)
    return averages


def select_best_models(sample_data: SampleData, keep_best_n: int, ranking_measure: str) -> SampleData:
    """
    Keep the best `keep_best_n` models by their average on `ranking_measure`.

    The lowest-ranked models are dropped from every measure. Baseline models are never
    dropped, so a baseline evaluation can end up with keep_best_n + 1 models. If the ranking
    measure is missing the input is returned unchanged.
    """
    n_models = sample_data.model_count
    if n_models <= keep_best_n or n_models <= 1:
        return sample_data

    try:
        averages = ranking_averages(sample_data, ranking_measure)
    except MissingMeasureError:
        logger.error("Measure %r for model selection not available in sample data; no selection.", ranking_measure)
        return sample_data

    protected = set(sample_data.baseline_indices)
    ranked = sorted(range(n_models), key=lambda i: averages[i])
    obsolete = {i for i in ranked[: n_models - keep_best_n] if i not in protected}

    logger.info(
        "Selecting best %d of %d models by %r (dropping %d).",
        keep_best_n,
        n_models,
        ranking_measure,
        len(obsolete),
    )
    return sample_data.without_models(obsolete)
