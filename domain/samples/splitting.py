"""Splitting sample data by a fixed independent variable."""

import logging
from enum import Enum

from domain.samples.data import ModelKey, SampleData

logger = logging.getLogger(__name__)


class IndependentVariable(str, Enum):
    """Model attribute held fixed within one evaluation group."""

    CLASSIFIER = "Classifier"
    FEATURE_SET = "FeatureSet"


def _value_of(model: ModelKey, variable: IndependentVariable) -> str:
    return model.classifier if variable is IndependentVariable.CLASSIFIER else model.feature_set


def split_by_independent_variable(sample_data: SampleData, fixed: IndependentVariable) -> list[SampleData]:
    """
    Split into one group per value of the fixed independent variable.

    Data is only split when both classifiers and feature sets vary. In baseline evaluations
    every group needs its own baseline model, which is moved to index 0.

    Raises:
        ValueError: If a group in a baseline evaluation has no baseline model.
    """
    classifiers = list(dict.fromkeys(m.classifier for m in sample_data.model_metadata))
    feature_sets = list(dict.fromkeys(m.feature_set for m in sample_data.model_metadata))

    if not (len(classifiers) > 1 and len(feature_sets) > 1):
        return [sample_data]

    values = classifiers if fixed is IndependentVariable.CLASSIFIER else feature_sets
    groups: list[SampleData] = []

    for value in values:
        members = {i for i, m in enumerate(sample_data.model_metadata) if _value_of(m, fixed) == value}
        group = sample_data.without_models(set(range(sample_data.model_count)) - members)

        if sample_data.is_baseline_evaluation:
            baseline = next((m for m in sample_data.baseline_models if _value_of(m, fixed) == value), None)
            if baseline is None:
                raise ValueError(
                    f"Missing baseline model for {fixed.value}={value!r}. With both classifiers and feature sets "
                    "varying, a baseline must be flagged within every group of the fixed independent variable."
                )
            group = group.model_copy(update={"baseline_models": [baseline]})
            group = group.with_first(group.model_metadata.index(baseline))

        logger.debug("Split group %s=%r: %d models", fixed.value, value, group.model_count)
        groups.append(group)

    logger.info("Split sample data by %s into %d groups.", fixed.value, len(groups))
    return groups
