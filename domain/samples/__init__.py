"""Sample data model, best-N selection and splitting."""

from domain.samples.data import DatasetPair, ModelKey, PipelineKind, SampleData
from domain.samples.selection import ranking_averages, select_best_models
from domain.samples.splitting import IndependentVariable, split_by_independent_variable

__all__ = [
    "SampleData",
    "ModelKey",
    "DatasetPair",
    "PipelineKind",
    "IndependentVariable",
    "select_best_models",
    "ranking_averages",
    "split_by_independent_variable",
]
