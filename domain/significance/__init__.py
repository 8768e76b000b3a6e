"""Significance graph construction and validated topological ordering."""

from domain.significance.graph import SignificanceGraph, build_significance_graph
from domain.significance.ordering import (
    OrderingStatus,
    SignificanceOrdering,
    levels_are_separated,
    order_significant_differences,
    topological_levels,
)

__all__ = [
    "SignificanceGraph",
    "build_significance_graph",
    "SignificanceOrdering",
    "OrderingStatus",
    "topological_levels",
    "levels_are_separated",
    "order_significant_differences",
]
