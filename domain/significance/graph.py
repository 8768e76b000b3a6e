"""Directed significance graph over model indices."""

import math
from collections.abc import Iterator, Sequence

from domain.schemas import PairwiseTestResult


class SignificanceGraph:
    """
    Index-based directed graph: one vertex per model, edge u -> v meaning
    "u is significantly worse than v".

    Adjacency is kept as sorted successor lists plus an in-degree counter per vertex,
    so leveling never has to remove vertices by identity.
    """

    def __init__(self, n_vertices: int) -> None:
        if n_vertices < 0:
            raise ValueError("n_vertices must be >= 0")
        self._successors: list[set[int]] = [set() for _ in range(n_vertices)]
        self._in_degree: list[int] = [0] * n_vertices

    @property
    def n_vertices(self) -> int:
        return len(self._successors)

    def add_edge(self, source: int, target: int) -> None:
        if source == target:
            raise ValueError(f"Self-loop on vertex {source}")
        if target in self._successors[source]:
            return
        self._successors[source].add(target)
        self._in_degree[target] += 1

    def has_edge(self, source: int, target: int) -> bool:
        return target in self._successors[source]

    def successors(self, vertex: int) -> list[int]:
        return sorted(self._successors[vertex])

    def out_degree(self, vertex: int) -> int:
        return len(self._successors[vertex])

    def in_degree(self, vertex: int) -> int:
        return self._in_degree[vertex]

    def edges(self) -> Iterator[tuple[int, int]]:
        for source in range(self.n_vertices):
            for target in self.successors(source):
                yield source, target

    @property
    def n_edges(self) -> int:
        return sum(len(s) for s in self._successors)

    def __repr__(self) -> str:
        return f"SignificanceGraph(n_vertices={self.n_vertices}, edges={list(self.edges())})"


def build_significance_graph(
    result: PairwiseTestResult,
    averages: Sequence[float],
    significance_medium: float,
) -> SignificanceGraph:
    """
    Build the graph from uncorrected post-hoc p-values.

    For every lower-triangular cell (i, j) with p <= significance_medium, an edge is added
    between models i+1 and j, pointing from the lower to the higher average. NaN cells and
    non-significant cells add nothing.
    """
    graph = SignificanceGraph(len(averages))

    for i, j, p in result.cells():
        if math.isnan(p) or p > significance_medium:
            continue
        if averages[i + 1] < averages[j]:
            graph.add_edge(i + 1, j)
        else:
            graph.add_edge(j, i + 1)

    return graph
