"""Level-based topological ordering of significance graphs."""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from domain.errors import CyclicGraphError
from domain.significance.graph import SignificanceGraph

logger = logging.getLogger(__name__)


class OrderingStatus(str, Enum):
    VALID = "valid"
    CYCLIC = "cyclic"
    INCOMPLETE = "incomplete"


class SignificanceOrdering(BaseModel):
    """
    Partial order of models derived from a significance graph.

    levels maps level -> ascending model indices; level 0 holds the weakest group.
    levels is None unless status is valid.
    """

    model_config = ConfigDict(frozen=True)

    status: OrderingStatus
    levels: dict[int, list[int]] | None = None
    edges: list[tuple[int, int]] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.status is OrderingStatus.VALID


def topological_levels(graph: SignificanceGraph) -> dict[int, list[int]]:
    """
    Group vertices into levels with a level-synchronous Kahn's algorithm.

    Vertices whose in-degree drops to zero join the next level, never the current one.

    Raises:
        CyclicGraphError: If some vertices can never be reached (the graph has a cycle).
    """
    remaining_in = [graph.in_degree(v) for v in range(graph.n_vertices)]
    current = [v for v in range(graph.n_vertices) if remaining_in[v] == 0]

    levels: dict[int, list[int]] = {}
    processed = 0
    while current:
        levels[len(levels)] = current
        processed += len(current)

        following: list[int] = []
        for v in current:
            for w in graph.successors(v):
                remaining_in[w] -= 1
                if remaining_in[w] == 0:
                    following.append(w)
        current = sorted(following)

    if processed != graph.n_vertices:
        unresolved = [v for v in range(graph.n_vertices) if remaining_in[v] > 0]
        raise CyclicGraphError(f"Significance graph contains a cycle through vertices {unresolved}")

    return levels


def levels_are_separated(graph: SignificanceGraph, levels: dict[int, list[int]]) -> bool:
    """
    Check that every vertex has an edge to every vertex on all higher levels.

    A level only counts as "below" another when each of its members is significantly
    worse than each member of every level above it.
    """
    remaining = graph.n_vertices
    for level in sorted(levels)[:-1]:
        remaining -= len(levels[level])
        for v in levels[level]:
            if graph.out_degree(v) != remaining:
                logger.debug(
                    "Vertex %d on level %d has out-degree %d, expected %d",
                    v,
                    level,
                    graph.out_degree(v),
                    remaining,
                )
                return False
    return True


def order_significant_differences(graph: SignificanceGraph) -> SignificanceOrdering:
    """
    Turn a significance graph into a validated level ordering.

    Cycles and levels without total separation both yield an ordering without levels,
    which consumers report as "no strict ordering".
    """
    edges = list(graph.edges())

    try:
        levels = topological_levels(graph)
    except CyclicGraphError as e:
        logger.warning("No valid order: %s", e)
        return SignificanceOrdering(status=OrderingStatus.CYCLIC, edges=edges)

    if not levels_are_separated(graph, levels):
        logger.info("No valid order: adjacent levels are not fully separated (edges=%s)", edges)
        return SignificanceOrdering(status=OrderingStatus.INCOMPLETE, edges=edges)

    return SignificanceOrdering(status=OrderingStatus.VALID, levels=levels, edges=edges)
