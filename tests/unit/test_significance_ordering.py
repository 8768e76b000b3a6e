import math

import pytest

from domain.errors import CyclicGraphError
from domain.schemas import PairwiseTestResult
from domain.significance import (
    OrderingStatus,
    SignificanceGraph,
    build_significance_graph,
    levels_are_separated,
    order_significant_differences,
    topological_levels,
)

NAN = math.nan
MEDIUM = 0.05


def _pairwise(p_value: list[list[float]]) -> PairwiseTestResult:
    return PairwiseTestResult(method="Tukey", p_value=p_value, statistic=p_value)


def _graph(n: int, edges: list[tuple[int, int]]) -> SignificanceGraph:
    graph = SignificanceGraph(n)
    for source, target in edges:
        graph.add_edge(source, target)
    return graph


def test_edges_point_from_lower_to_higher_average() -> None:
    # cell (0, 0) compares model 0 with model 1
    graph = build_significance_graph(_pairwise([[0.01]]), averages=[0.8, 0.6], significance_medium=MEDIUM)
    assert list(graph.edges()) == [(1, 0)]

    graph = build_significance_graph(_pairwise([[0.01]]), averages=[0.6, 0.8], significance_medium=MEDIUM)
    assert list(graph.edges()) == [(0, 1)]


def test_nan_and_non_significant_cells_add_no_edges() -> None:
    result = _pairwise([[NAN, NAN], [0.051, 0.2]])

    graph = build_significance_graph(result, averages=[0.1, 0.2, 0.3], significance_medium=MEDIUM)

    assert graph.n_edges == 0


def test_threshold_is_inclusive() -> None:
    graph = build_significance_graph(_pairwise([[MEDIUM]]), averages=[0.1, 0.2], significance_medium=MEDIUM)

    assert graph.has_edge(0, 1)


def test_cells_above_the_diagonal_are_never_read() -> None:
    # Upper-triangle cell [0][1] is significant but must be ignored
    result = _pairwise([[0.5, 0.001], [0.5, 0.5]])

    graph = build_significance_graph(result, averages=[0.1, 0.2, 0.3], significance_medium=MEDIUM)

    assert graph.n_edges == 0


def test_scenario_b_baseline_graph_and_levels() -> None:
    # 4 models, baseline (model 0) is best; baseline comparisons significant, others not
    result = _pairwise(
        [
            [0.01, NAN, NAN],
            [0.01, 0.9, NAN],
            [0.01, 0.9, 0.9],
        ]
    )

    graph = build_significance_graph(result, averages=[0.9, 0.6, 0.5, 0.55], significance_medium=MEDIUM)
    ordering = order_significant_differences(graph)

    assert sorted(graph.edges()) == [(1, 0), (2, 0), (3, 0)]
    assert ordering.status is OrderingStatus.VALID
    # Level 0 holds the weakest group, the baseline sits alone above it
    assert ordering.levels == {0: [1, 2, 3], 1: [0]}


def test_scenario_c_no_significant_differences_is_one_tie_group() -> None:
    result = _pairwise([[0.5, NAN], [0.5, 0.5]])

    graph = build_significance_graph(result, averages=[0.7, 0.6, 0.8], significance_medium=MEDIUM)
    ordering = order_significant_differences(graph)

    assert graph.n_edges == 0
    assert ordering.is_valid
    assert ordering.levels == {0: [0, 1, 2]}
    assert ordering.edges == []


def test_scenario_d_chain_without_transitive_edge_has_no_valid_order() -> None:
    # p(1,0)=0.01 favouring 1, p(2,0)=0.5, p(2,1)=0.01 favouring 2
    result = _pairwise([[0.01, NAN], [0.5, 0.01]])

    graph = build_significance_graph(result, averages=[0.5, 0.6, 0.7], significance_medium=MEDIUM)
    ordering = order_significant_differences(graph)

    assert sorted(graph.edges()) == [(0, 1), (1, 2)]
    assert not graph.has_edge(0, 2)
    assert ordering.status is OrderingStatus.INCOMPLETE
    assert ordering.levels is None
    assert ordering.edges == [(0, 1), (1, 2)]


def test_full_separation_of_three_groups_is_valid() -> None:
    # {0, 1} < {2} < {3}
    graph = _graph(4, [(0, 2), (0, 3), (1, 2), (1, 3), (2, 3)])

    ordering = order_significant_differences(graph)

    assert ordering.levels == {0: [0, 1], 1: [2], 2: [3]}
    for level, vertices in ordering.levels.items():
        above = sum(len(v) for lvl, v in ordering.levels.items() if lvl > level)
        assert all(graph.out_degree(v) == above for v in vertices)


def test_one_missing_edge_between_groups_invalidates_the_order() -> None:
    graph = _graph(4, [(0, 2), (0, 3), (1, 2), (2, 3)])  # (1, 3) missing

    ordering = order_significant_differences(graph)

    assert ordering.status is OrderingStatus.INCOMPLETE
    assert ordering.levels is None


def test_levels_are_level_synchronous() -> None:
    # 1 is freed while level 0 is processed but only joins the next level
    graph = _graph(3, [(0, 1)])

    assert topological_levels(graph) == {0: [0, 2], 1: [1]}


def test_cycle_is_reported() -> None:
    graph = _graph(3, [(0, 1), (1, 2), (2, 1)])

    with pytest.raises(CyclicGraphError):
        topological_levels(graph)

    ordering = order_significant_differences(graph)
    assert ordering.status is OrderingStatus.CYCLIC
    assert ordering.levels is None


def test_leveling_does_not_mutate_the_graph() -> None:
    graph = _graph(3, [(0, 1), (0, 2), (1, 2)])

    order_significant_differences(graph)

    assert sorted(graph.edges()) == [(0, 1), (0, 2), (1, 2)]
    assert [graph.in_degree(v) for v in range(3)] == [0, 1, 2]


def test_separation_check_ignores_the_last_level() -> None:
    graph = _graph(3, [(0, 1), (0, 2)])

    assert levels_are_separated(graph, {0: [0], 1: [1, 2]})
