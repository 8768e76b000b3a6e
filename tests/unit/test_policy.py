import pytest

from domain.policy import select_tests
from infrastructure.config.models import StatsConfig

TESTS = StatsConfig().tests


def test_two_models_select_two_sample_omnibus_tests_only() -> None:
    selection = select_tests(2, False, TESTS)

    assert selection.omnibus_parametric == "DependentT"
    assert selection.omnibus_non_parametric == "WilcoxonSignedRank"
    assert selection.post_hoc_parametric is None
    assert selection.post_hoc_non_parametric is None
    assert selection.has_post_hoc is False
    assert selection.contingency == "McNemar"


def test_multiple_models_select_all_pairs_post_hoc_tests() -> None:
    selection = select_tests(4, False, TESTS)

    assert selection.omnibus_parametric == "RepeatedMeasuresOneWayANOVA"
    assert selection.omnibus_non_parametric == "Friedman"
    assert selection.post_hoc_parametric == "Tukey"
    assert selection.post_hoc_non_parametric == "Nemenyi"
    assert selection.contingency is None


def test_baseline_evaluation_selects_vs_control_post_hoc_tests() -> None:
    selection = select_tests(3, True, TESTS)

    assert selection.post_hoc_parametric == "Dunett"
    assert selection.post_hoc_non_parametric == "PairwiseWilcoxonSignedRank"


def test_baseline_flag_does_not_matter_for_two_models() -> None:
    assert select_tests(2, True, TESTS) == select_tests(2, False, TESTS)


@pytest.mark.parametrize("model_count", [0, 1])
def test_fewer_than_two_models_are_rejected(model_count: int) -> None:
    with pytest.raises(ValueError):
        select_tests(model_count, False, TESTS)
