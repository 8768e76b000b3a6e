import math

import numpy as np
import pytest

from domain.errors import UnknownTestError
from domain.schemas import PairwiseTestResult, TestResult
from infrastructure.config.models import Engine
from infrastructure.config.registry import ALLOWED_TESTS
from infrastructure.engines import SHAPE_BY_TEST_CLASS, CallShape, engine_class
from infrastructure.engines.scipy import ScipyEngine


def _samples(shifts: list[float], n_samples: int = 12, seed: int = 7) -> list[list[float]]:
    rng = np.random.default_rng(seed)
    noise = rng.normal(0.0, 0.01, size=(len(shifts), n_samples))
    return [list(0.7 + shift + noise[i]) for i, shift in enumerate(shifts)]


@pytest.fixture
def engine():
    with ScipyEngine() as eng:
        yield eng


def test_every_allowed_test_is_implemented_with_its_call_shape() -> None:
    engine = ScipyEngine()

    for test_class, names in ALLOWED_TESTS.items():
        for name in names:
            handle = engine.resolve(name, SHAPE_BY_TEST_CLASS[test_class])
            assert handle.name == name


def test_scipy_engine_is_the_class_for_the_scipy_name() -> None:
    assert engine_class(Engine.SCIPY) is ScipyEngine


def test_resolve_rejects_unknown_identifiers_and_wrong_shapes() -> None:
    engine = ScipyEngine()

    with pytest.raises(UnknownTestError, match="Available: .*DependentT"):
        engine.resolve("StudentT", CallShape.TWO_SAMPLE)
    with pytest.raises(UnknownTestError):
        engine.resolve("Friedman", CallShape.POST_HOC)


def test_calls_require_an_open_engine() -> None:
    handle = ScipyEngine().resolve("DependentT", CallShape.TWO_SAMPLE)
    x, y = _samples([0.0, 0.05])

    with pytest.raises(RuntimeError, match="not open"):
        handle(x, y)


def test_dependent_t_detects_a_clear_difference(engine: ScipyEngine) -> None:
    x, y = _samples([0.0, 0.05])

    result = engine.resolve("DependentT", CallShape.TWO_SAMPLE)(x, y)

    assert isinstance(result, TestResult)
    assert result.p_value < 0.01
    assert "normality_of_differences" in result.assumptions


def test_wilcoxon_signed_rank_returns_a_p_value(engine: ScipyEngine) -> None:
    x, y = _samples([0.0, 0.05])

    result = engine.resolve("WilcoxonSignedRank", CallShape.TWO_SAMPLE)(x, y)

    assert 0.0 <= result.p_value < 0.01


def test_mcnemar_on_contingency_counts(engine: ScipyEngine) -> None:
    result = engine.resolve("McNemar", CallShape.CONTINGENCY)([[40, 2], [15, 43]])

    assert result.p_value < 0.05


@pytest.mark.parametrize("name", ["RepeatedMeasuresOneWayANOVA", "Friedman"])
def test_multi_sample_omnibus_tests(engine: ScipyEngine, name: str) -> None:
    result = engine.resolve(name, CallShape.MULTI_SAMPLE)(_samples([0.0, 0.05, 0.1]))

    assert result.method == name
    assert result.p_value < 0.05


def test_multi_sample_tests_need_three_models(engine: ScipyEngine) -> None:
    with pytest.raises(ValueError):
        engine.resolve("Friedman", CallShape.MULTI_SAMPLE)(_samples([0.0, 0.05]))


@pytest.mark.parametrize("name", ["PairwiseDependentT", "Tukey", "Nemenyi"])
def test_all_pairs_post_hoc_fill_the_lower_triangle(engine: ScipyEngine, name: str) -> None:
    result = engine.resolve(name, CallShape.POST_HOC)(_samples([0.0, 0.05, 0.1, 0.15]))

    assert isinstance(result, PairwiseTestResult)
    assert result.size == 3
    for i in range(3):
        for j in range(3):
            p = result.p_value[i][j]
            if j <= i:
                assert 0.0 <= p <= 1.0
            else:
                assert math.isnan(p)


@pytest.mark.parametrize("name", ["Dunett", "PairwiseWilcoxonSignedRank"])
def test_baseline_post_hoc_fill_column_zero_only(engine: ScipyEngine, name: str) -> None:
    result = engine.resolve(name, CallShape.POST_HOC)(_samples([0.1, 0.0, 0.05, 0.02]))

    for i in range(3):
        assert 0.0 <= result.p_value[i][0] <= 1.0
        assert all(math.isnan(p) for p in result.p_value[i][1:])


def test_correction_requests_follow_the_test_family(engine: ScipyEngine) -> None:
    samples = _samples([0.0, 0.05, 0.1])

    assert engine.resolve("PairwiseDependentT", CallShape.POST_HOC)(samples).requires_correction
    assert engine.resolve("PairwiseWilcoxonSignedRank", CallShape.POST_HOC)(samples).requires_correction
    assert not engine.resolve("Tukey", CallShape.POST_HOC)(samples).requires_correction
    assert not engine.resolve("Nemenyi", CallShape.POST_HOC)(samples).requires_correction
    assert not engine.resolve("Dunett", CallShape.POST_HOC)(samples).requires_correction
