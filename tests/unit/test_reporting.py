import json
import logging
import math
from datetime import datetime
from pathlib import Path

import pytest

from application import (
    Evaluator,
    format_ordering,
    format_outcome,
    log_evaluation_summary,
    p_value_frame,
    serialize_evaluation_results,
)
from domain.results import SignificanceLevels
from domain.samples import ModelKey, PipelineKind, SampleData
from domain.schemas import PairwiseTestResult, TestOutcome, TestResult
from domain.significance import OrderingStatus, SignificanceOrdering
from infrastructure.config.models import Engine, RunConfig, StatsConfig
from infrastructure.engines import MockEngine, make_engine
from infrastructure.engines.scipy import ScipyEngine
from main import make_run_id

NAN = math.nan


def _sample_data(n_models: int) -> SampleData:
    models = [ModelKey(classifier=f"clf{i}", feature_set="fs") for i in range(n_models)]
    return SampleData(
        samples={"Accuracy": [[0.5 + 0.1 * i + 0.001 * k for k in range(6)] for i in range(n_models)]},
        model_metadata=models,
    )


def test_format_ordering_lists_levels_weakest_first() -> None:
    ordering = SignificanceOrdering(status=OrderingStatus.VALID, levels={0: [0, 1], 1: [2]})

    assert format_ordering(ordering) == "(M0,M1)<(M2)"


def test_format_ordering_reports_missing_orders() -> None:
    assert format_ordering(None) == "not computed"
    assert format_ordering(SignificanceOrdering(status=OrderingStatus.CYCLIC)) == "no strict ordering (cyclic)"


def test_format_outcome_adds_significance_stars() -> None:
    sig = SignificanceLevels()

    assert format_outcome(TestOutcome.success(TestResult(method="Friedman", p_value=0.001)), sig) == (
        "Friedman test: p=0.0010 (***)"
    )
    assert format_outcome(TestOutcome.success(TestResult(method="Friedman", p_value=0.3)), sig) == (
        "Friedman test: p=0.3000"
    )
    assert format_outcome(TestOutcome.failure("Friedman", "boom"), sig) == "Friedman test: failed (boom)"
    assert format_outcome(None, sig) == "not run"


def test_p_value_frame_labels_rows_and_columns() -> None:
    result = PairwiseTestResult(method="Tukey", p_value=[[0.01, NAN], [0.2, 0.03]])

    frame = p_value_frame(result)

    assert list(frame.index) == ["M1", "M2"]
    assert list(frame.columns) == ["M0", "M1"]
    assert frame.loc["M2", "M0"] == 0.2
    assert math.isnan(frame.loc["M1", "M1"])


def test_serialized_results_write_nan_as_null(tmp_path: Path) -> None:
    with MockEngine() as engine:
        results = Evaluator(StatsConfig(), engine).evaluate(_sample_data(3))

    path = serialize_evaluation_results(results, tmp_path / "out" / "evaluation_00.json")

    payload = json.loads(path.read_text(encoding="utf-8"))
    post_hoc = payload["measures"]["Accuracy"]["post_hoc_parametric"]["result"]
    assert post_hoc["p_value"][0][1] is None
    assert payload["measures"]["Accuracy"]["ordering_parametric"]["status"] == "valid"


def test_summary_logs_models_and_orderings(caplog: pytest.LogCaptureFixture) -> None:
    with MockEngine() as engine:
        results = Evaluator(StatsConfig(), engine).evaluate(_sample_data(3))

    with caplog.at_level(logging.INFO, logger="application.evaluation"):
        log_evaluation_summary(results, Path("evaluation_00.json"))

    assert "M2: clf2; fs" in caplog.text
    assert "ordering: (M0)<(M1)<(M2)" in caplog.text
    assert "evaluation_00.json" in caplog.text


def test_make_engine_builds_configured_or_mock_engine(tmp_path: Path) -> None:
    cfg = RunConfig(engine=Engine.SCIPY, samples_file_path=tmp_path / "samples.csv")

    engine = make_engine(cfg)
    mock = make_engine(cfg, use_mock=True, mock_fixtures={"Friedman": None})

    assert isinstance(engine, ScipyEngine)
    assert engine.cfg is cfg
    assert not engine.is_open
    assert isinstance(mock, MockEngine)
    assert mock.fixtures == {"Friedman": None}


def test_run_id_is_timestamp_pipeline_and_engine() -> None:
    run_id = make_run_id(datetime(2024, 3, 5, 14, 7, 9), PipelineKind.MULTIPLE_CV, "scipy")

    assert run_id == "20240305_140709_MULTIPLE_CV_scipy"
