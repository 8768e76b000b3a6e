from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.results import SignificanceLevels
from domain.samples import IndependentVariable, PipelineKind
from domain.schemas import CorrectionMethod, TestClass
from infrastructure.config import load_run_config
from infrastructure.config.models import RunConfig, StatsConfig


def test_stats_config_defaults_match_reference_configuration() -> None:
    cfg = StatsConfig()

    assert cfg.tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC] == "RepeatedMeasuresOneWayANOVA"
    assert cfg.tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE] == "Dunett"
    assert cfg.corrections == [CorrectionMethod.BONFERRONI, CorrectionMethod.HOCHBERG, CorrectionMethod.HOLM]
    assert (cfg.significance.low, cfg.significance.medium, cfg.significance.high) == (0.1, 0.05, 0.01)
    assert cfg.select_best_n == 10
    assert cfg.select_by_measure == "Weighted F-Measure"
    assert cfg.fix_independent_variable is IndependentVariable.FEATURE_SET


def test_test_not_in_allowed_set_is_rejected() -> None:
    tests = StatsConfig().tests
    tests[TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC] = "Tukey"

    with pytest.raises(ValidationError, match="not allowed"):
        StatsConfig(tests=tests)


def test_missing_required_test_class_is_rejected() -> None:
    tests = StatsConfig().tests
    del tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC]

    with pytest.raises(ValidationError, match="MultipleSamplesParametric"):
        StatsConfig(tests=tests)


def test_contingency_test_class_is_optional() -> None:
    tests = StatsConfig().tests
    del tests[TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY]

    cfg = StatsConfig(tests=tests)

    assert TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY not in cfg.tests


def test_empty_corrections_are_rejected() -> None:
    with pytest.raises(ValidationError, match="correction"):
        StatsConfig(corrections=[])


def test_duplicate_corrections_are_collapsed_in_order() -> None:
    cfg = StatsConfig(corrections=["holm", "BH", "holm"])

    assert cfg.corrections == [CorrectionMethod.HOLM, CorrectionMethod.BH]


@pytest.mark.parametrize(
    "levels",
    [
        {"low": 0.05, "medium": 0.1, "high": 0.01},
        {"low": 0.1, "medium": 0.05, "high": 0.06},
        {"low": 1.5, "medium": 0.05, "high": 0.01},
        {"low": 0.1, "medium": 0.05, "high": -0.01},
        {"low": 0.1, "medium": 0.05, "high": 0.0},
    ],
)
def test_invalid_significance_levels_are_rejected(levels: dict[str, float]) -> None:
    with pytest.raises(ValidationError):
        StatsConfig(significance=SignificanceLevels(**levels))


def test_select_best_n_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        StatsConfig(select_best_n=0)


def test_repeated_cv_requires_n_folds() -> None:
    with pytest.raises(ValidationError, match="n_folds"):
        RunConfig(samples_file_path=Path("dataset/x.csv"), pipeline_kind=PipelineKind.MULTIPLE_CV)


def test_dataset_level_repeated_cv_requires_n_repetitions() -> None:
    with pytest.raises(ValidationError, match="n_repetitions"):
        RunConfig(
            samples_file_path=Path("dataset/x.csv"),
            pipeline_kind=PipelineKind.MULTIPLE_CV_DATASET_LVL,
            n_folds=10,
        )


def test_load_run_config_resolves_paths_and_stats(tmp_path: Path) -> None:
    experiment = tmp_path / "experiment.yaml"
    experiment.write_text(
        "\n".join(
            [
                "samples_file: results.csv",
                f"data_dir: {tmp_path}",
                "pipeline_kind: MULTIPLE_CV",
                "n_folds: 10",
                "stats:",
                "  corrections: [BY]",
                "  significance: {low: 0.2, medium: 0.1, high: 0.05}",
                "  tests:",
                "    TwoSamplesParametric: DependentT",
                "    TwoSamplesNonParametric: WilcoxonSignedRank",
                "    MultipleSamplesParametric: RepeatedMeasuresOneWayANOVA",
                "    MultipleSamplesNonParametric: Friedman",
                "    MultipleSamplesParametricPosthoc: PairwiseDependentT",
                "    MultipleSamplesNonParametricPostHoc: Nemenyi",
                "    MultipleSamplesParametricPosthocBaseline: Dunett",
                "    MultipleSamplesNonParametricPostHocBaseline: PairwiseWilcoxonSignedRank",
            ]
        ),
        encoding="utf-8",
    )

    cfg = load_run_config(experiment)

    assert cfg.samples_file_path == tmp_path / "results.csv"
    assert cfg.pipeline_kind is PipelineKind.MULTIPLE_CV
    assert cfg.n_folds == 10
    assert cfg.stats.corrections == [CorrectionMethod.BY]
    assert cfg.stats.significance.medium == 0.1
    assert cfg.stats.tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC] == "PairwiseDependentT"
    assert TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY not in cfg.stats.tests


def test_load_run_config_requires_samples_file(tmp_path: Path) -> None:
    experiment = tmp_path / "experiment.yaml"
    experiment.write_text("pipeline_kind: CV\n", encoding="utf-8")

    with pytest.raises(ValueError, match="samples_file"):
        load_run_config(experiment)
