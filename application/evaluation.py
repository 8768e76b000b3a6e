"""Evaluation workflow and summary logging."""

import logging
import math
from pathlib import Path
from typing import Any

import pandas as pd
from opik import track

from application.constants import (
    CONTINGENCY_MEASURE,
    EVALUATION_FILENAME,
    PRETTY_CORRECTION_NAMES,
    PRETTY_TEST_NAMES,
)
from application.corrections import apply_corrections
from application.serialize import serialize_evaluation_results
from domain.errors import InsufficientModelsError, MissingSamplesError
from domain.policy import TestSelection, select_tests
from domain.results import EvaluationResults, MeasureEvaluation, SignificanceLevels
from domain.samples import SampleData
from domain.schemas import PairwiseTestResult, TestOutcome
from domain.significance import SignificanceOrdering, build_significance_graph, order_significant_differences
from infrastructure.config.models import StatsConfig
from infrastructure.engines.base import SHAPE_BY_TEST_CLASS, StatisticsEngine, TestHandle
from infrastructure.observability import clear_measure_context, set_log_context

logger = logging.getLogger(__name__)


class Evaluator:
    """
    Runs the configured tests on SampleData and orders models per measure.

    All configured tests are resolved against the engine on construction, so an unknown
    identifier fails before any data is touched.
    """

    def __init__(self, cfg: StatsConfig, engine: StatisticsEngine) -> None:
        self.cfg = cfg
        self.engine = engine
        self._handles: dict[str, TestHandle] = {
            name: engine.resolve(name, SHAPE_BY_TEST_CLASS[test_class]) for test_class, name in cfg.tests.items()
        }

    @track(
        name="Significance.evaluation",
        type="general",
        metadata={"task": "significance_evaluation"},
        capture_input=False,
        capture_output=False,
    )
    def evaluate(self, sample_data: SampleData) -> EvaluationResults:
        """
        Evaluate every measure of `sample_data`.

        - 2 models: two-sample omnibus tests only (plus the contingency test, when configured).
        - >2 models: omnibus tests, post-hoc tests, corrections and orderings for both the
          parametric and the non-parametric branch.

        Raises:
            InsufficientModelsError: If fewer than two models are present.
            MissingSamplesError: If there is no sample data, or a measure has no samples.
        """
        if not sample_data.samples:
            raise MissingSamplesError("No measure data available for evaluation")

        n_models = sample_data.model_count
        if n_models < 2:
            raise InsufficientModelsError(f"Nothing to compare: {n_models} model(s) in sample data")

        if sample_data.is_baseline_evaluation and sample_data.baseline_indices[0] != 0:
            logger.warning(
                "Baseline evaluation but model 0 is not a baseline (baselines at %s); model 0 is used as control.",
                sample_data.baseline_indices,
            )

        selection = select_tests(n_models, sample_data.is_baseline_evaluation, self.cfg.tests)
        logger.info(
            "Evaluating %d models on %d measures (baseline=%s): %s",
            n_models,
            len(sample_data.samples),
            sample_data.is_baseline_evaluation,
            selection.model_dump(exclude_none=True),
        )

        measures: dict[str, MeasureEvaluation] = {}
        try:
            for measure, per_model in sample_data.samples.items():
                set_log_context(measure=measure)
                if not per_model or not per_model[0]:
                    raise MissingSamplesError(f"No samples for measure '{measure}'")

                logger.info("Evaluating %s samples.", measure)
                if n_models == 2:
                    measures[measure] = self._evaluate_two_models(per_model, selection)
                else:
                    measures[measure] = self._evaluate_multiple_models(
                        per_model, sample_data.sample_averages[measure], selection
                    )
        finally:
            clear_measure_context()

        if selection.contingency is not None:
            measures[CONTINGENCY_MEASURE] = self._evaluate_contingency(sample_data, selection.contingency)

        return EvaluationResults(
            sample_data=sample_data,
            significance=self.cfg.significance,
            is_baseline_evaluation=sample_data.is_baseline_evaluation,
            selection=selection,
            measures=measures,
        )

    def _run(self, name: str, *args: Any) -> TestOutcome:
        """Run one test; exceptions, missing results and NaN p-values become failed outcomes."""
        try:
            result = self._handles[name](*args)
        except Exception as e:
            logger.error("Test %s failed: %s", name, e, exc_info=True)
            return TestOutcome.failure(name, f"{type(e).__name__}: {e}")

        outcome = TestOutcome.from_result(name, result)
        if not outcome.succeeded:
            logger.warning("Test %s produced no usable result: %s", name, outcome.error)
        return outcome

    def _evaluate_two_models(self, per_model: list[list[float]], selection: TestSelection) -> MeasureEvaluation:
        x, y = per_model
        return MeasureEvaluation(
            parametric=self._run(selection.omnibus_parametric, x, y),
            non_parametric=self._run(selection.omnibus_non_parametric, x, y),
        )

    def _evaluate_branch(
        self,
        omnibus_name: str,
        post_hoc_name: str,
        per_model: list[list[float]],
        averages: list[float],
    ) -> tuple[TestOutcome, TestOutcome | None, SignificanceOrdering | None]:
        omnibus = self._run(omnibus_name, per_model)
        if not omnibus.succeeded:
            return omnibus, None, None

        post_hoc = self._run(post_hoc_name, per_model)
        if not post_hoc.succeeded or not isinstance(post_hoc.result, PairwiseTestResult):
            return omnibus, post_hoc, None

        result = post_hoc.result
        if result.requires_correction:
            result = apply_corrections(self.engine, result, self.cfg.corrections)
            post_hoc = TestOutcome.success(result)

        # Orderings use the uncorrected p-values
        graph = build_significance_graph(result, averages, self.cfg.significance.medium)
        ordering = order_significant_differences(graph)
        logger.info("%s ordering: %s", post_hoc_name, format_ordering(ordering))
        return omnibus, post_hoc, ordering

    def _evaluate_multiple_models(
        self,
        per_model: list[list[float]],
        averages: list[float],
        selection: TestSelection,
    ) -> MeasureEvaluation:
        if selection.post_hoc_parametric is None or selection.post_hoc_non_parametric is None:
            raise ValueError("Post-hoc tests must be selected when comparing more than two models")

        # Both branches always run; neither short-circuits the other
        parametric, post_hoc_parametric, ordering_parametric = self._evaluate_branch(
            selection.omnibus_parametric, selection.post_hoc_parametric, per_model, averages
        )
        non_parametric, post_hoc_non_parametric, ordering_non_parametric = self._evaluate_branch(
            selection.omnibus_non_parametric, selection.post_hoc_non_parametric, per_model, averages
        )
        return MeasureEvaluation(
            parametric=parametric,
            non_parametric=non_parametric,
            post_hoc_parametric=post_hoc_parametric,
            post_hoc_non_parametric=post_hoc_non_parametric,
            ordering_parametric=ordering_parametric,
            ordering_non_parametric=ordering_non_parametric,
        )

    def _evaluate_contingency(self, sample_data: SampleData, name: str) -> MeasureEvaluation:
        if sample_data.contingency_matrix is None:
            logger.error("Contingency matrix not available; %s cannot be run.", name)
            return MeasureEvaluation(non_parametric=TestOutcome.failure(name, "contingency matrix not available"))
        return MeasureEvaluation(non_parametric=self._run(name, sample_data.contingency_matrix))


def format_ordering(ordering: SignificanceOrdering | None) -> str:
    """Render levels as '(M0,M1)<(M2)', weakest group first."""
    if ordering is None:
        return "not computed"
    if not ordering.is_valid or ordering.levels is None:
        return f"no strict ordering ({ordering.status.value})"
    return "<".join(
        "(" + ",".join(f"M{i}" for i in ordering.levels[level]) + ")" for level in sorted(ordering.levels)
    )


def format_outcome(outcome: TestOutcome | None, significance: SignificanceLevels) -> str:
    """Render an omnibus outcome as 'name: p=0.0012 (***)' or the failure reason."""
    if outcome is None:
        return "not run"
    name = PRETTY_TEST_NAMES.get(outcome.method, outcome.method)
    if not outcome.succeeded or outcome.result is None:
        return f"{name}: failed ({outcome.error})"
    p_value = outcome.result.p_value
    if isinstance(p_value, list):
        return f"{name}: pairwise"
    stars = significance.stars(p_value)
    return f"{name}: p={p_value:.4f}" + (f" ({stars})" if stars else "")


def p_value_frame(result: PairwiseTestResult, matrix: list[list[float]] | None = None) -> pd.DataFrame:
    """Lower-triangular p-values as a DataFrame (rows M1.., columns M0..)."""
    values = result.p_value if matrix is None else matrix
    size = len(values)
    return pd.DataFrame(
        [[values[i][j] if j <= i else math.nan for j in range(size)] for i in range(size)],
        index=[f"M{i + 1}" for i in range(size)],
        columns=[f"M{j}" for j in range(size)],
    )


def log_evaluation_summary(results: EvaluationResults, evaluation_path: Path | None = None) -> None:
    """
    Log a concise, human-readable evaluation summary.

    Args:
        results: Results of one evaluation
        evaluation_path: Path to the serialized results (optional)
    """
    sig = results.significance
    logger.info("=== Evaluation Summary ===")
    for i, model in enumerate(results.sample_data.model_metadata):
        marker = " (baseline)" if model in results.sample_data.baseline_models else ""
        logger.info("M%d: %s%s", i, model.label, marker)
    logger.info("Significance levels: *** p<=%s, ** p<=%s, * p<=%s", sig.high, sig.medium, sig.low)

    for measure, evaluation in results.measures.items():
        logger.info("--- %s ---", measure)
        logger.info("Parametric: %s", format_outcome(evaluation.parametric, sig))
        logger.info("Non-parametric: %s", format_outcome(evaluation.non_parametric, sig))

        for label, post_hoc, ordering in (
            ("Parametric post-hoc", evaluation.post_hoc_parametric, evaluation.ordering_parametric),
            ("Non-parametric post-hoc", evaluation.post_hoc_non_parametric, evaluation.ordering_non_parametric),
        ):
            if post_hoc is None:
                continue
            name = PRETTY_TEST_NAMES.get(post_hoc.method, post_hoc.method)
            if not post_hoc.succeeded or not isinstance(post_hoc.result, PairwiseTestResult):
                logger.info("%s (%s): failed (%s)", label, name, post_hoc.error)
                continue
            logger.debug("%s p-values (%s):\n%s", label, name, p_value_frame(post_hoc.result))
            for method, matrix in post_hoc.result.corrections.items():
                logger.debug(
                    "%s p-values, %s-corrected:\n%s",
                    label,
                    PRETTY_CORRECTION_NAMES[method],
                    p_value_frame(post_hoc.result, matrix),
                )
            logger.info("%s (%s) ordering: %s", label, name, format_ordering(ordering))

    if evaluation_path is not None:
        logger.info("Saved evaluation results to %s", evaluation_path)


def evaluate_groups(evaluator: Evaluator, groups: list[SampleData], run_dir: Path) -> list[Path]:
    """
    Evaluate every split group and write one evaluation file per group.

    A group with fewer than two models is logged and skipped; the remaining groups are
    still evaluated. Returns the paths of the files written.
    """
    written: list[Path] = []
    for index, group in enumerate(groups):
        set_log_context(group=index)
        try:
            results = evaluator.evaluate(group)
        except InsufficientModelsError as e:
            logger.warning("Skipping group %02d: %s", index, e)
            continue

        evaluation_path = serialize_evaluation_results(results, run_dir / EVALUATION_FILENAME.format(index=index))
        log_evaluation_summary(results, evaluation_path)
        written.append(evaluation_path)

    if not written:
        logger.error("None of the %d groups could be evaluated.", len(groups))
    return written
