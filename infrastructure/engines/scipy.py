"""Statistics engine backed by scipy, statsmodels and scikit-posthocs."""

import logging
import math
from collections.abc import Sequence

import numpy as np
import pandas as pd
import scikit_posthocs as sp
from scipy import stats
from statsmodels.stats.anova import AnovaRM
from statsmodels.stats.contingency_tables import mcnemar
from statsmodels.stats.multitest import multipletests

from domain.schemas import CorrectionMethod, PairwiseTestResult, PValueMatrix, TestResult
from infrastructure.config.models import Engine

from .base import CallShape, StatisticsEngine, implements

logger = logging.getLogger(__name__)

# CorrectionMethod -> statsmodels multipletests method
MULTIPLETESTS_METHOD: dict[CorrectionMethod, str] = {
    CorrectionMethod.BONFERRONI: "bonferroni",
    CorrectionMethod.HOLM: "holm",
    CorrectionMethod.HOCHBERG: "simes-hochberg",
    CorrectionMethod.HOMMEL: "hommel",
    CorrectionMethod.BH: "fdr_bh",
    CorrectionMethod.BY: "fdr_by",
}

# Exact McNemar below this many discordant pairs
MCNEMAR_EXACT_BELOW = 25


def _nan_matrix(size: int) -> list[list[float]]:
    return [[math.nan] * size for _ in range(size)]


def _as_matrix(samples: Sequence[Sequence[float]]) -> np.ndarray:
    matrix = np.asarray(samples, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] < 3:
        raise ValueError(f"Expected a model-major matrix with at least 3 models, got shape {matrix.shape}")
    return matrix


def _normality(samples: Sequence[float]) -> TestResult:
    statistic, p_value = stats.shapiro(np.asarray(samples, dtype=float))
    return TestResult(method="Shapiro-Wilk", p_value=float(p_value), statistic=float(statistic))


def _normality_per_model(matrix: np.ndarray) -> dict[str, TestResult]:
    return {f"normality_M{i}": _normality(row) for i, row in enumerate(matrix)}


class ScipyEngine(StatisticsEngine):
    """In-process engine; the session is stateless, the lock still serialises calls."""

    engine = Engine.SCIPY

    # ---- Two samples ----

    @implements("DependentT", CallShape.TWO_SAMPLE)
    def dependent_t(self, x: Sequence[float], y: Sequence[float]) -> TestResult:
        res = stats.ttest_rel(x, y)
        diff = np.asarray(x, dtype=float) - np.asarray(y, dtype=float)
        return TestResult(
            method="DependentT",
            parameters={"df": float(len(diff) - 1)},
            p_value=float(res.pvalue),
            statistic=float(res.statistic),
            assumptions={"normality_of_differences": _normality(diff)},
        )

    @implements("WilcoxonSignedRank", CallShape.TWO_SAMPLE)
    def wilcoxon_signed_rank(self, x: Sequence[float], y: Sequence[float]) -> TestResult:
        res = stats.wilcoxon(x, y)
        return TestResult(method="WilcoxonSignedRank", p_value=float(res.pvalue), statistic=float(res.statistic))

    @implements("McNemar", CallShape.CONTINGENCY)
    def mcnemar(self, table: Sequence[Sequence[int]]) -> TestResult:
        counts = np.asarray(table, dtype=int)
        exact = int(counts[0, 1] + counts[1, 0]) < MCNEMAR_EXACT_BELOW
        res = mcnemar(counts, exact=exact, correction=True)
        return TestResult(
            method="McNemar",
            parameters={"exact": float(exact)},
            p_value=float(res.pvalue),
            statistic=float(res.statistic),
        )

    # ---- Multiple samples (omnibus) ----

    @implements("RepeatedMeasuresOneWayANOVA", CallShape.MULTI_SAMPLE)
    def repeated_measures_anova(self, samples: Sequence[Sequence[float]]) -> TestResult:
        matrix = _as_matrix(samples)
        n_models, n_samples = matrix.shape
        long_df = pd.DataFrame(
            {
                "sample": np.tile(np.arange(n_samples), n_models),
                "model": np.repeat(np.arange(n_models), n_samples),
                "value": matrix.ravel(),
            }
        )
        table = AnovaRM(data=long_df, depvar="value", subject="sample", within=["model"]).fit().anova_table
        return TestResult(
            method="RepeatedMeasuresOneWayANOVA",
            parameters={
                "df_num": float(table["Num DF"].iloc[0]),
                "df_den": float(table["Den DF"].iloc[0]),
            },
            p_value=float(table["Pr > F"].iloc[0]),
            statistic=float(table["F Value"].iloc[0]),
            assumptions=_normality_per_model(matrix),
        )

    @implements("Friedman", CallShape.MULTI_SAMPLE)
    def friedman(self, samples: Sequence[Sequence[float]]) -> TestResult:
        matrix = _as_matrix(samples)
        statistic, p_value = stats.friedmanchisquare(*matrix)
        return TestResult(
            method="Friedman",
            parameters={"df": float(matrix.shape[0] - 1)},
            p_value=float(p_value),
            statistic=float(statistic),
        )

    # ---- Post-hoc, all pairs ----

    @implements("PairwiseDependentT", CallShape.POST_HOC)
    def pairwise_dependent_t(self, samples: Sequence[Sequence[float]]) -> PairwiseTestResult:
        matrix = _as_matrix(samples)
        size = matrix.shape[0] - 1
        p_value, statistic = _nan_matrix(size), _nan_matrix(size)
        for i in range(size):
            for j in range(i + 1):
                res = stats.ttest_rel(matrix[i + 1], matrix[j])
                p_value[i][j] = float(res.pvalue)
                statistic[i][j] = float(res.statistic)
        return PairwiseTestResult(
            method="PairwiseDependentT",
            p_value=p_value,
            statistic=statistic,
            requires_correction=True,
        )

    @implements("Tukey", CallShape.POST_HOC)
    def tukey(self, samples: Sequence[Sequence[float]]) -> PairwiseTestResult:
        matrix = _as_matrix(samples)
        res = stats.tukey_hsd(*matrix)
        size = matrix.shape[0] - 1
        p_value, statistic = _nan_matrix(size), _nan_matrix(size)
        for i in range(size):
            for j in range(i + 1):
                p_value[i][j] = float(res.pvalue[i + 1, j])
                statistic[i][j] = float(res.statistic[i + 1, j])
        return PairwiseTestResult(method="Tukey", p_value=p_value, statistic=statistic)

    @implements("Nemenyi", CallShape.POST_HOC)
    def nemenyi(self, samples: Sequence[Sequence[float]]) -> PairwiseTestResult:
        matrix = _as_matrix(samples)
        # scikit-posthocs expects blocks (samples) as rows and groups (models) as columns
        p_frame = sp.posthoc_nemenyi_friedman(matrix.T)
        mean_ranks = stats.rankdata(matrix.T, axis=1).mean(axis=0)
        size = matrix.shape[0] - 1
        p_value, statistic = _nan_matrix(size), _nan_matrix(size)
        for i in range(size):
            for j in range(i + 1):
                p_value[i][j] = float(p_frame.iloc[i + 1, j])
                statistic[i][j] = float(mean_ranks[i + 1] - mean_ranks[j])
        return PairwiseTestResult(method="Nemenyi", p_value=p_value, statistic=statistic)

    # ---- Post-hoc, vs. baseline (model 0) ----

    @implements("Dunett", CallShape.POST_HOC)
    def dunnett(self, samples: Sequence[Sequence[float]]) -> PairwiseTestResult:
        matrix = _as_matrix(samples)
        res = stats.dunnett(*matrix[1:], control=matrix[0])
        size = matrix.shape[0] - 1
        p_value, statistic = _nan_matrix(size), _nan_matrix(size)
        for i in range(size):
            p_value[i][0] = float(res.pvalue[i])
            statistic[i][0] = float(res.statistic[i])
        return PairwiseTestResult(method="Dunett", p_value=p_value, statistic=statistic)

    @implements("PairwiseWilcoxonSignedRank", CallShape.POST_HOC)
    def pairwise_wilcoxon_signed_rank(self, samples: Sequence[Sequence[float]]) -> PairwiseTestResult:
        matrix = _as_matrix(samples)
        size = matrix.shape[0] - 1
        p_value, statistic = _nan_matrix(size), _nan_matrix(size)
        for i in range(size):
            res = stats.wilcoxon(matrix[i + 1], matrix[0])
            p_value[i][0] = float(res.pvalue)
            statistic[i][0] = float(res.statistic)
        return PairwiseTestResult(
            method="PairwiseWilcoxonSignedRank",
            p_value=p_value,
            statistic=statistic,
            requires_correction=True,
        )

    # ---- Corrections ----

    def _adjust_p(self, result: PairwiseTestResult, method: CorrectionMethod) -> PValueMatrix:
        cells = [(i, j, p) for i, j, p in result.cells() if not math.isnan(p)]
        corrected = _nan_matrix(result.size)
        if not cells:
            return corrected

        _, adjusted, _, _ = multipletests([p for _, _, p in cells], method=MULTIPLETESTS_METHOD[method])
        for (i, j, _), p in zip(cells, adjusted):
            corrected[i][j] = float(p)
        return corrected

