"""Application-level constants."""

from domain.schemas import CorrectionMethod

# Synthetic measure under which the contingency test is recorded
CONTINGENCY_MEASURE = "Contingency Table"

# Human-readable names for reports
PRETTY_TEST_NAMES: dict[str, str] = {
    "McNemar": "McNemar test",
    "DependentT": "dependent t-test",
    "WilcoxonSignedRank": "Wilcoxon signed-rank test",
    "RepeatedMeasuresOneWayANOVA": "repeated-measures one-way ANOVA",
    "Friedman": "Friedman test",
    "PairwiseDependentT": "pairwise dependent t-test",
    "Tukey": "Tukey's test",
    "Nemenyi": "Nemenyi test",
    "Dunett": "Dunett's test",
    "PairwiseWilcoxonSignedRank": "pairwise Wilcoxon signed-rank test",
    "Shapiro-Wilk": "Shapiro-Wilk test",
}

PRETTY_CORRECTION_NAMES: dict[CorrectionMethod, str] = {
    CorrectionMethod.BONFERRONI: "Bonferroni",
    CorrectionMethod.HOLM: "Holm",
    CorrectionMethod.HOCHBERG: "Hochberg",
    CorrectionMethod.HOMMEL: "Hommel",
    CorrectionMethod.BH: "Benjamini-Hochberg",
    CorrectionMethod.BY: "Benjamini-Yekutieli",
}

# Output filenames
EVALUATION_FILENAME = "evaluation_{index:02d}.json"
CONFIG_SNAPSHOT_FILENAME = "config.resolved.json"
DATA_FINGERPRINT_FILENAME = "data_fingerprint.json"
LOG_FILENAME = "run.log"
