from domain.schemas import TestClass

# Test class -> accepted test identifiers
# Add new identifiers here once an engine implements them
ALLOWED_TESTS: dict[TestClass, frozenset[str]] = {
    TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY: frozenset({"McNemar"}),
    TestClass.TWO_SAMPLES_PARAMETRIC: frozenset({"DependentT"}),
    TestClass.TWO_SAMPLES_NON_PARAMETRIC: frozenset({"WilcoxonSignedRank"}),
    TestClass.MULTIPLE_SAMPLES_PARAMETRIC: frozenset({"RepeatedMeasuresOneWayANOVA"}),
    TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC: frozenset({"Friedman"}),
    TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC: frozenset({"PairwiseDependentT", "Tukey"}),
    TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC: frozenset({"Nemenyi"}),
    TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE: frozenset({"Dunett"}),
    TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC_BASELINE: frozenset({"PairwiseWilcoxonSignedRank"}),
}

# Test classes that may be left out of the configuration
OPTIONAL_TEST_CLASSES: frozenset[TestClass] = frozenset({TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY})
