"""Selection of which configured tests apply to an evaluation."""

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from domain.schemas import TestClass


class TestSelection(BaseModel):
    """Test identifiers chosen for one evaluation; post-hoc slots are None for two models."""

    __test__ = False
    model_config = ConfigDict(frozen=True)

    omnibus_parametric: str
    omnibus_non_parametric: str
    post_hoc_parametric: str | None = None
    post_hoc_non_parametric: str | None = None
    contingency: str | None = None

    @property
    def has_post_hoc(self) -> bool:
        return self.post_hoc_parametric is not None or self.post_hoc_non_parametric is not None


def select_tests(
    model_count: int,
    is_baseline_evaluation: bool,
    tests: Mapping[TestClass, str],
) -> TestSelection:
    """
    Pick test identifiers for a given model count.

    - 2 models: two-sample omnibus tests only (plus the contingency test, when configured).
    - >2 models: multi-sample omnibus tests plus post-hoc tests; baseline evaluations use the
      vs.-control post-hoc tests, all others the full pairwise ones.

    Both the parametric and the non-parametric branch are always selected.

    Raises:
        ValueError: If fewer than two models are given.
    """
    if model_count < 2:
        raise ValueError(f"At least two models are needed to select tests, got {model_count}")

    if model_count == 2:
        return TestSelection(
            omnibus_parametric=tests[TestClass.TWO_SAMPLES_PARAMETRIC],
            omnibus_non_parametric=tests[TestClass.TWO_SAMPLES_NON_PARAMETRIC],
            contingency=tests.get(TestClass.TWO_SAMPLES_NON_PARAMETRIC_CONTINGENCY),
        )

    if is_baseline_evaluation:
        post_hoc_parametric = tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC_BASELINE]
        post_hoc_non_parametric = tests[TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC_BASELINE]
    else:
        post_hoc_parametric = tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC_POSTHOC]
        post_hoc_non_parametric = tests[TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC_POSTHOC]

    return TestSelection(
        omnibus_parametric=tests[TestClass.MULTIPLE_SAMPLES_PARAMETRIC],
        omnibus_non_parametric=tests[TestClass.MULTIPLE_SAMPLES_NON_PARAMETRIC],
        post_hoc_parametric=post_hoc_parametric,
        post_hoc_non_parametric=post_hoc_non_parametric,
    )
