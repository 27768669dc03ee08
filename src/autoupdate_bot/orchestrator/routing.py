"""Pure helper functions for trial routing and classification.

All functions are stateless and have no external dependencies.
"""

from autoupdate_bot.models import TestRunResult, UpdateSetState
from autoupdate_bot.orchestrator.state import TrialState


def classify_test_run(test_run: TestRunResult) -> UpdateSetState:
    """Map a finished test run to its update set state.

    Args:
        test_run: Result of running the test suite on the updated tree.

    Returns:
        TEST_PASSED on a zero exit code, TEST_FAILED otherwise (including
        launch failures).
    """
    if test_run.succeeded:
        return UpdateSetState.TEST_PASSED
    return UpdateSetState.TEST_FAILED


def route_after_fetch(state: TrialState) -> str:
    """Router for the post-fetch conditional edge.

    Returns:
        "done" when the server has no more candidates, "apply" otherwise.
    """
    update_set = state["update_set"]
    if state["done"] or update_set is None or update_set.is_empty:
        return "done"
    return "apply"


def route_after_apply(state: TrialState) -> str:
    """Router for the post-apply conditional edge.

    Returns:
        "report" for candidates that could not be applied (no test run),
        "test" otherwise.
    """
    if state["state"] == UpdateSetState.INVALID:
        return "report"
    return "test"


def restore_failure_is_fatal(state: UpdateSetState | None) -> bool:
    """Whether a failed restore must abort the loop.

    A passing candidate is reported as tested, so the tree must be back in its
    original state before the loop moves on. Discarded candidates (invalid or
    failing) only log the failure.
    """
    return state == UpdateSetState.TEST_PASSED
