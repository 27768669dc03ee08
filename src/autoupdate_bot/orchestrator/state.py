"""State definition for the LangGraph trial graph."""

import operator
from typing import Annotated, TypedDict

from autoupdate_bot.models import (
    DependencyFile,
    TestRunResult,
    UpdateSet,
    UpdateSetResult,
    UpdateSetState,
)


class TrialState(TypedDict):
    """State for one fetch → apply → test → report → restore trial.

    errors uses an Annotated[list, operator.add] reducer and accumulates
    across nodes. All other fields use default overwrite semantics.
    """

    # Input
    project_slug: str
    branch: str
    revision: str

    # Fetching
    update_set: UpdateSet | None
    done: bool

    # Applying
    original_files: list[DependencyFile]
    updated_files: list[DependencyFile]

    # Testing and classification
    test_run: TestRunResult | None
    state: UpdateSetState | None

    # Reporting
    result: UpdateSetResult | None

    # Non-fatal problems (apply errors, best-effort restore failures)
    errors: Annotated[list[str], operator.add]


def make_initial_state(project_slug: str, branch: str, revision: str) -> TrialState:
    """Create the initial state for a single trial.

    Args:
        project_slug: Remote project identifier.
        branch: Branch being tested.
        revision: Commit being tested.

    Returns:
        TrialState dict with all fields initialised to defaults.
    """
    return {
        "project_slug": project_slug,
        "branch": branch,
        "revision": revision,
        "update_set": None,
        "done": False,
        "original_files": [],
        "updated_files": [],
        "test_run": None,
        "state": None,
        "result": None,
        "errors": [],
    }
