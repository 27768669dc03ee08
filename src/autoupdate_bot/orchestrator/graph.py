"""LangGraph trial graph: one update set from fetch to restore.

Wires the update-set client, ecosystem registry, test suite executor and file
restorer into a StateGraph. Candidate-level failures are folded into the
classification; everything else raises out of ``invoke`` and aborts the loop.
"""

import sys
from typing import Callable

from langgraph.graph import END, START, StateGraph

from autoupdate_bot.api.base import UpdateSetClient
from autoupdate_bot.api.exceptions import ApiConflictError
from autoupdate_bot.ecosystems.exceptions import CandidateApplyError
from autoupdate_bot.ecosystems.registry import EcosystemRegistry
from autoupdate_bot.execution.exceptions import FileRestoreError
from autoupdate_bot.execution.file_restorer import FileRestorer
from autoupdate_bot.execution.test_suite import TestSuiteExecutor
from autoupdate_bot.models import DependencyFile, UpdateSetResult, UpdateSetState
from autoupdate_bot.orchestrator.exceptions import GraphBuildError, UnknownRevisionError
from autoupdate_bot.orchestrator.routing import (
    classify_test_run,
    restore_failure_is_fatal,
    route_after_apply,
    route_after_fetch,
)
from autoupdate_bot.orchestrator.state import TrialState


def _warn(message: str) -> None:
    print(f"[LoopController] {message}", file=sys.stderr)


def make_fetch_node(client: UpdateSetClient) -> Callable[[TrialState], dict]:
    """Factory: returns a node closure that fetches the next update set.

    The closure:
    1. Calls client.fetch_next_update_set(slug, branch, revision)
    2. Returns {"update_set": ..., "done": True} for the id 0 sentinel
    3. Returns {"update_set": ...} otherwise

    Raises:
        UnknownRevisionError: If the server answers with a conflict.
    """

    def fetch_node(state: TrialState) -> dict:
        try:
            update_set = client.fetch_next_update_set(
                state["project_slug"], state["branch"], state["revision"]
            )
        except ApiConflictError as exc:
            raise UnknownRevisionError(state["revision"]) from exc

        if update_set.is_empty:
            print("Job done!")
            return {"update_set": update_set, "done": True}

        print(f"\n========= [UpdateSet #{update_set.id}] =========")
        return {"update_set": update_set}

    return fetch_node


def make_apply_node(
    registry: EcosystemRegistry,
    restorer: FileRestorer,
) -> Callable[[TrialState], dict]:
    """Factory: returns a node closure that applies the update set to the tree.

    The closure:
    1. Calls registry.apply_update_set(update_set, originals, updated)
    2. Returns {"original_files": ..., "updated_files": ...}

    On CandidateApplyError: returns the partial snapshots with state INVALID.
    On any other error: restores captured originals best-effort, then re-raises.
    """

    def apply_node(state: TrialState) -> dict:
        update_set = state["update_set"]
        original_files: list[DependencyFile] = []
        updated_files: list[DependencyFile] = []

        print("Applying update set: ", end="", flush=True)
        try:
            registry.apply_update_set(update_set, original_files, updated_files)
        except CandidateApplyError as exc:
            print("failed")
            print(f"Update set #{update_set.id} can't be applied: {exc}")
            return {
                "original_files": original_files,
                "updated_files": updated_files,
                "state": UpdateSetState.INVALID,
                "errors": [f"apply_node error for update set {update_set.id}: {exc}"],
            }
        except Exception:
            print("failed")
            if original_files:
                try:
                    restorer.restore(original_files)
                except FileRestoreError as restore_exc:
                    _warn(f"Error while restoring files: {restore_exc}")
            raise

        print("Done")
        return {
            "original_files": original_files,
            "updated_files": updated_files,
        }

    return apply_node


def make_test_node(executor: TestSuiteExecutor) -> Callable[[TrialState], dict]:
    """Factory: returns a node closure that runs the test suite and classifies.

    Returns:
        {"test_run": ..., "state": TEST_PASSED | TEST_FAILED}
    """

    def test_node(state: TrialState) -> dict:
        test_run = executor.run()
        outcome = classify_test_run(test_run)
        if outcome == UpdateSetState.TEST_FAILED:
            print(test_run.output)
        return {"test_run": test_run, "state": outcome}

    return test_node


def make_report_node(client: UpdateSetClient) -> Callable[[TrialState], dict]:
    """Factory: returns a node closure that pushes the trial result.

    The updated snapshots (possibly partial for invalid candidates) are sent
    along with the state. Push errors propagate.
    """

    def report_node(state: TrialState) -> dict:
        result = UpdateSetResult(
            update_set_id=state["update_set"].id,
            project_slug=state["project_slug"],
            state=state["state"],
            dependency_files=list(state["updated_files"]),
        )
        client.push_update_set_result(result, state["branch"])
        return {"result": result}

    return report_node


def make_restore_node(restorer: FileRestorer) -> Callable[[TrialState], dict]:
    """Factory: returns a node closure that writes the originals back.

    A failure after a passing trial raises; after an invalid or failing trial
    it is logged and recorded in errors.
    """

    def restore_node(state: TrialState) -> dict:
        try:
            restorer.restore(state["original_files"])
        except FileRestoreError as exc:
            if restore_failure_is_fatal(state["state"]):
                raise
            _warn(f"Error while restoring files: {exc}")
            return {"errors": [f"restore_node error: {exc}"]}
        return {"errors": []}

    return restore_node


def build_trial_graph(
    client: UpdateSetClient,
    registry: EcosystemRegistry,
    executor: TestSuiteExecutor,
    restorer: FileRestorer,
):
    """Build and compile the trial StateGraph.

    Edge topology:
      START -> fetch_node
      fetch_node -> conditional(route_after_fetch) -> {apply_node, END}
      apply_node -> conditional(route_after_apply) -> {test_node, report_node}
      test_node -> report_node -> restore_node -> END

    Args:
        client: Remote update-set service.
        registry: Ecosystem installers/updaters.
        executor: Test suite executor.
        restorer: File restorer for the working tree.

    Returns:
        CompiledStateGraph ready to invoke.

    Raises:
        GraphBuildError: If graph construction fails.
    """
    try:
        graph = StateGraph(TrialState)

        graph.add_node("fetch_node", make_fetch_node(client))
        graph.add_node("apply_node", make_apply_node(registry, restorer))
        graph.add_node("test_node", make_test_node(executor))
        graph.add_node("report_node", make_report_node(client))
        graph.add_node("restore_node", make_restore_node(restorer))

        graph.add_edge(START, "fetch_node")
        graph.add_conditional_edges(
            "fetch_node",
            route_after_fetch,
            {
                "apply": "apply_node",
                "done": END,
            },
        )
        graph.add_conditional_edges(
            "apply_node",
            route_after_apply,
            {
                "test": "test_node",
                "report": "report_node",
            },
        )
        graph.add_edge("test_node", "report_node")
        graph.add_edge("report_node", "restore_node")
        graph.add_edge("restore_node", END)

        return graph.compile()

    except Exception as exc:
        raise GraphBuildError(f"Failed to build trial graph: {exc}") from exc
