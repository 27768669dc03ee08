"""Loop controller: repeats trials until done or out of budget."""

import time
from typing import Callable

from autoupdate_bot.api.base import UpdateSetClient
from autoupdate_bot.config import DEFAULT_MAX_DURATION
from autoupdate_bot.ecosystems.registry import EcosystemRegistry
from autoupdate_bot.execution.exceptions import BaselineTestFailureError
from autoupdate_bot.execution.file_restorer import FileRestorer
from autoupdate_bot.execution.test_suite import TestSuiteExecutor
from autoupdate_bot.models import LoopStatus, LoopSummary
from autoupdate_bot.orchestrator.graph import build_trial_graph
from autoupdate_bot.orchestrator.state import make_initial_state


class LoopController:
    """Runs the update-set trial loop for one project branch and revision.

    The budget is checked only before fetching the next candidate; a test run
    already in flight always completes, so the loop can overrun the budget by
    up to one trial.
    """

    def __init__(
        self,
        client: UpdateSetClient,
        registry: EcosystemRegistry,
        executor: TestSuiteExecutor,
        restorer: FileRestorer,
        project_slug: str,
        branch: str,
        revision: str,
        max_duration: float = DEFAULT_MAX_DURATION,
        check_baseline: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.executor = executor
        self.project_slug = project_slug
        self.branch = branch
        self.revision = revision
        self.max_duration = max_duration
        self.check_baseline = check_baseline
        self._clock = clock
        self._graph = build_trial_graph(client, registry, executor, restorer)

    def run(self) -> LoopSummary:
        """Trial update sets until the server is out of candidates or time is up.

        Returns:
            LoopSummary with status DONE or TIMED_OUT and every pushed result.

        Raises:
            BaselineTestFailureError: If check_baseline is set and the suite
                fails on the untouched tree.
            Any error other than candidate-level apply/test failures aborts
            the loop and propagates unchanged.
        """
        if self.check_baseline:
            self._run_baseline()

        start = self._clock()
        results = []
        while True:
            elapsed = self._clock() - start
            if elapsed > self.max_duration:
                print("Max loop duration reached, aborting.")
                return LoopSummary(
                    status=LoopStatus.TIMED_OUT,
                    results=results,
                    elapsed_seconds=elapsed,
                )

            final_state = self._graph.invoke(
                make_initial_state(self.project_slug, self.branch, self.revision)
            )
            if final_state["done"]:
                return LoopSummary(
                    status=LoopStatus.DONE,
                    results=results,
                    elapsed_seconds=self._clock() - start,
                )
            results.append(final_state["result"])

    def _run_baseline(self) -> None:
        test_run = self.executor.run()
        if not test_run.succeeded:
            print("Aborting, initial test suite run is failing:")
            print(test_run.output)
            raise BaselineTestFailureError(
                f"Initial test suite run is failing (exit code {test_run.exit_code})"
            )
