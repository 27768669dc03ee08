from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..models.update_set_models import UpdateSet, UpdateSetResult


@runtime_checkable
class UpdateSetClient(Protocol):
    """Remote side of the trial loop: hands out candidates, collects results."""

    def fetch_next_update_set(
        self, project_slug: str, branch: str, revision: str
    ) -> UpdateSet:
        """Next candidate for the revision; an UpdateSet with id 0 when done.

        Raises ApiConflictError when the revision is unknown server-side.
        """

    def push_update_set_result(self, result: UpdateSetResult, branch: str) -> None:
        """Record the outcome of one trial."""

    def close(self) -> None:
        """Release any connection held by the client."""
