"""Exceptions for orchestrator operations."""


class OrchestratorError(Exception):
    """Base exception for all orchestrator operations."""


class GraphBuildError(OrchestratorError):
    """Raised when graph construction fails."""


class UnknownRevisionError(OrchestratorError):
    """Raised when the remote service does not know the current revision."""

    def __init__(self, revision: str) -> None:
        super().__init__(
            f"The current revision ({revision}) is unknown on Gemnasium, please push "
            "your dependency files before running autoupdate. "
            "See `gemnasium df help push`."
        )
        self.revision = revision
