"""Exceptions for local execution: test suite, file restore, VCS lookup."""


class ExecutionError(Exception):
    """Base exception for all local execution operations."""


class EmptyTestSuiteError(ExecutionError):
    """Raised when no test suite command is configured."""


class BaselineTestFailureError(ExecutionError):
    """Raised when the test suite fails before any update set is applied."""


class FileRestoreError(ExecutionError):
    """Raised when an original dependency file cannot be written back."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"Cannot restore {path}: {message}")
        self.path = path


class RevisionLookupError(ExecutionError):
    """Raised when the current revision or branch cannot be determined."""
