"""Local side effects of a trial: test runs, file restores, VCS lookups."""

from autoupdate_bot.execution.exceptions import (
    BaselineTestFailureError,
    EmptyTestSuiteError,
    ExecutionError,
    FileRestoreError,
    RevisionLookupError,
)
from autoupdate_bot.execution.file_restorer import FileRestorer
from autoupdate_bot.execution.test_suite import TestSuiteExecutor, resolve_test_suite
from autoupdate_bot.execution.vcs import get_current_branch, get_current_revision

__all__ = [
    "BaselineTestFailureError",
    "EmptyTestSuiteError",
    "ExecutionError",
    "FileRestoreError",
    "FileRestorer",
    "RevisionLookupError",
    "TestSuiteExecutor",
    "get_current_branch",
    "get_current_revision",
    "resolve_test_suite",
]
