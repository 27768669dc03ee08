"""Data models for the autoupdate bot."""

from autoupdate_bot.models.dependency_models import (
    DependencyFile,
    Package,
    RequirementUpdate,
    VersionUpdate,
)
from autoupdate_bot.models.update_set_models import (
    LoopStatus,
    LoopSummary,
    TestRunResult,
    UpdateSet,
    UpdateSetResult,
    UpdateSetState,
)

__all__ = [
    "DependencyFile",
    "LoopStatus",
    "LoopSummary",
    "Package",
    "RequirementUpdate",
    "TestRunResult",
    "UpdateSet",
    "UpdateSetResult",
    "UpdateSetState",
    "VersionUpdate",
]
