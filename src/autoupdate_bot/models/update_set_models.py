"""Update set, trial result and loop summary models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from autoupdate_bot.models.dependency_models import (
    DependencyFile,
    RequirementUpdate,
    VersionUpdate,
)


class UpdateSetState(str, Enum):
    """Classification of a single update set trial."""

    INVALID = "invalid"
    TEST_PASSED = "test_passed"
    TEST_FAILED = "test_failed"


class LoopStatus(str, Enum):
    """Graceful terminal states of the trial loop."""

    DONE = "done"
    TIMED_OUT = "timed_out"


class UpdateSet(BaseModel):
    """Candidate bundle of dependency changes computed by the remote service.

    An id of 0 means the service has no more candidates for this revision.
    """

    model_config = ConfigDict(frozen=True)

    id: int = 0
    requirement_updates: dict[str, list[RequirementUpdate]] = Field(default_factory=dict)
    version_updates: dict[str, list[VersionUpdate]] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def _null_id(cls, value):
        return 0 if value is None else value

    @field_validator("requirement_updates", "version_updates", mode="before")
    @classmethod
    def _null_updates(cls, value):
        # The service sends null for an ecosystem map or list with no entries
        if value is None:
            return {}
        if isinstance(value, dict):
            return {key: [] if updates is None else updates for key, updates in value.items()}
        return value

    @property
    def is_empty(self) -> bool:
        return self.id == 0


class UpdateSetResult(BaseModel):
    model_config = ConfigDict(frozen=False)

    # Addressing fields, part of the request URL rather than the body
    update_set_id: int = Field(exclude=True)
    project_slug: str = Field(exclude=True)

    state: UpdateSetState
    dependency_files: list[DependencyFile] = Field(default_factory=list)

    @field_validator("dependency_files", mode="before")
    @classmethod
    def _null_files(cls, value):
        return [] if value is None else value


class TestRunResult(BaseModel):
    __test__ = False

    model_config = ConfigDict(frozen=False)

    command: list[str]
    exit_code: int
    stdout: str
    stderr: str
    duration_seconds: float | None = None
    launch_error: str | None = None  # Set when the command could not be started

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and self.launch_error is None

    @property
    def output(self) -> str:
        parts = [self.stdout, self.stderr]
        if self.launch_error:
            parts.append(self.launch_error)
        return "\n".join(part for part in parts if part)


class LoopSummary(BaseModel):
    model_config = ConfigDict(frozen=False)

    status: LoopStatus
    results: list[UpdateSetResult] = Field(default_factory=list)
    elapsed_seconds: float = 0.0
    finished_at: datetime = Field(default_factory=datetime.now)

    def count(self, state: UpdateSetState) -> int:
        return sum(1 for result in self.results if result.state == state)
