"""Models for dependency files and the updates applied to them."""

import base64

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator


class DependencyFile(BaseModel):
    """Snapshot of a dependency manifest: its path and raw content.

    Used both for the original content captured before an update set is
    applied and for the updated content reported back afterwards.
    """

    model_config = ConfigDict(frozen=True)

    path: str  # Relative path from repo root
    content: bytes = b""

    @field_validator("content", mode="before")
    @classmethod
    def _decode_content(cls, value):
        # The API transmits content base64-encoded
        if isinstance(value, str):
            return base64.b64decode(value)
        return value

    @field_serializer("content", when_used="json")
    def _encode_content(self, value: bytes) -> str:
        return base64.b64encode(value).decode("ascii")


class Package(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    slug: str = ""
    type: str = ""  # Ecosystem identifier, e.g. "pypi", "npm"


class RequirementUpdate(BaseModel):
    """A textual patch to apply to one dependency manifest."""

    model_config = ConfigDict(frozen=True)

    file: DependencyFile
    patch: str


class VersionUpdate(BaseModel):
    """A request to bump one package's pinned version."""

    model_config = ConfigDict(frozen=True)

    package: Package
    old_version: str
    target_version: str
