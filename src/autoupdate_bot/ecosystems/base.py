from __future__ import annotations

import posixpath
from abc import ABC, abstractmethod
from pathlib import Path

from ..models.dependency_models import DependencyFile, RequirementUpdate, VersionUpdate
from ..utils.patching import apply_patch_with_git
from .exceptions import CantInstallRequirementsError


class Ecosystem(ABC):
    """Apply capabilities for one package manager.

    Both operations mutate the working tree in place and append snapshots to
    the caller-owned ``original_files`` / ``updated_files`` lists, so several
    ecosystems of one update set accumulate into the same pair of lists.
    """

    name: str = ""

    def __init__(self, repo_path: str | Path = ".") -> None:
        self.repo_path = Path(repo_path)

    def install_requirements(
        self,
        updates: list[RequirementUpdate],
        original_files: list[DependencyFile],
        updated_files: list[DependencyFile],
    ) -> None:
        """Apply requirement patches in the order supplied.

        Raises:
            CantInstallRequirementsError: If a manifest is missing or git
                rejects its patch.
        """
        for update in updates:
            relative_path = posixpath.normpath(update.file.path)
            target = self.resolve(relative_path)
            if not target.is_file():
                raise CantInstallRequirementsError(
                    f"{self.name}: dependency file not found: {relative_path}"
                )

            before = target.read_bytes()
            try:
                after, error = apply_patch_with_git(relative_path, before, update.patch)
            except ValueError as exc:
                raise CantInstallRequirementsError(str(exc)) from exc
            if after is None:
                raise CantInstallRequirementsError(
                    f"{self.name}: patch does not apply to {relative_path}: {error}"
                )

            self.record(relative_path, before, after, original_files, updated_files)
            target.write_bytes(after)

    @abstractmethod
    def update_versions(
        self,
        updates: list[VersionUpdate],
        original_files: list[DependencyFile],
        updated_files: list[DependencyFile],
    ) -> None:
        """Rewrite version pins in the order supplied.

        Raises:
            CantUpdateVersionsError: If a pin cannot be found or rewritten.
        """

    def resolve(self, relative_path: str) -> Path:
        return self.repo_path / relative_path

    @staticmethod
    def record(
        relative_path: str,
        before: bytes,
        after: bytes,
        original_files: list[DependencyFile],
        updated_files: list[DependencyFile],
    ) -> None:
        """Append a before/after snapshot pair, one entry per path.

        The first capture of a path stays its original; later captures only
        replace the updated snapshot. Paths are compared normalized, so
        ``./requirements.txt`` and ``requirements.txt`` are one file. Callers
        record before writing so a failed write can still be restored.
        """
        relative_path = posixpath.normpath(relative_path)
        if not any(f.path == relative_path for f in original_files):
            original_files.append(DependencyFile(path=relative_path, content=before))

        snapshot = DependencyFile(path=relative_path, content=after)
        for idx, existing in enumerate(updated_files):
            if existing.path == relative_path:
                updated_files[idx] = snapshot
                return
        updated_files.append(snapshot)
