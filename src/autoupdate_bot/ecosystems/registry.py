from __future__ import annotations

from pathlib import Path
from typing import Callable

from ..models.dependency_models import DependencyFile, RequirementUpdate, VersionUpdate
from ..models.update_set_models import UpdateSet
from .base import Ecosystem
from .exceptions import UnsupportedEcosystemError
from .npm import NpmEcosystem
from .pypi import PypiEcosystem

Installer = Callable[[list[RequirementUpdate], list[DependencyFile], list[DependencyFile]], None]
Updater = Callable[[list[VersionUpdate], list[DependencyFile], list[DependencyFile]], None]


class EcosystemRegistry:
    """Maps ecosystem identifiers to installer/updater capabilities."""

    def __init__(self, repo_path: str | Path = ".") -> None:
        self.repo_path = Path(repo_path)
        self._ecosystems: dict[str, type[Ecosystem]] = {}
        self._instances: dict[str, Ecosystem] = {}

    def register(self, name: str, ecosystem_cls: type[Ecosystem]) -> None:
        key = self._normalize_name(name)
        self._ecosystems[key] = ecosystem_cls
        self._instances.pop(key, None)

    def has_ecosystem(self, name: str) -> bool:
        return self._normalize_name(name) in self._ecosystems

    def names(self) -> list[str]:
        return sorted(self._ecosystems)

    def get(self, name: str) -> Ecosystem:
        key = self._normalize_name(name)
        if key not in self._ecosystems:
            raise UnsupportedEcosystemError(f"Unsupported ecosystem: {name}")
        if key not in self._instances:
            self._instances[key] = self._ecosystems[key](self.repo_path)
        return self._instances[key]

    def get_installer(self, name: str) -> Installer:
        return self.get(name).install_requirements

    def get_updater(self, name: str) -> Updater:
        return self.get(name).update_versions

    def apply_update_set(
        self,
        update_set: UpdateSet,
        original_files: list[DependencyFile],
        updated_files: list[DependencyFile],
    ) -> None:
        """Patch requirement files, then bump versions, ecosystem by ecosystem.

        Snapshots accumulate into the two lists as changes land, so on failure
        they describe exactly what was modified before the error.
        """
        for ecosystem, requirement_updates in update_set.requirement_updates.items():
            installer = self.get_installer(ecosystem)
            installer(requirement_updates, original_files, updated_files)

        for ecosystem, version_updates in update_set.version_updates.items():
            updater = self.get_updater(ecosystem)
            updater(version_updates, original_files, updated_files)

    @staticmethod
    def _normalize_name(value: str) -> str:
        return value.strip().lower()


def default_registry(repo_path: str | Path = ".") -> EcosystemRegistry:
    """Registry with every built-in ecosystem registered."""
    registry = EcosystemRegistry(repo_path)
    registry.register(PypiEcosystem.name, PypiEcosystem)
    registry.register(NpmEcosystem.name, NpmEcosystem)
    return registry
