"""npm ecosystem: version ranges in package.json."""

from __future__ import annotations

import json
import re

from ..models.dependency_models import DependencyFile, VersionUpdate
from .base import Ecosystem
from .exceptions import CantUpdateVersionsError

DEPENDENCY_SECTIONS = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
    "peerDependencies",
)
RANGE_PREFIX_RE = re.compile(r'^(?P<prefix>[\^~]|[<>]=?|=|v)?(?P<version>.+)$')


def split_range(spec: str) -> tuple[str, str]:
    """Split "^1.2.3" into ("^", "1.2.3")."""
    match = RANGE_PREFIX_RE.match(spec.strip())
    if match is None:
        return "", spec.strip()
    return match.group("prefix") or "", match.group("version")


class NpmEcosystem(Ecosystem):
    name = "npm"
    manifest = "package.json"

    def update_versions(
        self,
        updates: list[VersionUpdate],
        original_files: list[DependencyFile],
        updated_files: list[DependencyFile],
    ) -> None:
        target = self.resolve(self.manifest)
        if not target.is_file():
            raise CantUpdateVersionsError(f"npm: {self.manifest} not found")

        for update in updates:
            before = target.read_bytes()
            try:
                text = before.decode("utf-8")
                manifest = json.loads(text)
            except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                raise CantUpdateVersionsError(
                    f"npm: {self.manifest} is malformed: {exc}"
                ) from exc
            if not isinstance(manifest, dict):
                raise CantUpdateVersionsError(f"npm: {self.manifest} is not an object")

            package_name = update.package.name
            matching: list[str] = []
            for section in DEPENDENCY_SECTIONS:
                deps = manifest.get(section)
                if not isinstance(deps, dict):
                    continue
                spec = deps.get(package_name)
                if not isinstance(spec, str) or spec in matching:
                    continue
                if split_range(spec)[1] == update.old_version:
                    matching.append(spec)
            if not matching:
                raise CantUpdateVersionsError(
                    f"npm: {package_name}@{update.old_version} not found in {self.manifest}"
                )

            for spec in matching:
                prefix, _ = split_range(spec)
                entry_re = re.compile(
                    r'("' + re.escape(package_name) + r'"\s*:\s*")' + re.escape(spec) + r'"'
                )
                text = entry_re.sub(
                    lambda m: m.group(1) + prefix + update.target_version + '"', text
                )

            after = text.encode("utf-8")
            self.record(self.manifest, before, after, original_files, updated_files)
            target.write_bytes(after)
