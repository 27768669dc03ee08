"""PyPI ecosystem: version pins in requirements files."""

from __future__ import annotations

import re

from ..models.dependency_models import DependencyFile, VersionUpdate
from .base import Ecosystem
from .exceptions import CantUpdateVersionsError

REQUIREMENT_PIN_RE = re.compile(
    r'^(?P<prefix>\s*)(?P<name>[A-Za-z0-9][A-Za-z0-9._-]*)'
    r'(?P<extras>\[[^\]]*\])?(?P<op>\s*==\s*)(?P<version>[^\s;#,\\]+)'
)
_NAME_SEPARATORS_RE = re.compile(r'[-_.]+')


def canonicalize_name(name: str) -> str:
    """PEP 503 normalized project name."""
    return _NAME_SEPARATORS_RE.sub("-", name).lower()


def rewrite_pin(text: str, name: str, old_version: str, target_version: str) -> str | None:
    """Return text with ``name==old_version`` rewritten, or None if absent.

    Extras, environment markers and trailing comments are preserved.
    """
    wanted = canonicalize_name(name)
    changed = False
    lines = text.splitlines(keepends=True)
    for idx, line in enumerate(lines):
        match = REQUIREMENT_PIN_RE.match(line)
        if match is None:
            continue
        if canonicalize_name(match.group("name")) != wanted:
            continue
        if match.group("version") != old_version:
            continue
        start, end = match.span("version")
        lines[idx] = line[:start] + target_version + line[end:]
        changed = True
    if not changed:
        return None
    return "".join(lines)


class PypiEcosystem(Ecosystem):
    name = "pypi"
    manifests = ("requirements.txt", "requirements-dev.txt", "dev-requirements.txt")

    def update_versions(
        self,
        updates: list[VersionUpdate],
        original_files: list[DependencyFile],
        updated_files: list[DependencyFile],
    ) -> None:
        for update in updates:
            package_name = update.package.name
            found = False
            for manifest in self.manifests:
                target = self.resolve(manifest)
                if not target.is_file():
                    continue
                before = target.read_bytes()
                try:
                    text = before.decode("utf-8")
                except UnicodeDecodeError as exc:
                    raise CantUpdateVersionsError(
                        f"pypi: {manifest} is not valid UTF-8"
                    ) from exc

                rewritten = rewrite_pin(
                    text, package_name, update.old_version, update.target_version
                )
                if rewritten is None:
                    continue
                after = rewritten.encode("utf-8")
                self.record(manifest, before, after, original_files, updated_files)
                target.write_bytes(after)
                found = True

            if not found:
                raise CantUpdateVersionsError(
                    f"pypi: no pin {package_name}=={update.old_version} "
                    f"found in {', '.join(self.manifests)}"
                )
