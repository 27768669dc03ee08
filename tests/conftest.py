import shutil
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autoupdate_bot.models import (
    DependencyFile,
    Package,
    RequirementUpdate,
    UpdateSet,
    VersionUpdate,
)

REQUIREMENTS_TXT = b"requests==2.31.0\nfoo==1.0\nbar[extra]==0.5 ; python_version >= '3.8'\n"
PACKAGE_JSON = (
    b'{\n'
    b'  "name": "demo",\n'
    b'  "dependencies": {\n'
    b'    "left-pad": "^1.0.0",\n'
    b'    "lodash": "4.17.20"\n'
    b'  },\n'
    b'  "devDependencies": {\n'
    b'    "jest": "~29.0.0"\n'
    b'  }\n'
    b'}\n'
)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


@pytest.fixture
def repo_dir(tmp_path) -> Path:
    """Working tree with one pip and one npm manifest."""
    (tmp_path / "requirements.txt").write_bytes(REQUIREMENTS_TXT)
    (tmp_path / "package.json").write_bytes(PACKAGE_JSON)
    return tmp_path


def make_version_update(
    name: str = "foo",
    old_version: str = "1.0",
    target_version: str = "1.1",
    ecosystem: str = "pypi",
) -> VersionUpdate:
    return VersionUpdate(
        package=Package(name=name, type=ecosystem),
        old_version=old_version,
        target_version=target_version,
    )


def make_requirement_update(path: str, patch: str) -> RequirementUpdate:
    return RequirementUpdate(file=DependencyFile(path=path, content=b""), patch=patch)


def make_update_set(
    update_set_id: int = 1,
    version_updates: dict | None = None,
    requirement_updates: dict | None = None,
) -> UpdateSet:
    return UpdateSet(
        id=update_set_id,
        version_updates=version_updates or {},
        requirement_updates=requirement_updates or {},
    )


@pytest.fixture
def mock_client():
    """Update-set client that hands out one pypi candidate, then stops."""
    client = MagicMock()
    client.fetch_next_update_set.side_effect = [
        make_update_set(1, version_updates={"pypi": [make_version_update()]}),
        UpdateSet(id=0),
    ]
    return client
