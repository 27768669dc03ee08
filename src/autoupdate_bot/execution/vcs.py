"""Current revision and branch lookup.

Environment variables win over git so CI systems that check out a detached
HEAD can still name the branch being tested.
"""

import os
import subprocess
from typing import Mapping

from autoupdate_bot.execution.exceptions import RevisionLookupError

REVISION_ENV_VAR = "REVISION"
BRANCH_ENV_VAR = "BRANCH"


def _git_output(args: list[str], repo_path: str) -> str:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=repo_path,
            capture_output=True,
            text=True,
        )
    except OSError:
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def get_current_revision(
    repo_path: str = ".",
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the commit being tested.

    Raises:
        RevisionLookupError: If neither REVISION nor git provide one.
    """
    env = os.environ if environ is None else environ
    revision = env.get(REVISION_ENV_VAR, "").strip() or _git_output(
        ["rev-parse", "HEAD"], repo_path
    )
    if not revision:
        raise RevisionLookupError(
            f"Can't determine current revision, please use {REVISION_ENV_VAR} env var to specify it"
        )
    return revision


def get_current_branch(
    repo_path: str = ".",
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the branch being tested.

    Raises:
        RevisionLookupError: If neither BRANCH nor git provide one, or git
            reports a detached HEAD.
    """
    env = os.environ if environ is None else environ
    branch = env.get(BRANCH_ENV_VAR, "").strip() or _git_output(
        ["rev-parse", "--abbrev-ref", "HEAD"], repo_path
    )
    if not branch or branch == "HEAD":
        raise RevisionLookupError(
            f"Can't determine current branch, please use {BRANCH_ENV_VAR} env var to specify it"
        )
    return branch
