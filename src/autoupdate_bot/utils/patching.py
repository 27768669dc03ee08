"""Utilities for applying requirement patches with git."""

import subprocess
import tempfile
from pathlib import Path


def normalize_patch(file_path: str, patch_text: str) -> str:
    """Return a git-compatible unified diff for a single file.

    Patches sent without file headers (bare ``@@`` hunks) get
    ``a/<file_path>`` / ``b/<file_path>`` headers prepended. A trailing
    newline is always present.
    """
    patch = patch_text if patch_text.endswith("\n") else patch_text + "\n"
    if patch.startswith("--- ") or patch.startswith("diff --git "):
        return patch
    return f"--- a/{file_path}\n+++ b/{file_path}\n{patch}"


def apply_patch_with_git(
    file_path: str,
    original_content: bytes,
    patch_text: str,
) -> tuple[bytes | None, str]:
    """Apply a patch to one file's content inside a temporary git repo.

    The working tree is never touched: the original content is written to
    a scratch repository, patched there with ``git apply`` and read back.

    Args:
        file_path: Relative path of the file the patch targets.
        original_content: Content to patch.
        patch_text: Unified diff (headers optional).

    Returns:
        Tuple of (patched_content, error_message). patched_content is None
        when git rejects the patch; error_message is empty on success.

    Raises:
        ValueError: If file_path escapes the repository root.
        OSError: If git cannot be executed.
    """
    if ".." in Path(file_path).parts or Path(file_path).is_absolute():
        raise ValueError(f"Refusing to patch path outside repository: {file_path}")

    with tempfile.TemporaryDirectory() as tmpdir:
        tmp_path = Path(tmpdir)
        target = tmp_path / file_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(original_content)

        subprocess.run(
            ["git", "init", "--quiet"],
            cwd=tmpdir,
            capture_output=True,
            check=True,
        )

        result = subprocess.run(
            ["git", "apply", "--whitespace=nowarn", "-"],
            input=normalize_patch(file_path, patch_text).encode("utf-8"),
            cwd=tmpdir,
            capture_output=True,
        )
        if result.returncode != 0:
            return None, result.stderr.decode("utf-8", errors="replace").strip()

        return target.read_bytes(), ""
