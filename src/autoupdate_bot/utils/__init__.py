"""Utilities for the autoupdate bot."""

from autoupdate_bot.utils.patching import apply_patch_with_git, normalize_patch

__all__ = [
    "apply_patch_with_git",
    "normalize_patch",
]
