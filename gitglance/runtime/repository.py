"""Repository discovery by walking parent directories."""

from __future__ import annotations

import os
import stat

GIT_DIR_NAME = ".git"


def find_owning_repository(path: str | os.PathLike[str]) -> str:
    """Return the nearest directory at or above ``path`` holding a ``.git`` directory.

    Returns ``""`` when the walk reaches the filesystem root without finding
    one. The path is normalized lexically only; symlinks are not resolved.
    Levels that cannot be stat-ed, including names with NUL bytes, are
    skipped.
    """
    current = os.path.normpath(os.fspath(path))
    while True:
        try:
            if stat.S_ISDIR(os.lstat(os.path.join(current, GIT_DIR_NAME)).st_mode):
                return current
        except (OSError, ValueError):
            pass

        parent = os.path.dirname(current)
        if parent == current:
            return ""
        current = parent


def is_within(path: str, root: str) -> bool:
    """Return whether ``path`` equals ``root`` or lies beneath it (string-wise)."""
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


__all__ = ["find_owning_repository", "is_within"]
