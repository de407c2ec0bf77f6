"""Working-tree walk that collects untracked, non-ignored files."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from ..cancel import CancelToken, check_canceled
from ..errors import PathTooLongError
from ..ignore import IgnoreStack
from ..index import GITLINK, IndexEntry

logger = logging.getLogger(__name__)

GIT_DIR_NAME = ".git"


def _is_ignored(ignores: IgnoreStack | None, path_rel: str, is_directory: bool) -> bool:
    if ignores is None:
        return False
    try:
        return ignores.is_ignored(path_rel, is_directory)
    except PathTooLongError:
        logger.debug("Path too long for ignore matching, keeping it. path=%s", path_rel)
        return False


def collect_untracked_paths(
    repo_root: str | os.PathLike[str],
    tracked: Mapping[str, IndexEntry],
    *,
    respect_gitignore: bool = True,
    cancel: CancelToken | None = None,
) -> list[str]:
    """Walk ``repo_root`` depth-first and return untracked file paths.

    Paths are relative and ``/``-separated. Anything named ``.git`` is skipped,
    as are tracked files and submodule gitlink directories. A directory that
    replaced a tracked file is still walked. Ignore rules only apply to
    untracked paths; an ignored directory drops its whole subtree. Unreadable
    directories are skipped.
    """
    root = os.fspath(repo_root)
    ignores = IgnoreStack(root) if respect_gitignore else None
    untracked: list[str] = []
    pending = [""]

    while pending:
        check_canceled(cancel)
        directory_rel = pending.pop()
        directory_abs = os.path.join(root, *directory_rel.split("/")) if directory_rel else root
        if ignores is not None:
            ignores.load(directory_rel)

        try:
            with os.scandir(directory_abs) as entries:
                children = sorted(entries, key=lambda entry: entry.name)
        except OSError as exc:
            logger.debug("Skipping unreadable directory. path=%s error=%s", directory_abs, exc)
            continue

        subdirectories: list[str] = []
        for child in children:
            check_canceled(cancel)
            if child.name == GIT_DIR_NAME:
                continue

            child_rel = f"{directory_rel}/{child.name}" if directory_rel else child.name
            try:
                is_dir = child.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            entry = tracked.get(child_rel)
            if entry is not None and (not is_dir or entry.object_type == GITLINK):
                continue
            if _is_ignored(ignores, child_rel, is_dir):
                continue
            if is_dir:
                subdirectories.append(child_rel)
            else:
                untracked.append(child_rel)

        pending.extend(reversed(subdirectories))

    return untracked


__all__ = ["GIT_DIR_NAME", "collect_untracked_paths"]
