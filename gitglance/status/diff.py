"""Working tree vs. index comparison.

Tracked entries are checked with a stat fast path before any hashing; the
walk contributes untracked files that no ignore rule excludes.
"""

from __future__ import annotations

import logging
import os
import stat
import sys
from collections.abc import Mapping

from ..cancel import CancelToken, check_canceled
from ..errors import GitStatusError, InvariantViolation, NotARepositoryError
from ..index import GITLINK, REGULAR_FILE, SYMBOLIC_LINK, IndexEntry, parse_index
from .hashing import SYMLINKS_SUPPORTED, hash_matches
from .types import UNCHANGED, ChangeKind, ChangedFile
from .walk import GIT_DIR_NAME, collect_untracked_paths

logger = logging.getLogger(__name__)

# Windows keeps the executable bit only in the index, and its st_ctime is
# the creation time.
FILE_MODE_SUPPORTED = sys.platform != "win32"
CTIME_SUPPORTED = sys.platform != "win32"

_NANOSECONDS = 1_000_000_000
_UINT32_MASK = 0xFFFFFFFF


def to_native_path(path_rel: str) -> str:
    return path_rel.replace("/", os.sep) if os.sep != "/" else path_rel


def _split_timestamp(timestamp_ns: int) -> tuple[int, int]:
    seconds, nanoseconds = divmod(timestamp_ns, _NANOSECONDS)
    return seconds & _UINT32_MASK, nanoseconds


def stat_unchanged(entry: IndexEntry, st: os.stat_result) -> bool:
    """Return whether recorded mtime and ctime both equal the live values.

    Each timestamp is compared against its own recorded pair: mtime with
    mtime, ctime with ctime.
    """
    if _split_timestamp(st.st_mtime_ns) != (entry.mtime_seconds, entry.mtime_nanoseconds):
        return False
    if not CTIME_SUPPORTED:
        return True
    return _split_timestamp(st.st_ctime_ns) == (entry.ctime_seconds, entry.ctime_nanoseconds)


def file_changed(
    entry: IndexEntry,
    path: str,
    st: os.stat_result,
    cancel: CancelToken | None = None,
) -> ChangeKind:
    """Classify how the live ``path`` (with ``lstat`` result ``st``) differs from ``entry``."""
    if stat_unchanged(entry, st):
        return UNCHANGED

    kind = UNCHANGED
    object_type = entry.object_type
    if object_type == REGULAR_FILE:
        if not stat.S_ISREG(st.st_mode):
            kind |= ChangeKind.TYPE_CHANGED
        if FILE_MODE_SUPPORTED and entry.is_executable != bool(st.st_mode & stat.S_IXUSR):
            kind |= ChangeKind.MODE_CHANGED
    elif object_type == SYMBOLIC_LINK:
        if SYMLINKS_SUPPORTED and not stat.S_ISLNK(st.st_mode):
            kind |= ChangeKind.TYPE_CHANGED
    elif object_type == GITLINK:
        if not stat.S_ISDIR(st.st_mode):
            kind |= ChangeKind.TYPE_CHANGED
        return kind
    else:
        raise InvariantViolation(f"unknown git index entry mode: {entry.mode:o}")

    check_canceled(cancel)
    if not hash_matches(path, st, entry.hash):
        kind |= ChangeKind.DATA_CHANGED
    return kind


def diff(
    repo_root: str | os.PathLike[str],
    index_entries: Mapping[str, IndexEntry],
    *,
    cancel: CancelToken | None = None,
    respect_gitignore: bool = True,
) -> dict[str, ChangedFile]:
    """Return changed, deleted and untracked paths relative to ``repo_root``.

    Result keys use OS-native separators. Unchanged tracked files are absent.
    """
    root = os.fspath(repo_root)
    changed: dict[str, ChangedFile] = {}

    for path_rel in collect_untracked_paths(
        root,
        index_entries,
        respect_gitignore=respect_gitignore,
        cancel=cancel,
    ):
        changed[path_rel] = ChangedFile(UNCHANGED, untracked=True)

    for path_rel, entry in index_entries.items():
        check_canceled(cancel)
        full_path = os.path.join(root, to_native_path(path_rel))
        try:
            st = os.lstat(full_path)
        except (FileNotFoundError, NotADirectoryError):
            changed[path_rel] = ChangedFile(ChangeKind.DELETED)
            continue
        except OSError as exc:
            logger.debug("Skipping unreadable tracked path. path=%s error=%s", full_path, exc)
            continue

        kind = file_changed(entry, full_path, st, cancel)
        if kind:
            changed[path_rel] = ChangedFile(kind)

    return {to_native_path(path_rel): value for path_rel, value in changed.items()}


def status_raw(
    repo_root: str | os.PathLike[str],
    index_path: str | os.PathLike[str],
    *,
    cancel: CancelToken | None = None,
    respect_gitignore: bool = True,
) -> dict[str, ChangedFile]:
    """Compute status against an explicit index file without checking for ``.git``.

    A missing index file means nothing is tracked.
    """
    root = os.fspath(repo_root)
    if not os.path.isdir(root):
        raise GitStatusError(f"path does not exist: {root}")

    try:
        index_entries = parse_index(index_path, cancel)
    except FileNotFoundError:
        index_entries = {}

    changed = diff(root, index_entries, cancel=cancel, respect_gitignore=respect_gitignore)
    logger.debug("Computed status. repo=%s tracked=%d changed=%d", root, len(index_entries), len(changed))
    return changed


def status_for_repo(
    repo_root: str | os.PathLike[str],
    *,
    cancel: CancelToken | None = None,
    respect_gitignore: bool = True,
) -> dict[str, ChangedFile]:
    """Compute status for the repository rooted at ``repo_root``."""
    root = os.fspath(repo_root)
    git_dir = os.path.join(root, GIT_DIR_NAME)
    if not os.path.isdir(git_dir):
        raise NotARepositoryError(f"not a Git repository: {root}")
    return status_raw(
        root,
        os.path.join(git_dir, "index"),
        cancel=cancel,
        respect_gitignore=respect_gitignore,
    )


__all__ = [
    "CTIME_SUPPORTED",
    "FILE_MODE_SUPPORTED",
    "diff",
    "file_changed",
    "stat_unchanged",
    "status_for_repo",
    "status_raw",
    "to_native_path",
]
