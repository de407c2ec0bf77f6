"""Poll-based index watching.

Computes a cheap hash over the watched repository's git control files so a
UI loop can force a status refresh after ``git add`` / ``git restore``.
"""

from __future__ import annotations

import hashlib
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .repository import GIT_DIR_NAME


class _Submitter(Protocol):
    def submit(self, path: str, *, force: bool = False) -> None: ...


def _update_digest(digest, token: str) -> None:
    """Append a token plus separator byte to a hash digest."""
    digest.update(token.encode("utf-8", errors="surrogateescape"))
    digest.update(b"\0")


def _path_stat_signature(path: Path) -> tuple[str, int, int, int]:
    """Return a stable stat tuple describing ``path`` existence and metadata.

    The inode is included because git replaces the index by renaming
    ``index.lock`` over it.
    """
    try:
        st = path.stat()
    except FileNotFoundError:
        return ("missing", 0, 0, 0)
    except OSError:
        return ("error", 0, 0, 0)
    return ("ok", st.st_mtime_ns, st.st_size, st.st_ino)


def build_index_watch_signature(repo_root: str | os.PathLike[str]) -> str:
    """Build a digest over the index and HEAD files of ``repo_root``."""
    git_dir = Path(repo_root) / GIT_DIR_NAME
    digest = hashlib.blake2b(digest_size=20)
    _update_digest(digest, f"git_dir:{git_dir}")

    for label, path in (("index", git_dir / "index"), ("head", git_dir / "HEAD")):
        state, mtime_ns, size, inode = _path_stat_signature(path)
        _update_digest(digest, f"{label}:{state}:{mtime_ns}:{size}:{inode}")

    return digest.hexdigest()


class IndexWatcher:
    """Force a status refresh when the watched repository's index changes.

    ``maybe_refresh`` is meant to be called from the UI loop; it only stats
    files once every ``poll_seconds``.
    """

    def __init__(
        self,
        scheduler: _Submitter,
        *,
        poll_seconds: float = 0.5,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._scheduler = scheduler
        self._poll_seconds = poll_seconds
        self._monotonic = monotonic
        self._repo_root = ""
        self._signature: str | None = None
        self._last_poll = 0.0

    @property
    def repo_root(self) -> str:
        return self._repo_root

    def watch(self, repo_root: str) -> None:
        """Switch to ``repo_root``; the next poll records a fresh baseline."""
        if repo_root == self._repo_root:
            return
        self._repo_root = repo_root
        self._signature = None
        self._last_poll = 0.0

    def maybe_refresh(self) -> bool:
        """Resubmit the watched repository when its index changed since the last poll."""
        if not self._repo_root:
            return False
        now = self._monotonic()
        if self._signature is not None and (now - self._last_poll) < self._poll_seconds:
            return False
        self._last_poll = now

        signature = build_index_watch_signature(self._repo_root)
        if self._signature is None:
            self._signature = signature
            return False
        if signature == self._signature:
            return False

        self._signature = signature
        self._scheduler.submit(self._repo_root, force=True)
        return True


__all__ = ["IndexWatcher", "build_index_watch_signature"]
