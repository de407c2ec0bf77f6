"""Git blob hashing for working-tree files and symlinks."""

from __future__ import annotations

import hashlib
import os
import stat
import sys

from ..filedata import open_file_data

# Windows checkouts store symlinks as plain files holding the target path.
SYMLINKS_SUPPORTED = sys.platform != "win32"


def blob_hash(data: bytes) -> bytes:
    """Return the raw SHA-1 git assigns to a blob holding ``data``."""
    digest = hashlib.sha1(b"blob %d\0" % len(data))
    digest.update(data)
    return digest.digest()


def hash_symlink(path: str | os.PathLike[str]) -> bytes:
    """Hash a symlink by its target string, never by the target's contents."""
    return blob_hash(os.fsencode(os.readlink(path)))


def hash_file(path: str | os.PathLike[str]) -> bytes:
    """Hash a regular file's contents as a git blob."""
    with open(path, "rb") as file, open_file_data(file) as data:
        digest = hashlib.sha1(b"blob %d\0" % len(data))
        digest.update(data)
        return digest.digest()


def hash_path(path: str | os.PathLike[str], st: os.stat_result) -> bytes:
    """Hash ``path`` the way git would store it, given its ``lstat`` result."""
    if SYMLINKS_SUPPORTED and stat.S_ISLNK(st.st_mode):
        return hash_symlink(path)
    return hash_file(path)


def hash_matches(path: str | os.PathLike[str], st: os.stat_result, expected: bytes) -> bool:
    """Return whether the live content still hashes to ``expected``.

    Unreadable paths count as a mismatch.
    """
    try:
        return hash_path(path, st) == expected
    except OSError:
        return False


__all__ = [
    "SYMLINKS_SUPPORTED",
    "blob_hash",
    "hash_file",
    "hash_matches",
    "hash_path",
    "hash_symlink",
]
