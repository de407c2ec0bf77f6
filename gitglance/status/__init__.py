"""Working-tree status computation against the git index.

This package contains:
- change-kind flags and result datatypes (``types``)
- git blob hashing (``hashing``)
- the untracked-file walk (``walk``)
- the index vs. working-tree diff (``diff``)
- result-map transforms for tree views (``transforms``)
"""

from __future__ import annotations

from .diff import diff, file_changed, stat_unchanged, status_for_repo, status_raw
from .hashing import blob_hash, hash_file, hash_path, hash_symlink
from .transforms import exclude_deleted, exclude_directory_entries, include_ancestor_directories
from .types import (
    UNCHANGED,
    ChangedFile,
    ChangeKind,
    RepositorySnapshot,
    change_kind_from_string,
    change_kind_to_string,
)
from .walk import collect_untracked_paths

__all__ = [
    "UNCHANGED",
    "ChangeKind",
    "ChangedFile",
    "RepositorySnapshot",
    "blob_hash",
    "change_kind_from_string",
    "change_kind_to_string",
    "collect_untracked_paths",
    "diff",
    "exclude_deleted",
    "exclude_directory_entries",
    "file_changed",
    "hash_file",
    "hash_path",
    "hash_symlink",
    "include_ancestor_directories",
    "stat_unchanged",
    "status_for_repo",
    "status_raw",
]
