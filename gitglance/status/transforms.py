"""Pure post-processing of status result maps.

None of these mutate their input; each returns a new dict.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from .types import ChangeKind, ChangedFile


def _ancestors(path: str):
    parent = path
    while os.sep in parent:
        next_parent = os.path.dirname(parent)
        if not next_parent or next_parent == parent:
            return
        parent = next_parent
        yield parent


def include_ancestor_directories(changed_files: Mapping[str, ChangedFile]) -> dict[str, ChangedFile]:
    """Add every ancestor directory of every path, carrying that path's status.

    Lets a tree view mark folders that contain changes. Existing keys keep
    their own value.
    """
    result = dict(changed_files)
    for path in sorted(changed_files):
        value = changed_files[path]
        for parent in _ancestors(path):
            result.setdefault(parent, value)
    return result


def exclude_directory_entries(changed_files: Mapping[str, ChangedFile]) -> dict[str, ChangedFile]:
    """Drop any path that is an ancestor of another path in the map.

    Approximately undoes ``include_ancestor_directories``; leaf paths survive
    unchanged.
    """
    result = dict(changed_files)
    for path in changed_files:
        for parent in _ancestors(path):
            result.pop(parent, None)
    return result


def exclude_deleted(changed_files: Mapping[str, ChangedFile]) -> dict[str, ChangedFile]:
    """Drop entries flagged ``DELETED``."""
    return {
        path: value
        for path, value in changed_files.items()
        if not value.change_kind & ChangeKind.DELETED
    }


__all__ = ["exclude_deleted", "exclude_directory_entries", "include_ancestor_directories"]
