"""Status result datatypes: change-kind flags and per-path records."""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntFlag
from types import MappingProxyType


class ChangeKind(IntFlag):
    """What differs between a tracked path and its index entry.

    Values mirror git's stat-change bits so flags can be combined freely.
    """

    MTIME_CHANGED = 0x0001  # reserved; mtime alone never marks a change
    CTIME_CHANGED = 0x0002
    OWNER_CHANGED = 0x0004
    MODE_CHANGED = 0x0008
    INODE_CHANGED = 0x0010
    DATA_CHANGED = 0x0020
    TYPE_CHANGED = 0x0040
    DELETED = 0x0080


UNCHANGED = ChangeKind(0)


def change_kind_to_string(kind: ChangeKind) -> str:
    """Return set flag names joined by commas, lowest bit first."""
    return ",".join(flag.name for flag in ChangeKind if flag.name and kind & flag)


def change_kind_from_string(text: str) -> ChangeKind:
    """Parse a comma-separated flag list; unknown names are ignored."""
    kind = UNCHANGED
    for name in text.split(","):
        member = ChangeKind.__members__.get(name.strip())
        if member is not None:
            kind |= member
    return kind


@dataclass(frozen=True)
class ChangedFile:
    """Status of one path that differs from the index or is untracked."""

    change_kind: ChangeKind = UNCHANGED
    untracked: bool = False

    @property
    def deleted(self) -> bool:
        return bool(self.change_kind & ChangeKind.DELETED)


@dataclass(frozen=True)
class RepositorySnapshot:
    """Completed status result for one repository root."""

    changed_files: Mapping[str, ChangedFile]
    last_computed: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not isinstance(self.changed_files, MappingProxyType):
            object.__setattr__(self, "changed_files", MappingProxyType(dict(self.changed_files)))


__all__ = [
    "UNCHANGED",
    "ChangeKind",
    "ChangedFile",
    "RepositorySnapshot",
    "change_kind_from_string",
    "change_kind_to_string",
]
