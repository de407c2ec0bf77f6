"""Exception taxonomy for status computation.

Runtime conditions derive from ``GitStatusError`` so callers can keep the
previous snapshot on failure. ``InvariantViolation`` marks collaborator bugs
and is not a ``GitStatusError``.
"""

from __future__ import annotations


class GitStatusError(Exception):
    """Base class for recoverable status-computation failures."""


class NotARepositoryError(GitStatusError):
    """Raised when a path has no ``.git`` directory where one is required."""


class MalformedIndexError(GitStatusError):
    """Raised for a bad header, truncated entry, or invalid name padding."""


class UnsupportedIndexVersionError(MalformedIndexError):
    """Raised when the index header names a version other than 2."""

    def __init__(self, version: int) -> None:
        super().__init__(f"unsupported index version: {version}")
        self.version = version


class PathTooLongError(GitStatusError, ValueError):
    """Raised when an ignore query exceeds the matcher's path limit."""


class Canceled(GitStatusError):
    """Raised when a computation observes its cancel token."""


class InvariantViolation(AssertionError):
    """Programmer error: a caller broke a documented precondition."""


__all__ = [
    "GitStatusError",
    "NotARepositoryError",
    "MalformedIndexError",
    "UnsupportedIndexVersionError",
    "PathTooLongError",
    "Canceled",
    "InvariantViolation",
]
