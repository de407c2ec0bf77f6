"""Background orchestration around status computation.

Exports repository discovery, the single-flight scheduler and the
poll-based index watcher used by interactive front ends.
"""

from __future__ import annotations

from .repository import find_owning_repository, is_within
from .scheduler import StatusRequest, StatusScheduler
from .watch import IndexWatcher, build_index_watch_signature

__all__ = [
    "IndexWatcher",
    "StatusRequest",
    "StatusScheduler",
    "build_index_watch_signature",
    "find_owning_repository",
    "is_within",
]
