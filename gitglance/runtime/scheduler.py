"""Background single-flight scheduler for repository status computations.

One consumer thread admits "user is looking at this path" requests in order.
Each admitted request runs in its own worker thread; a request for a
different repository cancels the running worker and waits for it to exit
before the next one starts, so the snapshot cache only ever has one writer.

An ``InvariantViolation`` raised on either background thread is recorded and
re-raised to the caller from the next ``submit``, ``wait_until_idle`` or
``close``; the scheduler admits no further work after one.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from queue import Queue

from ..cancel import CancelToken
from ..config import EngineConfig
from ..errors import Canceled, GitStatusError, InvariantViolation
from ..status import (
    ChangedFile,
    RepositorySnapshot,
    include_ancestor_directories,
    status_for_repo,
)
from .repository import find_owning_repository, is_within

logger = logging.getLogger(__name__)

StatusFunction = Callable[..., Mapping[str, ChangedFile]]

_IDLE_POLL_SECONDS = 0.01


@dataclass(frozen=True)
class StatusRequest:
    """One submitted path plus whether it may restart identical work."""

    path: str
    force: bool = False


@dataclass(frozen=True)
class _ActiveComputation:
    """The worker currently admitted; owned and swapped by the consumer thread."""

    repo_root: str
    cancel: CancelToken
    worker: threading.Thread
    done: threading.Event


def _require_absolute(path: str, what: str) -> None:
    if not os.path.isabs(path):
        raise InvariantViolation(f"{what} must be absolute: {path!r}")


class StatusScheduler:
    """Latest-repository-wins status scheduler with a per-repository cache.

    ``redraw`` is invoked from the worker thread after each snapshot swap.
    Cache reads never wait for a running computation; they return the last
    completed snapshot.
    """

    def __init__(
        self,
        redraw: Callable[[], None] | None = None,
        *,
        config: EngineConfig | None = None,
        status_fn: StatusFunction | None = None,
    ) -> None:
        self._config = config if config is not None else EngineConfig()
        self._redraw = redraw
        self._status_fn = status_fn if status_fn is not None else self._default_status
        self._requests: Queue[StatusRequest | None] = Queue(maxsize=self._config.queue_depth)
        self._lock = threading.Lock()
        self._snapshots: dict[str, RepositorySnapshot] = {}
        self._pending_requests = 0
        self._active: _ActiveComputation | None = None
        self._consumer: threading.Thread | None = None
        self._closed = False
        self._failure: InvariantViolation | None = None

    def __enter__(self) -> StatusScheduler:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _default_status(self, repo_root: str, *, cancel: CancelToken) -> Mapping[str, ChangedFile]:
        return status_for_repo(
            repo_root,
            cancel=cancel,
            respect_gitignore=self._config.respect_gitignore,
        )

    def start(self) -> None:
        """Start the consumer thread if it is not running yet."""
        with self._lock:
            if self._closed:
                raise RuntimeError("status scheduler is closed")
            if self._consumer is not None:
                return
            self._consumer = threading.Thread(
                target=self._consume,
                name="gitglance-status-consumer",
                daemon=True,
            )
        self._consumer.start()

    def close(self) -> None:
        """Stop admitting requests, cancel the running worker and join both threads."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            consumer = self._consumer
        if consumer is None:
            return
        self._requests.put(None)
        consumer.join()
        self._raise_if_failed()

    def submit(self, path: str, *, force: bool = False) -> None:
        """Queue a request to refresh the repository owning ``path``.

        Blocks while the request queue is full. ``force`` restarts a running
        computation for the same repository instead of dropping the request.
        """
        _require_absolute(path, "submitted path")
        self._raise_if_failed()
        self.start()
        with self._lock:
            self._pending_requests += 1
        self._requests.put(StatusRequest(path=path, force=force))

    def _consume(self) -> None:
        while True:
            request = self._requests.get()
            if request is None:
                self._stop_active()
                return
            try:
                if self._failure is None:
                    self._admit(request)
            except InvariantViolation as exc:
                self._record_failure(exc)
            except Exception:
                logger.exception("Failed to admit status request. path=%r", request.path)
            finally:
                with self._lock:
                    self._pending_requests -= 1

    def _record_failure(self, exc: InvariantViolation) -> None:
        logger.error("Status scheduler stopped on a broken invariant. error=%s", exc)
        with self._lock:
            if self._failure is None:
                self._failure = exc

    def _raise_if_failed(self) -> None:
        with self._lock:
            failure = self._failure
        if failure is not None:
            raise failure

    def _canonical(self, path: str) -> str:
        return os.path.realpath(path) if self._config.canonicalize_paths else path

    def _admit(self, request: StatusRequest) -> None:
        repo_root = find_owning_repository(request.path)
        if not repo_root:
            logger.debug("Ignoring path outside any repository. path=%s", request.path)
            return
        repo_root = self._canonical(repo_root)

        active = self._active
        if (
            active is not None
            and not active.done.is_set()
            and active.repo_root == repo_root
            and not request.force
        ):
            return

        self._stop_active()
        self._evict_oldest_snapshot(keep=repo_root)

        token = CancelToken()
        done = threading.Event()
        worker = threading.Thread(
            target=self._run_worker,
            args=(repo_root, token, done),
            name="gitglance-status-worker",
            daemon=True,
        )
        self._active = _ActiveComputation(repo_root=repo_root, cancel=token, worker=worker, done=done)
        logger.debug("Starting status computation. repo=%s", repo_root)
        try:
            worker.start()
        except RuntimeError:
            self._active = None
            raise

    def _stop_active(self) -> None:
        active = self._active
        if active is None:
            return
        active.cancel.cancel()
        active.worker.join()
        self._active = None

    def _evict_oldest_snapshot(self, keep: str) -> None:
        with self._lock:
            if keep in self._snapshots or len(self._snapshots) < self._config.max_tracked_repositories:
                return
            oldest = min(self._snapshots, key=lambda root: self._snapshots[root].last_computed)
            del self._snapshots[oldest]
        logger.debug("Evicted cached repository status. repo=%s", oldest)

    def _run_worker(self, repo_root: str, token: CancelToken, done: threading.Event) -> None:
        stored = False
        try:
            stored = self._compute_and_store(repo_root, token)
        except InvariantViolation as exc:
            self._record_failure(exc)
        finally:
            done.set()
        if stored and self._redraw is not None:
            try:
                self._redraw()
            except Exception:
                logger.exception("Redraw callback failed. repo=%s", repo_root)

    def _compute_and_store(self, repo_root: str, token: CancelToken) -> bool:
        try:
            changed_files = self._status_fn(repo_root, cancel=token)
        except Canceled:
            logger.debug("Status computation canceled. repo=%s", repo_root)
            return False
        except (GitStatusError, OSError) as exc:
            logger.warning("Status computation failed, keeping previous snapshot. repo=%s error=%s", repo_root, exc)
            return False

        snapshot = RepositorySnapshot(include_ancestor_directories(changed_files))
        with self._lock:
            if token.canceled:
                return False
            self._snapshots[repo_root] = snapshot
        return True

    @property
    def pending_requests(self) -> int:
        """Submitted requests the consumer has not finished admitting."""
        with self._lock:
            return self._pending_requests

    @property
    def is_computing(self) -> bool:
        active = self._active
        return active is not None and not active.done.is_set()

    @property
    def active_repository(self) -> str:
        """Root of the computation in flight, or ``""`` when idle."""
        active = self._active
        if active is None or active.done.is_set():
            return ""
        return active.repo_root

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until every submitted request is admitted and no worker runs."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self.pending_requests == 0 and not self.is_computing:
                self._raise_if_failed()
                return True
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(_IDLE_POLL_SECONDS)

    def snapshot(self, repo_root: str) -> RepositorySnapshot | None:
        repo_root = self._canonical(repo_root)
        with self._lock:
            return self._snapshots.get(repo_root)

    def tracked_repositories(self) -> list[str]:
        with self._lock:
            return sorted(self._snapshots)

    def _tracked_repository_for_locked(self, path: str) -> str:
        matches = [root for root in self._snapshots if is_within(path, root)]
        return max(matches, key=len) if matches else ""

    def tracked_repository_for(self, path: str) -> str:
        """Return the deepest cached repository root containing ``path``, or ``""``."""
        path = self._canonical(path)
        with self._lock:
            return self._tracked_repository_for_locked(path)

    def snapshot_for(self, path: str) -> ChangedFile | None:
        """Return the cached status of ``path`` without waiting on any computation."""
        path = self._canonical(path)
        with self._lock:
            repo_root = self._tracked_repository_for_locked(path)
            if not repo_root:
                return None
            relative = os.path.relpath(path, repo_root)
            return self._snapshots[repo_root].changed_files.get(relative)

    def path_is_changed(self, path: str, repo_root: str) -> bool:
        """Return whether ``path`` is changed or untracked in the cached ``repo_root`` snapshot."""
        _require_absolute(path, "path")
        _require_absolute(repo_root, "repository root")
        path = self._canonical(path)
        repo_root = self._canonical(repo_root)
        with self._lock:
            snapshot = self._snapshots.get(repo_root)
            if snapshot is None:
                return False
            return os.path.relpath(path, repo_root) in snapshot.changed_files


__all__ = ["StatusRequest", "StatusScheduler"]
