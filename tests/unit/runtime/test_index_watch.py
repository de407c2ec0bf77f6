from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from gitglance.runtime import IndexWatcher, build_index_watch_signature


class _RecordingScheduler:
    def __init__(self) -> None:
        self.calls: list[tuple[str, bool]] = []

    def submit(self, path: str, *, force: bool = False) -> None:
        self.calls.append((path, force))


class _Clock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class BuildIndexWatchSignatureTests(unittest.TestCase):
    def test_signature_changes_when_index_is_replaced(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".git").mkdir()
            missing = build_index_watch_signature(root)

            (root / ".git" / "index").write_bytes(b"DIRC")
            first = build_index_watch_signature(root)
            self.assertNotEqual(missing, first)
            self.assertEqual(first, build_index_watch_signature(root))

            lock = root / ".git" / "index.lock"
            lock.write_bytes(b"DIRC-updated")
            os.replace(lock, root / ".git" / "index")
            self.assertNotEqual(first, build_index_watch_signature(root))


class IndexWatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        (self.root / ".git").mkdir()
        (self.root / ".git" / "index").write_bytes(b"v1")
        self.scheduler = _RecordingScheduler()
        self.clock = _Clock()
        self.watcher = IndexWatcher(self.scheduler, poll_seconds=1.0, monotonic=self.clock)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_no_repository_means_no_refresh(self) -> None:
        self.assertFalse(self.watcher.maybe_refresh())
        self.assertEqual(self.scheduler.calls, [])

    def test_first_poll_records_baseline(self) -> None:
        self.watcher.watch(str(self.root))
        self.assertEqual(self.watcher.repo_root, str(self.root))
        self.assertFalse(self.watcher.maybe_refresh())
        self.assertEqual(self.scheduler.calls, [])

    def test_index_change_forces_resubmission_after_poll_interval(self) -> None:
        self.watcher.watch(str(self.root))
        self.watcher.maybe_refresh()

        (self.root / ".git" / "index").write_bytes(b"version two")
        self.clock.now += 0.5
        self.assertFalse(self.watcher.maybe_refresh())

        self.clock.now += 0.6
        self.assertTrue(self.watcher.maybe_refresh())
        self.assertEqual(self.scheduler.calls, [(str(self.root), True)])

        self.clock.now += 2.0
        self.assertFalse(self.watcher.maybe_refresh())
        self.assertEqual(len(self.scheduler.calls), 1)

    def test_switching_repository_resets_baseline(self) -> None:
        other = self.root / "other"
        (other / ".git").mkdir(parents=True)
        self.watcher.watch(str(self.root))
        self.watcher.maybe_refresh()

        self.watcher.watch(str(other))
        (other / ".git" / "index").write_bytes(b"fresh")
        self.assertFalse(self.watcher.maybe_refresh())
        self.assertEqual(self.scheduler.calls, [])


if __name__ == "__main__":
    unittest.main()
