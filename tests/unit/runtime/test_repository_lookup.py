from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from gitglance.runtime import find_owning_repository, is_within


class FindOwningRepositoryTests(unittest.TestCase):
    def test_finds_nearest_git_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "repo"
            (root / ".git").mkdir(parents=True)
            (root / "src" / "pkg").mkdir(parents=True)
            inner = root / "src" / "inner"
            (inner / ".git").mkdir(parents=True)

            self.assertEqual(find_owning_repository(root), str(root))
            self.assertEqual(find_owning_repository(root / "src" / "pkg"), str(root))
            self.assertEqual(find_owning_repository(root / "src" / "pkg" / "missing.py"), str(root))
            self.assertEqual(find_owning_repository(inner / "x"), str(inner))

    def test_git_file_does_not_count_as_repository(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "repo"
            (root / ".git").mkdir(parents=True)
            worktree = root / "wt"
            worktree.mkdir()
            (worktree / ".git").write_text("gitdir: elsewhere\n", encoding="utf-8")

            self.assertEqual(find_owning_repository(worktree), str(root))

    def test_path_is_normalized(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "repo"
            (root / ".git").mkdir(parents=True)
            dotted = os.path.join(str(root), "a", "..", ".")
            self.assertEqual(find_owning_repository(dotted), str(root))


    def test_name_with_nul_byte_is_skipped_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp) / "repo"
            (root / ".git").mkdir(parents=True)
            self.assertEqual(find_owning_repository(os.path.join(str(root), "bad\0name")), str(root))

class IsWithinTests(unittest.TestCase):
    def test_prefix_must_end_at_separator(self) -> None:
        root = os.path.join(os.sep, "repo")
        self.assertTrue(is_within(root, root))
        self.assertTrue(is_within(os.path.join(root, "a"), root))
        self.assertFalse(is_within(root + "2", root))
        self.assertTrue(is_within(os.path.join(os.sep, "x"), os.sep))


if __name__ == "__main__":
    unittest.main()
