from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from gitglance.ignore import IgnoreStack, compile_ignore_file


class IgnoreStackTests(unittest.TestCase):
    def test_nested_ignore_file_overrides_parent(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "sub").mkdir()
            (root / ".gitignore").write_text("*.log\n", encoding="utf-8")
            (root / "sub" / ".gitignore").write_text("!keep.log\n", encoding="utf-8")

            stack = IgnoreStack(root)
            stack.load("")
            stack.load("sub")

            self.assertTrue(stack.is_ignored("app.log", False))
            self.assertTrue(stack.is_ignored("sub/app.log", False))
            self.assertFalse(stack.is_ignored("sub/keep.log", False))
            self.assertFalse(stack.is_ignored("sub/main.c", False))

    def test_nested_patterns_are_relative_to_their_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "web").mkdir()
            (root / "web" / ".gitignore").write_text("/dist/\n", encoding="utf-8")

            stack = IgnoreStack(root)
            stack.load("")
            stack.load("web")

            self.assertTrue(stack.is_ignored("web/dist", True))
            self.assertFalse(stack.is_ignored("dist", True))
            self.assertFalse(stack.is_ignored("web/app/dist", True))

    def test_info_exclude_applies_at_root_below_gitignore(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / ".git" / "info").mkdir(parents=True)
            (root / ".git" / "info" / "exclude").write_text("*.tmp\nsecret.txt\n", encoding="utf-8")
            (root / ".gitignore").write_text("!secret.txt\n", encoding="utf-8")

            stack = IgnoreStack(root)
            self.assertIsNotNone(stack.load(""))

            self.assertTrue(stack.is_ignored("scratch.tmp", False))
            self.assertFalse(stack.is_ignored("secret.txt", False))

    def test_directory_without_rules_is_not_stored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            (root / "empty").mkdir()
            (root / "empty" / ".gitignore").write_text("# only a comment\n\n", encoding="utf-8")

            stack = IgnoreStack(root)
            self.assertIsNone(stack.load("empty"))
            self.assertNotIn("empty", stack)
            self.assertIsNone(stack.load(""))
            self.assertFalse(stack.is_ignored("empty/file", False))


class CompileIgnoreFileTests(unittest.TestCase):
    def test_reads_crlf_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / ".gitignore"
            path.write_bytes(b"*.o\r\n# c\r\n!main.o\r\n")
            ignore_set = compile_ignore_file(path)
            self.assertEqual(len(ignore_set), 2)
            self.assertTrue(ignore_set.matches_path("util.o"))
            self.assertFalse(ignore_set.matches_path("main.o"))

    def test_missing_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                compile_ignore_file(Path(tmp) / "nope")


if __name__ == "__main__":
    unittest.main()
