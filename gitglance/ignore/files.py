"""Loading ``.gitignore`` files and layering them per directory."""

from __future__ import annotations

import logging
import os
import posixpath
from pathlib import Path

from .rules import IgnoreSet, compile_ignore_lines

logger = logging.getLogger(__name__)

GITIGNORE_FILENAME = ".gitignore"
INFO_EXCLUDE_PATH = Path(".git") / "info" / "exclude"


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8", errors="replace").split("\n")


def compile_ignore_file(path: str | os.PathLike[str]) -> IgnoreSet:
    """Read and compile an ignore file; ``OSError`` propagates."""
    return compile_ignore_lines(_read_lines(Path(path)))


class IgnoreStack:
    """Ignore sets keyed by directory, relative to one repository root.

    Directory keys use ``/`` separators with ``""`` for the root. Deeper
    ignore files take precedence over their parents.
    """

    def __init__(self, repo_root: str | os.PathLike[str]) -> None:
        self.repo_root = Path(repo_root)
        self._sets: dict[str, IgnoreSet] = {}

    def __contains__(self, directory_rel: str) -> bool:
        return directory_rel in self._sets

    def load(self, directory_rel: str) -> IgnoreSet | None:
        """Compile the ignore file of ``directory_rel`` if it has one.

        The root directory also picks up ``.git/info/exclude``, with lower
        precedence than the root ``.gitignore``.
        """
        directory = self.repo_root / directory_rel if directory_rel else self.repo_root
        lines: list[str] = []
        candidates = [directory / GITIGNORE_FILENAME]
        if not directory_rel:
            candidates.insert(0, self.repo_root / INFO_EXCLUDE_PATH)

        for candidate in candidates:
            try:
                lines.extend(_read_lines(candidate))
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.debug("Skipping unreadable ignore file. path=%s error=%s", candidate, exc)

        ignore_set = compile_ignore_lines(lines)
        if not ignore_set.rules:
            return None
        self._sets[directory_rel] = ignore_set
        return ignore_set

    def is_ignored(self, path_rel: str, is_directory: bool) -> bool:
        """Return whether ``path_rel`` (``/``-separated) is ignored.

        Ignore files are consulted from the path's own directory upwards; the
        first one with a matching rule decides.
        """
        directory = posixpath.dirname(path_rel)
        while True:
            ignore_set = self._sets.get(directory)
            if ignore_set is not None:
                relative = path_rel[len(directory) + 1 :] if directory else path_rel
                verdict = ignore_set.match(relative, is_directory)
                if verdict is not None:
                    return verdict
            if not directory:
                return False
            directory = posixpath.dirname(directory)


__all__ = ["GITIGNORE_FILENAME", "IgnoreStack", "compile_ignore_file"]
