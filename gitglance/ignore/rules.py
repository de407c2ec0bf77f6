"""Compiled ``.gitignore`` rules and rule-set evaluation.

Rules are evaluated in file order and the last matching rule decides, which
lets a later ``!pattern`` re-include paths an earlier pattern excluded.
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..errors import InvariantViolation, PathTooLongError
from .glob import match_component

MAX_PATH_LENGTH = 4096
_IGNORE_LINE_STRIP = " \t\r\n"


def _match_components(path: Sequence[str], components: Sequence[str]) -> tuple[bool, bool]:
    """Match rule components against the start of ``path``.

    Returns ``(matched, final)`` where ``final`` reports that the match
    consumed every path component rather than a leading directory prefix.
    """
    for i, component in enumerate(components):
        if i >= len(path):
            return False, False
        if component == "**":
            rest = components[i + 1 :]
            for j in range(len(path) - 1, i - 1, -1):
                matched, final = _match_components(path[j:], rest)
                if matched:
                    return True, final
            return False, False
        if not match_component(path[i], component):
            return False, False
    return True, len(components) == len(path)


@dataclass(frozen=True)
class IgnoreRule:
    """One compiled pattern line."""

    components: tuple[str, ...]
    negate: bool = False
    directory_only: bool = False
    anchored: bool = False

    def __post_init__(self) -> None:
        if not self.components:
            raise InvariantViolation("ignore rule requires at least one component")

    def _applies(self, final: bool, is_directory: bool) -> bool:
        return not self.directory_only or not final or is_directory

    def matches(self, path: Sequence[str], is_directory: bool) -> bool:
        """Return whether this rule matches the split ``path``."""
        if self.anchored:
            matched, final = _match_components(path, self.components)
            return matched and self._applies(final, is_directory)

        for start in range(len(path)):
            matched, final = _match_components(path[start:], self.components)
            if matched:
                return self._applies(final, is_directory)
        return False


def parse_rule(line: str) -> IgnoreRule | None:
    """Compile one ``.gitignore`` line, or ``None`` for blanks and comments."""
    pattern = line.strip(_IGNORE_LINE_STRIP)
    if not pattern or pattern == "!" or pattern.startswith("#"):
        return None

    negate = pattern.startswith("!")
    if negate:
        pattern = pattern[1:]
    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]
    directory_only = pattern.endswith("/")

    components = tuple(part for part in pattern.split("/") if part)
    if not components:
        return None

    # A separator anywhere but the end anchors the pattern, as in git.
    return IgnoreRule(
        components=components,
        negate=negate,
        directory_only=directory_only,
        anchored=anchored or len(components) > 1,
    )


def _split_query_path(path: str, is_directory: bool) -> tuple[tuple[str, ...], bool] | None:
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if path.endswith("/"):
        is_directory = True

    normalized = posixpath.normpath(path) if path else "."
    if normalized == ".":
        return (), True
    if normalized == "*" or normalized.startswith("/"):
        return None

    components = tuple(normalized.split("/"))
    if ".." in components:
        return None
    return components, is_directory


class IgnoreSet:
    """Ordered rules compiled from one ignore file."""

    def __init__(self, rules: Iterable[IgnoreRule] = ()) -> None:
        self.rules: list[IgnoreRule] = list(rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __repr__(self) -> str:
        return f"IgnoreSet(rules={len(self.rules)})"

    def match(self, path: str, is_directory: bool = False) -> bool | None:
        """Return the verdict of the last matching rule, or ``None`` if none match.

        ``path`` is relative to the directory holding the ignore file. A
        trailing ``/`` also marks the path as a directory.
        """
        if len(path.encode("utf-8", errors="surrogateescape")) > MAX_PATH_LENGTH:
            raise PathTooLongError(f"path cannot be longer than {MAX_PATH_LENGTH} bytes")

        split = _split_query_path(path, is_directory)
        if split is None:
            return None
        components, is_directory = split

        verdict: bool | None = None
        for rule in self.rules:
            if rule.matches(components, is_directory):
                verdict = not rule.negate
        return verdict

    def matches_path(self, path: str, is_directory: bool = False) -> bool:
        """Return whether ``path`` is ignored by this rule set."""
        return self.match(path, is_directory) is True


def compile_ignore_lines(lines: Iterable[str]) -> IgnoreSet:
    """Compile pattern lines into an ``IgnoreSet``, skipping blanks and comments."""
    rules = []
    for line in lines:
        rule = parse_rule(line)
        if rule is not None:
            rules.append(rule)
    return IgnoreSet(rules)


__all__ = [
    "MAX_PATH_LENGTH",
    "IgnoreRule",
    "IgnoreSet",
    "compile_ignore_lines",
    "parse_rule",
]
