"""Gitignore pattern compilation and matching.

This package contains:
- single-component glob matching (``glob``)
- compiled rules with last-match-wins evaluation (``rules``)
- ignore-file loading layered per directory (``files``)
"""

from __future__ import annotations

from .files import GITIGNORE_FILENAME, IgnoreStack, compile_ignore_file
from .glob import match_component
from .rules import MAX_PATH_LENGTH, IgnoreRule, IgnoreSet, compile_ignore_lines, parse_rule

__all__ = [
    "GITIGNORE_FILENAME",
    "MAX_PATH_LENGTH",
    "IgnoreRule",
    "IgnoreSet",
    "IgnoreStack",
    "compile_ignore_file",
    "compile_ignore_lines",
    "match_component",
    "parse_rule",
]
