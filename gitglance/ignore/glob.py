"""Single path-component glob matching with gitignore semantics.

Supports ``*``, ``?``, backslash escapes and bracket expressions with
negation, ranges, a leading literal ``]`` and POSIX character classes.
Components never contain ``/`` so wildcards need no separator handling.
"""

from __future__ import annotations

import string

_PRINTABLE = frozenset(chr(code) for code in range(32, 127))

POSIX_CHARACTER_CLASSES: dict[str, frozenset[str]] = {
    "alnum": frozenset(string.ascii_letters + string.digits),
    "alpha": frozenset(string.ascii_letters),
    "blank": frozenset(" \t"),
    "cntrl": frozenset(chr(code) for code in (*range(32), 127)),
    "digit": frozenset(string.digits),
    "graph": _PRINTABLE - {" "},
    "lower": frozenset(string.ascii_lowercase),
    "print": _PRINTABLE,
    "punct": frozenset(string.punctuation),
    "space": frozenset(string.whitespace),
    "upper": frozenset(string.ascii_uppercase),
    "xdigit": frozenset(string.hexdigits),
}


def _match_bracket(pattern: str, start: int, char: str) -> tuple[bool, int] | None:
    """Match ``char`` against the bracket expression opening at ``start``.

    Returns ``(matched, index_after_bracket)`` or ``None`` when the expression
    is unterminated, which makes the whole pattern fail.
    """
    end = len(pattern)
    j = start + 1
    if j >= end:
        return None

    negate = False
    if pattern[j] in "!^":
        negate = True
        j += 1
        if j >= end:
            return None

    matched = False
    if pattern[j] == "]":
        matched = char == "]"
        j += 1

    while j < end and pattern[j] != "]":
        token = pattern[j]
        if token == "\\" and j + 1 < end:
            if pattern[j + 1] == char:
                matched = True
            j += 2
            continue
        if token == "[" and j + 2 < end and pattern[j + 1] == ":":
            close = pattern.find(":]", j + 2)
            if close == -1:
                return None
            members = POSIX_CHARACTER_CLASSES.get(pattern[j + 2 : close])
            if members is not None and char in members:
                matched = True
            j = close + 2
            continue
        if j + 2 < end and pattern[j + 1] == "-" and pattern[j + 2] != "]":
            if token <= char <= pattern[j + 2]:
                matched = True
            j += 3
            continue
        if token == char:
            matched = True
        j += 1

    if j >= end:
        return None
    return matched != negate, j + 1


def match_component(name: str, pattern: str) -> bool:
    """Return whether one path component matches one glob component."""
    i = 0
    j = 0
    star_j = -1
    star_i = -1
    name_len = len(name)
    pattern_len = len(pattern)

    while i < name_len:
        if j < pattern_len:
            token = pattern[j]
            if token == "?":
                i += 1
                j += 1
                continue
            if token == "*":
                star_j = j
                star_i = i
                j += 1
                continue
            if token == "[":
                result = _match_bracket(pattern, j, name[i])
                if result is None:
                    return False
                matched, next_j = result
                if matched:
                    i += 1
                    j = next_j
                    continue
            else:
                if token == "\\" and j + 1 < pattern_len:
                    j += 1
                    token = pattern[j]
                if name[i] == token:
                    i += 1
                    j += 1
                    continue

        if star_j != -1:
            # Let the last star swallow one more character and retry.
            j = star_j + 1
            star_i += 1
            i = star_i
            continue
        return False

    while j < pattern_len and pattern[j] == "*":
        j += 1
    return j >= pattern_len


__all__ = ["POSIX_CHARACTER_CLASSES", "match_component"]
