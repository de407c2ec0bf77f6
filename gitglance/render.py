"""Status badges for tree rows and command-line listings."""

from __future__ import annotations

from pygments.console import colorize as ansi_colorize

from .status import ChangedFile, ChangeKind, change_kind_to_string

_BADGE_DELETED = ("[D]", "red")
_BADGE_CHANGED = ("[M]", "yellow")
_BADGE_UNTRACKED = ("[?]", "green")


def format_status_badges(changed: ChangedFile | None, colorize: bool = True) -> str:
    """Return space-prefixed badges for ``changed``, or ``""`` when clean."""
    if changed is None:
        return ""

    badges: list[tuple[str, str]] = []
    if changed.change_kind & ChangeKind.DELETED:
        badges.append(_BADGE_DELETED)
    elif changed.change_kind:
        badges.append(_BADGE_CHANGED)
    if changed.untracked:
        badges.append(_BADGE_UNTRACKED)
    if not badges:
        return ""

    if colorize:
        return " " + "".join(ansi_colorize(color, text) for text, color in badges)
    return " " + "".join(text for text, _color in badges)


def describe_change(changed: ChangedFile) -> str:
    """Return a short human label: flag names, or ``untracked``."""
    if changed.untracked:
        return "untracked"
    return change_kind_to_string(changed.change_kind) or "unchanged"


__all__ = ["describe_change", "format_status_badges"]
