"""Public package surface for gitglance.

Exports ``main`` for programmatic CLI invocation.
The status engine lives in ``gitglance.status``, ``gitglance.index``,
``gitglance.ignore`` and ``gitglance.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
