"""Zero-copy file contents via ``mmap`` with a read-into-memory fallback."""

from __future__ import annotations

import mmap
import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO


@contextmanager
def open_file_data(file: BinaryIO) -> Iterator[bytes | mmap.mmap]:
    """Yield the full contents of an open binary file.

    Non-empty files are memory-mapped read-only and unmapped when the block
    exits, whether it succeeds or raises. When the platform or file type
    refuses mapping, the contents are read into memory instead.
    """
    size = os.fstat(file.fileno()).st_size
    if size == 0:
        yield b""
        return

    try:
        mapped: mmap.mmap | None = mmap.mmap(file.fileno(), 0, access=mmap.ACCESS_READ)
    except (OSError, ValueError):
        mapped = None

    if mapped is None:
        yield file.read()
        return

    with mapped:
        yield mapped


__all__ = ["open_file_data"]
