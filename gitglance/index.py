"""Reader for the binary ``.git/index`` file (format version 2).

Only the fields needed for change detection are kept: both timestamps, the
mode word and the object hash. Any structural problem fails the whole parse.
"""

from __future__ import annotations

import logging
import os
import stat
import struct
from dataclasses import dataclass

from .cancel import CancelToken, check_canceled
from .errors import InvariantViolation, MalformedIndexError, UnsupportedIndexVersionError
from .filedata import open_file_data

logger = logging.getLogger(__name__)

INDEX_SIGNATURE = b"DIRC"
SUPPORTED_INDEX_VERSION = 2
HASH_SIZE = 20
NAME_LENGTH_MASK = 0xFFF

OBJECT_TYPE_MASK = 0o170000
REGULAR_FILE = 0o100000
SYMBOLIC_LINK = 0o120000
GITLINK = 0o160000

# ctime, mtime, dev+ino (skipped), mode, uid+gid+size (skipped), hash, flags
_HEADER = struct.Struct(">4sII")
_ENTRY_HEAD = struct.Struct(">IIII8xI12x20sH")
ENTRY_HEADER_SIZE = _ENTRY_HEAD.size


@dataclass(frozen=True)
class IndexEntry:
    """Recorded metadata for one tracked path."""

    ctime_seconds: int
    ctime_nanoseconds: int
    mtime_seconds: int
    mtime_nanoseconds: int
    mode: int
    hash: bytes

    def __post_init__(self) -> None:
        if len(self.hash) != HASH_SIZE:
            raise InvariantViolation(f"index entry hash must be {HASH_SIZE} bytes, got {len(self.hash)}")

    @property
    def object_type(self) -> int:
        return self.mode & OBJECT_TYPE_MASK

    @property
    def is_executable(self) -> bool:
        return bool(self.mode & stat.S_IXUSR)


def _padding_length(name_length: int) -> int:
    """NUL bytes after a name: at least one, up to the next 8-byte boundary."""
    return 8 - ((ENTRY_HEADER_SIZE + name_length) % 8)


def parse_index_data(data, cancel: CancelToken | None = None) -> dict[str, IndexEntry]:
    """Parse index bytes (``bytes`` or a mapped buffer) into path -> entry."""
    size = len(data)
    if size < _HEADER.size:
        raise MalformedIndexError("invalid size, unable to read index header")

    signature, version, entry_count = _HEADER.unpack_from(data, 0)
    if signature != INDEX_SIGNATURE:
        raise MalformedIndexError('invalid header, missing "DIRC"')
    if version != SUPPORTED_INDEX_VERSION:
        raise UnsupportedIndexVersionError(version)

    entries: dict[str, IndexEntry] = {}
    offset = _HEADER.size
    for entry_index in range(entry_count):
        check_canceled(cancel)

        if offset + ENTRY_HEADER_SIZE > size:
            raise MalformedIndexError(f"invalid size, truncated entry at index {entry_index}")
        ctime_s, ctime_ns, mtime_s, mtime_ns, mode, digest, flags = _ENTRY_HEAD.unpack_from(data, offset)
        offset += ENTRY_HEADER_SIZE

        name_length = flags & NAME_LENGTH_MASK
        if name_length == NAME_LENGTH_MASK:
            # Long names are only NUL-terminated; the length field saturates.
            name_end = data.find(b"\0", offset)
            if name_end == -1:
                raise MalformedIndexError(f"invalid size, unterminated path name at index {entry_index}")
        else:
            name_end = offset + name_length
            if name_end > size:
                raise MalformedIndexError(
                    f"invalid size, unable to read path name of size {name_length} at index {entry_index}"
                )
        name = bytes(data[offset:name_end])

        padding = _padding_length(len(name))
        padding_end = name_end + padding
        if padding_end > size:
            raise MalformedIndexError(
                f"invalid size, unable to read path name null bytes of size {padding} at index {entry_index}"
            )
        if data[name_end:padding_end] != bytes(padding):
            raise MalformedIndexError(f"non-null byte found in null padding of length {padding}")
        offset = padding_end

        entries[os.fsdecode(name)] = IndexEntry(
            ctime_seconds=ctime_s,
            ctime_nanoseconds=ctime_ns,
            mtime_seconds=mtime_s,
            mtime_nanoseconds=mtime_ns,
            mode=mode,
            hash=digest,
        )

    return entries


def parse_index(path: str | os.PathLike[str], cancel: CancelToken | None = None) -> dict[str, IndexEntry]:
    """Parse a version-2 index file into ``/``-separated path -> ``IndexEntry``.

    Raises ``MalformedIndexError`` (or its ``UnsupportedIndexVersionError``
    subclass) for bad content and lets ``OSError`` through for I/O failures.
    """
    st = os.stat(path)
    if not stat.S_ISREG(st.st_mode):
        raise MalformedIndexError("not a regular file")

    with open(path, "rb") as file, open_file_data(file) as data:
        entries = parse_index_data(data, cancel)
    logger.debug("Parsed index. path=%s entries=%d", path, len(entries))
    return entries


__all__ = [
    "GITLINK",
    "HASH_SIZE",
    "OBJECT_TYPE_MASK",
    "REGULAR_FILE",
    "SYMBOLIC_LINK",
    "IndexEntry",
    "parse_index",
    "parse_index_data",
]
