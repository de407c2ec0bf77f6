"""Tests for the binary index reader."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from index_builder import encode_entry, encode_index

from gitglance.cancel import CancelToken
from gitglance.errors import (
    Canceled,
    InvariantViolation,
    MalformedIndexError,
    UnsupportedIndexVersionError,
)
from gitglance.index import GITLINK, REGULAR_FILE, IndexEntry, parse_index, parse_index_data

DIGEST = bytes(range(20))


class ParseIndexDataTests(unittest.TestCase):
    def test_single_entry_fields(self) -> None:
        data = encode_index(
            [encode_entry("src/main.py", ctime=(10, 11), mtime=(20, 21), mode=0o100755, digest=DIGEST)]
        )

        entries = parse_index_data(data)

        self.assertEqual(list(entries), ["src/main.py"])
        entry = entries["src/main.py"]
        self.assertEqual(
            (entry.ctime_seconds, entry.ctime_nanoseconds, entry.mtime_seconds, entry.mtime_nanoseconds),
            (10, 11, 20, 21),
        )
        self.assertEqual(entry.mode, 0o100755)
        self.assertEqual(entry.object_type, REGULAR_FILE)
        self.assertTrue(entry.is_executable)
        self.assertEqual(entry.hash, DIGEST)

    def test_multiple_entries_with_every_padding_length(self) -> None:
        names = [("x" * length) for length in range(1, 10)]
        data = encode_index([encode_entry(name) for name in names])
        entries = parse_index_data(data)
        self.assertEqual(sorted(entries), sorted(names))

    def test_gitlink_entry(self) -> None:
        entries = parse_index_data(encode_index([encode_entry("vendor/lib", mode=0o160000)]))
        self.assertEqual(entries["vendor/lib"].object_type, GITLINK)
        self.assertFalse(entries["vendor/lib"].is_executable)

    def test_long_name_uses_nul_terminator(self) -> None:
        name = "d/" + "n" * 4200
        data = encode_index([encode_entry(name), encode_entry("after.txt")])
        entries = parse_index_data(data)
        self.assertIn(name, entries)
        self.assertIn("after.txt", entries)

    def test_name_of_exactly_sentinel_length(self) -> None:
        name = "s" * 0xFFF
        entries = parse_index_data(encode_index([encode_entry(name)]))
        self.assertEqual(list(entries), [name])

    def test_empty_index(self) -> None:
        self.assertEqual(parse_index_data(encode_index([])), {})

    def test_unsupported_version_names_the_version(self) -> None:
        data = encode_index([encode_entry("a")], version=3)
        with self.assertRaises(UnsupportedIndexVersionError) as ctx:
            parse_index_data(data)
        self.assertEqual(ctx.exception.version, 3)
        self.assertEqual(str(ctx.exception), "unsupported index version: 3")
        self.assertIsInstance(ctx.exception, MalformedIndexError)

    def test_bad_signature(self) -> None:
        with self.assertRaisesRegex(MalformedIndexError, "DIRC"):
            parse_index_data(encode_index([], signature=b"DIRX"))

    def test_short_header(self) -> None:
        with self.assertRaisesRegex(MalformedIndexError, "header"):
            parse_index_data(b"DIRC\x00\x00")

    def test_truncated_entry(self) -> None:
        data = encode_index([encode_entry("file.txt")])
        with self.assertRaisesRegex(MalformedIndexError, "truncated entry"):
            parse_index_data(data[:40])

    def test_truncated_name(self) -> None:
        data = encode_index([encode_entry("file.txt")])
        with self.assertRaisesRegex(MalformedIndexError, "path name of size 8"):
            parse_index_data(data[: 12 + 62 + 3])

    def test_entry_count_larger_than_data(self) -> None:
        data = bytearray(encode_index([encode_entry("a.txt")]))
        data[11] = 2
        with self.assertRaises(MalformedIndexError):
            parse_index_data(bytes(data))

    def test_non_nul_padding(self) -> None:
        data = encode_index([encode_entry("a.txt", padding_byte=b"x")])
        with self.assertRaisesRegex(MalformedIndexError, "null padding"):
            parse_index_data(data)

    def test_unterminated_long_name(self) -> None:
        entry = encode_entry("n" * 5000)
        data = encode_index([entry])
        with self.assertRaisesRegex(MalformedIndexError, "unterminated"):
            parse_index_data(data[: -len(entry) + 62 + 100])

    def test_canceled_token_stops_parse(self) -> None:
        token = CancelToken()
        token.cancel()
        with self.assertRaises(Canceled):
            parse_index_data(encode_index([encode_entry("a")]), token)


class IndexEntryTests(unittest.TestCase):
    def test_hash_length_is_checked(self) -> None:
        with self.assertRaises(InvariantViolation):
            IndexEntry(0, 0, 0, 0, 0o100644, b"short")


class ParseIndexFileTests(unittest.TestCase):
    def test_reads_index_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "index"
            path.write_bytes(encode_index([encode_entry("a.txt", digest=DIGEST)]))
            entries = parse_index(path)
            self.assertEqual(entries["a.txt"].hash, DIGEST)

    def test_empty_file_is_malformed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "index"
            path.write_bytes(b"")
            with self.assertRaises(MalformedIndexError):
                parse_index(path)

    def test_directory_is_not_a_regular_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaisesRegex(MalformedIndexError, "not a regular file"):
                parse_index(tmp)

    def test_missing_file_raises_os_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                parse_index(os.path.join(tmp, "index"))


if __name__ == "__main__":
    unittest.main()
