"""Byte-level helpers shared by the table and shapefile decoders."""

import struct
from typing import Any, BinaryIO

from shpkit.errors import TruncatedFileError


def read_exact(stream: BinaryIO, size: int, what: str) -> bytes:
    """Read exactly *size* bytes from *stream* or raise ``TruncatedFileError``."""
    data = stream.read(size)
    if len(data) != size:
        raise TruncatedFileError(what, size, len(data))
    return data


def nul_terminated(raw: bytes) -> bytes:
    """Return *raw* up to (not including) the first NUL, or all of it when there is none."""
    end = raw.find(b"\x00")
    return raw if end < 0 else raw[:end]


def decode_text(raw: bytes, encoding: str) -> str:
    return raw.decode(encoding, errors="replace")


class ByteReader:
    """Sequential ``struct`` reads over an in-memory buffer.

    Every read is bounds-checked so a short buffer raises ``TruncatedFileError``
    naming *what* was being read instead of a bare ``struct.error``.
    """

    def __init__(self, data: bytes | memoryview, what: str, position: int = 0) -> None:
        self._data = data
        self._what = what
        self.position = position

    @property
    def remaining(self) -> int:
        return len(self._data) - self.position

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self._data)

    def _require(self, size: int) -> None:
        if size > self.remaining:
            raise TruncatedFileError(self._what, size, self.remaining)

    def unpack(self, fmt: str) -> tuple[Any, ...]:
        size = struct.calcsize(fmt)
        self._require(size)
        values = struct.unpack_from(fmt, self._data, self.position)
        self.position += size
        return values

    def unpack_one(self, fmt: str) -> Any:
        return self.unpack(fmt)[0]

    def take(self, size: int) -> memoryview:
        self._require(size)
        chunk = memoryview(self._data)[self.position : self.position + size]
        self.position += size
        return chunk
