"""Exceptions raised while loading and decoding tables and shapefiles."""

from __future__ import annotations


class ShpkitError(Exception):
    """Base class for every error raised by shpkit."""


class TruncatedFileError(ShpkitError, EOFError):
    """The input ended before a complete structure could be read."""

    def __init__(self, what: str, expected: int, available: int) -> None:
        super().__init__(f"Unexpected end of data reading {what}: needed {expected} bytes, got {available}")
        self.what = what
        self.expected = expected
        self.available = available


class FormatError(ShpkitError, ValueError):
    """The bytes do not follow the file format."""


class InvalidHeaderError(FormatError):
    pass


class InvalidMagicError(FormatError):
    pass


class FileLengthMismatchError(FormatError):
    pass


class InvalidFieldTypeError(FormatError):
    pass


class InvalidShapeTypeError(FormatError):
    pass


class UnsupportedShapeTypeError(FormatError):
    pass


class InvalidShapeRecordError(FormatError):
    pass


class DatasetMismatchError(FormatError):
    pass


class FieldDecodeError(ShpkitError, ValueError):
    """A field's bytes cannot be read as its declared type."""

    def __init__(self, field_name: str, field_type: str, raw: bytes) -> None:
        super().__init__(f"Cannot decode field '{field_name}' ({field_type}) from {raw!r}")
        self.field_name = field_name
        self.field_type = field_type
        self.raw = raw
