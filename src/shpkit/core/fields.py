import re

from shpkit.core.binary import decode_text
from shpkit.errors import FieldDecodeError
from shpkit.models import Date, FieldDescriptor, FieldType, RecordField

_NUMBER_RE = re.compile(rb"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_TRUE_BYTES = frozenset(b"YyTt")
_DATE_LENGTH = 8


def parse_number(descriptor: FieldDescriptor, raw: bytes) -> float:
    text = raw.strip()
    if not _NUMBER_RE.fullmatch(text):
        raise FieldDecodeError(descriptor.name, descriptor.field_type.value, raw)
    return float(text)


def parse_date_text(descriptor: FieldDescriptor, raw: bytes) -> Date:
    """Parse an ASCII ``YYYYMMDD`` date field."""
    parts = (raw[0:4], raw[4:6], raw[6:8])
    if len(raw) < _DATE_LENGTH or not all(part.isdigit() for part in parts):
        raise FieldDecodeError(descriptor.name, descriptor.field_type.value, raw)
    year, month, day = (int(part) for part in parts)
    return Date(year=year, month=month, day=day)


def parse_logical(raw: bytes) -> bool:
    return bool(raw) and raw[0] in _TRUE_BYTES


def decode_field(descriptor: FieldDescriptor, record_data: bytes, encoding: str) -> RecordField:
    """Decode one field of a fixed-length record according to its declared type."""
    raw = record_data[descriptor.offset : descriptor.end]
    field_type = descriptor.field_type

    if field_type in (FieldType.CHARACTER, FieldType.MEMO):
        return decode_text(raw.strip(), encoding)
    if field_type in (FieldType.NUMERIC, FieldType.FLOATING_POINT):
        return parse_number(descriptor, raw)
    if field_type is FieldType.DATE:
        return parse_date_text(descriptor, raw)
    if field_type is FieldType.LOGICAL:
        return parse_logical(raw)
    raise AssertionError(f"Field '{descriptor.name}' has unvalidated type {field_type!r}")
