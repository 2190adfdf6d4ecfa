"""Reader for dBase-style attribute tables (``.dbf``)."""

import codecs
import logging
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from shpkit.config import get_text_encoding
from shpkit.core.binary import decode_text, nul_terminated, read_exact
from shpkit.core.fields import decode_field
from shpkit.errors import InvalidFieldTypeError, InvalidHeaderError
from shpkit.models import Date, FieldDescriptor, FieldType, RecordField

logger = logging.getLogger(__name__)

HEADER_LENGTH = 32
DESCRIPTOR_LENGTH = 32
# fixed header plus the 0x0D terminator after the last descriptor
_MIN_HEADER_LENGTH = HEADER_LENGTH + 1
_NAME_LENGTH = 11
_TYPE_OFFSET = 11
_LENGTH_OFFSET = 16
_DECIMAL_OFFSET = 17


@dataclass(frozen=True)
class TableSchema:
    """Field layout shared by every record of one table."""

    fields: tuple[FieldDescriptor, ...]
    encoding: str

    def index_of(self, name: str) -> int | None:
        for i, descriptor in enumerate(self.fields):
            if descriptor.name == name:
                return i
        return None

    @property
    def names(self) -> list[str]:
        return [descriptor.name for descriptor in self.fields]


@dataclass(frozen=True)
class Record:
    data: bytes
    schema: TableSchema

    def field_by_index(self, index: int) -> RecordField:
        if not 0 <= index < len(self.schema.fields):
            raise IndexError(f"Field index {index} out of range for schema with {len(self.schema.fields)} fields")
        return decode_field(self.schema.fields[index], self.data, self.schema.encoding)

    def field_by_name(self, name: str) -> RecordField | None:
        index = self.schema.index_of(name)
        if index is None:
            return None
        return self.field_by_index(index)

    def as_dict(self) -> dict[str, RecordField]:
        return {descriptor.name: self.field_by_index(i) for i, descriptor in enumerate(self.schema.fields)}


@dataclass(frozen=True)
class Table:
    last_modified: Date
    schema: TableSchema
    record_length: int
    records: tuple[Record, ...]

    @property
    def fields(self) -> tuple[FieldDescriptor, ...]:
        return self.schema.fields

    @property
    def record_count(self) -> int:
        return len(self.records)

    def record_at(self, index: int) -> Record:
        if not 0 <= index < len(self.records):
            raise IndexError(f"Record index {index} out of range for table with {len(self.records)} records")
        return self.records[index]

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)


def parse_date_binary(raw: bytes) -> Date:
    """Decode the header's year-since-1900, month, day byte triple."""
    return Date(year=1900 + raw[0], month=raw[1], day=raw[2])


def parse_field_descriptor(block: bytes, offset: int, encoding: str) -> FieldDescriptor:
    name = decode_text(nul_terminated(block[:_NAME_LENGTH]), encoding).strip()
    type_code = chr(block[_TYPE_OFFSET])
    try:
        field_type = FieldType(type_code)
    except ValueError:
        raise InvalidFieldTypeError(f"Invalid field type {type_code!r} for field '{name}'") from None
    return FieldDescriptor(
        name=name,
        field_type=field_type,
        length=block[_LENGTH_OFFSET],
        offset=offset,
        decimal_count=block[_DECIMAL_OFFSET],
    )


def read_table(stream: BinaryIO, encoding: str) -> Table:
    header = read_exact(stream, HEADER_LENGTH, "table header")
    last_modified = parse_date_binary(header[1:4])
    record_count, header_length, record_length = struct.unpack_from("<IHH", header, 4)

    if header_length < _MIN_HEADER_LENGTH:
        raise InvalidHeaderError(f"Header length {header_length} is shorter than {_MIN_HEADER_LENGTH} bytes")
    field_count = (header_length - _MIN_HEADER_LENGTH) // DESCRIPTOR_LENGTH

    fields: list[FieldDescriptor] = []
    offset = 0
    for i in range(field_count):
        block = read_exact(stream, DESCRIPTOR_LENGTH, f"field descriptor {i}")
        descriptor = parse_field_descriptor(block, offset, encoding)
        fields.append(descriptor)
        offset = descriptor.end

    if offset > record_length:
        raise InvalidHeaderError(f"Fields span {offset} bytes but records are {record_length} bytes long")

    schema = TableSchema(fields=tuple(fields), encoding=encoding)
    logger.debug(
        "Table header: %d records of %d bytes, %d fields, modified %s",
        record_count,
        record_length,
        field_count,
        last_modified,
    )

    # records start after the header and the deletion flag byte
    stream.seek(header_length + 1)
    records = tuple(
        Record(data=read_exact(stream, record_length, f"record {i}"), schema=schema) for i in range(record_count)
    )
    return Table(last_modified=last_modified, schema=schema, record_length=record_length, records=records)


def load_table(path: str | Path, encoding: str | None = None) -> Table:
    """Load a whole table into memory; field values are decoded on request."""
    resolved_encoding = encoding or get_text_encoding()
    codecs.lookup(resolved_encoding)

    file_path = Path(path)
    try:
        with file_path.open("rb") as stream:
            table = read_table(stream, resolved_encoding)
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    logger.info("Loaded table %s: %d records, %d fields", file_path, table.record_count, len(table.fields))
    return table
