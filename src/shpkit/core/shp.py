"""Reader for shapefile geometry (``.shp``)."""

import logging
import os
import struct
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from shpkit.core.binary import ByteReader, read_exact
from shpkit.errors import (
    FileLengthMismatchError,
    InvalidMagicError,
    InvalidShapeRecordError,
    InvalidShapeTypeError,
    UnsupportedShapeTypeError,
)
from shpkit.models import BoundingBox, Point, Shape, ShapeType

logger = logging.getLogger(__name__)

FILE_CODE = 0x0000270A
HEADER_LENGTH = 100
POINT_LENGTH = 16


@dataclass(frozen=True)
class ShapeFileHeader:
    shape_type: ShapeType
    bounding_box: BoundingBox
    file_length: int


@dataclass(frozen=True)
class ShapeFile:
    shape_type: ShapeType
    bounding_box: BoundingBox
    shapes: tuple[Shape, ...]
    file_length: int = 0

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self) -> Iterator[Shape]:
        return iter(self.shapes)

    def __getitem__(self, index: int) -> Shape:
        return self.shapes[index]


def parse_shape_type(code: int) -> ShapeType:
    try:
        return ShapeType(code)
    except ValueError:
        raise InvalidShapeTypeError(f"Invalid shape type {code}") from None


def read_bounding_box(reader: ByteReader) -> BoundingBox:
    xmin, ymin, xmax, ymax = reader.unpack("<4d")
    return BoundingBox(min=Point(x=xmin, y=ymin), max=Point(x=xmax, y=ymax))


def read_points(reader: ByteReader, count: int) -> tuple[Point, ...]:
    chunk = reader.take(count * POINT_LENGTH)
    return tuple(Point(x=x, y=y) for x, y in struct.iter_unpack("<2d", chunk))


def read_count(reader: ByteReader, what: str, record_number: int) -> int:
    count: int = reader.unpack_one("<i")
    if count < 0:
        raise InvalidShapeRecordError(f"Record {record_number} declares a negative {what} ({count})")
    return count


def build_parts(starts: tuple[int, ...], point_count: int, record_number: int) -> tuple[tuple[int, int], ...]:
    """Turn part start indices into ``(start, end)`` ranges covering every point.

    A record without parts gets a single implicit part over all its points.
    """
    if not starts:
        return ((0, point_count),)
    if starts[0] != 0 or any(b < a for a, b in zip(starts, starts[1:])) or starts[-1] > point_count:
        raise InvalidShapeRecordError(
            f"Record {record_number} has part starts {list(starts)} that do not partition {point_count} points"
        )
    ends = (*starts[1:], point_count)
    return tuple(zip(starts, ends))


def parse_header(header: bytes, actual_length: int) -> ShapeFileHeader:
    file_code = struct.unpack_from(">i", header, 0)[0]
    if file_code != FILE_CODE:
        raise InvalidMagicError(f"Invalid file code {file_code:#010x}, expected {FILE_CODE:#010x}")

    declared_length = 2 * struct.unpack_from(">i", header, 24)[0]
    if declared_length != actual_length:
        raise FileLengthMismatchError(f"Header declares {declared_length} bytes but the file has {actual_length}")

    shape_type = parse_shape_type(struct.unpack_from("<i", header, 32)[0])
    bounding_box = read_bounding_box(ByteReader(header, "file bounding box", position=36))
    return ShapeFileHeader(shape_type=shape_type, bounding_box=bounding_box, file_length=declared_length)


def decode_shape(content: memoryview, record_number: int, file_type: ShapeType) -> Shape:
    """Decode the content of one record (everything after the 8-byte record header)."""
    reader = ByteReader(content, f"shape record {record_number}")
    shape_type = parse_shape_type(reader.unpack_one("<i"))
    if shape_type is not ShapeType.NULL and shape_type is not file_type:
        raise InvalidShapeTypeError(
            f"Record {record_number} has shape type {shape_type.name} but the file declares {file_type.name}"
        )
    if not shape_type.is_supported:
        raise UnsupportedShapeTypeError(f"Record {record_number}: shape type {shape_type.name} is not supported")

    if shape_type is ShapeType.NULL:
        return Shape(shape_type=shape_type, bounding_box=BoundingBox.empty(), record_number=record_number)

    if shape_type is ShapeType.POINT:
        (point,) = read_points(reader, 1)
        return Shape(
            shape_type=shape_type,
            bounding_box=BoundingBox.from_point(point),
            points=(point,),
            parts=((0, 1),),
            record_number=record_number,
        )

    bounding_box = read_bounding_box(reader)

    if shape_type is ShapeType.MULTIPOINT:
        point_count = read_count(reader, "point count", record_number)
        points = read_points(reader, point_count)
        return Shape(
            shape_type=shape_type,
            bounding_box=bounding_box,
            points=points,
            parts=((0, point_count),),
            record_number=record_number,
        )

    # polyline and polygon share one layout
    part_count = read_count(reader, "part count", record_number)
    point_count = read_count(reader, "point count", record_number)
    starts = reader.unpack(f"<{part_count}i")
    parts = build_parts(starts, point_count, record_number)
    points = read_points(reader, point_count)
    return Shape(
        shape_type=shape_type,
        bounding_box=bounding_box,
        points=points,
        parts=parts,
        record_number=record_number,
    )


def iter_shapes(data: bytes, file_type: ShapeType) -> Iterator[Shape]:
    """Walk the record stream after the file header until the bytes run out."""
    reader = ByteReader(data, "shape records")
    while not reader.exhausted:
        record_number, content_words = reader.unpack(">ii")
        if content_words < 0:
            raise InvalidShapeRecordError(f"Record {record_number} declares a negative content length")
        content = reader.take(2 * content_words)
        yield decode_shape(content, record_number, file_type)


def read_shapefile(stream: BinaryIO) -> ShapeFile:
    header_bytes = read_exact(stream, HEADER_LENGTH, "shapefile header")
    header = parse_header(header_bytes, os.fstat(stream.fileno()).st_size)
    logger.debug(
        "Shapefile header: type %s, %d bytes, extent %s",
        header.shape_type.name,
        header.file_length,
        header.bounding_box,
    )
    shapes = tuple(iter_shapes(stream.read(), header.shape_type))
    return ShapeFile(
        shape_type=header.shape_type,
        bounding_box=header.bounding_box,
        shapes=shapes,
        file_length=header.file_length,
    )


def load_shapefile(path: str | Path) -> ShapeFile:
    """Load and decode every shape of a ``.shp`` file."""
    file_path = Path(path)
    try:
        with file_path.open("rb") as stream:
            shapefile = read_shapefile(stream)
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    logger.info("Loaded shapefile %s: %d %s shapes", file_path, len(shapefile), shapefile.shape_type.name)
    return shapefile
