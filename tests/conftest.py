"""Shared fixtures and byte builders for tests."""

import struct
from collections.abc import Sequence
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).parent.parent

Bbox = tuple[float, float, float, float]


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# DbfBuilder: synthesises dBase tables byte by byte
# ---------------------------------------------------------------------------


class DbfBuilder:
    @staticmethod
    def descriptor(name: str, field_type: str, length: int, decimals: int = 0) -> bytes:
        block = bytearray(32)
        encoded = name.encode("utf-8")[:11]
        block[: len(encoded)] = encoded
        block[11] = ord(field_type)
        block[16] = length
        block[17] = decimals
        return bytes(block)

    @staticmethod
    def build(
        fields: Sequence[tuple[str, str, int]],
        rows: Sequence[Sequence[str]],
        *,
        modified: tuple[int, int, int] = (116, 2, 17),
        deletion_flags: bool = False,
        record_length: int | None = None,
        header_length: int | None = None,
        encoding: str = "utf-8",
    ) -> bytes:
        """Build a table.

        Without *deletion_flags* the records follow a single flag byte and the
        declared record length is the sum of the field lengths. With it every
        record carries its own leading flag, as in files written by GIS tools.
        """
        field_bytes = sum(length for _, _, length in fields)
        if record_length is None:
            record_length = field_bytes + (1 if deletion_flags else 0)
        if header_length is None:
            header_length = 32 + 32 * len(fields) + 1

        header = bytearray(32)
        header[0] = 0x03
        header[1:4] = bytes(modified)
        struct.pack_into("<IHH", header, 4, len(rows), header_length, record_length)

        out = bytearray(header)
        for name, field_type, length in fields:
            out += DbfBuilder.descriptor(name, field_type, length)
        out += b"\r"
        if not deletion_flags:
            out += b" "
        for row in rows:
            if deletion_flags:
                out += b" "
            for (_, _, length), value in zip(fields, row):
                out += value.encode(encoding).ljust(length)[:length]
        out += b"\x1a"
        return bytes(out)


# ---------------------------------------------------------------------------
# ShpBuilder: synthesises shapefiles byte by byte
# ---------------------------------------------------------------------------


class ShpBuilder:
    @staticmethod
    def bbox_of(points: Sequence[tuple[float, float]]) -> Bbox:
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        return (min(xs), min(ys), max(xs), max(ys))

    @staticmethod
    def header(shape_type: int, file_length: int, bbox: Bbox = (0.0, 0.0, 0.0, 0.0), magic: int = 0x270A) -> bytes:
        return struct.pack(">7i", magic, 0, 0, 0, 0, 0, file_length // 2) + struct.pack(
            "<2i8d", 1000, shape_type, *bbox, 0.0, 0.0, 0.0, 0.0
        )

    @staticmethod
    def record(number: int, content: bytes) -> bytes:
        return struct.pack(">2i", number, len(content) // 2) + content

    @staticmethod
    def null() -> bytes:
        return struct.pack("<i", 0)

    @staticmethod
    def point(x: float, y: float, shape_type: int = 1) -> bytes:
        return struct.pack("<i2d", shape_type, x, y)

    @staticmethod
    def multipoint(points: Sequence[tuple[float, float]]) -> bytes:
        content = struct.pack("<i4di", 8, *ShpBuilder.bbox_of(points), len(points))
        return content + b"".join(struct.pack("<2d", *p) for p in points)

    @staticmethod
    def poly(
        shape_type: int,
        starts: Sequence[int],
        points: Sequence[tuple[float, float]],
        point_count: int | None = None,
    ) -> bytes:
        declared_points = len(points) if point_count is None else point_count
        bbox = ShpBuilder.bbox_of(points) if points else (0.0, 0.0, 0.0, 0.0)
        content = struct.pack("<i4d2i", shape_type, *bbox, len(starts), declared_points)
        content += struct.pack(f"<{len(starts)}i", *starts)
        return content + b"".join(struct.pack("<2d", *p) for p in points)

    @staticmethod
    def build(
        shape_type: int,
        contents: Sequence[bytes],
        *,
        bbox: Bbox = (0.0, 0.0, 0.0, 0.0),
        magic: int = 0x270A,
        length_delta: int = 0,
    ) -> bytes:
        body = b"".join(ShpBuilder.record(i + 1, content) for i, content in enumerate(contents))
        total = 100 + len(body)
        return ShpBuilder.header(shape_type, total + length_delta, bbox, magic) + body


# ---------------------------------------------------------------------------
# Reference table: a slice of the U.S. states cartographic boundary file
# ---------------------------------------------------------------------------

STATES_FIELDS = [
    ("STATEFP", "C", 2),
    ("STATENS", "C", 8),
    ("AFFGEOID", "C", 11),
    ("GEOID", "C", 2),
    ("STUSPS", "C", 2),
    ("NAME", "C", 100),
    ("LSAD", "C", 2),
    ("ALAND", "N", 14),
    ("AWATER", "N", 14),
]

_STATES = [
    ("28", "MS", "Mississippi"),
    ("37", "NC", "North Carolina"),
    ("40", "OK", "Oklahoma"),
    ("51", "VA", "Virginia"),
    ("54", "WV", "West Virginia"),
    ("22", "LA", "Louisiana"),
    ("26", "MI", "Michigan"),
    ("25", "MA", "Massachusetts"),
    ("16", "ID", "Idaho"),
    ("12", "FL", "Florida"),
    ("31", "NE", "Nebraska"),
    ("53", "WA", "Washington"),
    ("35", "NM", "New Mexico"),
    ("72", "PR", "Puerto Rico"),
    ("46", "SD", "South Dakota"),
    ("48", "TX", "Texas"),
    ("06", "CA", "California"),
    ("01", "AL", "Alabama"),
    ("13", "GA", "Georgia"),
    ("42", "PA", "Pennsylvania"),
    ("29", "MO", "Missouri"),
    ("05", "AR", "Arkansas"),
    ("47", "TN", "Tennessee"),
    ("19", "IA", "Iowa"),
    ("39", "OH", "Ohio"),
    ("08", "CO", "Colorado"),
    ("34", "NJ", "New Jersey"),
    ("24", "MD", "Maryland"),
]


def states_rows() -> list[list[str]]:
    rows = []
    for i, (fp, usps, name) in enumerate(_STATES):
        aland = f"{121533519481 + i:14d}"
        awater = f"{3926919758:14d}"
        rows.append([fp, f"{1779000 + i:08d}", f"0400000US{fp}", fp, usps, name, "00", aland, awater])
    return rows


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def states_dbf(tmp_path: Path) -> Path:
    """Write the reference states table (with per-record deletion flags)."""
    path = tmp_path / "states.dbf"
    path.write_bytes(DbfBuilder.build(STATES_FIELDS, states_rows(), deletion_flags=True))
    return path


@pytest.fixture
def mixed_fields() -> list[tuple[str, str, int]]:
    return [
        ("NAME", "C", 14),
        ("COUNT", "N", 6),
        ("RATIO", "F", 10),
        ("FOUNDED", "D", 8),
        ("ACTIVE", "L", 1),
        ("NOTES", "M", 10),
    ]


@pytest.fixture
def mixed_dbf(tmp_path: Path, mixed_fields: list[tuple[str, str, int]]) -> Path:
    rows = [
        ["  Springfield", "   42", "  3.25e-1", "18610412", "T", "0000000001"],
        ["Shelbyville", "  -7.5", "abc", "19xx0101", "n", ""],
        ["Ogdenville", "", "+.5", "20000229", "?", "   memo  "],
    ]
    path = tmp_path / "places.dbf"
    path.write_bytes(DbfBuilder.build(mixed_fields, rows))
    return path
