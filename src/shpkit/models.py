import datetime
import math
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, model_validator


class FieldType(str, Enum):
    CHARACTER = "C"
    DATE = "D"
    FLOATING_POINT = "F"
    LOGICAL = "L"
    MEMO = "M"
    NUMERIC = "N"


class ShapeType(IntEnum):
    NULL = 0
    POINT = 1
    POLYLINE = 3
    POLYGON = 5
    MULTIPOINT = 8
    POINT_Z = 11
    POLYLINE_Z = 13
    POLYGON_Z = 15
    MULTIPOINT_Z = 18
    POINT_M = 21
    POLYLINE_M = 23
    POLYGON_M = 25
    MULTIPOINT_M = 28
    MULTIPATCH = 31

    @property
    def is_supported(self) -> bool:
        """Whether records of this type can be decoded (2D types only)."""
        return self in _SUPPORTED_SHAPE_TYPES


_SUPPORTED_SHAPE_TYPES = frozenset(
    {ShapeType.NULL, ShapeType.POINT, ShapeType.POLYLINE, ShapeType.POLYGON, ShapeType.MULTIPOINT}
)


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class BoundingBox(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: Point
    max: Point

    @classmethod
    def from_point(cls, point: Point) -> "BoundingBox":
        return cls(min=point, max=point)

    @classmethod
    def empty(cls) -> "BoundingBox":
        """The extent of a Null shape: NaN on both corners."""
        nan = Point(x=math.nan, y=math.nan)
        return cls(min=nan, max=nan)

    @property
    def is_empty(self) -> bool:
        return any(math.isnan(v) for v in (self.min.x, self.min.y, self.max.x, self.max.y))


class Date(BaseModel):
    """A calendar date as stored in a table; values are not range-checked."""

    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    day: int

    def to_date(self) -> datetime.date:
        return datetime.date(self.year, self.month, self.day)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


class FieldDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    field_type: FieldType
    length: int
    offset: int
    decimal_count: int = 0

    @property
    def end(self) -> int:
        return self.offset + self.length


# Decoded value of one record field: Text, Number, Date or Bool.
RecordField = str | float | Date | bool


class Shape(BaseModel):
    model_config = ConfigDict(frozen=True)

    shape_type: ShapeType
    bounding_box: BoundingBox
    points: tuple[Point, ...] = ()
    parts: tuple[tuple[int, int], ...] = ()
    record_number: int | None = None

    @model_validator(mode="after")
    def _check_parts(self) -> "Shape":
        if self.points and not self.parts:
            raise ValueError(f"Shape with {len(self.points)} points has no parts")
        expected_start = 0
        for start, end in self.parts:
            if start != expected_start or end < start:
                raise ValueError(f"Parts {self.parts} do not partition {len(self.points)} points")
            expected_start = end
        if self.parts and expected_start != len(self.points):
            raise ValueError(f"Parts {self.parts} do not partition {len(self.points)} points")
        return self

    def part_points(self, index: int) -> tuple[Point, ...]:
        start, end = self.parts[index]
        return self.points[start:end]
