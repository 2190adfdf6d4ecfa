from shpkit.core.dataset import Dataset, companion_path, load_dataset
from shpkit.core.dbf import Record, Table, TableSchema, load_table
from shpkit.core.shp import ShapeFile, load_shapefile
from shpkit.errors import (
    DatasetMismatchError,
    FieldDecodeError,
    FileLengthMismatchError,
    FormatError,
    InvalidFieldTypeError,
    InvalidHeaderError,
    InvalidMagicError,
    InvalidShapeRecordError,
    InvalidShapeTypeError,
    ShpkitError,
    TruncatedFileError,
    UnsupportedShapeTypeError,
)
from shpkit.models import BoundingBox, Date, FieldDescriptor, FieldType, Point, RecordField, Shape, ShapeType

__all__ = [
    "BoundingBox",
    "Dataset",
    "DatasetMismatchError",
    "Date",
    "FieldDecodeError",
    "FieldDescriptor",
    "FieldType",
    "FileLengthMismatchError",
    "FormatError",
    "InvalidFieldTypeError",
    "InvalidHeaderError",
    "InvalidMagicError",
    "InvalidShapeRecordError",
    "InvalidShapeTypeError",
    "Point",
    "Record",
    "RecordField",
    "Shape",
    "ShapeFile",
    "ShapeType",
    "ShpkitError",
    "Table",
    "TableSchema",
    "TruncatedFileError",
    "UnsupportedShapeTypeError",
    "companion_path",
    "load_dataset",
    "load_shapefile",
    "load_table",
]
