import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from shpkit.core.dbf import Record, Table, load_table
from shpkit.core.shp import ShapeFile, load_shapefile
from shpkit.errors import DatasetMismatchError
from shpkit.models import Shape

logger = logging.getLogger(__name__)

TABLE_SUFFIX = ".dbf"
GEOMETRY_SUFFIX = ".shp"


def companion_path(path: str | Path, suffix: str) -> Path:
    """Return the file next to *path* with the same stem and *suffix*.

    Tries the lower-case suffix first, then upper case; when neither exists the
    lower-case candidate is returned.
    """
    base = Path(path)
    candidates = [base.with_suffix(suffix.lower()), base.with_suffix(suffix.upper())]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


@dataclass(frozen=True)
class Dataset:
    shapefile: ShapeFile
    table: Table | None = None

    def features(self) -> Iterator[tuple[Shape, Record | None]]:
        """Yield each shape with the table row that shares its position."""
        if self.table is None:
            for shape in self.shapefile:
                yield shape, None
            return
        yield from zip(self.shapefile, self.table)


def load_dataset(path: str | Path, encoding: str | None = None) -> Dataset:
    """Load a shapefile and, when present, its companion attribute table."""
    shp_path = companion_path(path, GEOMETRY_SUFFIX)
    shapefile = load_shapefile(shp_path)

    dbf_path = companion_path(shp_path, TABLE_SUFFIX)
    if not dbf_path.exists():
        logger.warning("No attribute table found next to %s", shp_path)
        return Dataset(shapefile=shapefile)

    table = load_table(dbf_path, encoding=encoding)
    if table.record_count != len(shapefile):
        raise DatasetMismatchError(
            f"{shp_path} has {len(shapefile)} shapes but {dbf_path} has {table.record_count} records"
        )
    return Dataset(shapefile=shapefile, table=table)
