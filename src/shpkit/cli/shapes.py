from pathlib import Path
from typing import Annotated

import typer

from shpkit.cli.output import console, load_or_exit, render_table
from shpkit.core.dataset import load_dataset
from shpkit.core.shp import load_shapefile
from shpkit.models import BoundingBox


def _format_box(box: BoundingBox) -> str:
    if box.is_empty:
        return "-"
    return f"({box.min.x:g}, {box.min.y:g}) - ({box.max.x:g}, {box.max.y:g})"


def shapes(
    path: Annotated[Path, typer.Argument(help="Path to a .shp file.")],
    limit: Annotated[int, typer.Option(min=1, help="Max rows to return.")] = 20,
) -> None:
    """List the shapes of a geometry file."""
    shapefile = load_or_exit(load_shapefile, path)
    rows = [
        (i, shape.shape_type.name, len(shape.points), len(shape.parts), _format_box(shape.bounding_box))
        for i, shape in enumerate(shapefile.shapes[:limit])
    ]
    render_table(["#", "type", "points", "parts", "bounding box"], rows, title=shapefile.shape_type.name)
    if len(shapefile) > limit:
        console.print(f"Showing {limit} of {len(shapefile)} shapes")


def info(
    path: Annotated[Path, typer.Argument(help="Path to a .shp file (its .dbf companion is loaded too).")],
) -> None:
    """Summarise a dataset: geometry header and companion table."""
    dataset = load_or_exit(load_dataset, path)
    shapefile = dataset.shapefile

    console.print(f"[bold]Shape type:[/bold] {shapefile.shape_type.name}")
    console.print(f"[bold]Extent:[/bold] {_format_box(shapefile.bounding_box)}")
    console.print(f"[bold]Shapes:[/bold] {len(shapefile)}")
    if dataset.table is None:
        console.print("[yellow]No attribute table[/yellow]")
        return
    console.print(f"[bold]Records:[/bold] {dataset.table.record_count}")
    console.print(f"[bold]Fields:[/bold] {', '.join(dataset.table.schema.names)}")
