from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.text import Text

from shpkit.cli.output import console, err_console, load_or_exit, render_table
from shpkit.core.dbf import Record, load_table
from shpkit.errors import FieldDecodeError


def _cell(record: Record, index: int) -> Text | str:
    try:
        return str(record.field_by_index(index))
    except FieldDecodeError as exc:
        return Text(f"<invalid {exc.raw!r}>", style="red")


def fields(
    path: Annotated[Path, typer.Argument(help="Path to a .dbf table.")],
) -> None:
    """Show the field schema of a table."""
    table = load_or_exit(load_table, path)
    rows = [(i, f.name, f.field_type.name, f.length, f.offset) for i, f in enumerate(table.fields)]
    render_table(["index", "name", "type", "length", "offset"], rows, title=f"Last modified {table.last_modified}")


def records(
    path: Annotated[Path, typer.Argument(help="Path to a .dbf table.")],
    limit: Annotated[int, typer.Option(min=1, help="Max rows to return.")] = 20,
    field: Annotated[list[str] | None, typer.Option("--field", "-f", help="Field to show (repeatable).")] = None,
) -> None:
    """Show decoded records of a table."""
    table = load_or_exit(load_table, path)

    names = field or table.schema.names
    indices: list[int] = []
    for name in names:
        index = table.schema.index_of(name)
        if index is None:
            err_console.print(f"[red]Unknown field:[/red] {escape(name)}")
            raise typer.Exit(1)
        indices.append(index)

    rows = [[i, *(_cell(record, j) for j in indices)] for i, record in enumerate(table.records[:limit])]
    render_table(["#", *names], rows)
    if table.record_count > limit:
        console.print(f"Showing {limit} of {table.record_count} records")
