from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from shpkit.errors import ShpkitError

console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]], title: str | None = None) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(v if isinstance(v, Text) else Text(str(v)) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def load_or_exit(loader: Callable[[Path], T], path: Path) -> T:
    """Run *loader* on *path*, turning load failures into exit status 1."""
    try:
        return loader(path)
    except (ShpkitError, OSError, LookupError) as exc:
        err_console.print(f"[red]Failed to load {escape(str(path))}:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc
