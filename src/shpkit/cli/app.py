import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from shpkit.cli.output import err_console
from shpkit.cli.shapes import info, shapes
from shpkit.cli.table import fields, records
from shpkit.config import get_log_level

app = typer.Typer(
    name="shpkit",
    help="shpkit CLI: inspect shapefile geometry and dBase attribute tables.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    level = logging.DEBUG if verbose else get_log_level()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


app.command("fields")(fields)
app.command("records")(records)
app.command("shapes")(shapes)
app.command("info")(info)


def main() -> None:
    app()
