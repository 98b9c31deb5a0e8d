#!/usr/bin/env python3
"""
chaincp CLI - Checkpoint file builder

Main entrypoint for the chaincp command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import build, file

# Initialize Typer app
app = typer.Typer(
    name="chaincp",
    help="Build and inspect blockchain checkpoint files",
    add_completion=False,
)

console = Console()

app.add_typer(file.app, name="file", help="Inspect checkpoints files")

app.command(name="build")(build.build_command)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from chaincp.codec.format import MAGIC

    table = Table(show_header=False, box=None)
    table.add_row("[bold]chaincp[/bold]", f"v{__version__}")
    table.add_row("File format", MAGIC.decode("ascii"))

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
