"""
File commands: show, before, digest
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from chaincp.codec import CheckpointManager, load_checkpoints
from chaincp.core.errors import FormatError

app = typer.Typer()
console = Console()


def _load(path: str, json_output: bool) -> CheckpointManager:
    try:
        return load_checkpoints(path)
    except FileNotFoundError:
        if json_output:
            print(json.dumps({"error": "File not found", "path": path}))
        else:
            console.print(f"[red]Error: File not found:[/red] {path}")
        raise typer.Exit(2)
    except OSError as e:
        if json_output:
            print(json.dumps({"error": str(e), "path": path}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    except FormatError as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Malformed checkpoints file:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    path: str = typer.Argument("checkpoints", help="Path to checkpoints file"),
    lines: int = typer.Option(0, "--lines", "-n", help="Only show the last N checkpoints"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List checkpoints in a file.

    Examples:
        chaincp file show
        chaincp file show checkpoints --lines 10
    """
    manager = _load(path, json_output)
    rows = list(manager)
    if lines:
        rows = rows[-lines:]

    if json_output:
        print(
            json.dumps(
                {
                    "checkpoints": [cp.to_dict() for cp in rows],
                    "count": manager.num_checkpoints(),
                    "signatures": manager.signature_count,
                    "digest": manager.digest,
                },
                indent=2,
            )
        )
        return

    table = Table(title=f"Checkpoints: {path}")
    table.add_column("Height", style="cyan", justify="right")
    table.add_column("Timestamp", style="yellow", justify="right")
    table.add_column("Hash", style="green")
    for cp in rows:
        table.add_row(str(cp.height), str(cp.timestamp), cp.hash_hex)

    console.print(table)
    console.print(f"\n[bold]Total checkpoints:[/bold] {manager.num_checkpoints()}")
    console.print(f"[bold]Signatures:[/bold] {manager.signature_count}")
    console.print(f"[bold]Digest:[/bold] {manager.digest}")


@app.command()
def before(
    path: str = typer.Argument(..., help="Path to checkpoints file"),
    timestamp: int = typer.Argument(..., help="Unix time to look up"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Find the checkpoint at or before a time.

    Exits 1 when no checkpoint is that old (validation starts from genesis).
    """
    manager = _load(path, json_output)
    cp = manager.checkpoint_before(timestamp)

    if cp is None:
        if json_output:
            print(json.dumps({"found": False, "timestamp": timestamp}))
        else:
            console.print(f"[yellow]No checkpoint at or before {timestamp}[/yellow]")
        raise typer.Exit(1)

    if json_output:
        print(json.dumps({"found": True, **cp.to_dict()}))
    else:
        console.print(f"Height: [cyan]{cp.height}[/cyan]")
        console.print(f"Timestamp: {cp.timestamp}")
        console.print(f"Hash: [green]{cp.hash_hex}[/green]")


@app.command()
def digest(
    path: str = typer.Argument("checkpoints", help="Path to checkpoints file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Reload a file and print the digest a signature would cover."""
    manager = _load(path, json_output)

    if json_output:
        print(json.dumps({"digest": manager.digest, "count": manager.num_checkpoints()}))
    else:
        print(f"Hash of checkpoints data is {manager.digest}")
        console.print(f"{manager.num_checkpoints()} checkpoints, {manager.signature_count} signatures")
