"""
Build command: sync best chain and write the checkpoints file
"""

import json
from typing import Optional

import typer
from rich.console import Console

from chaincp.build import DEFAULT_OUTPUT, build_checkpoints
from chaincp.core.errors import CheckpointError
from chaincp.core.params import SpotCheck, load_params
from chaincp.logging_config import get_logger, setup_logging
from chaincp.sync import JsonlHeaderSource, RpcHeaderSource

console = Console()


def build_command(
    network: Optional[str] = typer.Option(
        None, "--network", "-n", envvar="CHAINCP_NETWORK", help="Network name (default: bitcoin)"
    ),
    headers: Optional[str] = typer.Option(
        None, "--headers", help="Best-chain header dump (JSONL) to replay"
    ),
    rpc_url: Optional[str] = typer.Option(
        "http://127.0.0.1:8332", "--rpc-url", envvar="CHAINCP_RPC_URL", help="Node JSON-RPC endpoint"
    ),
    rpc_user: Optional[str] = typer.Option(None, "--rpc-user", envvar="CHAINCP_RPC_USER"),
    rpc_password: Optional[str] = typer.Option(None, "--rpc-password", envvar="CHAINCP_RPC_PASSWORD"),
    output: str = typer.Option(DEFAULT_OUTPUT, "--out", "-o", help="Output checkpoints file"),
    interval: Optional[int] = typer.Option(None, "--interval", help="Override difficulty interval"),
    min_age: Optional[int] = typer.Option(None, "--min-age", help="Override minimum age (seconds)"),
    expect: Optional[str] = typer.Option(
        None, "--expect", help="Spot check TIMESTAMP:HEIGHT:HASH verified after writing"
    ),
    stop_height: Optional[int] = typer.Option(None, "--stop-height", help="Stop syncing after this height"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Build the checkpoints file from a synced chain.

    Examples:
        chaincp build
        chaincp build --network dogecoin --rpc-url http://127.0.0.1:22555
        chaincp build --headers headers.jsonl --out checkpoints
    """
    setup_logging()

    try:
        spot_check = SpotCheck.parse(expect) if expect else None
        params = load_params(network, interval, min_age, spot_check)
        logger = get_logger(__name__, network=params.name)

        if headers:
            source = JsonlHeaderSource(headers)
        else:
            source = RpcHeaderSource(rpc_url, user=rpc_user, password=rpc_password)

        with source:
            result = build_checkpoints(source, params, output_path=output, stop_height=stop_height)
        logger.info("Wrote %d checkpoints", result.count)

    except OSError as e:
        _fail(json_output, str(e))
        raise typer.Exit(2)
    except CheckpointError as e:
        _fail(json_output, str(e))
        raise typer.Exit(1)

    if json_output:
        print(
            json.dumps(
                {
                    "success": True,
                    "path": result.path,
                    "digest": result.digest,
                    "count": result.count,
                    "network": params.name,
                },
                indent=2,
            )
        )
    else:
        print(f"Hash of checkpoints data is {result.digest}")
        console.print(f"[green]✓[/green] Checkpoints written to '{result.path}'.")


def _fail(json_output: bool, message: str) -> None:
    if json_output:
        print(json.dumps({"success": False, "error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
