"""
intentbridge rpc - Call the remote action server directly.

Usage:
    intentbridge rpc createUser --params '{"name": "John"}'
    intentbridge rpc ping --url http://localhost:4000
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.syntax import Syntax

from intentbridge.actions.client import RemoteActionClient
from intentbridge.actions.models import ActionRequest, ActionResult
from intentbridge.config import ConfigurationError, load_config

console = Console()


async def _call(url: str, timeout: float, rpc_path: str, request: ActionRequest) -> ActionResult:
    client = RemoteActionClient(timeout=timeout, rpc_path=rpc_path)
    await client.connect(url)
    try:
        return await client.request(request)
    finally:
        await client.disconnect()


def rpc(
    method: Annotated[str, typer.Argument(help="Remote method to call.")],
    params: Annotated[
        str,
        typer.Option(
            "--params",
            "-p",
            help="Method parameters as a JSON object.",
        ),
    ] = "{}",
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            help="Action server base URL (defaults to remote_action.server_url).",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to load.",
        ),
    ] = None,
) -> None:
    """Send one JSON-RPC call to the remote action server and print the result."""
    try:
        parsed: Any = json.loads(params)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid --params JSON: {e}[/red]")
        raise typer.Exit(1)
    if not isinstance(parsed, dict):
        console.print("[red]--params must be a JSON object[/red]")
        raise typer.Exit(1)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    server_url = url or config.remote_action.server_url
    if not server_url:
        console.print("[red]No action server URL. Pass --url or set remote_action.server_url.[/red]")
        raise typer.Exit(1)

    request = ActionRequest(method=method, params=parsed, context={"source": "cli"})
    result = asyncio.run(
        _call(server_url, config.remote_action.timeout, config.remote_action.rpc_path, request)
    )

    output = json.dumps(result.to_payload(), indent=2, default=str)
    console.print(Syntax(output, "json", theme="monokai"))
    if not result.success:
        raise typer.Exit(1)
