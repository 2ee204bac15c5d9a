"""
intentbridge config - Configuration inspection commands.

Usage:
    intentbridge config show
    intentbridge config show --json
    intentbridge config validate
"""

import json
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax

from intentbridge.cli.output import mask_secrets
from intentbridge.config import (
    Config,
    ConfigurationError,
    expand_env_references,
    load_config,
    load_yaml_file,
)
from intentbridge.storage.paths import get_global_config_path

app = typer.Typer(
    name="config",
    help="Configuration management.",
)

console = Console()


ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Config file to load.",
    ),
]


@app.command()
def show(
    config_path: ConfigOption = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the effective configuration with secrets masked."""
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    config_dict = mask_secrets(config.model_dump())

    if json_output:
        output = json.dumps(config_dict, indent=2, default=str)
        console.print(Syntax(output, "json", theme="monokai"))
    else:
        output = yaml.dump(
            config_dict,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        console.print(Syntax(output, "yaml", theme="monokai"))


@app.command()
def validate(config_path: ConfigOption = None) -> None:
    """Validate configuration and report startup problems."""
    source = config_path or get_global_config_path()
    console.print(f"Validating: {source}")

    try:
        if config_path is not None:
            # Report field-level errors for the file on its own first
            Config.model_validate(expand_env_references(load_yaml_file(config_path)))
        config = load_config(config_path)
    except ValidationError as e:
        console.print("[red]Validation failed:[/red]")
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            console.print(f"  [red]{loc}:[/red] {error['msg']}")
        raise typer.Exit(1)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    problems = config.startup_problems()
    if problems:
        console.print("[red]Configuration is incomplete:[/red]")
        for problem in problems:
            console.print(f"  [red]-[/red] {problem}")
        raise typer.Exit(1)

    console.print("[green]Configuration is valid.[/green]")
    console.print("\n[bold]Configuration summary:[/bold]")
    console.print(f"  AI provider: {config.ai.provider}")
    console.print(f"  Platforms: {', '.join(config.enabled_platforms()) or 'none'}")
    remote = config.remote_action.server_url if config.remote_action.enable else "disabled (simulated)"
    console.print(f"  Remote actions: {remote}")
    console.print(f"  API auth: {'enabled' if config.api.auth_enabled else 'disabled'}")
