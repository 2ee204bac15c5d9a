"""
intentbridge platforms - Show messaging platform configuration.

Usage:
    intentbridge platforms
    intentbridge platforms --config ./config.yaml
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from intentbridge.config import ConfigurationError, load_config

console = Console()


def platforms(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to load.",
        ),
    ] = None,
) -> None:
    """Show which platforms are enabled and fully configured."""
    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="Messaging Platforms")
    table.add_column("Platform", style="cyan")
    table.add_column("Enabled", style="bold")
    table.add_column("Configured")

    for name, section in config.platforms.items():
        missing = section.missing_credentials()
        enabled = "[green]yes[/green]" if section.enable else "[dim]no[/dim]"
        if not missing:
            configured = "[green]✓ Ready[/green]"
        else:
            configured = f"[yellow]missing {', '.join(missing)}[/yellow]"
        table.add_row(name, enabled, configured)

    console.print(table)

    enabled_count = len(config.enabled_platforms())
    if enabled_count == 0:
        console.print("[yellow]No platforms enabled[/yellow]")
        console.print("[dim]Set platforms.<name>.enable: true to enable[/dim]")
    else:
        console.print(f"\n[green]✓[/green] {enabled_count} platform(s) enabled")
