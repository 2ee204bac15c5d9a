"""
Main Typer application for the intentbridge CLI.

This module defines the root CLI application and registers all commands.
"""

from typing import Annotated

import typer

from intentbridge import __version__
from intentbridge.cli.commands import config, platforms, rpc, serve
from intentbridge.cli.output import print_info

# Create the main Typer app
app = typer.Typer(
    name="intentbridge",
    help="Bridge chat platforms to AI intents and remote actions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"intentbridge version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    [bold blue]intentbridge[/bold blue] - chat platforms to AI-driven actions

    Receives messages from WhatsApp, Telegram, Slack and Microsoft Teams,
    turns them into intents, runs them against a remote action server,
    and replies in the same chat.
    """


# Register commands
app.command()(serve.serve)
app.command()(platforms.platforms)
app.command()(rpc.rpc)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
