"""
intentbridge serve - Run the bridge.

Usage:
    intentbridge serve
    intentbridge serve --config ./config.yaml --port 8080 --log-level DEBUG
"""

import asyncio
from pathlib import Path
from typing import Annotated

import typer

from intentbridge.cli.output import print_error, print_info
from intentbridge.config import ConfigurationError, load_config
from intentbridge.logging_config import setup_logging
from intentbridge.platforms.exceptions import PlatformError
from intentbridge.providers.exceptions import ProviderConfigurationError
from intentbridge.service import IntentBridgeService

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def serve(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to load.",
        ),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option(
            "--port",
            help="Port for the HTTP API.",
            min=1,
            max=65535,
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL.",
        ),
    ] = None,
) -> None:
    """Start the platform adapters and the HTTP API."""
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        print_error(f"Invalid log level: {log_level}")
        raise typer.Exit(1)

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        print_error(f"Configuration error: {e}")
        raise typer.Exit(1)

    if port is not None:
        config.server.port = port
    if log_level is not None:
        config.logging.level = log_level.upper()

    problems = config.startup_problems()
    if problems:
        print_error("Cannot start with the current configuration:")
        for problem in problems:
            print_error(f"  {problem}")
        raise typer.Exit(1)

    setup_logging(config.logging.level, config.logging.file)
    enabled = ", ".join(config.enabled_platforms()) or "none"
    print_info(f"Starting IntentBridge on port {config.server.port} (platforms: {enabled})")

    service = IntentBridgeService(config)
    try:
        asyncio.run(service.run())
    except (ConfigurationError, PlatformError, ProviderConfigurationError, ImportError) as e:
        print_error(f"Startup failed: {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        pass  # Clean exit on Ctrl+C
