"""
Output formatting utilities for the CLI.

Provides consistent output formatting across all CLI commands.
"""

from typing import Any

from rich.console import Console

# Global console instance
console = Console()

SECRET_MARKERS = ("token", "key", "password", "secret")
MASK = "********"


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def is_secret_key(key: str) -> bool:
    """Whether a config key names a credential."""
    lowered = key.lower()
    return any(marker in lowered for marker in SECRET_MARKERS)


def mask_secrets(value: Any) -> Any:
    """Recursively replace non-empty credential values with a mask."""
    if isinstance(value, dict):
        return {
            k: (MASK if is_secret_key(str(k)) and v else mask_secrets(v))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [mask_secrets(item) for item in value]
    return value
