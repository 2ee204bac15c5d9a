"""
IntentBridge - chat platforms to AI intents to remote actions.

Receives messages from WhatsApp, Telegram, Slack and Microsoft Teams,
extracts a structured intent with a pluggable language provider, optionally
executes it against a JSON-RPC action server, and replies in the same chat.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("intentbridge")
except PackageNotFoundError:
    __version__ = "1.0.0"

__all__ = [
    "__version__",
]
