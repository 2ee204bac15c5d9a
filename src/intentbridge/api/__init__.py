"""HTTP facade for IntentBridge."""

from intentbridge.api.server import create_app

__all__ = ["create_app"]
