"""Remote action execution over JSON-RPC."""

from intentbridge.actions.client import RemoteActionClient
from intentbridge.actions.exceptions import NotConnectedError, RemoteActionError
from intentbridge.actions.models import ActionRequest, ActionResult

__all__ = [
    "ActionRequest",
    "ActionResult",
    "NotConnectedError",
    "RemoteActionClient",
    "RemoteActionError",
]
