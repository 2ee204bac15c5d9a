"""Simulated actions used when no remote action server is configured.

This is a degraded mode so the pipeline still produces a meaningful reply.
It does not persist anything.
"""

import time
from collections.abc import Callable
from enum import Enum
from typing import Any, Optional

from intentbridge.providers.models import Intent


class SimulatedAction(str, Enum):
    """Actions the simulator knows how to fake."""

    CREATE = "create"
    READ = "read"
    QUERY = "query"
    SEARCH = "search"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def parse(cls, action: str) -> Optional["SimulatedAction"]:
        """Map a free-form intent action onto a known action, if any."""
        try:
            return cls(action.strip().lower())
        except ValueError:
            return None


def _item_type(entities: dict[str, Any]) -> str:
    return entities.get("type") or "item"


def _simulate_create(entities: dict[str, Any]) -> dict[str, Any]:
    return {
        "success": True,
        "id": str(int(time.time() * 1000)),
        "message": f"Created {_item_type(entities)} successfully",
        "data": entities,
    }


def _simulate_lookup(entities: dict[str, Any]) -> dict[str, Any]:
    return {
        "success": True,
        "results": [
            {"id": "1", "name": "Item 1", **entities},
            {"id": "2", "name": "Item 2", **entities},
        ],
    }


def _simulate_update(entities: dict[str, Any]) -> dict[str, Any]:
    return {
        "success": True,
        "message": f"Updated {_item_type(entities)} successfully",
        "data": entities,
    }


def _simulate_delete(entities: dict[str, Any]) -> dict[str, Any]:
    return {
        "success": True,
        "message": f"Deleted {_item_type(entities)} successfully",
    }


_HANDLERS: dict[SimulatedAction, Callable[[dict[str, Any]], dict[str, Any]]] = {
    SimulatedAction.CREATE: _simulate_create,
    SimulatedAction.READ: _simulate_lookup,
    SimulatedAction.QUERY: _simulate_lookup,
    SimulatedAction.SEARCH: _simulate_lookup,
    SimulatedAction.UPDATE: _simulate_update,
    SimulatedAction.DELETE: _simulate_delete,
}


def simulate_action(intent: Intent) -> dict[str, Any]:
    """Synthesize a plausible result for an intent.

    Args:
        intent: The interpreted intent

    Returns:
        A structured result; unknown actions yield success=False with a
        "not sure how to help" message
    """
    action = SimulatedAction.parse(intent.action)
    if action is None:
        return {
            "success": False,
            "message": (
                f"I understand you want to {intent.action}, "
                "but I'm not sure how to help with that yet."
            ),
        }
    return _HANDLERS[action](dict(intent.entities))
