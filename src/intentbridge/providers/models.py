"""
Provider data models for IntentBridge.

Defines the structured intent exchanged between providers and the router.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageRole(str, Enum):
    """Valid completion message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class Intent:
    """Structured interpretation of free text.

    `action` is a free-form verb. Providers may invent values beyond the
    common ones ("create", "query", "update", "delete", "unknown", "error").
    """

    action: str
    entities: dict[str, Any] = field(default_factory=dict)
    confidence: float = 0.5

    ERROR_ACTION = "error"
    UNKNOWN_ACTION = "unknown"

    @property
    def is_error(self) -> bool:
        """Whether the provider failed to interpret the text."""
        return self.action == self.ERROR_ACTION

    @classmethod
    def error(cls, message: str) -> "Intent":
        """Create the intent returned when interpretation fails."""
        return cls(action=cls.ERROR_ACTION, entities={"error": message}, confidence=0.0)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "action": self.action,
            "entities": self.entities,
            "confidence": self.confidence,
        }
