"""Data models for multi-platform messaging."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class PlatformType(str, Enum):
    """Supported messaging platforms."""

    WHATSAPP = "whatsapp"
    TELEGRAM = "telegram"
    SLACK = "slack"
    TEAMS = "teams"


class Message(BaseModel):
    """A single inbound chat turn, normalized from a platform event.

    Messages are frozen once an adapter has built them.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    platform: PlatformType
    user_id: str
    user_name: Optional[str] = None
    chat_id: str
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: dict[str, Any] = Field(default_factory=dict)

    def __str__(self) -> str:
        """String representation for logging."""
        return f"[{self.platform.value}] {self.user_name or self.user_id}@{self.chat_id}: {self.text[:50]}"
