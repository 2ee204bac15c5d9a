"""
Audit logging for IntentBridge.

Writes platform and remote-action events to a JSON Lines file.
"""

import hashlib
import json
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from intentbridge.config.schema import AuditConfig
from intentbridge.storage.paths import expand_path

logger = logging.getLogger(__name__)


class AuditEventType(str, Enum):
    """Types of audit events."""

    PLATFORM_MESSAGE_RECEIVED = "platform_message_received"
    PLATFORM_MESSAGE_SENT = "platform_message_sent"
    PLATFORM_DELIVERY_FAILED = "platform_delivery_failed"
    PLATFORM_ADAPTER_STARTED = "platform_adapter_started"
    PLATFORM_ADAPTER_STOPPED = "platform_adapter_stopped"
    PLATFORM_ADAPTER_ERROR = "platform_adapter_error"
    ACTION_REQUEST = "action_request"


class AuditLogger:
    """
    JSON Lines based audit logger.

    Message text is stored only when include_messages is set; otherwise a
    short SHA-256 digest stands in for it. A failed write is logged and
    never interrupts the caller.
    """

    def __init__(
        self,
        log_path: str | Path,
        enable: bool = True,
        include_messages: bool = False,
    ) -> None:
        self.log_path = expand_path(log_path)
        self.enable = enable
        self.include_messages = include_messages
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: AuditConfig) -> "AuditLogger":
        return cls(
            log_path=config.path,
            enable=config.enable,
            include_messages=config.include_messages,
        )

    @staticmethod
    def _hash_text(text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]

    def _text_fields(self, key: str, text: str) -> dict[str, str]:
        if self.include_messages:
            return {key: text}
        return {f"{key}_hash": self._hash_text(text)}

    def _write_event(self, event_type: AuditEventType, data: dict[str, Any]) -> None:
        if not self.enable:
            return

        event = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type.value,
            **data,
        }
        try:
            line = json.dumps(event, default=str, ensure_ascii=False)
            with self._lock:
                self.log_path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.log_path, "a", encoding="utf-8") as f:
                    f.write(line + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit event {event_type.value}: {e}")

    def log_platform_message_received(
        self,
        platform: str,
        user_id: str,
        chat_id: str,
        message: str,
        username: Optional[str] = None,
    ) -> None:
        """Log a message received from a platform."""
        data: dict[str, Any] = {"platform": platform, "user_id": user_id, "chat_id": chat_id}
        if username:
            data["username"] = username
        data.update(self._text_fields("message", message))
        self._write_event(AuditEventType.PLATFORM_MESSAGE_RECEIVED, data)

    def log_platform_message_sent(self, platform: str, chat_id: str, response: str) -> None:
        """Log a reply handed to a platform."""
        data: dict[str, Any] = {"platform": platform, "chat_id": chat_id}
        data.update(self._text_fields("response", response))
        self._write_event(AuditEventType.PLATFORM_MESSAGE_SENT, data)

    def log_platform_delivery_failed(self, platform: str, chat_id: str, error: str) -> None:
        """Log a reply that could not be delivered."""
        self._write_event(
            AuditEventType.PLATFORM_DELIVERY_FAILED,
            {"platform": platform, "chat_id": chat_id, "error": error},
        )

    def log_platform_adapter_started(self, platform: str) -> None:
        self._write_event(AuditEventType.PLATFORM_ADAPTER_STARTED, {"platform": platform})

    def log_platform_adapter_stopped(self, platform: str) -> None:
        self._write_event(AuditEventType.PLATFORM_ADAPTER_STOPPED, {"platform": platform})

    def log_platform_adapter_error(self, platform: str, error: str) -> None:
        self._write_event(
            AuditEventType.PLATFORM_ADAPTER_ERROR, {"platform": platform, "error": error}
        )

    def log_action_request(
        self,
        method: str,
        success: bool,
        platform: Optional[str] = None,
        error: Optional[str] = None,
    ) -> None:
        """Log one remote action call and its outcome."""
        data: dict[str, Any] = {"method": method, "success": success}
        if platform:
            data["platform"] = platform
        if error:
            data["error"] = error
        self._write_event(AuditEventType.ACTION_REQUEST, data)
