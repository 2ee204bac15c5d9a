"""Conversation reference storage for platforms that reply by reference."""

import asyncio
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ConversationReferenceStore:
    """Maps chat IDs to opaque delivery-address data.

    Some platforms (Microsoft Teams) can only reach a chat through the
    reference captured from an earlier inbound activity. Entries are written
    on inbound messages and read on outbound sends from concurrent handling
    tasks, so every access goes through one lock.

    Entries are never evicted.
    """

    def __init__(self) -> None:
        self._references: dict[str, Any] = {}
        self._lock = asyncio.Lock()

    async def remember(self, chat_id: str, reference: Any) -> None:
        """Store or refresh the reference for a chat.

        Args:
            chat_id: Platform chat identifier
            reference: Opaque platform reference object
        """
        async with self._lock:
            is_new = chat_id not in self._references
            self._references[chat_id] = reference

        if is_new:
            logger.debug(f"Stored conversation reference for chat {chat_id}")

    async def get(self, chat_id: str) -> Optional[Any]:
        """Look up the reference for a chat.

        Args:
            chat_id: Platform chat identifier

        Returns:
            The stored reference, or None if the chat has never been seen
        """
        async with self._lock:
            return self._references.get(chat_id)

    async def forget(self, chat_id: str) -> bool:
        """Remove the reference for a chat.

        Returns:
            True if a reference was removed
        """
        async with self._lock:
            return self._references.pop(chat_id, None) is not None

    async def clear(self) -> None:
        """Remove every stored reference."""
        async with self._lock:
            self._references.clear()

    def __len__(self) -> int:
        return len(self._references)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._references
