"""Platform adapter protocol definition."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from intentbridge.platforms.models import Message, PlatformType

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Message], Awaitable[None]]


class PlatformAdapter(ABC):
    """Abstract base class for platform adapters.

    Each platform (WhatsApp, Telegram, Slack, Teams) implements this protocol
    to provide a unified interface for the message router.

    An adapter has at most one message handler. Registering a new handler
    replaces the previous one.
    """

    def __init__(self) -> None:
        """Initialize the platform adapter."""
        self._connected = False
        self._handler: Optional[MessageHandler] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    @abstractmethod
    def platform_type(self) -> PlatformType:
        """The type of platform this adapter handles."""
        ...

    @property
    def is_connected(self) -> bool:
        """Check if the adapter currently holds a live connection."""
        return self._connected

    @property
    def has_handler(self) -> bool:
        """Check if a message handler is subscribed."""
        return self._handler is not None

    @abstractmethod
    async def initialize(self) -> None:
        """Establish the platform connection.

        This method should:
        1. Build platform-specific clients from the stored credentials
        2. Verify the credentials with the platform where possible
        3. Begin listening for incoming messages
        4. Set self._connected = True

        Raises:
            PlatformConnectionError: If credentials are invalid or the
                platform is unreachable
        """
        ...

    @abstractmethod
    async def send_message(
        self,
        chat_id: str,
        text: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Deliver text to a chat.

        Resolves once the platform transport has accepted the message.

        Args:
            chat_id: Platform-specific chat identifier
            text: Message text
            metadata: Optional platform-specific send options

        Raises:
            DeliveryError: If the chat cannot be addressed or the transport
                rejects the send
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release transport resources. Safe to call when not connected."""
        ...

    def on_message(self, handler: MessageHandler) -> None:
        """Subscribe the single inbound message handler.

        Args:
            handler: Coroutine function invoked once per inbound message
        """
        if self._handler is not None and self._handler is not handler:
            logger.warning(
                f"Replacing existing message handler on {self.platform_type.value} adapter"
            )
        self._handler = handler

    def dispatch(self, message: Message) -> Optional[asyncio.Task]:
        """Hand an inbound message to the subscribed handler.

        The handler runs as its own task so a slow message never blocks
        the platform's event loop or other chats.

        Args:
            message: Normalized inbound message

        Returns:
            The scheduled task, or None if no handler is subscribed
        """
        if self._handler is None:
            logger.warning(f"Dropping message with no handler subscribed: {message}")
            return None

        task = asyncio.create_task(
            self._run_handler(self._handler, message),
            name=f"handle-{message.platform.value}-{message.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_handler(self, handler: MessageHandler, message: Message) -> None:
        try:
            await handler(message)
        except Exception as e:
            logger.error(f"Message handler failed for {message}: {e}", exc_info=True)

    async def health_check(self) -> bool:
        """Check if the platform connection is healthy.

        Returns:
            True if healthy, False otherwise

        Default implementation reports the connection flag. Platforms can
        override to implement specific health checks.
        """
        return self._connected
