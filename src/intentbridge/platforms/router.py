"""Message router service for multi-platform messaging."""

import logging
from typing import Any, Optional

from intentbridge.actions.client import RemoteActionClient
from intentbridge.actions.models import ActionRequest
from intentbridge.audit import AuditLogger
from intentbridge.platforms.models import Message
from intentbridge.platforms.protocol import PlatformAdapter
from intentbridge.platforms.simulation import simulate_action
from intentbridge.providers.models import Intent
from intentbridge.providers.protocol import LanguageProvider

logger = logging.getLogger(__name__)

GENERIC_APOLOGY = "Sorry, I encountered an error processing your request. Please try again."

# Inbound metadata carried back to the adapter as send options
REPLY_METADATA_KEYS = ("thread_ts",)


class MessageRouter:
    """Routes messages between platform adapters and the language provider.

    The router:
    1. Manages the registered platform adapters
    2. Interprets each inbound message into an intent
    3. Executes the intent remotely, or simulates it when no client is set
    4. Delivers exactly one reply back to the originating chat

    Each message is handled independently. The adapter registry is filled
    at startup before messages flow and is only read afterwards.
    """

    def __init__(
        self,
        provider: LanguageProvider,
        action_client: Optional[RemoteActionClient] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> None:
        """Initialize the message router.

        Args:
            provider: Natural-language provider used to interpret and reply
            action_client: Remote action client (None = simulate actions)
            audit_logger: Optional audit trail
        """
        self._provider = provider
        self._action_client = action_client
        self._audit = audit_logger
        self._adapters: dict[str, PlatformAdapter] = {}

    @property
    def provider(self) -> LanguageProvider:
        return self._provider

    @property
    def action_client(self) -> Optional[RemoteActionClient]:
        return self._action_client

    def register_adapter(self, adapter: PlatformAdapter) -> None:
        """Register a platform adapter with the router.

        Must be called before the adapter's initialize() so no inbound
        message arrives without a subscriber.

        Args:
            adapter: The platform adapter to register

        Raises:
            ValueError: If an adapter for this platform is already registered
        """
        platform_name = adapter.platform_type.value
        if platform_name in self._adapters:
            raise ValueError(f"Adapter for {platform_name} already registered")

        self._adapters[platform_name] = adapter
        adapter.on_message(self.handle_message)
        logger.info(f"Registered adapter for platform: {platform_name}")

    def unregister_adapter(self, platform_name: str) -> None:
        """Unregister a platform adapter.

        Args:
            platform_name: The name of the platform to unregister
        """
        if platform_name in self._adapters:
            del self._adapters[platform_name]
            logger.info(f"Unregistered adapter for platform: {platform_name}")

    def get_adapter(self, platform_name: str) -> Optional[PlatformAdapter]:
        """Get an adapter by platform name.

        Args:
            platform_name: The name of the platform

        Returns:
            The adapter, or None if not found
        """
        return self._adapters.get(platform_name)

    @property
    def active_platforms(self) -> list[str]:
        """Get list of registered platform names."""
        return list(self._adapters.keys())

    async def handle_message(self, message: Message) -> None:
        """Run one inbound message through interpret, act, respond, deliver.

        Exactly one send is attempted for every message. If anything in the
        first three stages raises, the generic apology is sent instead.

        Args:
            message: The inbound message
        """
        logger.info(f"Received message: {message}")
        if self._audit:
            self._audit.log_platform_message_received(
                platform=message.platform.value,
                user_id=message.user_id,
                chat_id=message.chat_id,
                message=message.text,
                username=message.user_name,
            )

        try:
            reply = await self._process(message)
        except Exception as e:
            logger.error(f"Error handling message {message.id}: {e}", exc_info=True)
            reply = GENERIC_APOLOGY

        await self._deliver(message, reply)

    async def _process(self, message: Message) -> str:
        # 1. Interpret
        intent = await self._provider.process_natural_language(
            message.text,
            {
                "platform": message.platform.value,
                "userId": message.user_id,
                "userName": message.user_name,
            },
        )
        logger.debug(f"Intent for message {message.id}: {intent}")

        # 2. Act
        data = await self._act(intent, message)

        # 3. Respond
        return await self._provider.generate_response(
            intent, data, {"platform": message.platform.value}
        )

    async def _act(self, intent: Intent, message: Message) -> Any:
        if self._action_client is None or intent.is_error:
            return simulate_action(intent)

        request = ActionRequest(
            method=intent.action,
            params=intent.entities,
            context={
                "platform": message.platform.value,
                "userId": message.user_id,
                "userName": message.user_name,
                "chatId": message.chat_id,
            },
        )
        result = await self._action_client.request(request)

        if self._audit:
            self._audit.log_action_request(
                method=request.method,
                success=result.success,
                platform=message.platform.value,
                error=result.error,
            )

        if not result.success:
            logger.warning(f"Remote action {request.method} failed: {result.error}")
            return {"error": result.error}
        return result.data

    async def _deliver(self, message: Message, text: str) -> None:
        platform_name = message.platform.value
        adapter = self._adapters.get(platform_name)
        if adapter is None:
            logger.error(
                f"No adapter registered for platform {platform_name}; "
                f"dropping reply to chat {message.chat_id}"
            )
            return

        reply_metadata = {
            key: message.metadata[key] for key in REPLY_METADATA_KEYS if message.metadata.get(key)
        }

        try:
            await adapter.send_message(message.chat_id, text, reply_metadata or None)
        except Exception as e:
            logger.error(
                f"Failed to deliver reply to {platform_name} chat {message.chat_id}: {e}",
                exc_info=True,
            )
            if self._audit:
                self._audit.log_platform_delivery_failed(platform_name, message.chat_id, str(e))
            return

        if self._audit:
            self._audit.log_platform_message_sent(platform_name, message.chat_id, text)

    async def health_check(self) -> dict[str, bool]:
        """Check health of all adapters.

        Returns:
            Dict mapping platform names to health status
        """
        health = {}
        for platform_name, adapter in self._adapters.items():
            try:
                health[platform_name] = await adapter.health_check()
            except Exception as e:
                logger.error(f"Health check failed for {platform_name}: {e}")
                health[platform_name] = False
        return health

    async def shutdown(self) -> None:
        """Disconnect every adapter and the action client.

        Each disconnect failure is logged and the rest still run.
        """
        logger.info("Shutting down message router")

        for platform_name, adapter in self._adapters.items():
            try:
                await adapter.disconnect()
                logger.info(f"Disconnected adapter for {platform_name}")
                if self._audit:
                    self._audit.log_platform_adapter_stopped(platform_name)
            except Exception as e:
                logger.error(f"Failed to disconnect adapter for {platform_name}: {e}")

        if self._action_client is not None:
            try:
                await self._action_client.disconnect()
            except Exception as e:
                logger.error(f"Failed to disconnect remote action client: {e}")

        logger.info("Message router stopped")
