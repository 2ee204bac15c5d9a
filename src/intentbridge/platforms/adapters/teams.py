"""Microsoft Teams platform adapter using the Bot Framework."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from intentbridge.platforms.conversations import ConversationReferenceStore
from intentbridge.platforms.exceptions import DeliveryError
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.protocol import PlatformAdapter

logger = logging.getLogger(__name__)

try:
    from botbuilder.core import (
        BotFrameworkAdapter,
        BotFrameworkAdapterSettings,
        TurnContext,
    )
    from botbuilder.schema import Activity, ActivityTypes

    BOTBUILDER_AVAILABLE = True
except ImportError:
    BOTBUILDER_AVAILABLE = False
    logger.warning("botbuilder-core not installed. Install with: pip install botbuilder-core")


class TeamsAdapter(PlatformAdapter):
    """Microsoft Teams adapter.

    Inbound activities arrive on the webhook mounted by the API server
    (default /api/teams/messages). Teams can only be reached through the
    conversation reference of an earlier inbound activity, so one is stored
    per chat and replies fail for chats that have never written in.

    Configuration:
        - app_id: Microsoft App ID of the bot registration
        - app_password: Client secret of the bot registration
    """

    def __init__(
        self,
        app_id: str,
        app_password: str,
        references: Optional[ConversationReferenceStore] = None,
    ):
        if not BOTBUILDER_AVAILABLE:
            raise ImportError(
                "botbuilder-core is required for Teams adapter. "
                "Install with: pip install botbuilder-core"
            )

        super().__init__()

        self._app_id = app_id
        self._app_password = app_password
        self._references = references if references is not None else ConversationReferenceStore()
        self._adapter: Optional[BotFrameworkAdapter] = None

    @property
    def platform_type(self) -> PlatformType:
        """The type of platform this adapter handles."""
        return PlatformType.TEAMS

    @property
    def references(self) -> ConversationReferenceStore:
        return self._references

    async def initialize(self) -> None:
        """Create the Bot Framework adapter.

        Credentials are checked by the Bot Framework on each request.
        """
        if self._connected:
            logger.warning("Teams adapter already connected")
            return

        adapter = BotFrameworkAdapter(
            BotFrameworkAdapterSettings(app_id=self._app_id, app_password=self._app_password)
        )
        adapter.on_turn_error = self._on_turn_error

        self._adapter = adapter
        self._connected = True
        logger.info("Teams adapter initialized")

    async def disconnect(self) -> None:
        if self._adapter is None:
            return

        self._adapter = None
        self._connected = False
        logger.info("Teams adapter disconnected")

    async def _on_turn_error(self, context: "TurnContext", error: Exception) -> None:
        logger.error(f"Teams adapter error: {error}", exc_info=error)
        await context.send_activity("Sorry, an error occurred processing your message.")

    async def process_webhook(self, body: dict[str, Any], auth_header: str) -> Optional[Any]:
        """Process one activity posted to the Teams webhook.

        Args:
            body: Deserialized request body
            auth_header: Value of the Authorization header

        Returns:
            The Bot Framework invoke response, if any

        Raises:
            RuntimeError: If the adapter has not been initialized
        """
        if self._adapter is None:
            raise RuntimeError("Teams adapter not initialized")

        activity = Activity().deserialize(body)
        return await self._adapter.process_activity(activity, auth_header, self._on_turn)

    async def _on_turn(self, context: "TurnContext") -> None:
        activity = context.activity
        if activity.type != ActivityTypes.message:
            return

        chat_id = activity.conversation.id
        await self._references.remember(chat_id, TurnContext.get_conversation_reference(activity))

        message = self.to_message(activity)
        if message is not None:
            self.dispatch(message)

    def to_message(self, activity: "Activity") -> Optional[Message]:
        """Normalize a Teams message activity, or None if it has no text."""
        if not activity.text:
            return None

        timestamp = activity.timestamp or datetime.now(timezone.utc)
        return Message(
            id=activity.id or str(int(datetime.now(timezone.utc).timestamp() * 1000)),
            platform=PlatformType.TEAMS,
            user_id=activity.from_property.id,
            user_name=activity.from_property.name,
            chat_id=activity.conversation.id,
            text=activity.text,
            timestamp=timestamp,
            metadata={
                "conversation_type": activity.conversation.conversation_type,
                "channel_id": activity.channel_id,
            },
        )

    async def send_message(
        self,
        chat_id: str,
        text: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Send a message into a previously seen Teams conversation.

        Raises:
            DeliveryError: If the chat has no stored conversation reference
                or the Bot Framework rejects the send
        """
        if self._adapter is None:
            raise DeliveryError("Teams adapter not initialized", platform="teams", chat_id=chat_id)

        reference = await self._references.get(chat_id)
        if reference is None:
            error_msg = f"No conversation reference found for chat ID {chat_id}. Cannot send message."
            logger.error(error_msg)
            raise DeliveryError(error_msg, platform="teams", chat_id=chat_id)

        async def _send(context: "TurnContext") -> None:
            await context.send_activity(text)

        try:
            await self._adapter.continue_conversation(reference, _send, bot_id=self._app_id)
        except Exception as e:
            logger.error(f"Error sending Teams message to {chat_id}: {e}")
            raise DeliveryError(str(e), platform="teams", chat_id=chat_id) from e

        logger.info(f"Sent Teams message to {chat_id}")
