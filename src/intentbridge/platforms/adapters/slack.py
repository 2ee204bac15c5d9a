"""Slack bot platform adapter using Socket Mode."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from intentbridge.platforms.exceptions import DeliveryError, PlatformConnectionError
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.protocol import PlatformAdapter

logger = logging.getLogger(__name__)

try:
    from slack_sdk.errors import SlackApiError
    from slack_sdk.socket_mode.aiohttp import SocketModeClient
    from slack_sdk.socket_mode.request import SocketModeRequest
    from slack_sdk.socket_mode.response import SocketModeResponse
    from slack_sdk.web.async_client import AsyncWebClient

    SLACK_AVAILABLE = True
except ImportError:
    SLACK_AVAILABLE = False
    logger.warning("slack-sdk not installed. Install with: pip install slack-sdk")

IGNORED_SUBTYPES = ("bot_message", "message_changed", "message_deleted")


class SlackAdapter(PlatformAdapter):
    """Slack bot adapter using Socket Mode.

    Socket Mode uses a WebSocket connection, so it works behind firewalls
    without a public webhook.

    Configuration:
        - bot_token: Bot User OAuth Token (starts with xoxb-)
        - app_token: App-Level Token for Socket Mode (starts with xapp-)
        - allowed_channels: List of allowed channel IDs (empty = all channels)
    """

    def __init__(
        self,
        bot_token: str,
        app_token: str,
        allowed_channels: Optional[list[str]] = None,
    ):
        if not SLACK_AVAILABLE:
            raise ImportError(
                "slack-sdk is required for Slack adapter. "
                "Install with: pip install slack-sdk"
            )

        super().__init__()

        self._bot_token = bot_token
        self._app_token = app_token
        self._allowed_channels = set(allowed_channels) if allowed_channels else None

        self._web_client: Optional[AsyncWebClient] = None
        self._socket_client: Optional[SocketModeClient] = None
        self._bot_user_id: Optional[str] = None

    @property
    def platform_type(self) -> PlatformType:
        """The type of platform this adapter handles."""
        return PlatformType.SLACK

    async def initialize(self) -> None:
        """Authenticate and open the Socket Mode connection."""
        if self._connected:
            logger.warning("Slack adapter already connected")
            return

        logger.info("Starting Slack bot adapter (Socket Mode)")

        web_client = AsyncWebClient(token=self._bot_token)
        try:
            auth_response = await web_client.auth_test()
        except SlackApiError as e:
            raise PlatformConnectionError(
                f"Failed to authenticate Slack bot: {e}", platform="slack"
            ) from e
        self._bot_user_id = auth_response["user_id"]
        logger.info(f"Slack bot authenticated as user ID: {self._bot_user_id}")

        socket_client = SocketModeClient(app_token=self._app_token, web_client=web_client)
        socket_client.socket_mode_request_listeners.append(self._handle_socket_event)
        try:
            await socket_client.connect()
        except Exception as e:
            raise PlatformConnectionError(
                f"Failed to open Slack Socket Mode connection: {e}", platform="slack"
            ) from e

        self._web_client = web_client
        self._socket_client = socket_client
        self._connected = True
        logger.info("Slack adapter initialized")

    async def disconnect(self) -> None:
        """Close the Socket Mode connection."""
        if self._socket_client is None:
            return

        socket_client, self._socket_client = self._socket_client, None
        self._web_client = None
        self._connected = False
        await socket_client.close()
        logger.info("Slack adapter disconnected")

    async def _handle_socket_event(
        self, client: "SocketModeClient", req: "SocketModeRequest"
    ) -> None:
        # Acknowledge first so Slack does not redeliver
        await client.send_socket_mode_response(SocketModeResponse(envelope_id=req.envelope_id))

        if req.type != "events_api":
            return

        event = req.payload.get("event", {})
        if event.get("type") == "message":
            self.handle_event(event)

    def to_message(self, event: dict[str, Any]) -> Optional[Message]:
        """Normalize a Slack message event, or None if it should be ignored."""
        if event.get("subtype") in IGNORED_SUBTYPES or event.get("bot_id"):
            return None
        if self._bot_user_id and event.get("user") == self._bot_user_id:
            return None

        text = event.get("text")
        channel_id = event.get("channel")
        ts = event.get("ts")
        if not text or not channel_id or not ts:
            return None

        return Message(
            id=ts,
            platform=PlatformType.SLACK,
            user_id=event.get("user") or "unknown",
            chat_id=channel_id,
            text=text,
            timestamp=datetime.fromtimestamp(float(ts), tz=timezone.utc),
            metadata={
                "channel_type": event.get("channel_type", "unknown"),
                "thread_ts": event.get("thread_ts"),
            },
        )

    def handle_event(self, event: dict[str, Any]) -> None:
        """Dispatch a Slack message event to the subscribed handler."""
        message = self.to_message(event)
        if message is None:
            return

        if self._allowed_channels and message.chat_id not in self._allowed_channels:
            logger.warning(f"Rejected message from unauthorized channel: {message.chat_id}")
            return

        self.dispatch(message)

    async def send_message(
        self,
        chat_id: str,
        text: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Post a message to a Slack channel.

        `metadata["thread_ts"]` replies inside that thread.
        """
        if self._web_client is None:
            raise DeliveryError("Slack app not initialized", platform="slack", chat_id=chat_id)

        try:
            await self._web_client.chat_postMessage(
                channel=chat_id,
                text=text,
                thread_ts=(metadata or {}).get("thread_ts"),
            )
        except SlackApiError as e:
            logger.error(f"Failed to send Slack message: {e}")
            raise DeliveryError(str(e), platform="slack", chat_id=chat_id) from e

        logger.debug(f"Sent Slack message to {chat_id}")

    async def health_check(self) -> bool:
        """Check if the Slack bot connection is healthy."""
        if not self._connected or self._web_client is None:
            return False

        try:
            await self._web_client.auth_test()
            return True
        except SlackApiError as e:
            logger.error(f"Slack health check failed: {e}")
            return False
