"""WhatsApp platform adapter using the WhatsApp Business Cloud API."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx

from intentbridge.platforms.exceptions import DeliveryError, PlatformConnectionError
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.protocol import PlatformAdapter

logger = logging.getLogger(__name__)

GRAPH_API_URL = "https://graph.facebook.com"


class WhatsAppAdapter(PlatformAdapter):
    """WhatsApp Business Cloud API adapter.

    Inbound messages are pushed by Meta to the webhook mounted by the API
    server; replies go out through the Graph API.

    Configuration:
        - phone_number_id: Business phone number ID
        - access_token: Graph API access token
        - verify_token: Shared secret for the webhook verification handshake
    """

    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        verify_token: str,
        api_version: str = "v19.0",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()

        self._phone_number_id = phone_number_id
        self._access_token = access_token
        self._verify_token = verify_token
        self._api_version = api_version
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def platform_type(self) -> PlatformType:
        """The type of platform this adapter handles."""
        return PlatformType.WHATSAPP

    async def initialize(self) -> None:
        """Open the Graph API client and check the phone number is reachable."""
        if self._connected:
            logger.warning("WhatsApp adapter already connected")
            return

        client = httpx.AsyncClient(
            base_url=f"{GRAPH_API_URL}/{self._api_version}",
            headers={"Authorization": f"Bearer {self._access_token}"},
            timeout=self._timeout,
            transport=self._transport,
        )
        try:
            response = await client.get(f"/{self._phone_number_id}")
            response.raise_for_status()
        except httpx.HTTPError as e:
            await client.aclose()
            raise PlatformConnectionError(
                f"Failed to verify WhatsApp phone number {self._phone_number_id}: {e}",
                platform="whatsapp",
            ) from e

        self._client = client
        self._connected = True
        logger.info("WhatsApp adapter initialized")

    async def disconnect(self) -> None:
        if self._client is None:
            return

        client, self._client = self._client, None
        self._connected = False
        await client.aclose()
        logger.info("WhatsApp adapter disconnected")

    def verify_webhook(self, mode: Optional[str], token: Optional[str], challenge: Optional[str]) -> Optional[str]:
        """Answer the webhook subscription handshake.

        Returns:
            The challenge to echo back, or None if verification fails
        """
        if mode == "subscribe" and token and token == self._verify_token:
            logger.info("WhatsApp webhook verified")
            return challenge or ""
        logger.warning("WhatsApp webhook verification failed")
        return None

    def parse_webhook(self, payload: dict[str, Any]) -> list[Message]:
        """Extract text messages from a webhook notification payload."""
        messages: list[Message] = []

        for entry in payload.get("entry") or []:
            for change in entry.get("changes") or []:
                value = change.get("value") or {}
                names = {
                    contact.get("wa_id"): (contact.get("profile") or {}).get("name")
                    for contact in value.get("contacts") or []
                }
                for item in value.get("messages") or []:
                    if item.get("type") != "text":
                        logger.debug(f"Ignoring WhatsApp message of type {item.get('type')}")
                        continue

                    sender = item.get("from")
                    body = (item.get("text") or {}).get("body")
                    if not sender or not body:
                        continue

                    timestamp = datetime.now(timezone.utc)
                    if item.get("timestamp"):
                        timestamp = datetime.fromtimestamp(int(item["timestamp"]), tz=timezone.utc)

                    messages.append(
                        Message(
                            id=item.get("id") or str(int(timestamp.timestamp() * 1000)),
                            platform=PlatformType.WHATSAPP,
                            user_id=sender,
                            user_name=names.get(sender),
                            chat_id=sender,
                            text=body,
                            timestamp=timestamp,
                            metadata={
                                "phone_number_id": (value.get("metadata") or {}).get(
                                    "phone_number_id"
                                ),
                            },
                        )
                    )

        return messages

    def handle_webhook(self, payload: dict[str, Any]) -> int:
        """Dispatch every text message in a webhook payload.

        Returns:
            Number of messages dispatched
        """
        messages = self.parse_webhook(payload)
        for message in messages:
            self.dispatch(message)
        return len(messages)

    async def send_message(
        self,
        chat_id: str,
        text: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Send a text message to a WhatsApp number."""
        if self._client is None:
            raise DeliveryError(
                "WhatsApp client not initialized", platform="whatsapp", chat_id=chat_id
            )

        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": chat_id,
            "type": "text",
            "text": {"body": text},
        }
        try:
            response = await self._client.post(f"/{self._phone_number_id}/messages", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Failed to send WhatsApp message: {e}")
            raise DeliveryError(str(e), platform="whatsapp", chat_id=chat_id) from e

        logger.debug(f"Sent WhatsApp message to {chat_id}")
