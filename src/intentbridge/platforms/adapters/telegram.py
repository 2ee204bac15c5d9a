"""Telegram bot platform adapter using long polling."""

import logging
from typing import Any, Optional

from intentbridge.platforms.exceptions import DeliveryError, PlatformConnectionError
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.protocol import PlatformAdapter

logger = logging.getLogger(__name__)

try:
    from telegram import Bot, Update
    from telegram.constants import ParseMode
    from telegram.error import BadRequest, TelegramError
    from telegram.ext import Application, ContextTypes, MessageHandler, filters

    TELEGRAM_AVAILABLE = True
except ImportError:
    TELEGRAM_AVAILABLE = False
    logger.warning(
        "python-telegram-bot not installed. "
        "Install with: pip install python-telegram-bot"
    )


class TelegramAdapter(PlatformAdapter):
    """Telegram bot adapter using long polling.

    Uses python-telegram-bot library with polling mode.
    No webhook setup required.

    Configuration:
        - bot_token: Telegram bot token from @BotFather
        - allowed_users: List of allowed Telegram user IDs (empty = all users)
        - polling_interval: Seconds between poll requests (default: 2)
    """

    def __init__(
        self,
        bot_token: str,
        allowed_users: Optional[list[str]] = None,
        polling_interval: float = 2.0,
    ):
        """Initialize Telegram adapter.

        Args:
            bot_token: Bot token from @BotFather
            allowed_users: List of allowed user IDs (None or empty = all users)
            polling_interval: Polling interval in seconds
        """
        if not TELEGRAM_AVAILABLE:
            raise ImportError(
                "python-telegram-bot is required for Telegram adapter. "
                "Install with: pip install python-telegram-bot"
            )

        super().__init__()

        self._bot_token = bot_token
        self._allowed_users = set(allowed_users) if allowed_users else None
        self._polling_interval = polling_interval

        self._application: Optional[Application] = None
        self._bot: Optional[Bot] = None

    @property
    def platform_type(self) -> PlatformType:
        """The type of platform this adapter handles."""
        return PlatformType.TELEGRAM

    async def initialize(self) -> None:
        """Start the Telegram bot with long polling."""
        if self._connected:
            logger.warning("Telegram adapter already connected")
            return

        logger.info("Starting Telegram bot adapter (polling mode)")

        application = Application.builder().token(self._bot_token).build()
        application.add_handler(
            MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_update)
        )

        try:
            # initialize() calls getMe, which rejects a bad token
            await application.initialize()
            await application.start()
            await application.updater.start_polling(
                poll_interval=self._polling_interval,
                allowed_updates=Update.ALL_TYPES,
            )
        except TelegramError as e:
            raise PlatformConnectionError(
                f"Failed to start Telegram bot: {e}", platform="telegram"
            ) from e

        self._application = application
        self._bot = application.bot
        self._connected = True
        logger.info("Telegram adapter initialized")

    async def disconnect(self) -> None:
        """Stop polling and shut the bot down."""
        if self._application is None:
            return

        application, self._application = self._application, None
        self._bot = None
        self._connected = False

        if application.updater and application.updater.running:
            await application.updater.stop()
        if application.running:
            await application.stop()
        await application.shutdown()
        logger.info("Telegram adapter disconnected")

    def to_message(self, update: "Update") -> Optional[Message]:
        """Normalize a Telegram update, or None if it carries no text."""
        tg_message = update.effective_message
        if tg_message is None or not tg_message.text:
            return None

        user = update.effective_user
        chat = update.effective_chat
        return Message(
            id=str(tg_message.message_id),
            platform=PlatformType.TELEGRAM,
            user_id=str(user.id) if user else "unknown",
            user_name=(user.username or user.first_name) if user else None,
            chat_id=str(chat.id),
            text=tg_message.text,
            timestamp=tg_message.date,
            metadata={
                "chat_type": chat.type,
                "first_name": user.first_name if user else None,
                "last_name": user.last_name if user else None,
            },
        )

    async def _handle_update(self, update: "Update", context: "ContextTypes.DEFAULT_TYPE") -> None:
        message = self.to_message(update)
        if message is None:
            return

        if self._allowed_users and message.user_id not in self._allowed_users:
            logger.warning(f"Rejected message from unauthorized user: {message.user_id}")
            return

        self.dispatch(message)

    async def send_message(
        self,
        chat_id: str,
        text: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Send a message to a Telegram chat.

        `metadata["parse_mode"]` overrides the default HTML parse mode. Text
        that Telegram cannot parse in that mode is resent as plain text.
        """
        if self._bot is None:
            raise DeliveryError("Telegram bot not initialized", platform="telegram", chat_id=chat_id)

        parse_mode = (metadata or {}).get("parse_mode", ParseMode.HTML)
        try:
            try:
                await self._bot.send_message(chat_id=chat_id, text=text, parse_mode=parse_mode)
            except BadRequest as e:
                if not parse_mode or "can't parse entities" not in str(e).lower():
                    raise
                logger.warning(f"Telegram rejected {parse_mode} markup, resending as plain text: {e}")
                await self._bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as e:
            logger.error(f"Failed to send Telegram message: {e}")
            raise DeliveryError(str(e), platform="telegram", chat_id=chat_id) from e

        logger.debug(f"Sent Telegram message to {chat_id}")

    async def health_check(self) -> bool:
        """Check if the Telegram bot connection is healthy."""
        if not self._connected or self._bot is None:
            return False

        try:
            await self._bot.get_me()
            return True
        except TelegramError as e:
            logger.error(f"Telegram health check failed: {e}")
            return False
