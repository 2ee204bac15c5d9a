"""Platform adapter implementations."""

from intentbridge.platforms.adapters.slack import SlackAdapter
from intentbridge.platforms.adapters.teams import TeamsAdapter
from intentbridge.platforms.adapters.telegram import TelegramAdapter
from intentbridge.platforms.adapters.whatsapp import WhatsAppAdapter

__all__ = [
    "SlackAdapter",
    "TeamsAdapter",
    "TelegramAdapter",
    "WhatsAppAdapter",
]
