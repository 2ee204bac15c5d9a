"""Multi-platform messaging for IntentBridge.

Architecture:
    Platform Adapters → Message Router → Language Provider / Remote Actions

Key Components:
    - PlatformAdapter: Abstract protocol for platform implementations
    - MessageRouter: Interprets, acts on, and replies to inbound messages
    - ConversationReferenceStore: Per-chat delivery addresses (Teams)
"""

from intentbridge.platforms.conversations import ConversationReferenceStore
from intentbridge.platforms.exceptions import (
    DeliveryError,
    PlatformConnectionError,
    PlatformError,
)
from intentbridge.platforms.models import Message, PlatformType
from intentbridge.platforms.protocol import MessageHandler, PlatformAdapter
from intentbridge.platforms.router import GENERIC_APOLOGY, MessageRouter

__all__ = [
    "ConversationReferenceStore",
    "DeliveryError",
    "GENERIC_APOLOGY",
    "Message",
    "MessageHandler",
    "MessageRouter",
    "PlatformAdapter",
    "PlatformConnectionError",
    "PlatformError",
    "PlatformType",
]
