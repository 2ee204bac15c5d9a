"""Platform adapter exceptions."""

from typing import Optional


class PlatformError(Exception):
    """Base exception for platform adapter errors."""

    def __init__(self, message: str, platform: Optional[str] = None):
        super().__init__(message)
        self.platform = platform


class PlatformConnectionError(PlatformError):
    """Credentials rejected or platform unreachable during initialize()."""

    pass


class DeliveryError(PlatformError):
    """An outbound message could not be handed to the platform transport."""

    def __init__(
        self,
        message: str,
        platform: Optional[str] = None,
        chat_id: Optional[str] = None,
    ):
        super().__init__(message, platform)
        self.chat_id = chat_id
