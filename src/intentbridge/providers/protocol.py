"""Natural-language provider protocol definition."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from intentbridge.providers.models import Intent

RESPONSE_FALLBACK = "I processed your request, but encountered an issue generating a response."
EMPTY_RESPONSE = "Request processed successfully."


class LanguageProvider(ABC):
    """Abstract base class for natural-language providers.

    Implementations absorb every failure of the external reasoning service
    into safe defaults. Neither method raises.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider name for logging."""
        ...

    @abstractmethod
    async def process_natural_language(
        self,
        text: str,
        context: Optional[dict[str, Any]] = None,
    ) -> Intent:
        """Extract a structured intent from free text.

        Args:
            text: The user's message
            context: Optional platform/user context

        Returns:
            The parsed intent, or Intent.error(...) on any failure
        """
        ...

    @abstractmethod
    async def generate_response(
        self,
        intent: Intent,
        data: Any,
        context: Optional[dict[str, Any]] = None,
    ) -> str:
        """Describe what happened in user-facing prose.

        Args:
            intent: The interpreted intent
            data: Result of the act stage
            context: Optional platform context

        Returns:
            Reply text, or RESPONSE_FALLBACK on any failure
        """
        ...
