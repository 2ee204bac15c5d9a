"""
LiteLLM-backed language provider.

Shared request/parse logic for the concrete providers. Subclasses only
decide the model and how prompts are laid out.
"""

import json
import logging
from abc import abstractmethod
from typing import Any, Optional

import litellm
from litellm import acompletion

from intentbridge.providers.models import Intent, MessageRole
from intentbridge.providers.parser import parse_intent
from intentbridge.providers.protocol import (
    EMPTY_RESPONSE,
    RESPONSE_FALLBACK,
    LanguageProvider,
)

logger = logging.getLogger(__name__)

# Drop unsupported params per-provider
litellm.drop_params = True

INTENT_INSTRUCTIONS = """You are an AI assistant that processes natural language requests and extracts structured intent.
Analyze the user's message and return a JSON object with:
- action: the main action the user wants to perform (e.g., "create", "read", "update", "delete", "query", "search")
- entities: key-value pairs of relevant information extracted from the message
- confidence: a number between 0 and 1 indicating confidence in the interpretation"""


def _to_json(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


class LiteLLMProvider(LanguageProvider):
    """Language provider that talks to a model through LiteLLM."""

    default_model: str = ""
    intent_temperature: float = 0.3
    response_temperature: float = 0.7
    max_tokens: int = 1024

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = 30.0,
    ):
        """Initialize the provider.

        Args:
            api_key: Provider API key (None = read from the environment by LiteLLM)
            model: LiteLLM model identifier (None = provider default)
            timeout: Per-call timeout in seconds
        """
        self.api_key = api_key
        self.model = model or self.default_model
        self.timeout = timeout

    @abstractmethod
    def build_intent_messages(
        self, text: str, context: Optional[dict[str, Any]]
    ) -> list[dict[str, str]]:
        """Build the completion messages for intent extraction."""
        ...

    @abstractmethod
    def build_response_messages(
        self, intent: Intent, data: Any, context: Optional[dict[str, Any]]
    ) -> list[dict[str, str]]:
        """Build the completion messages for reply generation."""
        ...

    async def _complete(self, messages: list[dict[str, str]], temperature: float) -> str:
        request_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": self.max_tokens,
            "timeout": self.timeout,
        }
        if self.api_key:
            request_kwargs["api_key"] = self.api_key

        response = await acompletion(**request_kwargs)
        return response.choices[0].message.content or ""

    async def process_natural_language(
        self,
        text: str,
        context: Optional[dict[str, Any]] = None,
    ) -> Intent:
        try:
            content = await self._complete(
                self.build_intent_messages(text, context),
                temperature=self.intent_temperature,
            )
            intent = parse_intent(content)
            logger.debug(f"Processed intent from {self.name}: {intent}")
            return intent
        except Exception as e:
            logger.error(f"{self.name} processing error: {e}")
            return Intent.error(str(e))

    async def generate_response(
        self,
        intent: Intent,
        data: Any,
        context: Optional[dict[str, Any]] = None,
    ) -> str:
        try:
            content = await self._complete(
                self.build_response_messages(intent, data, context),
                temperature=self.response_temperature,
            )
            return content.strip() or EMPTY_RESPONSE
        except Exception as e:
            logger.error(f"{self.name} response generation error: {e}")
            return RESPONSE_FALLBACK

    @staticmethod
    def _message(role: MessageRole, content: str) -> dict[str, str]:
        return {"role": role.value, "content": content}
