"""OpenAI chat-completions provider."""

from typing import Any, Optional

from intentbridge.providers.litellm_provider import (
    INTENT_INSTRUCTIONS,
    LiteLLMProvider,
    _to_json,
)
from intentbridge.providers.models import Intent, MessageRole

INTENT_EXAMPLES = """

Examples:
"Create a new user named John" -> {"action": "create", "entities": {"type": "user", "name": "John"}, "confidence": 0.9}
"Get all orders from last week" -> {"action": "query", "entities": {"type": "orders", "timeframe": "last week"}, "confidence": 0.85}
"Update product price to $50" -> {"action": "update", "entities": {"type": "product", "price": 50}, "confidence": 0.8}"""

RESPONSE_SYSTEM_PROMPT = """You are a helpful AI assistant that generates natural language responses based on structured data.
The user made a request that resulted in some data. Generate a friendly, conversational response that explains what happened."""


class OpenAIProvider(LiteLLMProvider):
    """Provider using OpenAI models with a system prompt."""

    default_model = "openai/gpt-3.5-turbo"

    @property
    def name(self) -> str:
        return "openai"

    def build_intent_messages(
        self, text: str, context: Optional[dict[str, Any]]
    ) -> list[dict[str, str]]:
        return [
            self._message(MessageRole.SYSTEM, INTENT_INSTRUCTIONS + INTENT_EXAMPLES),
            self._message(MessageRole.USER, text),
        ]

    def build_response_messages(
        self, intent: Intent, data: Any, context: Optional[dict[str, Any]]
    ) -> list[dict[str, str]]:
        user_prompt = (
            f"User's intent: {_to_json(intent.to_dict())}\n"
            f"Result data: {_to_json(data)}\n"
            "Generate a natural language response."
        )
        return [
            self._message(MessageRole.SYSTEM, RESPONSE_SYSTEM_PROMPT),
            self._message(MessageRole.USER, user_prompt),
        ]
