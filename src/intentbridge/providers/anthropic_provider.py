"""Anthropic Claude provider."""

from typing import Any, Optional

from intentbridge.providers.litellm_provider import (
    INTENT_INSTRUCTIONS,
    LiteLLMProvider,
    _to_json,
)
from intentbridge.providers.models import Intent, MessageRole


class AnthropicProvider(LiteLLMProvider):
    """Provider using Claude models.

    Instructions are embedded in a single user turn.
    """

    default_model = "anthropic/claude-3-haiku-20240307"
    intent_temperature = 0.0

    @property
    def name(self) -> str:
        return "anthropic"

    def build_intent_messages(
        self, text: str, context: Optional[dict[str, Any]]
    ) -> list[dict[str, str]]:
        prompt = (
            f"{INTENT_INSTRUCTIONS}\n\nReturn ONLY valid JSON, no other text."
            f'\n\nUser message: "{text}"\n\nReturn the JSON intent:'
        )
        return [self._message(MessageRole.USER, prompt)]

    def build_response_messages(
        self, intent: Intent, data: Any, context: Optional[dict[str, Any]]
    ) -> list[dict[str, str]]:
        prompt = (
            "You are a helpful AI assistant. The user made a request with the following intent:\n"
            f"{_to_json(intent.to_dict())}\n\n"
            "The system processed it and returned:\n"
            f"{_to_json(data)}\n\n"
            "Generate a friendly, conversational response that explains what happened "
            "to the user. Be concise and clear."
        )
        return [self._message(MessageRole.USER, prompt)]
