"""
IntentBridge Provider Layer.

Turns free text into structured intents and intents plus results into
replies, via LiteLLM. Two interchangeable providers are available:
OpenAI and Anthropic.
"""

from intentbridge.providers.anthropic_provider import AnthropicProvider
from intentbridge.providers.exceptions import ProviderConfigurationError, ProviderError
from intentbridge.providers.factory import create_provider
from intentbridge.providers.litellm_provider import LiteLLMProvider
from intentbridge.providers.models import Intent, MessageRole
from intentbridge.providers.openai_provider import OpenAIProvider
from intentbridge.providers.parser import IntentParseError, extract_json_object, parse_intent
from intentbridge.providers.protocol import (
    EMPTY_RESPONSE,
    RESPONSE_FALLBACK,
    LanguageProvider,
)

__all__ = [
    # Protocol
    "LanguageProvider",
    "RESPONSE_FALLBACK",
    "EMPTY_RESPONSE",
    # Implementations
    "LiteLLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "create_provider",
    # Models
    "Intent",
    "MessageRole",
    # Parsing
    "IntentParseError",
    "extract_json_object",
    "parse_intent",
    # Exceptions
    "ProviderError",
    "ProviderConfigurationError",
]
