"""Provider construction from configuration."""

import logging

from intentbridge.config.schema import AIConfig
from intentbridge.providers.anthropic_provider import AnthropicProvider
from intentbridge.providers.exceptions import ProviderConfigurationError
from intentbridge.providers.openai_provider import OpenAIProvider
from intentbridge.providers.protocol import LanguageProvider

logger = logging.getLogger(__name__)


def create_provider(config: AIConfig) -> LanguageProvider:
    """
    Create the configured language provider.

    Anthropic is used when selected and its key is present. Otherwise
    OpenAI is used if its key is present.

    Raises:
        ProviderConfigurationError: If no usable provider key is configured.
    """
    if config.provider == "anthropic" and config.anthropic_api_key:
        provider: LanguageProvider = AnthropicProvider(
            api_key=config.anthropic_api_key,
            model=config.anthropic_model,
            timeout=config.timeout,
        )
    elif config.openai_api_key:
        if config.provider == "anthropic":
            logger.warning("Anthropic selected but no key configured, using OpenAI")
        provider = OpenAIProvider(
            api_key=config.openai_api_key,
            model=config.openai_model,
            timeout=config.timeout,
        )
    else:
        raise ProviderConfigurationError(
            "No AI provider configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY."
        )

    logger.info(f"Using AI provider: {provider.name} ({provider.model})")
    return provider
