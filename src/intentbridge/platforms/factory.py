"""Build platform adapters from configuration."""

import logging

from intentbridge.config.schema import (
    Config,
    PlatformAdapterConfig,
    SlackConfig,
    TeamsConfig,
    TelegramConfig,
    WhatsAppConfig,
)
from intentbridge.platforms.adapters import (
    SlackAdapter,
    TeamsAdapter,
    TelegramAdapter,
    WhatsAppAdapter,
)
from intentbridge.platforms.exceptions import PlatformError
from intentbridge.platforms.protocol import PlatformAdapter

logger = logging.getLogger(__name__)


def create_adapter(name: str, config: PlatformAdapterConfig) -> PlatformAdapter:
    """Create the adapter for one platform section.

    Args:
        name: Platform name (whatsapp, telegram, slack, teams)
        config: That platform's configuration section

    Returns:
        An uninitialized adapter

    Raises:
        PlatformError: If credentials are missing or the platform is unknown
        ImportError: If the platform's SDK is not installed
    """
    missing = config.missing_credentials()
    if missing:
        raise PlatformError(
            f"{name} is enabled but missing: {', '.join(missing)}", platform=name
        )

    if isinstance(config, WhatsAppConfig):
        return WhatsAppAdapter(
            phone_number_id=config.phone_number_id,
            access_token=config.access_token,
            verify_token=config.verify_token,
            api_version=config.api_version,
        )
    if isinstance(config, TelegramConfig):
        return TelegramAdapter(
            bot_token=config.bot_token,
            allowed_users=config.allowed_users,
            polling_interval=config.polling_interval,
        )
    if isinstance(config, SlackConfig):
        return SlackAdapter(
            bot_token=config.bot_token,
            app_token=config.app_token,
            allowed_channels=config.allowed_channels,
        )
    if isinstance(config, TeamsConfig):
        return TeamsAdapter(app_id=config.app_id, app_password=config.app_password)

    raise PlatformError(f"Unknown platform: {name}", platform=name)


def create_adapters(config: Config) -> list[PlatformAdapter]:
    """Create an adapter for every enabled platform, in config order."""
    adapters = []
    for name, platform_config in config.platforms.items():
        if not platform_config.enable:
            continue
        adapters.append(create_adapter(name, platform_config))
        logger.debug(f"Created {name} adapter")
    return adapters
