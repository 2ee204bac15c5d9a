"""Configuration loading and schema."""

from intentbridge.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    apply_well_known_env,
    load_config,
    load_yaml_file,
)
from intentbridge.config.merger import (
    deep_merge,
    expand_env_references,
    get_nested_value,
    set_nested_value,
)
from intentbridge.config.schema import (
    AIConfig,
    ApiConfig,
    AuditConfig,
    Config,
    LoggingConfig,
    PlatformsConfig,
    RemoteActionConfig,
    ServerConfig,
    SlackConfig,
    TeamsConfig,
    TelegramConfig,
    WhatsAppConfig,
)

__all__ = [
    "AIConfig",
    "ApiConfig",
    "AuditConfig",
    "Config",
    "ConfigurationError",
    "LoggingConfig",
    "PlatformsConfig",
    "RemoteActionConfig",
    "ServerConfig",
    "SlackConfig",
    "TeamsConfig",
    "TelegramConfig",
    "WhatsAppConfig",
    "apply_env_overrides",
    "apply_well_known_env",
    "deep_merge",
    "expand_env_references",
    "get_nested_value",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
