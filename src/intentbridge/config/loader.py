"""
Configuration loader for IntentBridge.

Loads and merges configuration from multiple sources:
1. Default values
2. YAML config file (--config PATH, else ~/.intentbridge/config.yaml)
3. Well-known environment variables (OPENAI_API_KEY, TELEGRAM_BOT_TOKEN, ...)
4. Prefixed overrides (INTENTBRIDGE_<SECTION>__<KEY>)
"""

import os
import re
from collections.abc import Callable, Mapping
from pathlib import Path
from types import UnionType
from typing import Any, Union, get_args, get_origin

import yaml
from pydantic import BaseModel

from intentbridge.config.merger import deep_merge, expand_env_references, set_nested_value
from intentbridge.config.schema import Config
from intentbridge.storage.paths import get_global_config_path

ENV_PREFIX = "INTENTBRIDGE_"
NESTING_SEPARATOR = "__"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def _flag(value: str) -> bool:
    return value.strip().lower() == "true"


def _millis_to_seconds(value: str) -> float:
    return int(value) / 1000


# Environment variable -> (config key path, converter)
WELL_KNOWN_ENV: dict[str, tuple[str, Callable[[str], Any]]] = {
    "PORT": ("server.port", int),
    "AI_PROVIDER": ("ai.provider", str),
    "OPENAI_API_KEY": ("ai.openai_api_key", str),
    "ANTHROPIC_API_KEY": ("ai.anthropic_api_key", str),
    "WHATSAPP_ENABLED": ("platforms.whatsapp.enable", _flag),
    "WHATSAPP_PHONE_NUMBER_ID": ("platforms.whatsapp.phone_number_id", str),
    "WHATSAPP_ACCESS_TOKEN": ("platforms.whatsapp.access_token", str),
    "WHATSAPP_VERIFY_TOKEN": ("platforms.whatsapp.verify_token", str),
    "TELEGRAM_ENABLED": ("platforms.telegram.enable", _flag),
    "TELEGRAM_BOT_TOKEN": ("platforms.telegram.bot_token", str),
    "SLACK_ENABLED": ("platforms.slack.enable", _flag),
    "SLACK_BOT_TOKEN": ("platforms.slack.bot_token", str),
    "SLACK_APP_TOKEN": ("platforms.slack.app_token", str),
    "TEAMS_ENABLED": ("platforms.teams.enable", _flag),
    "TEAMS_APP_ID": ("platforms.teams.app_id", str),
    "TEAMS_APP_PASSWORD": ("platforms.teams.app_password", str),
    "MCP_SERVER_ENABLED": ("remote_action.enable", _flag),
    "MCP_SERVER_URL": ("remote_action.server_url", str),
    "MCP_SERVER_TIMEOUT": ("remote_action.timeout", _millis_to_seconds),
    "API_AUTH_ENABLED": ("api.auth_enabled", _flag),
    "API_SECRET_KEY": ("api.secret_key", str),
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary ({} if the file does not exist).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")
    return content


def _parse_env_value(value: str) -> Any:
    """Parse an override value to bool, int, float, list, or string."""
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    if "," in value:
        return [item.strip() for item in value.split(",")]

    return value


def _is_string_field(key_path: list[str]) -> bool:
    """Whether a dotted key path names a `str` (or optional `str`) schema field."""
    model: type[BaseModel] = Config
    for index, part in enumerate(key_path):
        field = model.model_fields.get(part)
        if field is None:
            return False

        annotation = field.annotation
        if index == len(key_path) - 1:
            if annotation is str:
                return True
            return get_origin(annotation) in (Union, UnionType) and str in get_args(annotation)

        if not (isinstance(annotation, type) and issubclass(annotation, BaseModel)):
            return False
        model = annotation

    return False


def apply_well_known_env(
    config: dict[str, Any], environ: Mapping[str, str]
) -> dict[str, Any]:
    """
    Apply the plain environment variables the service has always honoured.

    Raises:
        ConfigurationError: If a value cannot be converted.
    """
    for env_name, (key_path, convert) in WELL_KNOWN_ENV.items():
        raw = environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            value = convert(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {env_name}: {raw!r}") from e
        config = set_nested_value(config, key_path, value)
    return config


def apply_env_overrides(config: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Apply prefixed environment variable overrides.

    Variables follow the pattern INTENTBRIDGE_<SECTION>__<KEY>=<value>, with
    a double underscore between nesting levels so keys may contain single
    underscores (INTENTBRIDGE_PLATFORMS__TELEGRAM__BOT_TOKEN). Values for
    string fields are kept verbatim; others are coerced by _parse_env_value.
    """
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == "INTENTBRIDGE_HOME":
            continue

        suffix = key[len(ENV_PREFIX) :]
        if NESTING_SEPARATOR not in suffix:
            continue

        parts = [part.lower() for part in suffix.split(NESTING_SEPARATOR)]
        parsed = value if _is_string_field(parts) else _parse_env_value(value)
        config = set_nested_value(config, ".".join(parts), parsed)

    return config


def load_config(
    path: Path | None = None,
    skip_env: bool = False,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        path: Explicit YAML file. Must exist when given.
        skip_env: Skip environment variable sources.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    environ = os.environ if environ is None else environ

    # 1. Start with defaults
    config_dict = Config().model_dump()

    # 2. Config file
    if path is not None:
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        config_path = path
    else:
        config_path = get_global_config_path()

    if config_path.exists():
        file_config = expand_env_references(load_yaml_file(config_path))
        config_dict = deep_merge(config_dict, file_config)

    # 3-4. Environment
    if not skip_env:
        config_dict = apply_well_known_env(config_dict, environ)
        config_dict = apply_env_overrides(config_dict, environ)

    try:
        return Config.model_validate(config_dict)
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e
