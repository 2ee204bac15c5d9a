"""
Configuration merging helpers.

Deep merge with list append/remove prefixes, dotted key access, and
`${ENV}` reference expansion.
"""

import os
import re
from typing import Any

_ENV_REFERENCE = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Merge rules:
    - Dicts merge recursively
    - Scalars and lists in override replace base
    - '+key' appends unique items to the base list
    - '-key' removes items from the base list
    - None removes the key

    Examples:
        >>> deep_merge({"allowed_users": ["1"]}, {"+allowed_users": ["2"]})
        {"allowed_users": ["1", "2"]}
    """
    result = base.copy()

    for key, value in override.items():
        if key.startswith("+") and isinstance(value, list):
            target = key[1:]
            existing = result.get(target)
            if isinstance(existing, list):
                result[target] = existing + [item for item in value if item not in existing]
            else:
                result[target] = value

        elif key.startswith("-") and isinstance(value, list):
            target = key[1:]
            existing = result.get(target)
            if isinstance(existing, list):
                result[target] = [item for item in existing if item not in value]

        elif value is None:
            result.pop(key, None)

        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)

        else:
            result[key] = value

    return result


def get_nested_value(config: dict[str, Any], key_path: str) -> Any:
    """
    Get a value by dotted path ("platforms.telegram.bot_token").

    Returns:
        The value, or None if any part of the path is missing.
    """
    current: Any = config
    for key in key_path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def set_nested_value(config: dict[str, Any], key_path: str, value: Any) -> dict[str, Any]:
    """
    Set a value by dotted path, creating intermediate dicts as needed.

    Returns:
        The modified dictionary.
    """
    keys = key_path.split(".")
    current = config

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
    return config


def expand_env_references(value: Any) -> Any:
    """
    Replace "${NAME}" strings with the NAME environment variable.

    Walks dicts and lists recursively. Unset variables expand to "".
    """
    if isinstance(value, dict):
        return {key: expand_env_references(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_references(item) for item in value]
    if isinstance(value, str):
        match = _ENV_REFERENCE.match(value.strip())
        if match:
            return os.environ.get(match.group(1), "")
    return value
