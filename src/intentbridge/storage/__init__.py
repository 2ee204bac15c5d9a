"""Filesystem locations used by IntentBridge."""

from intentbridge.storage.paths import (
    expand_path,
    get_global_config_path,
    get_intentbridge_home,
)

__all__ = [
    "expand_path",
    "get_global_config_path",
    "get_intentbridge_home",
]
