"""
Path utilities for IntentBridge.

Provides consistent path resolution for configuration and data files.
"""

import os
from pathlib import Path


def get_intentbridge_home() -> Path:
    """
    Get the IntentBridge home directory.

    Resolution order:
    1. INTENTBRIDGE_HOME environment variable
    2. Default: ~/.intentbridge
    """
    env_home = os.environ.get("INTENTBRIDGE_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".intentbridge"


def get_global_config_path() -> Path:
    """Path to ~/.intentbridge/config.yaml."""
    return get_intentbridge_home() / "config.yaml"


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in a user-supplied path."""
    return Path(os.path.expandvars(str(path))).expanduser()
