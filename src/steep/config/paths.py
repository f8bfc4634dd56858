"""Path management for steep.

All state (config, logs) lives under a single base directory, overridable
with the STEEP_HOME environment variable. The default is ~/.steep.
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "STEEP_HOME"


@lru_cache(maxsize=1)
def get_steep_home() -> Path:
    """Get the base directory for steep data.

    Resolution order:
    1. STEEP_HOME environment variable (if set)
    2. ~/.steep
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".steep"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_steep_home() / "config.toml"


def get_logs_path() -> Path:
    """Get the JSONL log directory."""
    return get_steep_home() / "logs"
