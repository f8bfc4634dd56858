"""Configuration module."""

from steep.config.loader import (
    build_driver,
    build_engine,
    get_default_config,
    load_config,
)
from steep.config.models import (
    ConfigError,
    LoggingConfig,
    SchedulerConfig,
    SteepConfig,
)
from steep.config.paths import get_config_path, get_logs_path, get_steep_home

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "SchedulerConfig",
    "SteepConfig",
    "build_driver",
    "build_engine",
    "get_config_path",
    "get_default_config",
    "get_logs_path",
    "get_steep_home",
    "load_config",
]
