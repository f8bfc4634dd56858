"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from steep.config.models import ConfigError, SteepConfig
from steep.config.paths import get_config_path
from steep.scheduling.engine import Engine
from steep.scheduling.host import AsyncTickDriver

# Environment overrides: (env var, section, key)
ENV_OVERRIDES = [
    ("STEEP_TICK_RATE", "scheduler", "tick_rate"),
    ("STEEP_LOG_LEVEL", "logging", "level"),
]


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        Path("steep.toml"),  # Current directory
        get_config_path(),  # ~/.steep/config.toml (or STEEP_HOME)
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    for env_var, section_key, key in ENV_OVERRIDES:
        value = os.environ.get(env_var)
        if not value:
            continue
        section = config.setdefault(section_key, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[{section_key}] must be a table")
        section[key] = value
    return config


def load_config(path: Path | None = None) -> SteepConfig:
    """Load configuration from a TOML file.

    Args:
        path: Explicit path to config file. If None, searches default
            locations and falls back to defaults when none exists.

    Returns:
        Validated SteepConfig instance.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ConfigError: If the file is not valid TOML.
        pydantic.ValidationError: If values fail validation.
    """
    config_path: Path | None = None

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in _get_default_config_paths():
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    raw_config: dict[str, Any] = {}
    if config_path is not None:
        try:
            with config_path.open("rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    return SteepConfig.model_validate(raw_config)


def get_default_config() -> SteepConfig:
    """Get a default configuration for development/testing."""
    return SteepConfig()


def build_engine(config: SteepConfig) -> Engine:
    """Create an engine using the configured default queue name."""
    return Engine(default_queue_name=config.scheduler.default_queue_name)


def build_driver(config: SteepConfig, engine: Engine) -> AsyncTickDriver:
    """Create an asyncio tick driver for an engine's host."""
    scheduler = config.scheduler
    return AsyncTickDriver(
        engine.host,
        tick_rate=scheduler.tick_rate,
        max_delta=scheduler.max_delta,
        heartbeat_ticks=scheduler.heartbeat_ticks,
    )
