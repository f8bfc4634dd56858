"""Shared test fixtures."""

from pathlib import Path

import pytest

from steep.config.paths import ENV_VAR, get_steep_home
from steep.scheduling.engine import Engine
from steep.sequencer import Sequencer

# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def engine() -> Engine:
    """Engine on a fresh synchronous tick host."""
    return Engine()


@pytest.fixture
def owner() -> object:
    """An opaque owner identity."""
    return object()


@pytest.fixture
def seq(engine: Engine, owner: object) -> Sequencer:
    return Sequencer(engine, owner)


@pytest.fixture
def calls() -> list:
    """Collects callback invocations in order."""
    return []


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def steep_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point STEEP_HOME at a temporary directory."""
    home = tmp_path / "steep-home"
    monkeypatch.setenv(ENV_VAR, str(home))
    monkeypatch.delenv("STEEP_TICK_RATE", raising=False)
    monkeypatch.delenv("STEEP_LOG_LEVEL", raising=False)
    get_steep_home.cache_clear()
    yield home
    get_steep_home.cache_clear()


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
[scheduler]
tick_rate = 30
max_delta = 0.5
default_queue_name = "main"
heartbeat_ticks = 100

[logging]
level = "debug"
log_to_file = true
retention_days = 3
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})


@pytest.fixture
def root_logging():
    """Restore root logger handlers changed by configure_logging()."""
    import logging

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
