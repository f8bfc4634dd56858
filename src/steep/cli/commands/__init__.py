"""CLI command modules."""

from steep.cli.commands import config, demo, run

__all__ = ["config", "demo", "run"]
