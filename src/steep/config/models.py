"""Configuration models using Pydantic."""

import logging
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from steep.logging import DEFAULT_LOG_RETENTION_DAYS
from steep.scheduling.registry import DEFAULT_QUEUE_NAME

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Configuration error."""

    pass


class SchedulerConfig(BaseModel):
    """Configuration for the engine and its tick driver."""

    # Ticks per second for the asyncio driver
    tick_rate: float = Field(default=60.0, gt=0)
    # Upper bound on a single tick's delta (seconds) after a stall
    max_delta: float = Field(default=0.25, gt=0)
    # Queue targeted by calls that omit a name, for owners that never named one
    default_queue_name: str = DEFAULT_QUEUE_NAME
    # Log a heartbeat every N ticks; 0 disables
    heartbeat_ticks: int = Field(default=0, ge=0)

    @field_validator("default_queue_name")
    @classmethod
    def _non_empty_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("default_queue_name must not be empty")
        return value

    @model_validator(mode="after")
    def _check_max_delta(self) -> "SchedulerConfig":
        interval = 1.0 / self.tick_rate
        if self.max_delta < interval:
            logger.warning(
                "max_delta_below_tick_interval",
                extra={"tick.interval": interval, "tick.max_delta": self.max_delta},
            )
        return self


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    use_rich: bool = False
    log_to_file: bool = False
    retention_days: int = Field(default=DEFAULT_LOG_RETENTION_DAYS, ge=1)

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class SteepConfig(BaseModel):
    """Root configuration model."""

    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
