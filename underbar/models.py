"""Configuration and status models (timers, scheduler stats, logging)."""

import math
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimerStatus(str, Enum):
    """Lifecycle states of a scheduled call."""
    PENDING = "pending"
    FIRED = "fired"
    CANCELLED = "cancelled"
    FAILED = "failed"


class WaitSpec(BaseModel):
    """A wait in milliseconds before a deferred call may run."""
    model_config = ConfigDict(frozen=True)

    wait: float = Field(
        ...,
        ge=0,
        description="Wait in milliseconds"
    )

    @field_validator('wait')
    @classmethod
    def validate_finite(cls, v):
        """Reject NaN and infinity."""
        if not math.isfinite(v):
            raise ValueError(f"Wait must be a finite number of milliseconds, got {v}")
        return v


class SchedulerStats(BaseModel):
    """Counters describing a scheduler's activity."""
    total_scheduled: int = Field(default=0, ge=0, description="Timers ever scheduled")
    total_fired: int = Field(default=0, ge=0, description="Timers whose callback completed")
    total_cancelled: int = Field(default=0, ge=0, description="Timers cancelled before firing")
    total_failed: int = Field(default=0, ge=0, description="Timers whose callback raised")
    pending: int = Field(default=0, ge=0, description="Timers still waiting in the queue")
    now: Optional[float] = Field(None, description="Scheduler clock reading in milliseconds")


class LoggingConfig(BaseModel):
    """Settings for setup_logging."""
    level: str = Field(default="INFO", description="Log level name")
    format: str = Field(
        default='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        description="logging.Formatter format string"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        """Accept standard level names in any case."""
        level = v.upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}:
            raise ValueError(f"Unknown log level: {v}")
        return level
