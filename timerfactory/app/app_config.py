"""Sample app configuration."""

from pydantic import BaseModel, Field, field_validator

from ..common.clock import Clock
from ..common.pydantic import FactoryConfig
from ..registry import TimerFactory

MIDNIGHT_TIMER = "MidnightTimer"


class DemoTimerConfig(BaseModel):
    """A recurring timer run by the sample app."""

    name: str = Field(min_length=1)
    interval_seconds: float = Field(gt=0)
    message: str = ""
    failure_rate: float = Field(default=0.0, ge=0.0, le=1.0, description="Chance of raising on each run.")


def _default_timers() -> list[DemoTimerConfig]:
    return [
        DemoTimerConfig(name="5SecTimer", interval_seconds=5, message="5 second timer", failure_rate=0.111),
        DemoTimerConfig(name="30SecTimer", interval_seconds=30, message="30 second timer"),
        DemoTimerConfig(name="60SecTimer", interval_seconds=60, message="60 second timer"),
        DemoTimerConfig(name="1DayTimer", interval_seconds=86_400, message="1 day timer"),
        DemoTimerConfig(name="1WeekTimer", interval_seconds=604_800, message="1 week timer"),
    ]


class DemoConfig(BaseModel):
    """Sample app configuration."""

    factory: FactoryConfig = Field(default_factory=FactoryConfig)
    timers: list[DemoTimerConfig] = Field(default_factory=_default_timers)
    midnight_timer: bool = Field(default=True, description="Schedule a one-shot timer for the next midnight.")

    @field_validator("timers")
    @classmethod
    def validate_timers(cls, timers: list[DemoTimerConfig]) -> list[DemoTimerConfig]:
        """Reject duplicate timer names."""
        names = [t.name for t in timers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate timer names: {', '.join(duplicates)}")
        if MIDNIGHT_TIMER in names:
            raise ValueError(f"Timer name {MIDNIGHT_TIMER!r} is reserved.")
        return timers


def build_factory(config: DemoConfig, clock: Clock | None = None) -> TimerFactory:
    """Build the timer factory."""
    return TimerFactory(clock=clock, config=config.factory)
