"""Named timer registry."""

from .common.clock import Clock, ThreadingClock, ThreadingTimer, TimerHandle
from .common.duration import readable_duration, time_until, time_until_midnight
from .common.pydantic import FactoryConfig
from .errors import DisposedError, InvalidIntervalError, NameConflictError, TimerFactoryError
from .events import ActionFailed, ActionSucceeded, EventHook
from .registry import TimerControl, TimerFactory

__all__ = [
    "ActionFailed",
    "ActionSucceeded",
    "Clock",
    "DisposedError",
    "EventHook",
    "FactoryConfig",
    "InvalidIntervalError",
    "NameConflictError",
    "ThreadingClock",
    "ThreadingTimer",
    "TimerControl",
    "TimerFactory",
    "TimerFactoryError",
    "TimerHandle",
    "readable_duration",
    "time_until",
    "time_until_midnight",
]
