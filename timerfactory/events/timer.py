"""Timer invocation events."""

from datetime import timedelta

from pydantic import ConfigDict

from .core import Event


class ActionSucceeded(Event):
    """A timer callback completed."""

    name: str
    interval: timedelta


class ActionFailed(Event):
    """A timer callback raised."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    error: Exception
