"""Events."""

from .core import Event, EventHook
from .timer import ActionFailed, ActionSucceeded

__all__ = ["ActionFailed", "ActionSucceeded", "Event", "EventHook"]
