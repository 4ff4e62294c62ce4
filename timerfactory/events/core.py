"""A simple, thread-safe observer list.

Subscribers are called synchronously, in subscription order, on the thread
that emits the event. A failing subscriber is logged and does not prevent
the remaining subscribers from running.
"""

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Generic, Self, TypeVar

from pydantic import Field

from ..common.pydantic import FrozenBaseModel

logger = logging.getLogger(__name__)


class Event(FrozenBaseModel):
    """Base class for all events."""

    event_t: int = Field(default_factory=time.time_ns)


E = TypeVar("E", bound=Event)


class EventHook(Generic[E]):
    """Multi-subscriber notification list."""

    def __init__(self, name: str) -> None:
        """Initialize an empty hook."""
        self.name = name
        self._callbacks: list[Callable[[E], Any]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Number of subscribers."""
        with self._lock:
            return len(self._callbacks)

    def __iadd__(self, callback: Callable[[E], Any]) -> Self:
        """Subscribe with ``hook += callback``."""
        self.subscribe(callback)
        return self

    def __isub__(self, callback: Callable[[E], Any]) -> Self:
        """Unsubscribe with ``hook -= callback``."""
        self.unsubscribe(callback)
        return self

    def subscribe(self, callback: Callable[[E], Any]) -> Callable[[E], Any]:
        """Register a callback. Returns it so this can be used as a decorator."""
        with self._lock:
            self._callbacks.append(callback)
        return callback

    def unsubscribe(self, callback: Callable[[E], Any]) -> bool:
        """Remove a callback. Return ``True`` if it was subscribed."""
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                return False
            return True

    def clear(self) -> None:
        """Remove all subscribers."""
        with self._lock:
            self._callbacks.clear()

    def emit(self, event: E) -> None:
        """Deliver ``event`` to every subscriber."""
        with self._lock:
            callbacks = list(self._callbacks)
        for callback in callbacks:
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r of %s failed", callback, self.name)
