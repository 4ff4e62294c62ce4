"""Named timer registry.

``TimerFactory`` maps unique names to timers running on a :class:`Clock`.
Every callback is wrapped so that errors raised by user code are reported
through ``action_failed`` instead of escaping into the clock's threads.
"""

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Self, TypeVar

from .common.clock import Clock, ThreadingClock, TimerHandle
from .common.duration import ZERO, Interval, time_until, to_timedelta
from .common.pydantic import FactoryConfig
from .errors import DisposedError, InvalidIntervalError, NameConflictError
from .events import ActionFailed, ActionSucceeded, EventHook

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Longest wait threading primitives accept.
MAX_INTERVAL = timedelta(seconds=threading.TIMEOUT_MAX)


def _within_range(span: timedelta) -> timedelta:
    if span > MAX_INTERVAL:
        raise InvalidIntervalError(f"Interval must not exceed {MAX_INTERVAL}, got {span}.")
    return span


def _positive_interval(interval: Interval) -> timedelta:
    span = to_timedelta(interval)
    if span <= ZERO:
        raise InvalidIntervalError(f"Interval must be positive, got {span}.")
    return _within_range(span)


@dataclass(eq=False, slots=True)
class _TimerEntry:
    """Registry entry owning one handle."""

    name: str
    handle: TimerHandle | None = None
    on_release: Callable[[], Any] | None = None

    def release(self) -> None:
        """Disable and dispose the handle."""
        if self.handle is not None:
            self.handle.disable()
            self.handle.dispose()
        if self.on_release is not None:
            self.on_release()


class TimerControl:
    """Restricted access to a registered timer.

    Allows re-arming and stopping the timer; disposal stays with the factory.
    """

    def __init__(self, name: str, handle: TimerHandle):
        """Wrap the handle of timer ``name``."""
        self.name = name
        self._handle = handle

    def __repr__(self) -> str:
        """Debug representation."""
        return f"TimerControl(name={self.name!r}, active={self.active})"

    @property
    def active(self) -> bool:
        """Whether the underlying timer is still registered."""
        return not self._handle.disposed

    def change(self, due_time: Interval | None, period: Interval | None = None) -> bool:
        """Re-arm the timer. Return ``False`` once the timer was removed."""
        due = None if due_time is None else _within_range(to_timedelta(due_time))
        every = None if period is None else _within_range(to_timedelta(period))
        return self._handle.change(due, every)

    def stop(self) -> bool:
        """Stop firing. Return ``False`` once the timer was removed."""
        return self._handle.disable()


class TimerFactory:
    """Registry of named timers.

    Example:
        with TimerFactory() as timers:
            timers.action_failed += lambda ev: print(ev.name, ev.error)
            timers.add_timer("poll", 5, poll)
            ...
    """

    def __init__(self, clock: Clock | None = None, config: FactoryConfig | None = None):
        """Initialize an empty registry."""
        self.config = config or FactoryConfig()
        self.clock = clock or ThreadingClock(
            thread_name_prefix=self.config.thread_name_prefix, daemon=self.config.daemon
        )
        self.action_succeeded: EventHook[ActionSucceeded] = EventHook("action_succeeded")
        self.action_failed: EventHook[ActionFailed] = EventHook("action_failed")
        self._timers: dict[str, _TimerEntry] = {}
        self._anonymous: set[_TimerEntry] = set()
        self._lock = threading.RLock()
        self._disposed = False

    def __enter__(self) -> Self:
        """Use the factory as a context manager."""
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        """Dispose all timers."""
        self.dispose()

    @property
    def disposed(self) -> bool:
        """Whether ``dispose`` was called."""
        return self._disposed

    def _check_alive(self) -> None:
        if self._disposed:
            raise DisposedError("The timer factory has been disposed.")

    def _guarded(self, name: str, interval: timedelta, action: Callable[[], Any]) -> Callable[[], None]:
        """Wrap ``action`` so that it reports its outcome instead of raising."""

        def invoke() -> None:
            try:
                action()
            except Exception as exc:
                logger.debug("Timer %r failed: %r", name, exc)
                self.action_failed.emit(ActionFailed(name=name, error=exc))
            else:
                self.action_succeeded.emit(ActionSucceeded(name=name, interval=interval))

        return invoke

    def _add_recurring(self, name: str, interval: Interval, action: Callable[[], Any]) -> None:
        span = _positive_interval(interval)
        callback = self._guarded(name, span, action)
        with self._lock:
            self._check_alive()
            if name in self._timers:
                raise NameConflictError(name)
            # First fire after one interval, then every interval.
            handle = self.clock.create_timer(callback, span, span)
            self._timers[name] = _TimerEntry(name, handle)
        logger.debug("Added timer %r every %s", name, span)

    def add_timer(self, name: str, interval: Interval, action: Callable[[], Any]) -> None:
        """Run ``action`` every ``interval`` under ``name``.

        Raises:
            NameConflictError: ``name`` is already registered.
            InvalidIntervalError: ``interval`` is not positive or too large.
        """
        self._add_recurring(name, interval, action)

    def add_timer_with_result(self, name: str, producer: Callable[[], T], interval: Interval) -> None:
        """Run ``producer`` every ``interval``, discarding its value."""
        self._add_recurring(name, interval, producer)

    def add_timer_with_handler(
        self, name: str, producer: Callable[[], T], interval: Interval, handler: Callable[[T], Any]
    ) -> None:
        """Run ``producer`` every ``interval`` and pass its value to ``handler``.

        An error in either the producer or the handler counts as a failed
        invocation; ``handler`` is not called when ``producer`` raises.
        """

        def produce_and_handle() -> None:
            handler(producer())

        self._add_recurring(name, interval, produce_and_handle)

    def add_one_shot(self, name: str | None, producer: Callable[[], T], due_time: Interval) -> Future[T]:
        """Run ``producer`` once after ``due_time`` and return a future of its result.

        A named one-shot is listed with the other timers until it fires;
        removing it before then cancels the returned future. Anonymous
        one-shots (``name`` empty or ``None``) are only cancelled by
        ``kill_all_timers`` or ``dispose``.

        Raises:
            NameConflictError: ``name`` is already registered.
            InvalidIntervalError: ``due_time`` is negative or too large.
        """
        due = to_timedelta(due_time)
        if due < ZERO:
            raise InvalidIntervalError(f"Due time must not be negative, got {due}.")
        _within_range(due)

        future: Future[T] = Future()
        entry = _TimerEntry(name or "", on_release=future.cancel)

        def fire() -> None:
            with self._lock:
                if entry.name and self._timers.get(entry.name) is entry:
                    del self._timers[entry.name]
                self._anonymous.discard(entry)
                handle = entry.handle
            if handle is not None:
                handle.dispose()
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = producer()
            except Exception as exc:
                logger.debug("One-shot timer %r failed: %r", entry.name, exc)
                future.set_exception(exc)
            else:
                future.set_result(result)

        with self._lock:
            self._check_alive()
            if entry.name and entry.name in self._timers:
                raise NameConflictError(entry.name)
            # Held lock keeps an immediate fire from running before the entry is registered.
            entry.handle = self.clock.create_timer(fire, due, None)
            if future.done():
                # Clocks that fire synchronously have already run the producer.
                entry.handle.dispose()
            elif entry.name:
                self._timers[entry.name] = entry
            else:
                self._anonymous.add(entry)
        logger.debug("Added one-shot timer %r due in %s", entry.name, due)
        return future

    def remove_timer(self, name: str) -> None:
        """Stop and dispose the timer ``name``. Unknown names are ignored."""
        with self._lock:
            self._check_alive()
            entry = self._timers.pop(name, None)
        if entry is None:
            return
        entry.release()
        logger.debug("Removed timer %r", name)

    def stop_timer(self, name: str) -> bool:
        """Stop the timer ``name`` without removing it. Return ``False`` if unknown."""
        with self._lock:
            self._check_alive()
            entry = self._timers.get(name)
            if entry is None or entry.handle is None:
                return False
            entry.handle.disable()
        logger.debug("Stopped timer %r", name)
        return True

    def start_timer(self, name: str, interval: Interval) -> bool:
        """(Re)start the timer ``name`` at ``interval``. Return ``False`` if unknown."""
        span = _positive_interval(interval)
        with self._lock:
            self._check_alive()
            entry = self._timers.get(name)
            if entry is None or entry.handle is None:
                return False
            entry.handle.change(span, span)
        logger.debug("Started timer %r every %s", name, span)
        return True

    def get_timer(self, name: str) -> TimerControl | None:
        """Return a control for the timer ``name``, or ``None`` if unknown."""
        with self._lock:
            self._check_alive()
            entry = self._timers.get(name)
            if entry is None or entry.handle is None:
                return None
            return TimerControl(name, entry.handle)

    def get_timer_names(self) -> tuple[str, ...]:
        """Snapshot of the registered timer names."""
        with self._lock:
            self._check_alive()
            return tuple(self._timers)

    def get_time_span_until(self, future_time: datetime) -> timedelta:
        """Time left until ``future_time``; zero if it already passed."""
        return time_until(future_time, self.clock.now())

    def _drain(self) -> list[_TimerEntry]:
        entries = [*self._timers.values(), *self._anonymous]
        self._timers.clear()
        self._anonymous.clear()
        return entries

    def kill_all_timers(self) -> None:
        """Stop and dispose every timer."""
        with self._lock:
            self._check_alive()
            entries = self._drain()
        for entry in entries:
            entry.release()
        logger.debug("Killed %d timer(s)", len(entries))

    def dispose(self) -> None:
        """Kill all timers and refuse further use of the factory."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            entries = self._drain()
        for entry in entries:
            entry.release()
        logger.debug("Disposed timer factory with %d timer(s)", len(entries))
