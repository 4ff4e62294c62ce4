"""Test utilities and fake implementations."""

import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from timerfactory.common.clock import Clock, TimerHandle
from timerfactory.events import ActionFailed, ActionSucceeded
from timerfactory.registry import TimerFactory


class ManualTimer(TimerHandle):
    """Fake timer that fires only when its clock is advanced."""

    def __init__(self, clock: "ManualClock", callback: Callable[[], None]):
        """Attach the timer to ``clock``."""
        self.clock = clock
        self.callback = callback
        self.due_at: float | None = None
        self.period: float | None = None
        self.fire_count = 0
        self._disposed = False

    @property
    def disposed(self) -> bool:
        """Whether the timer was disposed."""
        return self._disposed

    def change(self, due_time: timedelta | None, period: timedelta | None) -> bool:
        """Re-arm relative to the clock's current time."""
        if self._disposed:
            return False
        if due_time is None:
            self.due_at = None
            return True
        self.due_at = self.clock.elapsed + max(due_time.total_seconds(), 0.0)
        self.period = period.total_seconds() if period is not None and period > timedelta(0) else None
        return True

    def dispose(self) -> None:
        """Disarm for good."""
        self._disposed = True
        self.due_at = None


class ManualClock(Clock):
    """Fake clock whose time only moves when ``advance`` is called."""

    def __init__(self, start: datetime | None = None):
        """Start the clock at ``start``."""
        self.start = start or datetime(2024, 1, 1, tzinfo=UTC)
        self.elapsed = 0.0
        self.timers: list[ManualTimer] = []

    def now(self) -> datetime:
        """Current fake time."""
        return self.start + timedelta(seconds=self.elapsed)

    def create_timer(
        self, callback: Callable[[], None], due_time: timedelta | None, period: timedelta | None
    ) -> TimerHandle:
        """Create a timer driven by this clock."""
        timer = ManualTimer(self, callback)
        timer.change(due_time, period)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in chronological order."""
        target = self.elapsed + seconds
        while True:
            due = [t for t in self.timers if t.due_at is not None and t.due_at <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due_at or 0.0)
            assert timer.due_at is not None
            self.elapsed = timer.due_at
            timer.due_at = timer.due_at + timer.period if timer.period is not None else None
            timer.fire_count += 1
            timer.callback()
        self.elapsed = target


class SynchronousClock(Clock):
    """Fake clock that fires timers as soon as they are created."""

    def create_timer(
        self, callback: Callable[[], None], due_time: timedelta | None, period: timedelta | None
    ) -> TimerHandle:
        """Create a timer and fire it immediately."""
        timer = ManualTimer(ManualClock(), callback)
        timer.change(due_time, None)
        callback()
        return timer


class EventRecorder:
    """Collects the events raised by a factory."""

    def __init__(self, factory: TimerFactory):
        """Subscribe to both events of ``factory``."""
        self.succeeded: list[ActionSucceeded] = []
        self.failed: list[ActionFailed] = []
        self._lock = threading.RLock()
        self._changed = threading.Condition(self._lock)
        factory.action_succeeded += self.on_succeeded
        factory.action_failed += self.on_failed

    def on_succeeded(self, event: ActionSucceeded) -> None:
        """Record a success."""
        with self._changed:
            self.succeeded.append(event)
            self._changed.notify_all()

    def on_failed(self, event: ActionFailed) -> None:
        """Record a failure."""
        with self._changed:
            self.failed.append(event)
            self._changed.notify_all()

    def successes(self, name: str) -> int:
        """Number of successes for ``name``."""
        with self._lock:
            return sum(1 for e in self.succeeded if e.name == name)

    def failures(self, name: str) -> int:
        """Number of failures for ``name``."""
        with self._lock:
            return sum(1 for e in self.failed if e.name == name)

    def wait_for(self, predicate: Callable[[], bool], timeout: float = 5.0) -> bool:
        """Wait until ``predicate`` holds or ``timeout`` expires."""
        with self._changed:
            return self._changed.wait_for(predicate, timeout=timeout)
