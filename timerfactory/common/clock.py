"""Clock interface for dependency injection."""

import itertools
import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

logger = logging.getLogger(__name__)


class TimerHandle(ABC):
    """Handle to a callback scheduled on a clock.

    ``due_time=None`` leaves the handle unarmed, ``period=None`` means the
    callback fires once.
    """

    @abstractmethod
    def change(self, due_time: timedelta | None, period: timedelta | None) -> bool:
        """Re-arm the timer. Return ``False`` if the handle was disposed."""

    def disable(self) -> bool:
        """Stop firing without releasing the handle."""
        return self.change(None, None)

    @abstractmethod
    def dispose(self) -> None:
        """Release the handle for good. Safe to call more than once."""

    @property
    @abstractmethod
    def disposed(self) -> bool:
        """Whether the handle was disposed."""


class Clock(ABC):
    """Clock interface for creating timers."""

    @abstractmethod
    def create_timer(
        self, callback: Callable[[], None], due_time: timedelta | None, period: timedelta | None
    ) -> TimerHandle:
        """Create a timer calling ``callback`` after ``due_time``, then every ``period``."""

    def now(self) -> datetime:
        """Current UTC time."""
        return datetime.now(UTC)


class ThreadingTimer(TimerHandle):
    """Timer implementation using threading.Timer.

    Every fire runs on its own ``threading.Timer`` thread and arms the next
    one only once the callback has returned, so invocations of one handle
    never overlap. Fires missed while a callback overran are skipped.
    """

    def __init__(self, callback: Callable[[], None], name: str = "timer", daemon: bool = True):
        """Wrap ``callback``; the timer stays unarmed until ``change`` is called."""
        self.callback = callback
        self.name = name
        self._daemon = daemon
        self._lock = threading.Lock()
        self._invoke_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0
        self._period: float | None = None
        self._next_due = 0.0
        self._disposed = False

    @property
    def disposed(self) -> bool:
        """Whether the handle was disposed."""
        return self._disposed

    @property
    def armed(self) -> bool:
        """Whether a fire is pending."""
        with self._lock:
            return self._timer is not None

    def change(self, due_time: timedelta | None, period: timedelta | None) -> bool:
        """Re-arm the timer. Return ``False`` if the handle was disposed."""
        with self._lock:
            if self._disposed:
                return False
            self._cancel()
            if due_time is None:
                return True
            seconds = None if period is None else period.total_seconds()
            self._period = seconds if seconds is not None and seconds > 0 else None
            self._next_due = time.monotonic() + max(due_time.total_seconds(), 0.0)
            self._arm()
            return True

    def dispose(self) -> None:
        """Cancel any pending fire and release the handle."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            self._cancel()

    def _cancel(self) -> None:
        # Bumping the generation invalidates fires that already left the timer thread queue.
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self) -> None:
        delay = max(self._next_due - time.monotonic(), 0.0)
        timer = threading.Timer(delay, self._fire, args=(self._generation,))
        timer.name = f"{self.name}-{self._generation}"
        timer.daemon = self._daemon
        self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._invoke_lock:
            with self._lock:
                if generation != self._generation or self._disposed:
                    return
            try:
                self.callback()
            except Exception:
                logger.exception("Unhandled error in timer %s", self.name)
            with self._lock:
                if generation != self._generation or self._disposed:
                    return
                if self._period is None:
                    self._timer = None
                    return
                self._next_due += self._period
                now = time.monotonic()
                if self._next_due < now:
                    skipped = math.ceil((now - self._next_due) / self._period)
                    logger.debug("Timer %s overran, skipping %d fire(s)", self.name, skipped)
                    self._next_due += skipped * self._period
                self._arm()


class ThreadingClock(Clock):
    """Real clock implementation using threading.Timer."""

    def __init__(self, thread_name_prefix: str = "timerfactory", daemon: bool = True):
        """Configure the threads created for timers."""
        self.thread_name_prefix = thread_name_prefix
        self.daemon = daemon
        self._counter = itertools.count(1)

    def create_timer(
        self, callback: Callable[[], None], due_time: timedelta | None, period: timedelta | None
    ) -> TimerHandle:
        """Create a timer calling ``callback`` after ``due_time``, then every ``period``."""
        timer = ThreadingTimer(callback, name=f"{self.thread_name_prefix}-{next(self._counter)}", daemon=self.daemon)
        timer.change(due_time, period)
        return timer
