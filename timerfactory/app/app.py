"""Sample console application."""

import logging
import random
import time
from collections.abc import Callable
from concurrent.futures import Future
from datetime import datetime, timedelta

from rich.console import Console

from ..common.clock import Clock
from ..common.duration import next_midnight, readable_duration, timestamp_format
from ..events import ActionFailed, ActionSucceeded
from .app_config import MIDNIGHT_TIMER, DemoConfig, DemoTimerConfig, build_factory

logger = logging.getLogger(__name__)


class DemoApp:
    """Runs the configured timers and reports on the console."""

    def __init__(
        self,
        config: DemoConfig,
        console: Console | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
    ):
        """Create the factory and subscribe to its events."""
        self.config = config
        self.console = console or Console()
        self._rng = rng or random.Random()
        self.factory = build_factory(config, clock)
        self.factory.action_failed += self.on_action_failed
        self.factory.action_succeeded += self.on_action_succeeded
        self.midnight: Future[datetime] | None = None

    def on_action_failed(self, event: ActionFailed) -> None:
        """Report a failed run."""
        self.console.print(f"🚨 '{event.name}': {event.error}")

    def on_action_succeeded(self, event: ActionSucceeded) -> None:
        """Log a successful run."""
        logger.debug(
            "'%s' executed successfully at %s with interval of %s.",
            event.name,
            timestamp_format(datetime.now()),
            readable_duration(event.interval),
        )

    def _make_action(self, timer: DemoTimerConfig) -> Callable[[], None]:
        def action() -> None:
            if timer.failure_rate > 0 and self._rng.random() <= timer.failure_rate:
                raise RuntimeError("Randomly generated exception for testing, you can ignore this.")
            self.console.print(f"🔔 {timer.message or timer.name} executed at {timestamp_format(datetime.now())}")

        return action

    def _on_midnight(self, future: Future[datetime]) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self.console.print(f"🚨 '{MIDNIGHT_TIMER}': {error}")
        else:
            self.console.print(f"🌙 Midnight reached at {timestamp_format(future.result())}")

    def start(self) -> None:
        """Register every configured timer."""
        for timer in self.config.timers:
            self.factory.add_timer(timer.name, timedelta(seconds=timer.interval_seconds), self._make_action(timer))

        if self.config.midnight_timer:
            due = self.factory.get_time_span_until(next_midnight())
            self.midnight = self.factory.add_one_shot(MIDNIGHT_TIMER, datetime.now, due)
            self.midnight.add_done_callback(self._on_midnight)

        self.console.print("[bold]Current timer list[/bold]")
        for name in self.factory.get_timer_names():
            self.console.print(f"  - {name}")

    def stop(self) -> None:
        """Dispose of the factory."""
        self.factory.dispose()
        self.console.print("🔔 Timer factory disposed.")

    def run(self, duration: float | None = None) -> None:
        """Run until Enter is pressed, or for ``duration`` seconds."""
        self.console.print("🔔 Creating timer factory objects…")
        self.start()
        try:
            if duration is None:
                self.console.input("✏️ Press Enter to dispose of the factory and close the app.")
            else:
                time.sleep(duration)
        finally:
            self.stop()
