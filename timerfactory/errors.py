"""Timer factory errors."""


class TimerFactoryError(Exception):
    """Base class for timer factory errors."""


class NameConflictError(TimerFactoryError, ValueError):
    """A timer with the same name is already registered."""

    def __init__(self, name: str):
        """Store the conflicting name."""
        super().__init__(f"A timer with the name '{name}' already exists.")
        self.name = name


class InvalidIntervalError(TimerFactoryError, ValueError):
    """Interval or due time outside the accepted range."""


class DisposedError(TimerFactoryError, RuntimeError):
    """The timer factory was used after being disposed."""
