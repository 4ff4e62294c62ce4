"""Duration helpers."""

from datetime import UTC, datetime, time, timedelta

from ..errors import InvalidIntervalError

Interval = timedelta | int | float

ZERO = timedelta(0)


def to_timedelta(value: Interval) -> timedelta:
    """Convert a number of seconds or a timedelta to a timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"Expected timedelta or seconds, got {type(value).__name__}")
    try:
        return timedelta(seconds=value)
    except (OverflowError, ValueError) as exc:
        raise InvalidIntervalError(f"Interval out of range: {value}.") from exc


def time_until(instant: datetime, now: datetime | None = None) -> timedelta:
    """Return the time left until ``instant``, or zero if it already passed.

    Naive datetimes are interpreted as local time.
    """
    if now is None:
        now = datetime.now(UTC)
    delay = instant.astimezone(UTC) - now.astimezone(UTC)
    return delay if delay > ZERO else ZERO


def next_midnight(add_hours: int = 0, now: datetime | None = None) -> datetime:
    """Return the next local midnight, optionally shifted by ``add_hours``."""
    if now is None:
        now = datetime.now()
    midnight = datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=now.tzinfo)
    if add_hours > 0:
        midnight += timedelta(hours=add_hours)
    return midnight


def time_until_midnight(add_hours: int = 0, now: datetime | None = None) -> timedelta:
    """Return the time left until the next local midnight (plus ``add_hours``)."""
    if now is None:
        now = datetime.now()
    return next_midnight(add_hours, now) - now


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def readable_duration(span: timedelta) -> str:
    """Return a human-friendly representation of a timedelta.

    Example: ``1 day 2 hours 5 seconds``. Spans below one millisecond
    fall back to fractional milliseconds.
    """
    parts: list[str] = []
    if span > ZERO:
        hours, rest = divmod(span.seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        units = [
            (span.days, "day"),
            (hours, "hour"),
            (minutes, "minute"),
            (seconds, "second"),
            (span.microseconds // 1000, "millisecond"),
        ]
        parts = [_plural(count, unit) for count, unit in units if count > 0]

    if not parts:
        return f"{span / timedelta(milliseconds=1):,.4f} milliseconds"
    return " ".join(parts)


def timestamp_format(dt: datetime) -> str:
    """Format a datetime as a twelve-hour timestamp with milliseconds."""
    return f"{dt:%I:%M:%S}.{dt.microsecond // 1000:03d} {dt:%p}"
