"""Test suite for duration helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from timerfactory.common.duration import (
    next_midnight,
    readable_duration,
    time_until,
    time_until_midnight,
    timestamp_format,
    to_timedelta,
)
from timerfactory.errors import InvalidIntervalError


class TestToTimedelta:
    """Test interval coercion."""

    def test_passthrough(self):
        """Timedeltas are returned unchanged."""
        span = timedelta(minutes=3)
        assert to_timedelta(span) is span

    @pytest.mark.parametrize(("value", "expected"), [(5, timedelta(seconds=5)), (0.25, timedelta(milliseconds=250))])
    def test_seconds(self, value, expected):
        """Numbers are seconds."""
        assert to_timedelta(value) == expected

    @pytest.mark.parametrize("value", [True, "1", None])
    def test_rejects_other_types(self, value):
        """Other types are rejected."""
        with pytest.raises(TypeError):
            to_timedelta(value)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), 1e20])
    def test_rejects_unrepresentable(self, value):
        """Values no timedelta can hold raise InvalidIntervalError."""
        with pytest.raises(InvalidIntervalError):
            to_timedelta(value)


class TestTimeUntil:
    """Test time_until."""

    def test_future(self):
        """Future instants give the remaining time."""
        now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert time_until(now + timedelta(seconds=10), now) == timedelta(seconds=10)

    def test_past_clamps_to_zero(self):
        """Past instants give zero."""
        now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        assert time_until(now - timedelta(seconds=1), now) == timedelta(0)

    def test_compares_in_utc(self):
        """Instants in other timezones are converted before subtracting."""
        now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        instant = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
        assert time_until(instant, now) == timedelta(minutes=30)

    def test_default_now(self):
        """Without ``now`` the current time is used."""
        span = time_until(datetime.now(UTC) + timedelta(seconds=10))
        assert timedelta(seconds=9) < span <= timedelta(seconds=10)

    def test_naive_is_local_time(self):
        """Naive datetimes are read as local time."""
        span = time_until(datetime.now() + timedelta(seconds=10))
        assert timedelta(seconds=9) < span <= timedelta(seconds=10)


class TestMidnight:
    """Test midnight helpers."""

    def test_next_midnight(self):
        """The next midnight is the start of the following day."""
        now = datetime(2024, 5, 1, 22, 15)
        assert next_midnight(now=now) == datetime(2024, 5, 2)

    def test_add_hours(self):
        """Hours are added after midnight."""
        now = datetime(2024, 5, 1, 22, 15)
        assert next_midnight(1, now) == datetime(2024, 5, 2, 1)

    def test_time_until_midnight(self):
        """The remaining time is measured from ``now``."""
        now = datetime(2024, 5, 1, 23, 0, tzinfo=UTC)
        assert time_until_midnight(now=now) == timedelta(hours=1)
        assert time_until_midnight(2, now) == timedelta(hours=3)


class TestReadableDuration:
    """Test readable_duration."""

    @pytest.mark.parametrize(
        ("span", "expected"),
        [
            (timedelta(seconds=5), "5 seconds"),
            (timedelta(seconds=1), "1 second"),
            (timedelta(days=1), "1 day"),
            (timedelta(days=2, hours=1, minutes=30), "2 days 1 hour 30 minutes"),
            (timedelta(minutes=1, milliseconds=1), "1 minute 1 millisecond"),
            (timedelta(hours=3, seconds=2, milliseconds=250), "3 hours 2 seconds 250 milliseconds"),
        ],
    )
    def test_units(self, span, expected):
        """Non-zero units are listed from largest to smallest."""
        assert readable_duration(span) == expected

    def test_below_millisecond(self):
        """Sub-millisecond spans use fractional milliseconds."""
        assert readable_duration(timedelta(microseconds=250)) == "0.2500 milliseconds"
        assert readable_duration(timedelta(0)) == "0.0000 milliseconds"


class TestTimestampFormat:
    """Test timestamp_format."""

    def test_morning(self):
        """Twelve-hour clock with milliseconds."""
        assert timestamp_format(datetime(2024, 5, 1, 9, 5, 7, 123456)) == "09:05:07.123 AM"

    def test_afternoon(self):
        """Afternoon hours wrap around."""
        assert timestamp_format(datetime(2024, 5, 1, 13, 0, 0, 999)) == "01:00:00.000 PM"
