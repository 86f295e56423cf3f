"""
Human-friendly relative time formatting: "3 minutes ago", "in 2 days", "last week".

Months and years are fixed 30-day and 365-day units, not calendar arithmetic.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, fields
from datetime import datetime, timedelta

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import UNSET

# Constants ------------------------------------------------------------------------------------------------------------

_SECOND = timedelta(seconds=1)
_MINUTE = timedelta(minutes=1)
_HOUR = timedelta(hours=1)
_DAY = timedelta(days=1)
_WEEK = timedelta(days=7)
_MONTH = timedelta(days=30)
_YEAR = timedelta(days=365)

# Below this magnitude friendly phrases say "just now"
_JUST_NOW = timedelta(seconds=10)

# noun -> (unit, past phrase for 1, future phrase for 1)
_BUCKETS = {
    "second": (_SECOND, None, None),
    "minute": (_MINUTE, None, None),
    "hour": (_HOUR, None, None),
    "day": (_DAY, "yesterday", "tomorrow"),
    "week": (_WEEK, "last week", "next week"),
    "month": (_MONTH, "last month", "next month"),
    "year": (_YEAR, "last year", "next year"),
}


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeFormatter:
    """
    Relative time formatter configuration.

    The magnitude of (now - instant) is classified into the first bucket whose threshold
    it stays below: seconds, minutes, hours, days, weeks, months, and finally years.

    Attributes:
        now: Reference instant. None means the current time at each format() call.
        second_threshold: Show "N seconds" below this (default 1 minute).
        minute_threshold: Show "N minutes" below this (default 1 hour).
        hour_threshold: Show "N hours" below this (default 1 day).
        day_threshold: Show "N days" below this (default 1 week).
        week_threshold: Show "N weeks" below this (default 30 days).
        month_threshold: Show "N months" below this (default 365 days), years above.
        friendly_phrases: Use "just now", "yesterday", "next week", etc.
        future_format: str.format template for future instants, "in {}" or "{} from now".
        zero_string: Text for the zero instant (None or datetime.min).

    Examples:
        >>> now = datetime(2023, 6, 15, 12, 0, 0)
        >>> tf = TimeFormatter(now=now)
        >>> tf.format(now - timedelta(seconds=45))
        '45 seconds ago'
        >>> tf.format(now - timedelta(days=1))
        'yesterday'
        >>> tf.with_future_format("{} from now").format(now + timedelta(hours=2))
        '2 hours from now'
    """
    now: datetime | None = None

    second_threshold: timedelta = _MINUTE
    minute_threshold: timedelta = _HOUR
    hour_threshold: timedelta = _DAY
    day_threshold: timedelta = _WEEK
    week_threshold: timedelta = _MONTH
    month_threshold: timedelta = _YEAR

    friendly_phrases: bool = True
    future_format: str = "in {}"
    zero_string: str = "<zero>"

    def __post_init__(self):
        """Validate fields"""
        if not isinstance(self.now, (datetime, type(None))):
            raise TypeError(f"now must be datetime | None, but got {type(self.now).__name__}")

        for name in ("second_threshold", "minute_threshold", "hour_threshold",
                     "day_threshold", "week_threshold", "month_threshold"):
            if not isinstance(getattr(self, name), timedelta):
                raise TypeError(f"{name} must be timedelta, but got {type(getattr(self, name)).__name__}")

        if not isinstance(self.future_format, str):
            raise TypeError(f"future_format must be str, but got {type(self.future_format).__name__}")
        if "{}" not in self.future_format:
            raise ValueError(f"future_format must contain a '{{}}' placeholder, but found {self.future_format!r}")

    def merge(self, **overrides) -> "TimeFormatter":
        """
        Create a new TimeFormatter with merged configuration options.

        Parameters not provided (or passed as UNSET) are inherited from the current instance.

        Raises:
            TypeError: If an unknown option name is given.
        """
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"unknown TimeFormatter options: {', '.join(sorted(unknown))}")
        values = {name: getattr(self, name) for name in known}
        values.update({k: v for k, v in overrides.items() if v is not UNSET})
        return TimeFormatter(**values)

    def with_now(self, now: datetime | None) -> "TimeFormatter":
        """Set a custom reference instant for relative calculations."""
        return self.merge(now=now)

    def with_second_threshold(self, d: timedelta) -> "TimeFormatter":
        """Set when to stop showing seconds and switch to minutes."""
        return self.merge(second_threshold=d)

    def with_minute_threshold(self, d: timedelta) -> "TimeFormatter":
        """Set when to stop showing minutes and switch to hours."""
        return self.merge(minute_threshold=d)

    def with_hour_threshold(self, d: timedelta) -> "TimeFormatter":
        """Set when to stop showing hours and switch to days."""
        return self.merge(hour_threshold=d)

    def with_day_threshold(self, d: timedelta) -> "TimeFormatter":
        """Set when to stop showing days and switch to weeks."""
        return self.merge(day_threshold=d)

    def with_week_threshold(self, d: timedelta) -> "TimeFormatter":
        """Set when to stop showing weeks and switch to months."""
        return self.merge(week_threshold=d)

    def with_month_threshold(self, d: timedelta) -> "TimeFormatter":
        """Set when to stop showing months and switch to years."""
        return self.merge(month_threshold=d)

    def with_friendly_phrases(self, enabled: bool) -> "TimeFormatter":
        """Enable or disable phrases like "just now" and "last week"."""
        return self.merge(friendly_phrases=enabled)

    def with_future_format(self, future_format: str) -> "TimeFormatter":
        """Set the template for future instants, "in {}" vs "{} from now"."""
        return self.merge(future_format=future_format)

    def with_zero_string(self, zero_string: str) -> "TimeFormatter":
        return self.merge(zero_string=zero_string)

    def reference(self) -> datetime:
        """The reference instant: `now` if set, otherwise the current time."""
        return self.now if self.now is not None else datetime.now()

    def format(self, instant: datetime | None) -> str:
        """
        Format an instant relative to the reference instant.

        Returns:
            The zero string for the zero instant, an idiomatic phrase ("just now", "yesterday",
            "next month"...), "<phrase> ago" for the past, or the future template otherwise.
        """
        if is_zero_time(instant):
            return self.zero_string

        diff = delta(self.reference(), instant)
        magnitude = abs(diff)
        is_past = diff > timedelta(0)

        bucket = self._bucket(magnitude)
        unit, past_phrase, future_phrase = _BUCKETS[bucket]
        count = magnitude // unit

        if self.friendly_phrases:
            if bucket == "second" and magnitude < _JUST_NOW:
                return "just now"
            if count == 1 and past_phrase is not None:
                return past_phrase if is_past else future_phrase

        phrase = f"1 {bucket}" if count == 1 else f"{count} {bucket}s"
        if is_past:
            return f"{phrase} ago"
        return self.future_format.format(phrase)

    def _bucket(self, magnitude: timedelta) -> str:
        thresholds = (
            (self.second_threshold, "second"),
            (self.minute_threshold, "minute"),
            (self.hour_threshold, "hour"),
            (self.day_threshold, "day"),
            (self.week_threshold, "week"),
            (self.month_threshold, "month"),
        )
        for threshold, bucket in thresholds:
            if magnitude < threshold:
                return bucket
        return "year"


# Methods --------------------------------------------------------------------------------------------------------------

def humanize(instant: datetime | None, now: datetime | None = None) -> str:
    """
    Format an instant relative to now (or the current time) with default settings.

    Examples:
        >>> now = datetime(2023, 6, 15, 12, 0, 0)
        >>> humanize(now - timedelta(seconds=5), now=now)
        'just now'
        >>> humanize(now + timedelta(days=2), now=now)
        'in 2 days'
    """
    return TimeFormatter(now=now).format(instant)


def is_zero_time(instant: datetime | None) -> bool:
    """None and datetime.min (naive, or aware at any offset) are the zero instant."""
    if instant is None:
        return True
    return instant.replace(tzinfo=None) == datetime.min


def delta(reference: datetime, instant: datetime) -> timedelta:
    """
    Signed difference reference - instant.

    When exactly one operand is timezone-aware, the naive one is taken as local time.
    """
    if (reference.tzinfo is None) != (instant.tzinfo is None):
        if reference.tzinfo is None:
            reference = reference.astimezone()
        else:
            instant = instant.astimezone()
    return reference - instant
