"""
Common Value Objects

- TimeInterval: a half-open range of absolute instants [start, end)
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone

from shared.domain.base import ValueObject


class InvalidIntervalError(ValueError):
    """Raised when an interval is empty, inverted or not anchored to a timezone."""


def _is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.tzinfo.utcoffset(value) is not None


@dataclass(frozen=True)
class TimeInterval(ValueObject):
    """
    Time interval value object

    Represents a range from start (inclusive) to end (exclusive).
    Both bounds are timezone-aware instants; wall-clock values are
    converted by the caller before they reach the domain.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise InvalidIntervalError("Interval bounds must be datetimes")
        if not _is_aware(self.start) or not _is_aware(self.end):
            raise InvalidIntervalError("Interval bounds must be timezone-aware instants")
        if self.start >= self.end:
            raise InvalidIntervalError(f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})")

    def overlaps(self, other: 'TimeInterval') -> bool:
        """
        Check if this interval overlaps with another

        Note: end is exclusive, so adjacent intervals don't overlap.

        Examples:
            - [09:00, 10:00) overlaps with [09:30, 10:30) -> True
            - [09:00, 10:00) overlaps with [10:00, 11:00) -> False (adjacent)
        """
        if not isinstance(other, TimeInterval):
            raise TypeError("Can only check overlap with another TimeInterval")

        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        """Check if an instant falls inside [start, end)"""
        return self.start <= instant < self.end

    def day_window(self) -> 'TimeInterval':
        """
        Widen the interval to whole UTC days

        Used as a coarse index range when loading candidate rows.
        """
        start = self.start.astimezone(timezone.utc)
        end = self.end.astimezone(timezone.utc)
        day_start = datetime.combine(start.date(), time.min, tzinfo=timezone.utc)
        day_end = datetime.combine(end.date(), time.min, tzinfo=timezone.utc)
        if day_end < end:
            day_end += timedelta(days=1)
        return TimeInterval(day_start, day_end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self):
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"

    def __repr__(self):
        return f"TimeInterval({self.start.isoformat()}, {self.end.isoformat()})"
