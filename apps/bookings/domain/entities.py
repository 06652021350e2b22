"""
Booking Domain Entities

Core business entity for the booking domain:
- Booking: a reservation of one space for one interval
- BookingPhase: display-only position of a booking relative to "now"
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from shared.domain.base import Aggregate
from shared.domain.value_objects import TimeInterval


class BookingPhase(Enum):
    """
    Where a booking sits relative to the current instant

    Derived on read for display; never stored and never consulted
    by conflict checks. A booking in progress blocks the space exactly
    like an upcoming one.
    """
    UPCOMING = 'upcoming'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Key invariants:
    - The interval is a valid half-open range of instants
    - No two bookings of one space overlap (enforced by the store)
    - Bookings are immutable; a change is a cancel plus a new booking
    """

    space_id: UUID
    user_id: int
    interval: TimeInterval
    space_name: str = ''
    space_type: str = ''

    @property
    def start(self) -> datetime:
        return self.interval.start

    @property
    def end(self) -> datetime:
        return self.interval.end

    def overlaps(self, interval: TimeInterval) -> bool:
        return self.interval.overlaps(interval)

    def is_in_progress(self, now: datetime) -> bool:
        return self.interval.contains(now)

    def phase(self, now: datetime) -> BookingPhase:
        if self.interval.contains(now):
            return BookingPhase.IN_PROGRESS
        if self.end <= now:
            return BookingPhase.COMPLETED
        return BookingPhase.UPCOMING

    def __str__(self):
        return f"Booking {self.id} of space {self.space_id} {self.interval}"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, space_id={self.space_id}, "
            f"user_id={self.user_id}, interval={self.interval!r})"
        )
