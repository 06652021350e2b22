"""
Occupancy Query Service

Answers "which spaces are busy" for the floor map colouring and the
admin dashboard. Uses the same ``TimeInterval`` predicates as the
conflict checker, so a space shown as free is one the store would
accept a booking for (modulo races, which the store settles).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Set
from uuid import UUID

from shared.domain.base import utc_now
from shared.domain.value_objects import TimeInterval
from apps.bookings.domain.entities import Booking

STATS_DAYS = 7
OTHER_SPACE_TYPE = "other"


@dataclass(frozen=True)
class BookingStats:
    """
    Dashboard numbers for the admin bookings page

    ``per_day`` maps each of the last seven UTC dates (oldest first, ending
    at today) to the number of bookings starting that day.
    ``by_space_type`` counts bookings per space type.
    """
    total: int
    in_progress: int
    unique_users: int
    per_day: Dict[str, int] = field(default_factory=dict)
    by_space_type: Dict[str, int] = field(default_factory=dict)


def summarize(bookings: Iterable[Booking], now: datetime | None = None) -> BookingStats:
    now = now or utc_now()
    bookings = list(bookings)

    today = now.astimezone(timezone.utc).date()
    per_day = {
        (today - timedelta(days=offset)).isoformat(): 0
        for offset in range(STATS_DAYS - 1, -1, -1)
    }
    by_space_type: Dict[str, int] = {}
    for booking in bookings:
        day = booking.start.astimezone(timezone.utc).date().isoformat()
        if day in per_day:
            per_day[day] += 1
        space_type = booking.space_type or OTHER_SPACE_TYPE
        by_space_type[space_type] = by_space_type.get(space_type, 0) + 1

    return BookingStats(
        total=len(bookings),
        in_progress=sum(1 for booking in bookings if booking.is_in_progress(now)),
        unique_users=len({booking.user_id for booking in bookings}),
        per_day=per_day,
        by_space_type=by_space_type,
    )


class OccupancyService:
    """Occupied-space lookups over the booking store"""

    def __init__(self, store):
        self.store = store

    def occupied_space_ids(self, interval: TimeInterval) -> Set[UUID]:
        """Distinct spaces with at least one booking overlapping ``interval``"""
        return {
            booking.space_id
            for booking in self.store.candidates_all(interval)
            if booking.overlaps(interval)
        }

    def occupied_at(self, instant: datetime) -> Set[UUID]:
        """Spaces with a booking in progress at ``instant``"""
        probe = TimeInterval(instant, instant + timedelta(microseconds=1))
        return {
            booking.space_id
            for booking in self.store.candidates_all(probe)
            if booking.is_in_progress(instant)
        }
