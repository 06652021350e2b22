"""
Conflict Checker

Decides whether a candidate interval collides with existing bookings
of a space. The store supplies candidate rows (a coarse, index-friendly
superset); the decision is always ``TimeInterval.overlaps``.

The functions here have no side effects and never catch errors, so the
same code serves as an optimistic pre-check and as the authoritative
check inside the store's create transaction.
"""

from typing import List

from shared.domain.value_objects import TimeInterval
from apps.bookings.domain.entities import Booking


def _same_space(left, right) -> bool:
    return str(left) == str(right)


def find_conflicts(space_id, interval: TimeInterval, store) -> List[Booking]:
    """Bookings of ``space_id`` whose interval overlaps ``interval``"""
    return [
        booking
        for booking in store.candidates(space_id, interval)
        if _same_space(booking.space_id, space_id) and booking.overlaps(interval)
    ]


def has_conflict(space_id, interval: TimeInterval, store) -> bool:
    """True if any existing booking of the space overlaps ``interval``"""
    return any(
        _same_space(booking.space_id, space_id) and booking.overlaps(interval)
        for booking in store.candidates(space_id, interval)
    )
