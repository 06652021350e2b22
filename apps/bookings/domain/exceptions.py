"""
Booking Domain Errors

Raised by the store and the conflict checker; translated into
caller-facing outcomes only by the lifecycle façade.
"""

from typing import Iterable
from uuid import UUID

from shared.domain.value_objects import InvalidIntervalError, TimeInterval

__all__ = [
    'BookingError',
    'ConflictError',
    'InactiveSpaceError',
    'InvalidIntervalError',
    'NotFoundError',
    'SpaceNotFoundError',
    'StoreUnavailableError',
]


class BookingError(Exception):
    """Base class for booking engine errors"""


class ConflictError(BookingError):
    """The requested interval overlaps an existing booking of the space."""

    def __init__(
        self,
        space_id,
        interval: TimeInterval,
        conflicting_ids: Iterable[UUID] = (),
    ):
        self.space_id = space_id
        self.interval = interval
        self.conflicting_ids = tuple(conflicting_ids)
        super().__init__(
            f"Space {space_id} is already booked for {interval}"
        )


class InactiveSpaceError(BookingError):
    """The space is under maintenance and does not accept bookings."""

    def __init__(self, space_id):
        self.space_id = space_id
        super().__init__(f"Space {space_id} is not available for booking")


class NotFoundError(BookingError):
    """The booking (or space) does not exist."""


class SpaceNotFoundError(NotFoundError):
    """The referenced space does not exist."""


class StoreUnavailableError(BookingError):
    """Transient storage failure or timeout; safe to retry with backoff."""

    retryable = True
