"""
Booking Lifecycle API

The boundary the HTTP layer calls. Each use case takes the caller's
identity as an explicit argument; nothing here reads a "current user".

Use cases:
- create_booking: reserve a space (authoritative, via the store)
- check_availability: optimistic pre-check for UI hints
- get_occupied / get_occupied_now: occupied spaces for the floor map
- list_for_user / list_for_space / list_all / get_booking: read models
- cancel_booking: hard-delete a booking
- stats: admin dashboard numbers

This is the last place where internal errors are mapped to caller-facing
outcomes. Conflicts and maintenance rejections stay distinct.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Set
from uuid import UUID
import logging

from shared.domain.base import utc_now
from shared.domain.value_objects import InvalidIntervalError, TimeInterval
from apps.bookings.domain.conflicts import has_conflict
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.exceptions import (
    ConflictError,
    InactiveSpaceError,
    NotFoundError,
    SpaceNotFoundError,
    StoreUnavailableError,
)
from apps.bookings.occupancy import BookingStats, OccupancyService, summarize
from apps.bookings.store import DjangoBookingStore

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Caller-facing result categories"""
    CREATED = 'created'
    CANCELLED = 'cancelled'
    ALREADY_BOOKED = 'already_booked'        # ConflictError
    INVALID_INTERVAL = 'invalid_interval'    # InvalidIntervalError
    SPACE_UNAVAILABLE = 'space_unavailable'  # InactiveSpaceError
    NOT_FOUND = 'not_found'                  # NotFoundError / SpaceNotFoundError
    RETRY = 'retry'                          # StoreUnavailableError
    FAILED = 'failed'                        # anything else


@dataclass(frozen=True)
class BookingResult:
    """Outcome of a write use case"""
    outcome: Outcome
    booking: Booking | None = None
    message: str = ''

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.CREATED, Outcome.CANCELLED)

    @property
    def retryable(self) -> bool:
        return self.outcome is Outcome.RETRY


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """Command to reserve a space for [start, end)"""
    space_id: UUID
    user_id: int
    start: datetime
    end: datetime


@dataclass
class CancelBookingCommand:
    """Command to remove a booking"""
    booking_id: UUID


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Builds the interval, delegates to the store and translates the
    store's error taxonomy into a BookingResult.
    """

    def __init__(self, store):
        self.store = store

    def handle(self, command: CreateBookingCommand) -> BookingResult:
        logger.info(
            f"Creating booking for space {command.space_id}, "
            f"user {command.user_id}, {command.start} - {command.end}"
        )

        try:
            interval = TimeInterval(command.start, command.end)
            booking = self.store.create(command.space_id, command.user_id, interval)
        except InvalidIntervalError as exc:
            return BookingResult(Outcome.INVALID_INTERVAL, message=str(exc))
        except ConflictError as exc:
            logger.info(f"Booking rejected, conflicts with {list(exc.conflicting_ids)}")
            return BookingResult(Outcome.ALREADY_BOOKED, message="This time slot is already booked.")
        except InactiveSpaceError as exc:
            return BookingResult(Outcome.SPACE_UNAVAILABLE, message=str(exc))
        except NotFoundError as exc:
            return BookingResult(Outcome.NOT_FOUND, message=str(exc))
        except StoreUnavailableError:
            return BookingResult(Outcome.RETRY, message="Booking service is busy, try again.")
        except Exception as exc:
            logger.error(f"Unexpected error creating booking for space {command.space_id}: {exc}", exc_info=True)
            return BookingResult(Outcome.FAILED, message="Booking failed.")

        return BookingResult(Outcome.CREATED, booking=booking)


class CancelBookingHandler:
    """Handler for cancelling a booking"""

    def __init__(self, store):
        self.store = store

    def handle(self, command: CancelBookingCommand) -> BookingResult:
        logger.info(f"Cancelling booking {command.booking_id}")

        try:
            booking = self.store.cancel(command.booking_id)
        except NotFoundError:
            return BookingResult(Outcome.NOT_FOUND, message="Booking already cancelled or invalid.")
        except StoreUnavailableError:
            return BookingResult(Outcome.RETRY, message="Booking service is busy, try again.")
        except Exception as exc:
            logger.error(f"Unexpected error cancelling booking {command.booking_id}: {exc}", exc_info=True)
            return BookingResult(Outcome.FAILED, message="Cancellation failed.")

        return BookingResult(Outcome.CANCELLED, booking=booking)


# ===== Façade =====

class BookingLifecycle:
    """Entry point used by the HTTP layer"""

    def __init__(self, store=None):
        self.store = store or DjangoBookingStore()
        self.occupancy = OccupancyService(self.store)
        self._create = CreateBookingHandler(self.store)
        self._cancel = CancelBookingHandler(self.store)

    def create_booking(self, space_id, user_id, start: datetime, end: datetime) -> BookingResult:
        return self._create.handle(CreateBookingCommand(space_id, user_id, start, end))

    def cancel_booking(self, booking_id) -> BookingResult:
        return self._cancel.handle(CancelBookingCommand(booking_id))

    def check_availability(self, space_id, start: datetime, end: datetime) -> bool:
        """
        Optimistic pre-check for UI hints

        Racy by nature; only ``create_booking`` decides. Unknown spaces and
        spaces under maintenance are never available.
        Raises InvalidIntervalError and StoreUnavailableError.
        """
        interval = TimeInterval(start, end)
        try:
            space = self.store.space_info(space_id)
        except SpaceNotFoundError:
            return False
        if not space.is_active:
            return False
        return not has_conflict(space.id, interval, self.store)

    def get_occupied(self, start: datetime, end: datetime) -> Set[UUID]:
        """
        Spaces busy during [start, end)

        An empty or inverted window yields an empty set: the map polls this
        while the user is still moving the pickers.
        """
        try:
            interval = TimeInterval(start, end)
        except InvalidIntervalError:
            return set()
        return self.occupancy.occupied_space_ids(interval)

    def get_occupied_now(self, now: datetime | None = None) -> Set[UUID]:
        return self.occupancy.occupied_at(now or utc_now())

    def get_booking(self, booking_id) -> Booking:
        return self.store.get(booking_id)

    def list_for_user(self, user_id) -> List[Booking]:
        return self.store.list_by_user(user_id)

    def list_for_space(self, space_id, start: datetime | None = None, end: datetime | None = None) -> List[Booking]:
        """Bookings of a space; with both bounds only those overlapping [start, end)"""
        within = None
        if start is not None and end is not None:
            within = TimeInterval(start, end)
        return self.store.list_by_space(space_id, within=within)

    def list_all(self, upcoming_only: bool = False, now: datetime | None = None) -> List[Booking]:
        if upcoming_only:
            return self.store.list_all(upcoming_after=now or utc_now())
        return self.store.list_all()

    def stats(self, now: datetime | None = None) -> BookingStats:
        return summarize(self.store.list_all(), now or utc_now())
