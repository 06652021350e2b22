"""
Booking Store

Durable home of booking rows. Owns creation, lookup and cancellation,
and enforces the no-overlap rule transactionally.

Strategy for creates (per space):
1. Fail fast on unknown or inactive spaces (read-only directory lookup)
2. Open a Unit of Work (transaction.atomic, bounded lock waits)
3. Lock the space row with SELECT FOR UPDATE, so creates for the same
   space queue behind each other while other spaces stay independent
4. Re-read the maintenance flag and re-run the conflict checker
5. Insert, then publish BookingCreated after commit
6. PostgreSQL EXCLUDE constraint as final safety net; on SQLite the
   connection runs IMMEDIATE transactions, which serialise writers

This is the only place that tells a lost race (ConflictError) apart
from an infrastructure failure (StoreUnavailableError).
"""

from datetime import datetime
from functools import wraps
from typing import List
from uuid import UUID
import logging

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, IntegrityError, OperationalError

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import InvalidIntervalError, TimeInterval
from apps.spaces.directory import SpaceDirectory, SpaceInfo
from apps.spaces.models import Space
from apps.bookings.domain.conflicts import find_conflicts
from apps.bookings.domain.entities import Booking, BookingPhase
from apps.bookings.domain.events import BookingCancelled, BookingCreated
from apps.bookings.domain.exceptions import (
    ConflictError,
    InactiveSpaceError,
    NotFoundError,
    SpaceNotFoundError,
    StoreUnavailableError,
)
from apps.bookings.models import NO_OVERLAP_CONSTRAINT, Booking as BookingRecord

logger = logging.getLogger(__name__)

DEFAULT_STORE_TIMEOUT_SECONDS = 5


def store_timeout_seconds() -> float:
    """How long a store call may wait on locks before giving up"""
    options = getattr(settings, 'BOOKINGS', {})
    return float(options.get('STORE_TIMEOUT_SECONDS', DEFAULT_STORE_TIMEOUT_SECONDS))


def as_uuid(value) -> UUID | None:
    """Parse an identifier, returning None for anything that is not a UUID"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def translate_operational_errors(method):
    """Surface driver-level failures of read paths as StoreUnavailableError"""

    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except OperationalError as exc:
            logger.warning(f"Booking store unavailable during {method.__name__}: {exc}")
            raise StoreUnavailableError(str(exc)) from exc

    return wrapper


class DjangoBookingStore:
    """
    Booking repository backed by the Django ORM

    Returns domain ``Booking`` entities; ORM rows never leave this module.
    """

    def __init__(self, spaces: SpaceDirectory | None = None, using: str = DEFAULT_DB_ALIAS):
        self.spaces = spaces or SpaceDirectory(using=using)
        self.using = using

    # ===== Writes =====

    def create(self, space_id, user_id, interval: TimeInterval) -> Booking:
        """
        Reserve ``interval`` of a space for a user

        Raises:
            InvalidIntervalError: interval is not a TimeInterval
            SpaceNotFoundError: the space does not exist
            InactiveSpaceError: the space is under maintenance
            ConflictError: an existing booking overlaps the interval
            StoreUnavailableError: lock timeout or lost connection
        """
        if not isinstance(interval, TimeInterval):
            raise InvalidIntervalError("A booking needs a TimeInterval")

        space_uuid = as_uuid(space_id)
        if space_uuid is None:
            raise SpaceNotFoundError(f"Space {space_id} does not exist")

        try:
            if not self.spaces.get(space_uuid).is_active:
                raise InactiveSpaceError(space_uuid)

            with DjangoUnitOfWork(using=self.using, lock_timeout=store_timeout_seconds()) as uow:
                space = self._lock_space(space_uuid)
                if not space.is_active:
                    raise InactiveSpaceError(space_uuid)

                conflicts = find_conflicts(space_uuid, interval, self)
                if conflicts:
                    raise ConflictError(space_uuid, interval, [b.id for b in conflicts])

                record = BookingRecord.objects.using(self.using).create(
                    space=space,
                    user_id=user_id,
                    start_time=interval.start,
                    end_time=interval.end,
                )
                booking = self._to_entity(record, space=space)
                booking.add_event(BookingCreated(
                    aggregate_id=booking.id,
                    booking_id=booking.id,
                    space_id=booking.space_id,
                    user_id=booking.user_id,
                    interval=booking.interval,
                ))
                uow.collect_events(booking)
        except IntegrityError as exc:
            if NO_OVERLAP_CONSTRAINT in str(exc):
                logger.info(f"Exclusion constraint rejected booking of space {space_uuid} for {interval}")
                raise ConflictError(space_uuid, interval) from exc
            raise
        except OperationalError as exc:
            logger.warning(f"Booking store unavailable while creating booking for space {space_uuid}: {exc}")
            raise StoreUnavailableError(str(exc)) from exc

        logger.info(
            f"Booking {booking.id} created for space {booking.space_id}, "
            f"user {booking.user_id}, {booking.interval}"
        )
        return booking

    def cancel(self, booking_id) -> Booking:
        """
        Delete a booking, freeing its slot once the transaction commits

        Raises:
            NotFoundError: no such booking (including a second cancel)
            StoreUnavailableError: lock timeout or lost connection
        """
        booking_uuid = as_uuid(booking_id)
        if booking_uuid is None:
            raise NotFoundError(f"Booking {booking_id} does not exist")

        try:
            with DjangoUnitOfWork(using=self.using, lock_timeout=store_timeout_seconds()) as uow:
                record = (
                    BookingRecord.objects.using(self.using)
                    .select_for_update()
                    .filter(pk=booking_uuid)
                    .first()
                )
                if record is None:
                    raise NotFoundError(f"Booking {booking_id} does not exist")

                booking = self._to_entity(record)
                record.delete()
                booking.add_event(BookingCancelled(
                    aggregate_id=booking.id,
                    booking_id=booking.id,
                    space_id=booking.space_id,
                    user_id=booking.user_id,
                    interval=booking.interval,
                ))
                uow.collect_events(booking)
        except OperationalError as exc:
            logger.warning(f"Booking store unavailable while cancelling booking {booking_id}: {exc}")
            raise StoreUnavailableError(str(exc)) from exc

        logger.info(f"Booking {booking.id} cancelled, space {booking.space_id} freed for {booking.interval}")
        return booking

    # ===== Reads =====

    @translate_operational_errors
    def get(self, booking_id) -> Booking:
        booking_uuid = as_uuid(booking_id)
        record = None
        if booking_uuid is not None:
            record = self._queryset().filter(pk=booking_uuid).first()
        if record is None:
            raise NotFoundError(f"Booking {booking_id} does not exist")
        return self._to_entity(record)

    @translate_operational_errors
    def list_by_space(self, space_id, within: TimeInterval | None = None) -> List[Booking]:
        """Bookings of one space, optionally only those overlapping ``within``"""
        space_uuid = as_uuid(space_id)
        if space_uuid is None:
            return []

        queryset = self._queryset().filter(space_id=space_uuid)
        if within is None:
            return [self._to_entity(record) for record in queryset]

        bookings = [self._to_entity(record) for record in self._near(queryset, within)]
        return [booking for booking in bookings if booking.overlaps(within)]

    @translate_operational_errors
    def space_info(self, space_id) -> SpaceInfo:
        """Directory entry of a space; SpaceNotFoundError if it does not exist"""
        return self.spaces.get(space_id)

    @translate_operational_errors
    def list_by_user(self, user_id) -> List[Booking]:
        """Bookings of one user; an id that is not an integer matches nobody"""
        try:
            user_pk = int(user_id)
        except (TypeError, ValueError):
            return []
        return [self._to_entity(record) for record in self._queryset().filter(user_id=user_pk)]

    @translate_operational_errors
    def list_all(self, upcoming_after: datetime | None = None) -> List[Booking]:
        """Every booking; with ``upcoming_after`` only those not yet completed at that instant"""
        bookings = [self._to_entity(record) for record in self._queryset()]
        if upcoming_after is None:
            return bookings
        return [b for b in bookings if b.phase(upcoming_after) is not BookingPhase.COMPLETED]

    @translate_operational_errors
    def candidates(self, space_id, interval: TimeInterval) -> List[Booking]:
        """
        Bookings of a space that could overlap ``interval``

        A superset: rows touching the whole-day window around the interval.
        The caller makes the decision with ``TimeInterval.overlaps``.
        """
        space_uuid = as_uuid(space_id)
        if space_uuid is None:
            return []
        queryset = BookingRecord.objects.using(self.using).filter(space_id=space_uuid)
        return [self._to_entity(record) for record in self._near(queryset, interval)]

    @translate_operational_errors
    def candidates_all(self, interval: TimeInterval) -> List[Booking]:
        """Bookings of every space that could overlap ``interval``"""
        queryset = BookingRecord.objects.using(self.using).all()
        return [self._to_entity(record) for record in self._near(queryset, interval)]

    # ===== Helpers =====

    def _queryset(self):
        return BookingRecord.objects.using(self.using).select_related('space').order_by('start_time', 'id')

    @staticmethod
    def _near(queryset, interval: TimeInterval):
        window = interval.day_window()
        return queryset.filter(start_time__lt=window.end, end_time__gt=window.start).order_by('start_time', 'id')

    def _lock_space(self, space_uuid: UUID) -> Space:
        try:
            return (
                Space.objects.using(self.using)
                .select_for_update()
                .only('id', 'name', 'space_type', 'is_active')
                .get(pk=space_uuid)
            )
        except Space.DoesNotExist:
            raise SpaceNotFoundError(f"Space {space_uuid} does not exist")

    @staticmethod
    def _to_entity(record: BookingRecord, space: Space | None = None) -> Booking:
        if space is None and BookingRecord.space.is_cached(record):
            space = record.space
        return Booking(
            id=record.id,
            created_at=record.created_at,
            space_id=record.space_id,
            user_id=record.user_id,
            interval=TimeInterval(record.start_time, record.end_time),
            space_name=space.name if space else '',
            space_type=space.space_type if space else '',
        )
