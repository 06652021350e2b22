"""
Unit of Work

Wraps one database transaction and holds the domain events raised
inside it. Events reach the message bus only once the transaction has
committed; a rollback drops them.
"""

from typing import List
import logging

from django.db import DEFAULT_DB_ALIAS, transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    transaction.atomic() plus after-commit event publishing

    ``lock_timeout`` (seconds) bounds how long statements inside the
    transaction may wait on row locks. PostgreSQL gets it as
    ``SET LOCAL lock_timeout/statement_timeout``; SQLite relies on the
    connection's busy ``timeout`` option instead.

    Usage:
        with DjangoUnitOfWork(lock_timeout=5) as uow:
            space = lock_space(space_id)
            booking = insert_booking(space, interval)
            booking.add_event(BookingCreated(...))
            uow.collect_events(booking)
        # BookingCreated is published here, after COMMIT
    """

    def __init__(self, using: str = DEFAULT_DB_ALIAS, lock_timeout: float | None = None):
        self.using = using
        self.lock_timeout = lock_timeout
        self._events: List[DomainEvent] = []
        self._atomic = None

    @property
    def connection(self):
        return transaction.get_connection(self.using)

    def __enter__(self):
        self._atomic = transaction.atomic(using=self.using)
        self._atomic.__enter__()
        try:
            self._apply_lock_timeout()
        except BaseException as exc:
            self._atomic.__exit__(type(exc), exc, exc.__traceback__)
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    def commit(self):
        """Hand the collected events to transaction.on_commit()"""
        events = self._events.copy()
        self._events.clear()
        logger.debug(f"Committing unit of work with {len(events)} events")

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self.using)

    def rollback(self):
        if self._events:
            logger.warning(f"Rolling back unit of work, dropping {len(self._events)} events")
        self._events.clear()

    def collect_events(self, aggregate):
        """Move pending events off an aggregate into this unit of work"""
        pending = aggregate.events
        if not pending:
            return
        self._events.extend(pending)
        aggregate.clear_events()
        logger.debug(f"Collected {len(pending)} events from {aggregate.__class__.__name__} {aggregate.id}")

    def _apply_lock_timeout(self):
        connection = self.connection
        if self.lock_timeout is None or connection.vendor != 'postgresql':
            return
        millis = int(self.lock_timeout * 1000)
        with connection.cursor() as cursor:
            cursor.execute(f"SET LOCAL lock_timeout = {millis}")
            cursor.execute(f"SET LOCAL statement_timeout = {millis}")

    def _publish_events(self, events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        logger.info(f"Publishing {len(events)} domain events after commit")
        try:
            message_bus.publish_events(events)
        except Exception as e:
            # Rows are committed; a failed fan-out is not a failed write.
            logger.error(f"Error publishing events: {e}", exc_info=True)
