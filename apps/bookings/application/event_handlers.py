"""Audit handlers for booking domain events."""

from __future__ import annotations

import structlog

from shared.application.message_bus import MessageBus
from apps.bookings.domain.events import BookingCancelled, BookingCreated

logger = structlog.get_logger("apps.bookings.audit")


def log_booking_created(event: BookingCreated) -> None:
    logger.info("booking.created", **event.to_dict())


def log_booking_cancelled(event: BookingCancelled) -> None:
    logger.info("booking.cancelled", **event.to_dict())


def register(bus: MessageBus) -> None:
    bus.register_event_handler(BookingCreated, log_booking_created)
    bus.register_event_handler(BookingCancelled, log_booking_cancelled)
