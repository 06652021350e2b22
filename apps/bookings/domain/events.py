"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import TimeInterval


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: A space was reserved for an interval

    Triggers:
    - Audit log entry
    """
    booking_id: UUID
    space_id: UUID
    user_id: int
    interval: TimeInterval

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'space_id': str(self.space_id),
            'user_id': self.user_id,
            'start_time': self.interval.start.isoformat(),
            'end_time': self.interval.end.isoformat(),
        })
        return data


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    Event: A booking was removed and its slot is free again

    Triggers:
    - Audit log entry
    """
    booking_id: UUID
    space_id: UUID
    user_id: int
    interval: TimeInterval

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'space_id': str(self.space_id),
            'user_id': self.user_id,
            'start_time': self.interval.start.isoformat(),
            'end_time': self.interval.end.isoformat(),
        })
        return data
