"""
Domain Building Blocks

- Entity: identity-based equality
- ValueObject: frozen, compared field by field
- Aggregate: an entity that records domain events for its unit of work
- DomainEvent: a fact about something that already happened

All timestamps are aware UTC datetimes.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List
from uuid import UUID, uuid4


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Entity(ABC):
    """An object defined by its id; two copies with one id are the same entity"""
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)

    def __eq__(self, other):
        return isinstance(other, self.__class__) and self.id == other.id

    def __hash__(self):
        return hash(self.id)


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable, identity-free; dataclass equality compares every field"""


@dataclass(eq=False)
class Aggregate(Entity):
    """
    Consistency boundary

    Pending events live on the aggregate until a unit of work collects
    them; they are published only if that unit of work commits.
    """
    _events: List['DomainEvent'] = field(default_factory=list, repr=False, init=False)

    def add_event(self, event: 'DomainEvent'):
        self._events.append(event)

    def clear_events(self):
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        return list(self._events)


@dataclass
class DomainEvent:
    """Base for events handed to the message bus after commit"""
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utc_now)
    aggregate_id: UUID | None = None

    def to_dict(self) -> dict:
        """Flat, JSON-friendly view used by the audit log"""
        return {
            'event_id': str(self.event_id),
            'event_type': type(self).__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id else None,
        }
