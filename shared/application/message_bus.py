"""
Message Bus

In-process fan-out of committed domain events to their handlers
(audit logging today). Handlers run synchronously in the committing
thread, after the transaction is durable.
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """Routes each event to every handler registered for its exact type"""

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler``; subscribing the same handler twice is a no-op"""
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"Registered {getattr(handler, '__name__', handler)} for {event_type.__name__}")

    def unregister_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        return list(self._event_handlers.get(event_type, []))

    def publish(self, event: DomainEvent) -> int:
        """
        Deliver one event

        A failing handler is logged and skipped; the others still run.
        Returns the number of handlers that failed.
        """
        event_name = type(event).__name__
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.debug(f"No handlers for {event_name} {event.event_id}")
            return 0

        failures = 0
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                failures += 1
                logger.error(
                    f"Handler {getattr(handler, '__name__', handler)} failed on {event_name} "
                    f"{event.event_id}: {e}",
                    exc_info=True,
                )
        return failures

    def publish_events(self, events: Iterable[DomainEvent]) -> int:
        """Deliver events in order; returns the total number of handler failures"""
        return sum(self.publish(event) for event in events)


# Process-wide bus; apps register their handlers in AppConfig.ready()
message_bus = MessageBus()
