from dataclasses import dataclass

from shared.application.message_bus import MessageBus
from shared.domain.base import Aggregate, DomainEvent


@dataclass
class Pinged(DomainEvent):
    pass


@dataclass
class Ponged(DomainEvent):
    pass


def test_handlers_receive_only_their_event_type():
    bus = MessageBus()
    pings, pongs = [], []
    bus.register_event_handler(Pinged, pings.append)
    bus.register_event_handler(Ponged, pongs.append)

    bus.publish_events([Pinged(), Ponged(), Pinged()])

    assert len(pings) == 2
    assert len(pongs) == 1


def test_registering_twice_delivers_once():
    bus = MessageBus()
    received = []
    handler = received.append
    bus.register_event_handler(Pinged, handler)
    bus.register_event_handler(Pinged, handler)

    bus.publish(Pinged())

    assert bus.handlers_for(Pinged) == [handler]
    assert len(received) == 1


def test_unregister_stops_delivery():
    bus = MessageBus()
    received = []
    handler = received.append
    bus.register_event_handler(Pinged, handler)
    bus.unregister_event_handler(Pinged, handler)

    assert bus.publish(Pinged()) == 0
    assert received == []


def test_failing_handler_does_not_stop_the_others():
    bus = MessageBus()
    received = []

    def explode(event):
        raise RuntimeError("handler down")

    bus.register_event_handler(Pinged, explode)
    bus.register_event_handler(Pinged, received.append)

    failures = bus.publish_events([Pinged()])

    assert failures == 1
    assert len(received) == 1


def test_aggregate_hands_over_its_events():
    aggregate = Aggregate()
    event = Pinged(aggregate_id=aggregate.id)
    aggregate.add_event(event)

    pending = aggregate.events
    aggregate.clear_events()

    assert pending == [event]
    assert aggregate.events == []
    assert event.to_dict()["event_type"] == "Pinged"
    assert event.to_dict()["aggregate_id"] == str(aggregate.id)
