"""Test the publish-subscribe event bus."""

import pytest

from tuiwave.application.event_bus import EventBus
from tuiwave.application.events import Event, ResizedEvent, SelectionChangedEvent


def test_publish_to_exact_type() -> None:
    bus = EventBus()
    received = []
    bus.subscribe(ResizedEvent, received.append)

    assert bus.publish(ResizedEvent(width=10, height=5)) == 1
    assert bus.publish(SelectionChangedEvent(tree_version=1, signal_count=0)) == 0
    assert [(e.width, e.height) for e in received] == [(10, 5)]


def test_base_class_receives_everything() -> None:
    bus = EventBus()
    received = []
    bus.subscribe(Event, received.append)
    bus.publish(ResizedEvent(width=1, height=1))
    bus.publish(SelectionChangedEvent(tree_version=2, signal_count=3))
    assert len(received) == 2


def test_unsubscribe() -> None:
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(ResizedEvent, received.append)
    unsubscribe()
    bus.publish(ResizedEvent(width=1, height=1))
    assert received == []

    bus.subscribe(ResizedEvent, received.append)
    bus.clear()
    assert bus.publish(ResizedEvent(width=1, height=1)) == 0


def test_handler_errors_propagate_in_debug() -> None:
    bus = EventBus()

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(ResizedEvent, broken)
    with pytest.raises(RuntimeError):
        bus.publish(ResizedEvent(width=1, height=1))


def test_events_are_immutable() -> None:
    event = ResizedEvent(width=1, height=2)
    with pytest.raises(AttributeError):
        event.width = 3
