"""
Event Bus Tests

To run:
    pytest tests/core/test_event_bus.py -v
"""

from enum import Enum

import pytest

from core.event_bus import EventBus


class Sample(Enum):
    STARTED = "started"
    STOPPED = "stopped"


@pytest.mark.unit
def test_publish_to_subscriber(event_tracker):
    """Test typed subscribers receive only their event."""
    bus = EventBus()
    bus.subscribe(Sample.STARTED, event_tracker.track)

    bus.publish(Sample.STARTED, {"n": 1})
    bus.publish(Sample.STOPPED)

    assert event_tracker.types() == [Sample.STARTED]
    assert event_tracker.events[0].data == {"n": 1}


@pytest.mark.unit
def test_subscribe_all(event_tracker):
    """Test wildcard subscribers receive everything in order."""
    bus = EventBus()
    bus.subscribe_all(event_tracker.track)

    bus.publish(Sample.STARTED)
    bus.publish(Sample.STOPPED)

    assert event_tracker.types() == [Sample.STARTED, Sample.STOPPED]


@pytest.mark.unit
def test_unsubscribe(event_tracker):
    """Test removed handlers stop receiving events."""
    bus = EventBus()
    bus.subscribe(Sample.STARTED, event_tracker.track)

    assert bus.unsubscribe(event_tracker.track, Sample.STARTED) is True
    assert bus.unsubscribe(event_tracker.track, Sample.STARTED) is False

    bus.publish(Sample.STARTED)
    assert event_tracker.events == []


@pytest.mark.unit
def test_failing_subscriber_is_isolated(event_tracker):
    """Test one broken handler does not stop the others."""
    bus = EventBus()

    def broken(_event):
        raise RuntimeError("boom")

    bus.subscribe(Sample.STARTED, broken)
    bus.subscribe(Sample.STARTED, event_tracker.track)

    event = bus.publish(Sample.STARTED)

    assert event_tracker.events == [event]


@pytest.mark.unit
def test_publish_copies_data():
    """Test later changes to the caller's dict do not leak into the event."""
    bus = EventBus()
    data = {"n": 1}

    event = bus.publish(Sample.STARTED, data)
    data["n"] = 2

    assert event.data == {"n": 1}


@pytest.mark.unit
def test_subscriber_count():
    bus = EventBus()
    bus.subscribe(Sample.STARTED, print)
    bus.subscribe_all(print)

    assert bus.subscriber_count(Sample.STARTED) == 2
    assert bus.subscriber_count(Sample.STOPPED) == 1
    assert bus.subscriber_count() == 2
