"""
Shared Test Configuration and Fixtures

Fixtures used across capture and session tests: a controllable clock,
mock capture backends and an event tracker.
"""

import pytest

from capture.implementations.mock_segment_encoder import MockSegmentEncoder
from capture.implementations.mock_stream_provider import MockStreamProvider

# =============================================================================
# CLOCK FIXTURES
# =============================================================================


class FakeClock:
    """Monotonic clock that only moves when told to"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    """
    Provide a manually advanced clock.

    Usage:
        def test_duration(fake_clock):
            fake_clock.advance(20)
    """
    return FakeClock()


# =============================================================================
# CAPTURE FIXTURES
# =============================================================================


@pytest.fixture
def mock_provider():
    """Provide MockStreamProvider with both cameras present"""
    provider = MockStreamProvider()
    yield provider
    provider.cleanup()


@pytest.fixture
def mock_encoder(fake_clock):
    """Provide MockSegmentEncoder driven by the fake clock"""
    encoder = MockSegmentEncoder(clock=fake_clock)
    yield encoder
    encoder.cleanup()


# =============================================================================
# EVENT TRACKING FIXTURES
# =============================================================================


@pytest.fixture
def event_tracker():
    """
    Provide helper for tracking published events.

    Usage:
        def test_events(manager, event_tracker):
            manager.events.subscribe_all(event_tracker.track)
            # ... trigger events ...
            assert event_tracker.count(SessionEvent.SEGMENT_ADDED) == 1
    """

    class EventTracker:
        def __init__(self):
            self.events = []

        def track(self, event):
            """Record a delivered event"""
            self.events.append(event)

        def types(self):
            """Event types in delivery order"""
            return [event.type for event in self.events]

        def of_type(self, event_type):
            return [event for event in self.events if event.type == event_type]

        def count(self, event_type) -> int:
            return len(self.of_type(event_type))

        def last(self, event_type):
            """Most recent event of a type, or None"""
            matching = self.of_type(event_type)
            return matching[-1] if matching else None

        def reset(self):
            """Clear event history"""
            self.events.clear()

    return EventTracker()
