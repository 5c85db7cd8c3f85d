"""
Session Test Configuration and Fixtures

Shared fixtures for session module tests.
"""

import pytest

from session.config import SessionConfig
from session.controllers.session_manager import SessionManager

# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def session_config():
    """Default one-minute budget, no config file"""
    return SessionConfig.defaults(stream_timeout_seconds=1.0)


# =============================================================================
# SESSION MANAGER FIXTURES
# =============================================================================


@pytest.fixture
def manager(mock_provider, mock_encoder, fake_clock, session_config, event_tracker):
    """
    Provide SessionManager on mocks with a manual tick.

    Every event the manager publishes lands in event_tracker.

    Usage:
        def test_session(manager):
            manager.initialize()
            manager.start_recording()
    """
    session = SessionManager(
        mock_provider,
        mock_encoder,
        config=session_config,
        clock=fake_clock,
        auto_tick=False,
    )
    session.events.subscribe_all(event_tracker.track)
    yield session
    session.cleanup()


@pytest.fixture
def live_manager(manager):
    """SessionManager already streaming from the back camera"""
    assert manager.initialize() is True
    return manager


@pytest.fixture
def record_segment(fake_clock):
    """
    Provide helper that records one segment of a given length.

    Usage:
        def test_record(live_manager, record_segment):
            segment = record_segment(live_manager, 20)
    """

    def record(session, seconds: float):
        assert session.start_recording() is True
        fake_clock.advance(seconds)
        return session.stop_recording()

    return record
