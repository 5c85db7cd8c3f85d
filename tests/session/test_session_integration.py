"""
Session Integration Tests

End-to-end scenarios across SessionManager, ledger, sequencer and the mock
capture backends, including the real monitor thread and the bounded
stream acquisition.

To run:
    pytest tests/session/test_session_integration.py -v
"""

import threading
import time

import pytest

from capture.constants import Facing
from capture.implementations.mock_segment_encoder import MockSegmentEncoder
from capture.implementations.mock_stream_provider import MockStreamProvider
from capture.interfaces.stream_provider_interface import DeviceBusyError
from session.config import SessionConfig
from session.constants import SessionErrorKind, SessionEvent, SessionStatus
from session.controllers.session_manager import SessionManager


def wait_for(condition, timeout: float = 2.0) -> bool:
    """Poll until condition() is true or the timeout passes"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.fixture
def threaded_manager(mock_provider):
    """SessionManager with the real clock and monitor thread, 300 ms budget"""
    config = SessionConfig.defaults(
        budget_ms=300,
        tick_interval_seconds=0.01,
        stream_timeout_seconds=1.0,
    )
    session = SessionManager(mock_provider, MockSegmentEncoder(), config=config)
    yield session
    session.cleanup()


# =============================================================================
# SCENARIO TESTS
# =============================================================================


@pytest.mark.unit_integration
def test_record_auto_stop_delete_scenario(live_manager, fake_clock, event_tracker):
    """
    Test the full budget scenario.

    Record 20 s, record again for 45 s (auto-stopped at 40 s), confirm the
    budget is used, delete the first segment and record again.
    """
    live_manager.start_recording()
    fake_clock.advance(20)
    first = live_manager.stop_recording()
    assert live_manager.total_recorded_ms == 20_000

    live_manager.start_recording()
    for _ in range(450):
        fake_clock.advance(0.1)
        live_manager.tick()
        if not live_manager.is_recording:
            break

    assert live_manager.ledger.segments[1].duration_ms == 40_000
    assert live_manager.total_recorded_ms == 60_000
    assert live_manager.start_recording() is False
    assert event_tracker.count(SessionEvent.BUDGET_EXHAUSTED) == 1

    live_manager.delete_segment(first.id)

    assert live_manager.total_recorded_ms == 40_000
    assert live_manager.remaining_ms == 20_000
    assert live_manager.start_recording() is True


@pytest.mark.unit_integration
def test_record_preview_delete_continue(live_manager, record_segment, mock_provider):
    """Test record, preview, delete in preview, back to camera, record more."""
    record_segment(live_manager, 10)
    second = record_segment(live_manager, 10)

    live_manager.enter_preview()
    live_manager.preview_advance()
    live_manager.delete_segment(second.id)
    live_manager.exit_preview()

    assert live_manager.status == SessionStatus.LIVE
    assert live_manager.total_recorded_ms == 10_000
    third = record_segment(live_manager, 5)
    assert [s.id for s in live_manager.ledger] == [1, third.id]
    assert mock_provider.active_stream_count() == 1
    assert mock_provider.double_releases == 0


@pytest.mark.unit_integration
def test_flip_restore_then_retry(live_manager, mock_provider):
    """Test a busy front camera leaves the back camera live, then flips later."""
    mock_provider.simulate_failure(Facing.FRONT, DeviceBusyError)

    assert live_manager.flip() is False
    assert live_manager.facing == Facing.BACK

    assert live_manager.flip() is True
    assert live_manager.facing == Facing.FRONT
    assert mock_provider.active_stream_count() == 1


# =============================================================================
# THREADING TESTS
# =============================================================================


@pytest.mark.unit_integration
@pytest.mark.slow
def test_monitor_thread_auto_stops(threaded_manager):
    """Test the background tick stops recording exactly at the budget."""
    threaded_manager.initialize()
    threaded_manager.start_recording()

    assert wait_for(lambda: not threaded_manager.is_recording)

    assert len(threaded_manager.ledger) == 1
    assert threaded_manager.total_recorded_ms == 300
    assert threaded_manager.start_recording() is False


@pytest.mark.unit_integration
@pytest.mark.slow
def test_user_stop_races_auto_stop(threaded_manager):
    """Test a user stop right at the budget yields a single segment."""
    threaded_manager.initialize()
    threaded_manager.start_recording()
    time.sleep(0.3)

    threaded_manager.stop_recording()
    wait_for(lambda: not threaded_manager.is_recording)

    assert len(threaded_manager.ledger) == 1
    assert threaded_manager.total_recorded_ms <= 300


@pytest.mark.unit_integration
@pytest.mark.slow
def test_acquire_timeout_releases_late_stream(mock_provider, mock_encoder):
    """Test a stream that arrives after the timeout is never leaked."""
    config = SessionConfig.defaults(stream_timeout_seconds=0.05)
    session = SessionManager(mock_provider, mock_encoder, config=config, auto_tick=False)
    mock_provider.simulate_acquire_delay(0.3)

    try:
        assert session.initialize() is False
        assert session.status == SessionStatus.ERROR
        assert session.error.kind == SessionErrorKind.STREAM_TIMEOUT

        assert wait_for(lambda: len(mock_provider.released) == 1)
        assert mock_provider.active_stream_count() == 0

        mock_provider.reset_test_config()
        assert session.initialize() is True
        assert mock_provider.active_stream_count() == 1
    finally:
        session.cleanup()


@pytest.mark.unit_integration
@pytest.mark.slow
def test_commands_rejected_while_acquiring(mock_provider, mock_encoder):
    """Test competing commands are refused while a stream is opening."""
    config = SessionConfig.defaults(stream_timeout_seconds=2.0)
    session = SessionManager(mock_provider, mock_encoder, config=config, auto_tick=False)
    mock_provider.simulate_acquire_delay(0.3)
    results = {}

    worker = threading.Thread(target=lambda: results.setdefault("init", session.initialize()))

    try:
        worker.start()
        assert wait_for(lambda: session._acquiring)

        assert session.status == SessionStatus.INITIALIZING
        assert session.initialize() is False
        assert session.flip() is False
        assert session.start_recording() is False
        assert session.enter_preview() is False

        worker.join(timeout=2.0)
        assert results["init"] is True
        assert session.status == SessionStatus.LIVE
        assert mock_provider.active_stream_count() == 1
    finally:
        session.cleanup()


@pytest.mark.unit_integration
@pytest.mark.slow
def test_flip_restores_when_target_times_out(mock_provider, mock_encoder, event_tracker):
    """Test a stuck front camera does not block restoring the back camera."""
    config = SessionConfig.defaults(stream_timeout_seconds=0.2)
    session = SessionManager(mock_provider, mock_encoder, config=config, auto_tick=False)
    session.events.subscribe_all(event_tracker.track)

    try:
        assert session.initialize(Facing.BACK) is True
        mock_provider.simulate_acquire_delay(1.0, facing=Facing.FRONT)

        assert session.flip() is False
        assert session.status == SessionStatus.LIVE
        assert session.facing == Facing.BACK
        assert session.error is None
        assert len(event_tracker.of_type(SessionEvent.FLIP_FAILED)) == 1

        # Late front stream is released once it arrives
        assert wait_for(lambda: mock_provider.active_stream_count() == 1)
        assert session.stream.active is True
    finally:
        session.cleanup()


@pytest.mark.unit_integration
@pytest.mark.slow
def test_retry_immediately_after_timeout(mock_provider, mock_encoder):
    """Test a retry right after a timeout is not held up by the stuck acquire."""
    config = SessionConfig.defaults(stream_timeout_seconds=0.2)
    session = SessionManager(mock_provider, mock_encoder, config=config, auto_tick=False)
    mock_provider.simulate_acquire_delay(1.0, facing=Facing.FRONT)

    try:
        assert session.initialize(Facing.FRONT) is False
        assert session.error.kind == SessionErrorKind.STREAM_TIMEOUT

        started = time.monotonic()
        assert session.initialize(Facing.BACK) is True
        assert time.monotonic() - started < 0.5
        assert session.status == SessionStatus.LIVE
        assert session.facing == Facing.BACK
    finally:
        session.cleanup()

    assert wait_for(lambda: mock_provider.active_stream_count() == 0)


@pytest.mark.unit_integration
@pytest.mark.slow
def test_hide_during_acquisition_opens_paused(mock_provider, mock_encoder):
    """Test going to the background while the camera opens is not lost."""
    config = SessionConfig.defaults(stream_timeout_seconds=2.0)
    session = SessionManager(mock_provider, mock_encoder, config=config, auto_tick=False)
    mock_provider.simulate_acquire_delay(0.3)
    results = {}

    worker = threading.Thread(target=lambda: results.setdefault("init", session.initialize()))

    try:
        worker.start()
        assert wait_for(lambda: session._acquiring)

        assert session.handle_visibility(hidden=True) is True

        worker.join(timeout=2.0)
        assert results["init"] is True
        assert session.status == SessionStatus.LIVE
        assert session.is_suspended is True
        assert session.stream.paused is True
        assert session.can_record() is False
        assert session.start_recording() is False

        assert session.handle_visibility(hidden=False) is True
        assert session.stream.paused is False
        assert session.start_recording() is True
    finally:
        session.cleanup()


@pytest.mark.unit_integration
@pytest.mark.slow
def test_show_during_acquisition_cancels_pending_suspend(mock_provider, mock_encoder):
    """Test hide then show while the camera opens leaves it running."""
    config = SessionConfig.defaults(stream_timeout_seconds=2.0)
    session = SessionManager(mock_provider, mock_encoder, config=config, auto_tick=False)
    mock_provider.simulate_acquire_delay(0.3)

    worker = threading.Thread(target=session.initialize)

    try:
        worker.start()
        assert wait_for(lambda: session._acquiring)

        session.handle_visibility(hidden=True)
        assert session.handle_visibility(hidden=False) is True

        worker.join(timeout=2.0)
        assert session.is_suspended is False
        assert session.stream.paused is False
        assert session.can_record() is True
    finally:
        session.cleanup()
