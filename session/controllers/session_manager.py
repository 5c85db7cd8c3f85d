"""
Session Manager

Owns one segmented-recording session: the camera stream, the single active
recording interval, the segment ledger and the preview sequencer.
Every mutating command runs under one lock, so auto-stop from the monitor
thread and a user stop can race safely: whichever gets the lock first
stops the recording and the other finds nothing to stop.

This is the high-level controller the view talks to.

SOLID Principles:
- Single Responsibility: Only arbitrates session state
- Open/Closed: Observers subscribe to the event bus
- Dependency Inversion: Depends on stream provider / encoder interfaces
"""

import itertools
import logging
import threading
import time
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from capture.constants import Facing, VideoHints
from capture.factory import create_capture_backends
from capture.interfaces.segment_encoder_interface import (
    EncoderHandle,
    SegmentEncoderInterface,
)
from capture.interfaces.stream_provider_interface import (
    StreamHandle,
    StreamProviderInterface,
    StreamTimeoutError,
    UnsupportedConstraintsError,
)
from core.event_bus import EventBus
from core.state_machine import StateMachine
from session.config import SessionConfig
from session.constants import (
    SESSION_TRANSITIONS,
    SessionErrorKind,
    SessionEvent,
    SessionStatus,
    StopReason,
    format_ms,
)
from session.controllers.preview_sequencer import PreviewSequencer
from session.errors import SessionError, classify_error
from session.models.ledger import SegmentLedger
from session.models.payload_registry import PayloadRegistry
from session.models.segment import Segment, SegmentPayload, SegmentSummary

AcquireResult = Tuple[Optional[StreamHandle], Optional[Exception]]


@dataclass
class _RecordingInterval:
    """The one in-progress recording"""

    started_at: float
    encoder: EncoderHandle
    facing: Facing
    stop_event: threading.Event = field(default_factory=threading.Event)
    thread: Optional[threading.Thread] = None


class SessionManager:
    """
    Manages a segmented recording session.

    Features:
    - Stream acquisition with constraint fallback and bounded wait
    - Camera flip with restore of the previous camera on failure
    - Cumulative budget with auto-stop from a 100 ms tick
    - Ordered segment ledger with exactly-once payload release
    - Looping preview of recorded segments
    - Suspend/resume on visibility changes

    Usage:
        manager = SessionManager(provider, encoder)
        manager.events.subscribe_all(print)

        manager.initialize(Facing.BACK)
        manager.start_recording()
        # ... later, or automatically when the budget runs out ...
        segment = manager.stop_recording()

        manager.enter_preview()
        manager.preview_advance()
        manager.exit_preview()

        manager.cleanup()
    """

    def __init__(
        self,
        stream_provider: Optional[StreamProviderInterface] = None,
        encoder: Optional[SegmentEncoderInterface] = None,
        config: Optional[SessionConfig] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], float] = time.monotonic,
        auto_tick: bool = True,
        payload_registry: Optional[PayloadRegistry] = None,
    ):
        """
        Initialize session manager.

        Args:
            stream_provider: Camera stream provider, or None to auto-create
            encoder: Segment encoder, or None to auto-create
            config: Session configuration (default: settings, no file)
            event_bus: Observation sink (default: private bus)
            clock: Monotonic time source in seconds
            auto_tick: Run the tick on a monitor thread while recording
            payload_registry: Store for segment payloads

        Example:
            # Testing with mocks and a manual tick
            manager = SessionManager(
                MockStreamProvider(), MockSegmentEncoder(), auto_tick=False
            )
        """
        self.logger = logging.getLogger(__name__)

        if stream_provider is None or encoder is None:
            default_provider, default_encoder = create_capture_backends()
            stream_provider = stream_provider or default_provider
            encoder = encoder or default_encoder

        self.provider = stream_provider
        self.encoder = encoder
        self.config = config or SessionConfig.defaults()
        self.events = event_bus or EventBus()
        self.registry = payload_registry or PayloadRegistry()
        self.clock = clock
        self.auto_tick = auto_tick

        # Session state
        self.ledger = SegmentLedger(self.config.budget_ms)
        self.facing: Facing = self.config.default_facing
        self.stream: Optional[StreamHandle] = None
        self.error: Optional[SessionError] = None
        self._machine = StateMachine(
            SessionStatus.INITIALIZING,
            SESSION_TRANSITIONS,
            name="Capture session",
        )
        self._machine.on_state_change = self._on_status_change

        self._interval: Optional[_RecordingInterval] = None
        self._sequencer: Optional[PreviewSequencer] = None
        self._suspended = False
        self._acquiring = False
        self._closed = False
        self._segment_ids = itertools.count(1)

        # Serializes every mutating command
        self._lock = threading.RLock()

        self.logger.info(
            f"Session Manager initialized "
            f"(budget: {format_ms(self.config.budget_ms)}, "
            f"facing: {self.facing.value})",
        )

    # =========================================================================
    # OBSERVABLE STATE
    # =========================================================================

    @property
    def status(self) -> SessionStatus:
        return self._machine.get_current_state()

    @property
    def is_recording(self) -> bool:
        return self._interval is not None

    @property
    def is_suspended(self) -> bool:
        return self._suspended

    @property
    def total_recorded_ms(self) -> int:
        return self.ledger.total_recorded_ms

    @property
    def remaining_ms(self) -> int:
        return self.ledger.remaining_ms

    @property
    def live_elapsed_ms(self) -> int:
        """Elapsed time of the active recording, 0 when not recording"""
        interval = self._interval
        return self._elapsed_ms(interval) if interval else 0

    @property
    def segments(self) -> List[SegmentSummary]:
        """Segment ids and durations in recording order"""
        with self._lock:
            return self.ledger.summaries()

    @property
    def preview_index(self) -> Optional[int]:
        sequencer = self._sequencer
        return sequencer.index if sequencer else None

    def can_record(self) -> bool:
        """Check if start_recording() would be accepted"""
        with self._lock:
            return (
                not self._closed
                and not self._acquiring
                and self.status is SessionStatus.LIVE
                and self.stream is not None
                and self._interval is None
                and not self._suspended
                and not self.ledger.is_exhausted
            )

    # =========================================================================
    # STREAM LIFECYCLE
    # =========================================================================

    def initialize(self, facing: Optional[Facing] = None) -> bool:
        """
        Acquire a stream for `facing` (default: last known facing).

        Also the retry path out of ERROR. A recording in progress is stopped
        first and any held stream is released before re-acquiring.

        Returns:
            True if the session is LIVE afterwards

        Example:
            if not manager.initialize(Facing.FRONT):
                print(manager.error)
        """
        with self._lock:
            if not self._can_acquire("initialize"):
                return False
            if self.status is SessionStatus.PREVIEW_ACTIVE:
                self.logger.warning("Cannot initialize during preview, exit preview first")
                return False

            target = facing or self.facing
            self._stop_if_recording(StopReason.INTERRUPTED)
            self._release_stream()
            self._begin_acquisition(f"acquiring {target.value} camera")

        handle, error = self._acquire_with_fallback(target)

        with self._lock:
            return self._commit_acquisition(target, handle, error)

    def flip(self) -> bool:
        """
        Switch to the opposite camera.

        If the new camera fails, the previous one is re-acquired (session
        stays LIVE, FLIP_FAILED event). If both fail the session goes to
        ERROR(FLIP_FAILED). Segments are never affected.

        Returns:
            True if now streaming from the opposite camera
        """
        with self._lock:
            if not self._can_acquire("flip"):
                return False
            if self.status in (SessionStatus.INITIALIZING, SessionStatus.PREVIEW_ACTIVE):
                self.logger.warning(f"Cannot flip in state: {self.status.value}")
                return False

            previous = self.facing
            target = previous.opposite()
            self._stop_if_recording(StopReason.INTERRUPTED)
            self._release_stream()
            self._begin_acquisition(f"flipping to {target.value} camera")

        handle, error = self._acquire_with_fallback(target)

        restored, restore_error = None, None
        if handle is None:
            self.logger.warning(
                f"Flip to {target.value} failed ({error}), "
                f"restoring {previous.value} camera",
            )
            restored, restore_error = self._acquire_with_fallback(previous)

        with self._lock:
            self._acquiring = False

            if self._closed:
                self._discard_late_stream(handle or restored)
                return False

            if handle is not None:
                self._commit_stream(target, handle)
                self.events.publish(
                    SessionEvent.FLIPPED,
                    {"from": previous.value, "to": target.value},
                )
                return True

            flip_error = classify_error(error)
            if restored is not None:
                self._commit_stream(previous, restored)
                self.events.publish(
                    SessionEvent.FLIP_FAILED,
                    {"facing": target.value, "error": flip_error.to_dict()},
                )
                return False

            self._fail(
                SessionError(
                    SessionErrorKind.FLIP_FAILED,
                    f"{target.value}: {flip_error}; "
                    f"{previous.value}: {classify_error(restore_error)}",
                ),
            )
            return False

    # =========================================================================
    # RECORDING
    # =========================================================================

    def start_recording(self) -> bool:
        """
        Start a new recording interval.

        Returns:
            False when not eligible: no live stream, already recording,
            suspended, or the budget is used up

        Example:
            if not manager.start_recording():
                print("Cannot record right now")
        """
        with self._lock:
            if self._closed or self._acquiring:
                return False

            if self.status is not SessionStatus.LIVE or self.stream is None:
                self.logger.warning(
                    f"Cannot start - no live stream (state: {self.status.value})",
                )
                return False

            if self._interval is not None:
                self.logger.warning("Cannot start - already recording")
                return False

            if self._suspended:
                self.logger.warning("Cannot start - session suspended")
                return False

            if self.ledger.is_exhausted:
                self.logger.warning(
                    f"Cannot start - budget used "
                    f"({format_ms(self.ledger.total_recorded_ms)})",
                )
                return False

            try:
                encoder_handle = self.encoder.begin(self.stream)
            except Exception as e:
                self.logger.error(f"Encoder failed to start: {e}")
                self._release_stream()
                self._fail(SessionError(SessionErrorKind.ENCODER_INIT_FAILED, str(e)))
                return False

            interval = _RecordingInterval(
                started_at=self.clock(),
                encoder=encoder_handle,
                facing=self.facing,
            )
            self._interval = interval

            if self.auto_tick:
                self._start_monitoring(interval)

            self.logger.info(
                f"Recording started ({format_ms(self.ledger.remaining_ms)} remaining)",
            )
            self.events.publish(
                SessionEvent.RECORDING_STARTED,
                {
                    "facing": self.facing.value,
                    "total_recorded_ms": self.ledger.total_recorded_ms,
                    "remaining_ms": self.ledger.remaining_ms,
                },
            )
            return True

    def tick(self) -> int:
        """
        Recompute live elapsed time and auto-stop at the budget.

        Returns:
            Live elapsed ms (0 when not recording)
        """
        with self._lock:
            interval = self._interval
            if interval is None:
                return 0

            live_ms = self._elapsed_ms(interval)
            total_ms = self.ledger.total_recorded_ms

            if total_ms + live_ms >= self.ledger.budget_ms:
                self.logger.info("Budget reached, auto-stopping")
                self.events.publish(
                    SessionEvent.BUDGET_EXHAUSTED,
                    {"live_elapsed_ms": live_ms, "total_recorded_ms": total_ms},
                )
                self._stop_recording(StopReason.AUTO)

            return live_ms

    def stop_recording(self) -> Optional[Segment]:
        """
        Stop the active recording and store it as a segment.

        Returns:
            The new segment, or None if nothing was recording
        """
        with self._lock:
            if self._interval is None:
                self.logger.debug("Stop ignored - not recording")
                return None
            return self._stop_recording(StopReason.USER)

    def delete_segment(self, segment_id: int) -> bool:
        """
        Delete a segment and release its payload.

        Unknown ids are ignored. During preview the cursor is kept valid and
        preview ends when the last segment is deleted.

        Returns:
            True if a segment was removed
        """
        leave_preview = False

        with self._lock:
            position = self.ledger.index_of(segment_id)
            if position < 0:
                self.logger.debug(f"Delete ignored - no segment {segment_id}")
                return False

            segment = self.ledger.remove(segment_id)
            segment.release()

            self.logger.info(
                f"Segment {segment_id} deleted "
                f"(total: {format_ms(self.ledger.total_recorded_ms)})",
            )
            self.events.publish(
                SessionEvent.SEGMENT_DELETED,
                {
                    "segment_id": segment_id,
                    "duration_ms": segment.duration_ms,
                    "total_recorded_ms": self.ledger.total_recorded_ms,
                },
            )

            if self._sequencer is not None and not self._sequencer.remove_at(position):
                self.logger.info("Last segment deleted during preview")
                leave_preview = True

        if leave_preview:
            self.exit_preview()

        return True

    # =========================================================================
    # PREVIEW
    # =========================================================================

    def enter_preview(self) -> bool:
        """
        Release the camera and start looping playback of the segments.

        An active recording is stopped first.

        Returns:
            True if preview started; False with no segments
        """
        with self._lock:
            if self._closed or self._acquiring:
                return False
            if self.status in (SessionStatus.INITIALIZING, SessionStatus.PREVIEW_ACTIVE):
                self.logger.debug(f"Preview ignored in state: {self.status.value}")
                return False

            self._stop_if_recording(StopReason.INTERRUPTED)

            if not self.ledger:
                self.logger.info("Nothing to preview")
                return False

            self._release_stream()
            self.error = None
            self._sequencer = PreviewSequencer(self.ledger.segments)
            self._set_status(SessionStatus.PREVIEW_ACTIVE, "preview")

            self.events.publish(
                SessionEvent.PREVIEW_ENTERED,
                {"segment_count": len(self._sequencer), "index": 0},
            )
            return True

    def exit_preview(self, reacquire: bool = True) -> bool:
        """
        Leave preview and re-acquire the last-used camera.

        Args:
            reacquire: False to only drop the sequencer, e.g. before a
                hand-off on shutdown. The session then waits in
                INITIALIZING with no stream until initialize().

        Returns:
            True if the session is LIVE again
        """
        with self._lock:
            if self.status is not SessionStatus.PREVIEW_ACTIVE:
                return False

            self._sequencer = None
            target = self.facing
            self.events.publish(SessionEvent.PREVIEW_EXITED, {"reacquire": reacquire})

            if not reacquire:
                self._set_status(SessionStatus.INITIALIZING, "preview closed")
                return False

            self._begin_acquisition("leaving preview")

        handle, error = self._acquire_with_fallback(target)

        with self._lock:
            return self._commit_acquisition(target, handle, error)

    def preview_current(self) -> Optional[Segment]:
        """Segment to play now, or None outside preview"""
        with self._lock:
            if self._sequencer is None:
                return None
            return self._sequencer.current()

    def preview_advance(self) -> Optional[Segment]:
        """
        Called when the current segment finishes playing.

        Returns:
            Next segment (wrapping), or None outside preview
        """
        with self._lock:
            if self._sequencer is None:
                return None
            segment = self._sequencer.advance()
            self.events.publish(
                SessionEvent.PREVIEW_ADVANCED,
                {"index": self._sequencer.index, "segment_id": segment.id},
            )
            return segment

    # =========================================================================
    # VISIBILITY
    # =========================================================================

    def suspend(self) -> bool:
        """
        App went to the background.

        Pauses (does not release) the stream and stops any recording as an
        implicit segment boundary.

        Returns:
            True if a live stream was suspended, or the stream being
            acquired will open paused
        """
        with self._lock:
            if self._suspended:
                return False

            if self._acquiring:
                # Applied when the stream arrives
                self._suspended = True
                self.logger.info("Session suspended while acquiring, stream will open paused")
                self.events.publish(SessionEvent.SUSPENDED, {"pending": True})
                return True

            if self.stream is None:
                return False

            self._stop_if_recording(StopReason.INTERRUPTED)
            self._suspended = True

            try:
                self.provider.pause(self.stream)
            except Exception as e:
                self.logger.error(f"Error pausing stream: {e}")

            self.logger.info("Session suspended")
            self.events.publish(SessionEvent.SUSPENDED, {})
            return True

    def resume(self) -> bool:
        """
        App came back to the foreground.

        Resumes the stream if one is still held; never re-acquires.

        Returns:
            True if a suspended stream was resumed
        """
        with self._lock:
            if not self._suspended:
                return False

            self._suspended = False

            if self.stream is None:
                if self._acquiring:
                    self.logger.info("Pending suspend cancelled")
                    self.events.publish(SessionEvent.RESUMED, {"pending": True})
                    return True
                return False

            try:
                self.provider.resume(self.stream)
            except Exception as e:
                self.logger.error(f"Error resuming stream: {e}")

            self.logger.info("Session resumed")
            self.events.publish(SessionEvent.RESUMED, {})
            return True

    def handle_visibility(self, hidden: bool) -> bool:
        """Deliver a visibility change as suspend/resume"""
        return self.suspend() if hidden else self.resume()

    # =========================================================================
    # HAND-OFF AND TEARDOWN
    # =========================================================================

    def hand_off_segments(self) -> List[Segment]:
        """
        Transfer all segments, payloads included, to the caller.

        The ledger is emptied without releasing payloads; the caller now
        owns them. Refused while recording or previewing.

        Returns:
            Segments in recording order (empty when refused)
        """
        with self._lock:
            if self._interval is not None or self._sequencer is not None:
                self.logger.warning("Cannot hand off segments while recording or previewing")
                return []

            segments = self.ledger.clear()
            self.logger.info(f"Handed off {len(segments)} segments")
            return segments

    def cleanup(self) -> None:
        """
        Tear the session down.

        Discards an active recording without producing a segment, releases
        the stream and every remaining payload.

        Always call this when done with session!
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

            self.logger.info("Cleaning up Session Manager")

            if self._interval is not None:
                self._discard_recording()

            self._sequencer = None
            self._release_stream()

            for segment in self.ledger.clear():
                segment.release()

        for component in (self.encoder, self.provider):
            try:
                component.cleanup()
            except Exception as e:
                self.logger.error(f"Error during {type(component).__name__} cleanup: {e}")

        self.logger.info("Session Manager cleanup complete")

    # =========================================================================
    # STATUS AND INFO
    # =========================================================================

    def get_status(self) -> Dict[str, Any]:
        """
        Get the read-only view of the session.

        Returns:
            Dictionary with status information (no payloads)
        """
        with self._lock:
            return {
                "status": self.status.value,
                "facing": self.facing.value,
                "error": self.error.to_dict() if self.error else None,
                "has_stream": self.stream is not None,
                "is_recording": self._interval is not None,
                "suspended": self._suspended,
                "live_elapsed_ms": self.live_elapsed_ms,
                "total_recorded_ms": self.ledger.total_recorded_ms,
                "remaining_ms": self.ledger.remaining_ms,
                "budget_ms": self.ledger.budget_ms,
                "segments": [s.to_dict() for s in self.ledger.summaries()],
                "preview_index": self.preview_index,
            }

    def get_session_info(self) -> str:
        """
        Get human-readable session information.

        Returns:
            Formatted string with session details
        """
        status = self.get_status()

        info = [
            f"State: {status['status']}",
            f"Camera: {status['facing']}",
            f"Recorded: {format_ms(status['total_recorded_ms'])} "
            f"of {format_ms(status['budget_ms'])}",
            f"Segments: {len(status['segments'])}",
        ]

        if status["is_recording"]:
            info.append(f"Recording: {format_ms(status['live_elapsed_ms'])}")
        if status["error"]:
            info.append(f"Error: {status['error']['kind']} ({status['error']['message']})")
        if status["preview_index"] is not None:
            info.append(f"Preview: segment {status['preview_index'] + 1}")

        return "\n".join(info)

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _can_acquire(self, command: str) -> bool:
        if self._closed:
            self.logger.warning(f"Cannot {command} - session closed")
            return False
        if self._acquiring:
            self.logger.warning(f"Cannot {command} - acquisition in progress")
            return False
        return True

    def _begin_acquisition(self, reason: str) -> None:
        self._acquiring = True
        self.error = None
        self._set_status(SessionStatus.INITIALIZING, reason)

    def _acquire_with_fallback(self, facing: Facing) -> AcquireResult:
        """
        Primary constraints first, then one unconstrained attempt if the
        device rejected the constraints.
        """
        handle, error = self._try_acquire(facing, self.config.video_hints)

        if isinstance(error, UnsupportedConstraintsError):
            self.logger.warning(f"{error}, retrying without constraints")
            handle, error = self._try_acquire(facing, None)
            if handle is not None:
                self.events.publish(
                    SessionEvent.STREAM_FALLBACK,
                    {"facing": facing.value, "stream_id": handle.stream_id},
                )

        return handle, error

    def _try_acquire(self, facing: Facing, hints: Optional[VideoHints]) -> AcquireResult:
        """
        Run one acquisition with a bounded wait.

        Each attempt gets its own daemon thread, so an acquire stuck past
        its timeout never delays the attempts that follow it.
        """
        timeout = self.config.stream_timeout_seconds
        future: Future = Future()

        def attempt():
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(
                    self.provider.acquire(facing, hints, self.config.audio_enabled),
                )
            except Exception as e:
                future.set_exception(e)

        try:
            threading.Thread(
                target=attempt,
                daemon=True,
                name=f"StreamAcquire-{facing.value}",
            ).start()
            return future.result(timeout=timeout), None
        except FutureTimeoutError:
            future.add_done_callback(self._release_late_stream)
            return None, StreamTimeoutError(
                f"{facing.value} camera not ready after {timeout:.1f}s",
            )
        except Exception as e:
            return None, e

    def _release_late_stream(self, future: Future) -> None:
        """A stream that arrives after its timeout is released at once"""
        if future.cancelled() or future.exception() is not None:
            return
        handle = future.result()
        self.logger.warning(f"Releasing stream {handle.stream_id} that arrived after timeout")
        try:
            self.provider.release(handle)
        except Exception as e:
            self.logger.error(f"Error releasing late stream: {e}")

    def _commit_acquisition(
        self,
        facing: Facing,
        handle: Optional[StreamHandle],
        error: Optional[Exception],
    ) -> bool:
        self._acquiring = False

        if self._closed:
            self._discard_late_stream(handle)
            return False

        if handle is not None:
            self._commit_stream(facing, handle)
            return True

        self._fail(classify_error(error))
        return False

    def _commit_stream(self, facing: Facing, handle: StreamHandle) -> None:
        self.stream = handle
        self.facing = facing
        self.error = None

        if self._suspended:
            try:
                self.provider.pause(handle)
            except Exception as e:
                self.logger.error(f"Error pausing stream: {e}")
            self.logger.info(f"Stream {handle.stream_id} opened paused (session suspended)")

        self._set_status(SessionStatus.LIVE, f"{facing.value} camera ready")
        self.events.publish(
            SessionEvent.STREAM_ACQUIRED,
            {
                "facing": facing.value,
                "stream_id": handle.stream_id,
                "constrained": handle.hints is not None,
            },
        )

    def _discard_late_stream(self, handle: Optional[StreamHandle]) -> None:
        if handle is not None:
            self.provider.release(handle)

    def _set_status(self, status: SessionStatus, reason: str) -> None:
        """Single place where the status changes; observers hear it via the bus"""
        self._machine.transition_to(status, reason)

    def _fail(self, error: SessionError) -> None:
        self.error = error
        self.logger.error(f"Session error: {error}")
        self._set_status(SessionStatus.ERROR, error.kind.value)
        self.events.publish(SessionEvent.ERROR, error.to_dict())

    def _release_stream(self) -> None:
        handle = self.stream
        if handle is None:
            return

        self.stream = None
        self._suspended = False

        try:
            self.provider.release(handle)
        except Exception as e:
            self.logger.error(f"Error releasing stream {handle.stream_id}: {e}")

        self.events.publish(
            SessionEvent.STREAM_RELEASED,
            {"facing": handle.facing.value, "stream_id": handle.stream_id},
        )

    def _stop_if_recording(self, reason: StopReason) -> None:
        if self._interval is not None:
            self._stop_recording(reason)

    def _stop_recording(self, reason: StopReason) -> Optional[Segment]:
        """Finalize the active interval into a segment (lock held)"""
        interval = self._interval
        self._interval = None
        self._stop_monitoring(interval)

        elapsed_ms = self._elapsed_ms(interval)
        # Clip to what the budget still allows; the encoded media may run
        # slightly longer than the accounted duration
        duration_ms = min(elapsed_ms, self.ledger.remaining_ms)

        try:
            payload = self.encoder.finish(interval.encoder)
        except Exception as e:
            self.logger.error(f"Failed to finalize recording: {e}", exc_info=True)
            self.events.publish(
                SessionEvent.RECORDING_FAILED,
                {"reason": reason.value, "elapsed_ms": elapsed_ms, "error": str(e)},
            )
            return None

        segment = Segment(
            id=next(self._segment_ids),
            payload=SegmentPayload(self.registry, self.registry.register(payload)),
            duration_ms=duration_ms,
            facing=interval.facing,
            encoded_duration_ms=payload.reported_duration_ms,
        )
        self.ledger.append(segment)

        self.logger.info(
            f"Recording stopped ({reason.value}): segment {segment.id}, "
            f"{format_ms(duration_ms)} "
            f"(total: {format_ms(self.ledger.total_recorded_ms)})",
        )
        self.events.publish(
            SessionEvent.RECORDING_STOPPED,
            {
                "reason": reason.value,
                "elapsed_ms": elapsed_ms,
                "duration_ms": duration_ms,
            },
        )
        self.events.publish(
            SessionEvent.SEGMENT_ADDED,
            {
                "segment_id": segment.id,
                "duration_ms": duration_ms,
                "total_recorded_ms": self.ledger.total_recorded_ms,
            },
        )
        return segment

    def _discard_recording(self) -> None:
        """Drop the active interval without producing a segment"""
        interval = self._interval
        self._interval = None
        self._stop_monitoring(interval)

        try:
            self.encoder.abort(interval.encoder)
        except Exception as e:
            self.logger.error(f"Error aborting encoder: {e}")

        self.logger.info("Active recording discarded")
        self.events.publish(
            SessionEvent.RECORDING_DISCARDED,
            {"elapsed_ms": self._elapsed_ms(interval)},
        )

    def _elapsed_ms(self, interval: _RecordingInterval) -> int:
        return max(0, int((self.clock() - interval.started_at) * 1000))

    def _start_monitoring(self, interval: _RecordingInterval) -> None:
        """
        Start background monitoring thread for one interval.

        The thread exits on its own once the interval's stop event is set.
        """
        interval.thread = threading.Thread(
            target=self._monitor_worker,
            args=(interval,),
            daemon=True,
            name="RecordingMonitor",
        )
        interval.thread.start()
        self.logger.debug("Monitoring thread started")

    def _stop_monitoring(self, interval: _RecordingInterval) -> None:
        # Never joined here: the worker may be waiting on the lock we hold
        interval.stop_event.set()
        self.logger.debug("Monitoring thread signalled")

    def _monitor_worker(self, interval: _RecordingInterval) -> None:
        """Tick every tick_interval_seconds until the interval ends"""
        check_interval = self.config.tick_interval_seconds

        while not interval.stop_event.wait(check_interval):
            try:
                self.tick()
            except Exception as e:
                self.logger.error(f"Error in monitoring thread: {e}")

    def _on_status_change(self, old, new, reason: str) -> None:
        self.events.publish(
            SessionEvent.STATUS_CHANGED,
            {"old": old.value, "new": new.value, "reason": reason},
        )

    def __del__(self):
        """Destructor - ensure cleanup"""
        if getattr(self, "_closed", True) is False:
            self.cleanup()
