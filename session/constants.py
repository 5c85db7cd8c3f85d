"""
Session Constants

Enums for session status, error kinds, stop reasons and published events,
plus the allowed status transition table.
"""

from enum import Enum


class SessionStatus(Enum):
    """
    Mutually exclusive session states.

    Lifecycle: INITIALIZING -> LIVE <-> PREVIEW_ACTIVE, any -> ERROR -> retry
    """

    INITIALIZING = "initializing"  # Acquiring a stream
    LIVE = "live"  # Stream held, recording possible
    ERROR = "error"  # Acquisition or encoder failure, retry required
    PREVIEW_ACTIVE = "preview_active"  # Stream released, playing segments


# Allowed status changes (from -> to)
SESSION_TRANSITIONS = {
    SessionStatus.INITIALIZING: {SessionStatus.LIVE, SessionStatus.ERROR},
    SessionStatus.LIVE: {
        SessionStatus.INITIALIZING,
        SessionStatus.ERROR,
        SessionStatus.PREVIEW_ACTIVE,
    },
    SessionStatus.ERROR: {
        SessionStatus.INITIALIZING,
        SessionStatus.PREVIEW_ACTIVE,
    },
    SessionStatus.PREVIEW_ACTIVE: {SessionStatus.INITIALIZING},
}


class SessionErrorKind(Enum):
    """Error taxonomy surfaced to the view. All are recoverable by retry."""

    PERMISSION_DENIED = "permission_denied"
    DEVICE_NOT_FOUND = "device_not_found"
    DEVICE_BUSY = "device_busy"
    UNSUPPORTED_CONSTRAINTS = "unsupported_constraints"
    ENCODER_INIT_FAILED = "encoder_init_failed"
    STREAM_TIMEOUT = "stream_timeout"
    FLIP_FAILED = "flip_failed"
    UNKNOWN = "unknown"


class StopReason(Enum):
    """Why a recording interval ended"""

    USER = "user"  # stop_recording() command
    AUTO = "auto"  # Budget exhausted by tick
    INTERRUPTED = "interrupted"  # App hidden, flip, retry or preview entry


class SessionEvent(Enum):
    """Observations published on the session event bus"""

    STATUS_CHANGED = "status_changed"
    STREAM_ACQUIRED = "stream_acquired"
    STREAM_FALLBACK = "stream_fallback"
    STREAM_RELEASED = "stream_released"
    RECORDING_STARTED = "recording_started"
    RECORDING_STOPPED = "recording_stopped"
    RECORDING_FAILED = "recording_failed"
    RECORDING_DISCARDED = "recording_discarded"
    BUDGET_EXHAUSTED = "budget_exhausted"
    SEGMENT_ADDED = "segment_added"
    SEGMENT_DELETED = "segment_deleted"
    PREVIEW_ENTERED = "preview_entered"
    PREVIEW_ADVANCED = "preview_advanced"
    PREVIEW_EXITED = "preview_exited"
    FLIPPED = "flipped"
    FLIP_FAILED = "flip_failed"
    SUSPENDED = "suspended"
    RESUMED = "resumed"
    ERROR = "error"


def format_ms(milliseconds: int) -> str:
    """
    Format a millisecond duration as m:ss.

    Example:
        format_ms(61500) -> "1:01"
    """
    seconds = max(0, int(milliseconds)) // 1000
    return f"{seconds // 60}:{seconds % 60:02d}"
