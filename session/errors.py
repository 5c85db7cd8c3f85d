"""
Session Errors

Maps capture-layer exceptions onto the session error taxonomy.
"""

from dataclasses import dataclass

from capture.interfaces.segment_encoder_interface import EncoderInitError
from capture.interfaces.stream_provider_interface import (
    DeviceBusyError,
    DeviceNotFoundError,
    PermissionDeniedError,
    StreamTimeoutError,
    UnsupportedConstraintsError,
)
from session.constants import SessionErrorKind

_KIND_BY_EXCEPTION = (
    (PermissionDeniedError, SessionErrorKind.PERMISSION_DENIED),
    (DeviceNotFoundError, SessionErrorKind.DEVICE_NOT_FOUND),
    (DeviceBusyError, SessionErrorKind.DEVICE_BUSY),
    (UnsupportedConstraintsError, SessionErrorKind.UNSUPPORTED_CONSTRAINTS),
    (StreamTimeoutError, SessionErrorKind.STREAM_TIMEOUT),
    (EncoderInitError, SessionErrorKind.ENCODER_INIT_FAILED),
)


@dataclass(frozen=True)
class SessionError:
    """Reason attached to SessionStatus.ERROR"""

    kind: SessionErrorKind
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": self.message}

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


def classify_error(error: BaseException) -> SessionError:
    """
    Classify an acquisition or encoder exception.

    Anything outside the capture hierarchies is UNKNOWN with its text.

    Example:
        classify_error(DeviceBusyError("busy")).kind -> DEVICE_BUSY
    """
    for exc_type, kind in _KIND_BY_EXCEPTION:
        if isinstance(error, exc_type):
            return SessionError(kind, str(error) or kind.value)
    return SessionError(SessionErrorKind.UNKNOWN, str(error) or type(error).__name__)


class EmptyLedgerError(Exception):
    """Preview requested over an empty segment list"""

    pass


class BudgetExceededError(Exception):
    """Appending a segment would exceed the recording budget"""

    pass


class PayloadReleaseError(Exception):
    """A segment payload was released twice or never registered"""

    pass
