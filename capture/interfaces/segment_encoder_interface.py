"""
Segment Encoder Interface

Abstract interface for segment encoders. An encoder wraps a live stream
and produces exactly one encoded payload per begin/finish cycle.
"""

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from capture.interfaces.stream_provider_interface import StreamHandle

_encoder_ids = itertools.count(1)


@dataclass(frozen=True)
class EncodedPayload:
    """
    Finalized output of one encoding cycle.

    reported_duration_ms is whatever the encoder measured; it is
    informational and may disagree with wall-clock accounting.
    """

    data: bytes
    mime_type: str
    reported_duration_ms: Optional[int] = None

    @property
    def size_bytes(self) -> int:
        return len(self.data)


@dataclass
class EncoderHandle:
    """An in-progress encoding cycle bound to one stream"""

    stream: StreamHandle
    encoder_id: int = field(default_factory=lambda: next(_encoder_ids))
    finished: bool = False
    resource: Any = field(default=None, repr=False)


class SegmentEncoderInterface(ABC):
    """
    Abstract base class for segment encoders.

    Lifecycle per segment: begin() -> finish() (or abort() on teardown).
    """

    @abstractmethod
    def begin(self, stream: StreamHandle) -> EncoderHandle:
        """
        Start encoding the given stream.

        Returns:
            Handle for the running encoding cycle

        Raises:
            EncoderInitError: Encoder could not start
        """
        pass

    @abstractmethod
    def finish(self, handle: EncoderHandle) -> EncodedPayload:
        """
        Stop encoding and return the finalized payload.

        May block while the encoder flushes. The payload is delivered once;
        finishing the same handle again raises EncoderError.

        Raises:
            EncoderError: Finalization failed or handle already finished
        """
        pass

    @abstractmethod
    def abort(self, handle: EncoderHandle) -> None:
        """
        Discard an encoding cycle without producing a payload.

        This should never raise exceptions.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the encoder backend is installed"""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Abort any running cycle and free resources"""
        pass


class EncoderError(Exception):
    """Exception raised for encoding errors"""

    pass


class EncoderInitError(EncoderError):
    """Encoder failed to start"""

    pass
