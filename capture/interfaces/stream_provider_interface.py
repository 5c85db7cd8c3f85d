"""
Stream Provider Interface

Abstract interface for device stream providers.
Defines the contract for acquiring and releasing a live audio+video capture
handle for a requested camera facing.

The session manager depends on this abstraction, never on V4L2 directly,
so tests run against MockStreamProvider.
"""

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from capture.constants import Facing, VideoHints

_stream_ids = itertools.count(1)


@dataclass
class StreamHandle:
    """
    Owned handle to a live capture stream.

    `hints` is None when the stream was acquired without constraints.
    `resource` is private to the provider that created the handle.
    """

    facing: Facing
    device: str
    hints: Optional[VideoHints]
    audio_enabled: bool
    stream_id: int = field(default_factory=lambda: next(_stream_ids))
    active: bool = True
    paused: bool = False
    resource: Any = field(default=None, repr=False)


class StreamProviderInterface(ABC):
    """
    Abstract base class for device stream providers.

    Implementations acquire a camera (and optionally microphone) for a
    facing direction and hand back a StreamHandle the caller owns until it
    calls release().
    """

    @abstractmethod
    def acquire(
        self,
        facing: Facing,
        video_hints: Optional[VideoHints] = None,
        audio_enabled: bool = True,
    ) -> StreamHandle:
        """
        Acquire a live stream.

        May block while the device opens. Callers bound the wait.

        Args:
            facing: Requested camera direction
            video_hints: Ideal constraints, or None for unconstrained
            audio_enabled: Whether to capture audio as well

        Returns:
            Active StreamHandle

        Raises:
            PermissionDeniedError: Access to the device was refused
            DeviceNotFoundError: No device for the requested facing
            DeviceBusyError: Device is held by another process
            UnsupportedConstraintsError: Device cannot satisfy video_hints
            StreamError: Any other acquisition failure
        """
        pass

    @abstractmethod
    def release(self, handle: StreamHandle) -> None:
        """
        Stop all tracks and release the device.

        Releasing an already-released handle is logged and ignored.
        """
        pass

    @abstractmethod
    def pause(self, handle: StreamHandle) -> None:
        """Pause live delivery without releasing the device"""
        pass

    @abstractmethod
    def resume(self, handle: StreamHandle) -> None:
        """Resume live delivery of a paused stream"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check if the provider can be used at all.

        Returns:
            True if at least one camera device is present
        """
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """
        Release every handle this provider still holds.

        This should never raise exceptions.
        """
        pass


class StreamError(Exception):
    """
    Exception raised for stream acquisition errors.

    Subclasses identify the failure kind so callers can classify it.
    """

    pass


class PermissionDeniedError(StreamError):
    """Camera or microphone access was refused"""

    pass


class DeviceNotFoundError(StreamError):
    """No capture device for the requested facing"""

    pass


class DeviceBusyError(StreamError):
    """Capture device is already in use by another process"""

    pass


class UnsupportedConstraintsError(StreamError):
    """Device cannot satisfy the requested video hints"""

    pass


class StreamTimeoutError(StreamError):
    """Stream did not become ready within the allowed time"""

    pass
