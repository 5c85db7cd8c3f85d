"""
Capture Interfaces Package

Exposes abstract interfaces for capture components.
"""

from capture.interfaces.segment_encoder_interface import (
    EncodedPayload,
    EncoderError,
    EncoderHandle,
    EncoderInitError,
    SegmentEncoderInterface,
)
from capture.interfaces.stream_provider_interface import (
    DeviceBusyError,
    DeviceNotFoundError,
    PermissionDeniedError,
    StreamError,
    StreamHandle,
    StreamProviderInterface,
    StreamTimeoutError,
    UnsupportedConstraintsError,
)

# Public API
__all__ = [
    # Exceptions
    "DeviceBusyError",
    "DeviceNotFoundError",
    "EncoderError",
    "EncoderInitError",
    "PermissionDeniedError",
    "StreamError",
    "StreamTimeoutError",
    "UnsupportedConstraintsError",
    # Types
    "EncodedPayload",
    "EncoderHandle",
    "StreamHandle",
    # Interfaces
    "SegmentEncoderInterface",
    "StreamProviderInterface",
]
