"""
Capture Module

Camera stream acquisition and segment encoding.

Provides automatic detection and graceful fallback between real V4L2/FFmpeg
capture and mock implementations for testing.

Public API:
    - CaptureFactory: Factory for creating providers and encoders
    - create_capture_backends: Matching provider + encoder with auto-detection
    - StreamProviderInterface / SegmentEncoderInterface: Capture contracts
    - Facing / VideoHints: Acquisition parameters
    - StreamError / EncoderError: Exception hierarchies

Usage:
    from capture import Facing, VideoHints, create_capture_backends

    provider, encoder = create_capture_backends()
    stream = provider.acquire(Facing.BACK, VideoHints())
"""

from capture.constants import DEFAULT_VIDEO_HINTS, Facing, VideoHints
from capture.factory import CaptureFactory, create_capture_backends
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

__all__ = [
    "CaptureFactory",
    "DEFAULT_VIDEO_HINTS",
    "DeviceBusyError",
    "DeviceNotFoundError",
    "EncodedPayload",
    "EncoderError",
    "EncoderHandle",
    "EncoderInitError",
    "Facing",
    "PermissionDeniedError",
    "SegmentEncoderInterface",
    "StreamError",
    "StreamHandle",
    "StreamProviderInterface",
    "StreamTimeoutError",
    "UnsupportedConstraintsError",
    "VideoHints",
    "create_capture_backends",
]
