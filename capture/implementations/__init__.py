"""
Capture Implementations Package

Exposes concrete implementations of capture interfaces.
"""

from capture.implementations.ffmpeg_segment_encoder import FFmpegSegmentEncoder
from capture.implementations.mock_segment_encoder import MockSegmentEncoder
from capture.implementations.mock_stream_provider import MockStreamProvider
from capture.implementations.v4l2_stream_provider import V4L2StreamProvider

# Public API
__all__ = [
    "FFmpegSegmentEncoder",
    "MockSegmentEncoder",
    "MockStreamProvider",
    "V4L2StreamProvider",
]
