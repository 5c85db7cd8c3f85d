"""
Capture Factory

Factory pattern for creating stream providers and segment encoders.
Automatically selects real or mock implementations based on availability.
"""

import logging
import time
from typing import Callable, Literal, Tuple

from capture.implementations.ffmpeg_segment_encoder import FFmpegSegmentEncoder
from capture.implementations.mock_segment_encoder import MockSegmentEncoder
from capture.implementations.mock_stream_provider import MockStreamProvider
from capture.implementations.v4l2_stream_provider import V4L2StreamProvider
from capture.interfaces.segment_encoder_interface import SegmentEncoderInterface
from capture.interfaces.stream_provider_interface import StreamProviderInterface

# Type alias for better type hints
CaptureMode = Literal["auto", "real", "mock"]


class CaptureFactory:
    """
    Factory for capture implementations.

    Usage:
        # Auto-detect (uses V4L2/FFmpeg if available, mock otherwise)
        provider = CaptureFactory.create_stream_provider()
        encoder = CaptureFactory.create_segment_encoder()

        # Force mock mode (useful for testing)
        provider = CaptureFactory.create_stream_provider(mode="mock")

        # Force real capture (raises error if not available)
        encoder = CaptureFactory.create_segment_encoder(mode="real")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_stream_provider(
        cls,
        mode: CaptureMode = "auto",
    ) -> StreamProviderInterface:
        """
        Create a stream provider.

        Raises:
            RuntimeError: If mode="real" but no camera device exists
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Stream Provider")
            return MockStreamProvider()

        provider = V4L2StreamProvider()

        if mode == "real":
            if not provider.is_available():
                raise RuntimeError("Real stream provider requested but no camera found")
            cls._logger.info("Creating V4L2 Stream Provider (forced)")
            return provider

        if provider.is_available():
            cls._logger.info("Creating V4L2 Stream Provider (auto-detected)")
            return provider

        cls._logger.warning("No camera device found, using Mock Stream Provider")
        return MockStreamProvider()

    @classmethod
    def create_segment_encoder(
        cls,
        mode: CaptureMode = "auto",
        clock: Callable[[], float] = time.monotonic,
    ) -> SegmentEncoderInterface:
        """
        Create a segment encoder.

        Args:
            mode: "auto" (detect), "real" (force FFmpeg), "mock" (force mock)
            clock: Time source for the mock encoder

        Raises:
            RuntimeError: If mode="real" but FFmpeg not available
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Segment Encoder")
            return MockSegmentEncoder(clock=clock)

        encoder = FFmpegSegmentEncoder()

        if mode == "real":
            if not encoder.is_available():
                raise RuntimeError("Real encoder requested but FFmpeg not available")
            cls._logger.info("Creating FFmpeg Segment Encoder (forced)")
            return encoder

        if encoder.is_available():
            cls._logger.info("Creating FFmpeg Segment Encoder (auto-detected)")
            return encoder

        cls._logger.warning("FFmpeg not available, using Mock Segment Encoder")
        return MockSegmentEncoder(clock=clock)

    @classmethod
    def is_real_capture_available(cls) -> dict[str, bool]:
        """
        Check if real capture is available.

        Returns:
            {'ffmpeg': bool, 'camera': bool}
        """
        return {
            "ffmpeg": FFmpegSegmentEncoder().is_available(),
            "camera": V4L2StreamProvider().is_available(),
        }


# Convenience functions for quick creation


def create_capture_backends(
    force_mock: bool = False,
) -> Tuple[StreamProviderInterface, SegmentEncoderInterface]:
    """
    Create a matching stream provider and encoder.

    A real encoder needs a real device, so when either side is unavailable
    both fall back to mocks.

    Example:
        provider, encoder = create_capture_backends()
    """
    if force_mock:
        return (
            CaptureFactory.create_stream_provider(mode="mock"),
            CaptureFactory.create_segment_encoder(mode="mock"),
        )

    provider = CaptureFactory.create_stream_provider(mode="auto")
    encoder = CaptureFactory.create_segment_encoder(mode="auto")

    if isinstance(provider, MockStreamProvider) != isinstance(encoder, MockSegmentEncoder):
        CaptureFactory._logger.warning(
            "Real capture only partially available, using mocks for both",
        )
        return MockStreamProvider(), MockSegmentEncoder()

    return provider, encoder
