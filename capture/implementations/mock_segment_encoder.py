"""
Mock Segment Encoder Implementation

Simulated encoder for testing without FFmpeg.
Produces a small fake MP4 payload per cycle and enforces the
"delivered once" rule so tests can catch double finalization.
"""

import logging
import time
from typing import Callable, Dict, List

from capture.interfaces.segment_encoder_interface import (
    EncodedPayload,
    EncoderError,
    EncoderHandle,
    EncoderInitError,
    SegmentEncoderInterface,
)
from capture.interfaces.stream_provider_interface import StreamHandle
from config.settings import SEGMENT_MIME_TYPE

# MP4 'ftyp' box prefix
FAKE_MP4_HEADER = b"\x00\x00\x00\x20ftypmp42"


class MockSegmentEncoder(SegmentEncoderInterface):
    """
    Mock encoder for testing.

    Usage:
        encoder = MockSegmentEncoder()
        handle = encoder.begin(stream)
        payload = encoder.finish(handle)
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        bytes_per_second: int = 1024,
    ):
        """
        Initialize mock encoder.

        Args:
            clock: Time source used for the reported duration
            bytes_per_second: Size of fake payload per recorded second
        """
        self.logger = logging.getLogger(__name__)
        self._clock = clock
        self._bytes_per_second = bytes_per_second

        self._started_at: Dict[int, float] = {}
        self.finished: List[EncoderHandle] = []
        self.aborted: List[EncoderHandle] = []

        # Configuration for test scenarios
        self._should_fail_begin = False
        self._should_fail_finish = False
        self._duration_skew_ms = 0

        self.logger.info("Mock Segment Encoder initialized")

    def begin(self, stream: StreamHandle) -> EncoderHandle:
        """Start a simulated encoding cycle"""
        if self._should_fail_begin:
            self.logger.error("[MOCK] Simulated encoder start failure")
            raise EncoderInitError("Simulated encoder failure")

        if not stream.active:
            raise EncoderInitError(f"Stream {stream.stream_id} is not active")

        handle = EncoderHandle(stream=stream)
        self._started_at[handle.encoder_id] = self._clock()

        self.logger.info(
            f"[MOCK] Encoder {handle.encoder_id} started on stream {stream.stream_id}",
        )
        return handle

    def finish(self, handle: EncoderHandle) -> EncodedPayload:
        """Finalize and return a fake payload"""
        if handle.finished or handle.encoder_id not in self._started_at:
            raise EncoderError(f"Encoder {handle.encoder_id} already finished")

        started = self._started_at.pop(handle.encoder_id)
        handle.finished = True

        if self._should_fail_finish:
            self.logger.error("[MOCK] Simulated finalize failure")
            raise EncoderError("Simulated finalize failure")

        duration_ms = max(0, int((self._clock() - started) * 1000))
        duration_ms += self._duration_skew_ms
        size = min(duration_ms * self._bytes_per_second // 1000, 1_000_000)

        self.finished.append(handle)
        self.logger.info(
            f"[MOCK] Encoder {handle.encoder_id} finished ({duration_ms} ms)",
        )
        return EncodedPayload(
            data=FAKE_MP4_HEADER + b"\x00" * size,
            mime_type=SEGMENT_MIME_TYPE,
            reported_duration_ms=duration_ms,
        )

    def abort(self, handle: EncoderHandle) -> None:
        """Discard a simulated cycle"""
        if self._started_at.pop(handle.encoder_id, None) is not None:
            handle.finished = True
            self.aborted.append(handle)
            self.logger.info(f"[MOCK] Encoder {handle.encoder_id} aborted")

    def is_available(self) -> bool:
        """Mock encoder is always available"""
        return True

    def cleanup(self) -> None:
        self.logger.debug("[MOCK] Cleanup")
        self._started_at.clear()

    # =========================================================================
    # TESTING HELPER METHODS (not part of SegmentEncoderInterface)
    # =========================================================================

    def simulate_begin_failure(self, enabled: bool = True) -> None:
        """Make begin() raise EncoderInitError"""
        self._should_fail_begin = enabled

    def simulate_finish_failure(self, enabled: bool = True) -> None:
        """Make finish() raise EncoderError"""
        self._should_fail_finish = enabled

    def simulate_duration_skew(self, skew_ms: int) -> None:
        """Report durations off from the clock by skew_ms"""
        self._duration_skew_ms = skew_ms

    def running_count(self) -> int:
        """Number of cycles begun but not finished or aborted"""
        return len(self._started_at)
