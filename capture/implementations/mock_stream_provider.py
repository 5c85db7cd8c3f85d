"""
Mock Stream Provider Implementation

Simulated camera stream provider for testing without a real camera.
Tracks every handle it hands out so tests can prove no stream leaks.

This is a "Fake" (test double) - it has working logic but no real hardware.
"""

import logging
import threading
import time
from typing import Dict, List, Optional, Set, Type

from capture.constants import Facing, VideoHints
from capture.interfaces.stream_provider_interface import (
    DeviceNotFoundError,
    StreamError,
    StreamHandle,
    StreamProviderInterface,
    UnsupportedConstraintsError,
)


class MockStreamProvider(StreamProviderInterface):
    """
    Mock stream provider for testing.

    Usage:
        provider = MockStreamProvider()
        handle = provider.acquire(Facing.BACK, VideoHints())
        provider.release(handle)
        assert provider.active_stream_count() == 0
    """

    def __init__(self, facings: Optional[Set[Facing]] = None):
        """
        Initialize mock provider.

        Args:
            facings: Camera directions that exist (default: both)
        """
        self.logger = logging.getLogger(__name__)
        self._facings = set(facings) if facings is not None else set(Facing)
        self._lock = threading.Lock()

        # Handle tracking
        self._active: Dict[int, StreamHandle] = {}
        self.acquired: List[StreamHandle] = []
        self.released: List[StreamHandle] = []
        self.double_releases = 0

        # Configuration for test scenarios
        self._failures: Dict[Facing, List[Type[StreamError]]] = {}
        self._unsupported_hints: Set[Facing] = set()
        self._acquire_delays: Dict[Optional[Facing], float] = {}

        self.logger.info(
            f"Mock Stream Provider initialized "
            f"(facings: {sorted(f.value for f in self._facings)})",
        )

    def acquire(
        self,
        facing: Facing,
        video_hints: Optional[VideoHints] = None,
        audio_enabled: bool = True,
    ) -> StreamHandle:
        """Simulate opening a camera, honouring configured failures"""
        delay = self._acquire_delays.get(facing, self._acquire_delays.get(None, 0.0))
        if delay:
            time.sleep(delay)

        with self._lock:
            queued = self._failures.get(facing)
            if queued:
                error_cls = queued.pop(0)
                self.logger.warning(
                    f"[MOCK] Simulated {error_cls.__name__} for {facing.value}",
                )
                raise error_cls(f"Simulated failure for {facing.value} camera")

            if facing not in self._facings:
                raise DeviceNotFoundError(f"No {facing.value} camera")

            if video_hints is not None and facing in self._unsupported_hints:
                self.logger.warning(
                    f"[MOCK] {facing.value} camera rejects {video_hints.resolution}",
                )
                raise UnsupportedConstraintsError(
                    f"{facing.value} camera cannot provide {video_hints.resolution}",
                )

            handle = StreamHandle(
                facing=facing,
                device=f"mock://{facing.value}",
                hints=video_hints,
                audio_enabled=audio_enabled,
            )
            self._active[handle.stream_id] = handle
            self.acquired.append(handle)

        self.logger.info(
            f"[MOCK] Stream {handle.stream_id} acquired ({facing.value}, "
            f"{video_hints.resolution if video_hints else 'unconstrained'})",
        )
        return handle

    def release(self, handle: StreamHandle) -> None:
        """Mark the handle released, counting double releases"""
        with self._lock:
            if handle.stream_id not in self._active:
                self.double_releases += 1
                self.logger.warning(
                    f"[MOCK] Stream {handle.stream_id} already released",
                )
                return
            del self._active[handle.stream_id]
            handle.active = False
            handle.paused = False
            self.released.append(handle)

        self.logger.info(f"[MOCK] Stream {handle.stream_id} released")

    def pause(self, handle: StreamHandle) -> None:
        handle.paused = True
        self.logger.debug(f"[MOCK] Stream {handle.stream_id} paused")

    def resume(self, handle: StreamHandle) -> None:
        handle.paused = False
        self.logger.debug(f"[MOCK] Stream {handle.stream_id} resumed")

    def is_available(self) -> bool:
        """Mock provider is available when any facing exists"""
        return bool(self._facings)

    def cleanup(self) -> None:
        """Release any handles still open"""
        self.logger.debug("[MOCK] Cleanup")
        for handle in list(self._active.values()):
            self.release(handle)

    # =========================================================================
    # TESTING HELPER METHODS (not part of StreamProviderInterface)
    # =========================================================================

    def simulate_failure(
        self,
        facing: Facing,
        error_cls: Type[StreamError],
        times: int = 1,
    ) -> None:
        """
        Make the next `times` acquisitions for `facing` raise error_cls.

        Example:
            provider.simulate_failure(Facing.FRONT, DeviceBusyError)
        """
        with self._lock:
            self._failures.setdefault(facing, []).extend([error_cls] * times)
        self.logger.debug(
            f"[MOCK] Configured {times}x {error_cls.__name__} for {facing.value}",
        )

    def simulate_unsupported_constraints(self, facing: Facing) -> None:
        """Make `facing` reject any acquisition that carries hints"""
        self._unsupported_hints.add(facing)

    def simulate_acquire_delay(self, seconds: float, facing: Optional[Facing] = None) -> None:
        """Make acquire() block for `seconds` before answering (one facing or all)"""
        self._acquire_delays[facing] = seconds

    def reset_test_config(self) -> None:
        """Reset test configuration to normal operation"""
        with self._lock:
            self._failures.clear()
        self._unsupported_hints.clear()
        self._acquire_delays.clear()

    def active_stream_count(self) -> int:
        """Number of handles acquired and not yet released"""
        with self._lock:
            return len(self._active)
