"""
V4L2 Stream Provider Implementation

Real stream provider for Linux Video4Linux2 cameras.
Opens the device node for the requested facing and holds it for the
lifetime of the handle. Encoders read from the same device node.
"""

import errno
import logging
import os
import re
import shutil
import subprocess
from typing import Dict, Optional, Set

from capture.constants import (
    Facing,
    VideoHints,
    device_for_facing,
    validate_camera_device,
)
from capture.interfaces.stream_provider_interface import (
    DeviceBusyError,
    DeviceNotFoundError,
    PermissionDeniedError,
    StreamError,
    StreamHandle,
    StreamProviderInterface,
    UnsupportedConstraintsError,
)

_SIZE_PATTERN = re.compile(r"Size:\s+\w+\s+(\d+)x(\d+)")


class V4L2StreamProvider(StreamProviderInterface):
    """
    Stream provider backed by /dev/video* device nodes.

    Usage:
        provider = V4L2StreamProvider()
        handle = provider.acquire(Facing.BACK, VideoHints())
        # ... encoder reads handle.device ...
        provider.release(handle)
    """

    def __init__(self, devices: Optional[Dict[Facing, str]] = None):
        """
        Initialize provider.

        Args:
            devices: Facing -> device node map (default from settings)
        """
        self.logger = logging.getLogger(__name__)
        self.devices = devices or {
            facing: device_for_facing(facing) for facing in Facing
        }
        self._open: Dict[int, StreamHandle] = {}

        self.logger.info(
            "V4L2 Stream Provider initialized ("
            + ", ".join(f"{f.value}: {d}" for f, d in self.devices.items())
            + ")",
        )

    def acquire(
        self,
        facing: Facing,
        video_hints: Optional[VideoHints] = None,
        audio_enabled: bool = True,
    ) -> StreamHandle:
        """
        Open the device node for `facing`.

        Hints are checked against the sizes reported by v4l2-ctl when it is
        installed; without v4l2-ctl the device is assumed to cope.
        """
        device = self.devices.get(facing)
        if not device or not validate_camera_device(device):
            raise DeviceNotFoundError(f"Camera device not found: {device}")

        if video_hints is not None:
            sizes = self._supported_sizes(device)
            if sizes and (video_hints.width, video_hints.height) not in sizes:
                raise UnsupportedConstraintsError(
                    f"{device} does not offer {video_hints.resolution}",
                )

        try:
            fd = os.open(device, os.O_RDWR | os.O_NONBLOCK)
        except OSError as e:
            raise self._classify_os_error(device, e) from e

        handle = StreamHandle(
            facing=facing,
            device=device,
            hints=video_hints,
            audio_enabled=audio_enabled,
            resource=fd,
        )
        self._open[handle.stream_id] = handle

        self.logger.info(
            f"Stream {handle.stream_id} opened: {device} ({facing.value}, "
            f"{video_hints.resolution if video_hints else 'unconstrained'})",
        )
        return handle

    def release(self, handle: StreamHandle) -> None:
        """Close the device node"""
        if self._open.pop(handle.stream_id, None) is None:
            self.logger.warning(f"Stream {handle.stream_id} already released")
            return

        try:
            os.close(handle.resource)
        except OSError as e:
            self.logger.error(f"Error closing {handle.device}: {e}")
        finally:
            handle.active = False
            handle.paused = False
            handle.resource = None

        self.logger.info(f"Stream {handle.stream_id} released ({handle.device})")

    def pause(self, handle: StreamHandle) -> None:
        # Device stays open; only delivery to the viewer stops
        handle.paused = True
        self.logger.info(f"Stream {handle.stream_id} paused")

    def resume(self, handle: StreamHandle) -> None:
        handle.paused = False
        self.logger.info(f"Stream {handle.stream_id} resumed")

    def is_available(self) -> bool:
        """Check that at least one configured camera exists"""
        return any(validate_camera_device(d) for d in self.devices.values())

    def cleanup(self) -> None:
        """Close every device node still open"""
        self.logger.info("Cleaning up V4L2 Stream Provider")
        for handle in list(self._open.values()):
            self.release(handle)

    def _supported_sizes(self, device: str) -> Set[tuple]:
        """
        Ask v4l2-ctl which frame sizes the device offers.

        Returns:
            Set of (width, height); empty when unknown
        """
        if not shutil.which("v4l2-ctl"):
            return set()

        try:
            result = subprocess.run(
                ["v4l2-ctl", "-d", device, "--list-formats-ext"],
                check=False,
                capture_output=True,
                text=True,
                timeout=2.0,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            self.logger.warning(f"Could not query formats of {device}: {e}")
            return set()

        if result.returncode != 0:
            return set()

        return {
            (int(w), int(h)) for w, h in _SIZE_PATTERN.findall(result.stdout)
        }

    @staticmethod
    def _classify_os_error(device: str, error: OSError) -> StreamError:
        """Map an open() failure onto the stream error hierarchy"""
        if error.errno in (errno.EACCES, errno.EPERM):
            return PermissionDeniedError(f"Permission denied: {device}")
        if error.errno == errno.EBUSY:
            return DeviceBusyError(f"Camera is busy: {device}")
        if error.errno in (errno.ENOENT, errno.ENODEV, errno.ENXIO):
            return DeviceNotFoundError(f"Camera device not found: {device}")
        return StreamError(f"Failed to open {device}: {error}")
