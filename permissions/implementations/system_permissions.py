"""
System Permissions Implementation

Checks camera and microphone access on the running system.

On Linux the answer is whether this process may open the configured
device nodes. iOS has no up-front check: the native prompt appears the
first time the camera is opened, so the check passes there.
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from config.settings import AUDIO_ENABLED, BACK_CAMERA_DEVICE, FRONT_CAMERA_DEVICE
from permissions.constants import SOUND_DEVICE_DIR, Platform
from permissions.interfaces.permission_interface import (
    PermissionCheckError,
    PermissionInterface,
)


def detect_platform() -> Platform:
    """
    Detect the platform family.

    Example:
        detect_platform() -> Platform.DESKTOP  # on a Raspberry Pi
    """
    if sys.platform == "ios":
        return Platform.IOS
    if sys.platform == "android" or "ANDROID_ROOT" in os.environ:
        return Platform.ANDROID
    return Platform.DESKTOP


class SystemPermissions(PermissionInterface):
    """
    Device-node permission checker.

    A device that does not exist is not a permission problem; it is
    reported later by stream acquisition as DEVICE_NOT_FOUND.
    """

    def __init__(
        self,
        camera_devices: Optional[List[str]] = None,
        audio_enabled: bool = AUDIO_ENABLED,
        sound_dir: str = SOUND_DEVICE_DIR,
    ):
        self.logger = logging.getLogger(__name__)
        self.camera_devices = camera_devices or [FRONT_CAMERA_DEVICE, BACK_CAMERA_DEVICE]
        self.audio_enabled = audio_enabled
        self.sound_dir = Path(sound_dir)
        self._platform = detect_platform()

        self.logger.info(f"System permissions initialized (platform: {self._platform.value})")

    def check_and_request_permissions(self) -> bool:
        if self._platform is Platform.IOS:
            self.logger.info("iOS: permissions are requested on first camera use")
            return True

        try:
            denied = self._denied_paths()
        except OSError as e:
            raise PermissionCheckError(f"Could not check device access: {e}") from e

        if denied:
            self.logger.warning(f"Access denied to: {', '.join(denied)}")
            return False

        self.logger.info("Camera and microphone access granted")
        return True

    def get_platform(self) -> Platform:
        return self._platform

    def is_available(self) -> bool:
        """Device-node checks need a POSIX system"""
        return os.name == "posix"

    def _denied_paths(self) -> List[str]:
        denied = []

        for device in self.camera_devices:
            if os.path.exists(device) and not os.access(device, os.R_OK | os.W_OK):
                denied.append(device)

        if self.audio_enabled and self.sound_dir.is_dir():
            for node in sorted(self.sound_dir.glob("pcmC*c")):
                if not os.access(node, os.R_OK | os.W_OK):
                    denied.append(str(node))

        return denied
