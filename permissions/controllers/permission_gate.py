"""
Permission Gate

Onboarding step run before the first camera acquisition: checks access,
explains what to do per platform, and supports "check again".
"""

import logging
from typing import Any, Dict, List, Optional

from permissions.constants import DENIED_MESSAGES, PLATFORM_INSTRUCTIONS, Platform
from permissions.factory import create_permissions
from permissions.interfaces.permission_interface import PermissionInterface


class PermissionGate:
    """
    Decides whether the session may start acquiring the camera.

    On iOS the gate always opens: the native prompt appears on first
    camera use, and a refusal then surfaces as PERMISSION_DENIED.

    Usage:
        gate = PermissionGate()
        if not gate.ensure():
            for line in gate.instructions():
                print(line)
            gate.retry()
    """

    def __init__(self, permissions: Optional[PermissionInterface] = None):
        self.logger = logging.getLogger(__name__)
        self.permissions = permissions or create_permissions()
        self.platform: Platform = self.permissions.get_platform()
        self._granted: Optional[bool] = None
        self.attempts = 0

    @property
    def granted(self) -> Optional[bool]:
        """None until the first check"""
        return self._granted

    def ensure(self) -> bool:
        """
        Check permissions once; later calls reuse a positive answer.

        Returns:
            True if the session may proceed
        """
        if self._granted:
            return True

        self.attempts += 1

        try:
            result = self.permissions.check_and_request_permissions()
        except Exception as e:
            self.logger.error(f"Permission check failed: {e}")
            result = False

        self._granted = result or self.platform is Platform.IOS

        if not self._granted:
            self.logger.warning(DENIED_MESSAGES[self.platform])

        return self._granted

    def retry(self) -> bool:
        """Check again after the user changed settings"""
        self.logger.info("Re-checking permissions")
        self._granted = None
        return self.ensure()

    def instructions(self) -> List[str]:
        return list(PLATFORM_INSTRUCTIONS[self.platform])

    def denied_message(self) -> str:
        return DENIED_MESSAGES[self.platform]

    def get_status(self) -> Dict[str, Any]:
        return {
            "platform": self.platform.value,
            "granted": self._granted,
            "attempts": self.attempts,
        }
