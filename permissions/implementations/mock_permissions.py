"""
Mock Permissions Implementation

Simulated permission checker for testing.
"""

import logging
from typing import List

from permissions.constants import Platform
from permissions.interfaces.permission_interface import (
    PermissionCheckError,
    PermissionInterface,
)


class MockPermissions(PermissionInterface):
    """
    Mock permission checker.

    Usage:
        permissions = MockPermissions(granted=False)
        assert not permissions.check_and_request_permissions()
        permissions.grant()
        assert permissions.check_and_request_permissions()
    """

    def __init__(self, granted: bool = True, platform: Platform = Platform.DESKTOP):
        self.logger = logging.getLogger(__name__)
        self._granted = granted
        self._platform = platform
        self._should_fail = False
        self.checks: List[bool] = []

        self.logger.info(
            f"Mock Permissions initialized (granted: {granted}, "
            f"platform: {platform.value})",
        )

    def check_and_request_permissions(self) -> bool:
        if self._should_fail:
            self.logger.error("[MOCK] Simulated permission check failure")
            raise PermissionCheckError("Simulated permission check failure")

        self.checks.append(self._granted)
        self.logger.info(f"[MOCK] Permissions {'granted' if self._granted else 'denied'}")
        return self._granted

    def get_platform(self) -> Platform:
        return self._platform

    def is_available(self) -> bool:
        return True

    # =========================================================================
    # TESTING HELPER METHODS (not part of PermissionInterface)
    # =========================================================================

    def grant(self) -> None:
        """Simulate the user allowing access"""
        self._granted = True

    def deny(self) -> None:
        """Simulate the user refusing access"""
        self._granted = False

    def simulate_check_failure(self, enabled: bool = True) -> None:
        """Make the check raise PermissionCheckError"""
        self._should_fail = enabled
