"""
Permissions Factory

Creates the permission checker: system checks when they can run,
mock otherwise.
"""

import logging
from typing import Literal

from permissions.implementations.mock_permissions import MockPermissions
from permissions.implementations.system_permissions import SystemPermissions
from permissions.interfaces.permission_interface import PermissionInterface

PermissionMode = Literal["auto", "real", "mock"]

_logger = logging.getLogger(__name__)


def create_permissions(mode: PermissionMode = "auto") -> PermissionInterface:
    """
    Create a permission checker.

    Raises:
        RuntimeError: If mode="real" but system checks cannot run

    Example:
        permissions = create_permissions(mode="mock")
    """
    if mode == "mock":
        _logger.info("Creating Mock Permissions")
        return MockPermissions()

    permissions = SystemPermissions()

    if permissions.is_available():
        _logger.info(f"Creating System Permissions ({mode})")
        return permissions

    if mode == "real":
        raise RuntimeError("System permission checks not available")

    _logger.warning("System permission checks not available, using Mock Permissions")
    return MockPermissions()
