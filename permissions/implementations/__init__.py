"""
Permission Implementations Package

System and mock permission checkers.
"""

from permissions.implementations.mock_permissions import MockPermissions
from permissions.implementations.system_permissions import (
    SystemPermissions,
    detect_platform,
)

__all__ = ["MockPermissions", "SystemPermissions", "detect_platform"]
