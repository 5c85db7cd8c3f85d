"""
Permission Interfaces Package

Abstract contract for platform permission checks.
"""

from permissions.interfaces.permission_interface import (
    PermissionCheckError,
    PermissionInterface,
)

__all__ = ["PermissionCheckError", "PermissionInterface"]
