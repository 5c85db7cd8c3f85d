"""
Permissions Module

Camera/microphone permission checks and per-platform onboarding.

Public API:
    - PermissionGate: Check, explain and retry before first capture
    - PermissionInterface: Permission checker contract
    - Platform: IOS / ANDROID / DESKTOP
    - create_permissions: Factory with auto/real/mock modes

Usage:
    from permissions import PermissionGate

    gate = PermissionGate()
    if not gate.ensure():
        print("\n".join(gate.instructions()))
"""

from permissions.constants import Platform
from permissions.controllers.permission_gate import PermissionGate
from permissions.factory import create_permissions
from permissions.implementations import MockPermissions, SystemPermissions, detect_platform
from permissions.interfaces import PermissionCheckError, PermissionInterface

__all__ = [
    "MockPermissions",
    "PermissionCheckError",
    "PermissionGate",
    "PermissionInterface",
    "Platform",
    "SystemPermissions",
    "create_permissions",
    "detect_platform",
]
