"""
Permission Controllers Package
"""

from permissions.controllers.permission_gate import PermissionGate

__all__ = ["PermissionGate"]
