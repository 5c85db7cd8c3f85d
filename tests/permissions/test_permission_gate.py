"""
Permission Gate Tests

To run:
    pytest tests/permissions/test_permission_gate.py -v
"""

import pytest

from permissions.constants import Platform
from permissions.controllers.permission_gate import PermissionGate
from permissions.factory import create_permissions
from permissions.implementations.mock_permissions import MockPermissions
from permissions.implementations.system_permissions import SystemPermissions


@pytest.mark.unit
def test_gate_opens_when_granted():
    """Test granted permissions open the gate."""
    gate = PermissionGate(MockPermissions(granted=True))

    assert gate.ensure() is True
    assert gate.granted is True


@pytest.mark.unit
def test_gate_caches_positive_answer():
    """Test a granted gate does not ask again."""
    permissions = MockPermissions(granted=True)
    gate = PermissionGate(permissions)

    gate.ensure()
    gate.ensure()

    assert len(permissions.checks) == 1


@pytest.mark.unit
def test_gate_denied_then_retry():
    """Test retry after the user grants access."""
    permissions = MockPermissions(granted=False, platform=Platform.ANDROID)
    gate = PermissionGate(permissions)

    assert gate.ensure() is False
    assert "grant" in gate.denied_message()

    permissions.grant()

    assert gate.retry() is True
    assert gate.get_status() == {"platform": "android", "granted": True, "attempts": 2}


@pytest.mark.unit
def test_gate_passes_on_ios():
    """Test iOS proceeds and lets the native prompt decide."""
    gate = PermissionGate(MockPermissions(granted=False, platform=Platform.IOS))

    assert gate.ensure() is True


@pytest.mark.unit
def test_gate_check_failure_counts_as_denied():
    """Test an exception from the checker keeps the gate closed."""
    permissions = MockPermissions()
    permissions.simulate_check_failure()

    assert PermissionGate(permissions).ensure() is False


@pytest.mark.unit
@pytest.mark.parametrize("platform", list(Platform))
def test_instructions_per_platform(platform):
    """Test every platform has onboarding text."""
    gate = PermissionGate(MockPermissions(platform=platform))

    assert len(gate.instructions()) >= 2


@pytest.mark.unit
def test_system_permissions_missing_devices_are_not_denied(tmp_path):
    """Test absent device nodes are left to stream acquisition."""
    permissions = SystemPermissions(
        camera_devices=[str(tmp_path / "video0")],
        audio_enabled=False,
    )

    if permissions.get_platform() is Platform.DESKTOP:
        assert permissions.check_and_request_permissions() is True


@pytest.mark.unit
def test_factory_mock_mode():
    assert isinstance(create_permissions(mode="mock"), MockPermissions)
