"""
Tests for the role-based permission policy.
"""
import pytest
from digforweb.exceptions import PermissionDeniedError
from digforweb.services.permissions import (
    CREATE, DELETE, NO_PERMISSIONS, UPDATE, VIEW, Permissions,
    normalize_role, permissions_for, require_permission
)


@pytest.mark.unit
class TestPermissionsFor:
    """Permission table per role."""

    @pytest.mark.parametrize('role', ['officer', 'petugas', 'Officer', ' PETUGAS '])
    def test_officer_may_do_everything(self, role):
        assert permissions_for(role) == Permissions(
            can_create=True, can_update=True, can_delete=True, can_view=True
        )

    def test_viewer_may_only_view(self):
        perms = permissions_for('viewer')

        assert perms.can_view
        assert not perms.can_create
        assert not perms.can_update
        assert not perms.can_delete

    @pytest.mark.parametrize('role', [None, '', 'admin', 'guest', 42])
    def test_unknown_roles_fail_closed(self, role):
        assert permissions_for(role) == NO_PERMISSIONS

    def test_allows_rejects_unknown_operation(self):
        assert not permissions_for('officer').allows('archive')

    def test_normalize_role(self):
        assert normalize_role('petugas') == 'officer'
        assert normalize_role('viewer') == 'viewer'
        assert normalize_role('root') is None


@pytest.mark.unit
class TestRequirePermission:
    """Tests for require_permission."""

    def test_officer_passes(self):
        for operation in (CREATE, UPDATE, DELETE, VIEW):
            require_permission('officer', operation)

    def test_viewer_cannot_delete(self):
        with pytest.raises(PermissionDeniedError) as exc_info:
            require_permission('viewer', DELETE)
        assert exc_info.value.status_code == 403

    def test_no_role_cannot_view(self):
        with pytest.raises(PermissionDeniedError):
            require_permission(None, VIEW)
