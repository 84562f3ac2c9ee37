"""
Role-based permission policy.

Permission depends on the role alone: there is no per-record ownership
check. Officers (``petugas`` on the API) may do everything, viewers may
only view, and any other role, including none, may do nothing.
"""
from dataclasses import dataclass

from digforweb.exceptions import PermissionDeniedError


ROLE_OFFICER = 'officer'
ROLE_VIEWER = 'viewer'

ROLE_CHOICES = [
    (ROLE_OFFICER, 'Officer (Petugas)'),
    (ROLE_VIEWER, 'Viewer'),
]

# Wire names used by the REST API
ROLE_ALIASES = {
    'petugas': ROLE_OFFICER,
}

CREATE = 'create'
UPDATE = 'update'
DELETE = 'delete'
VIEW = 'view'
OPERATIONS = (CREATE, UPDATE, DELETE, VIEW)


@dataclass(frozen=True)
class Permissions:
    can_create: bool = False
    can_update: bool = False
    can_delete: bool = False
    can_view: bool = False

    def allows(self, operation):
        if operation not in OPERATIONS:
            return False
        return getattr(self, f'can_{operation}')


NO_PERMISSIONS = Permissions()

_POLICY = {
    ROLE_OFFICER: Permissions(can_create=True, can_update=True, can_delete=True, can_view=True),
    ROLE_VIEWER: Permissions(can_view=True),
}


def normalize_role(role):
    """Canonical role name, or None when ``role`` is not recognized."""
    if not isinstance(role, str):
        return None
    role = role.strip().lower()
    role = ROLE_ALIASES.get(role, role)
    return role if role in _POLICY else None


def permissions_for(role):
    """Permissions granted to ``role``; unknown roles get none."""
    return _POLICY.get(normalize_role(role), NO_PERMISSIONS)


def require_permission(role, operation):
    """Raise ``PermissionDeniedError`` unless ``role`` may perform ``operation``."""
    if not permissions_for(role).allows(operation):
        raise PermissionDeniedError(
            f'Your role does not allow the "{operation}" operation.'
        )
