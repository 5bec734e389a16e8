"""Role entity for the booka-authz roles feature.

Tenant roles form a strict ladder ``staff < manager < owner``. ``superadmin``
sits above the ladder as a platform role; a user's superadmin status is
carried separately on ``UnifiedUser.is_super_admin``.
"""

from enum import Enum
from typing import Dict, Optional, Union


class Role(str, Enum):
    """Roles known to the permission catalog."""
    STAFF = "staff"
    MANAGER = "manager"
    OWNER = "owner"
    SUPERADMIN = "superadmin"


# Numerical hierarchy level for comparison (higher = more privileged)
ROLE_LEVELS: Dict[Role, int] = {
    Role.STAFF: 100,
    Role.MANAGER: 200,
    Role.OWNER: 300,
    Role.SUPERADMIN: 1000,
}

# Role names still present in older membership rows
LEGACY_ROLE_ALIASES: Dict[str, Role] = {
    "admin": Role.SUPERADMIN,
    "tenant_admin": Role.OWNER,
    "receptionist": Role.STAFF,
    "employee": Role.STAFF,
}

TENANT_ROLES = (Role.STAFF, Role.MANAGER, Role.OWNER)


def coerce_role(role: Union[Role, str, None]) -> Optional[Role]:
    """Return the Role for an exact role name, or None when it is unknown."""
    if isinstance(role, Role):
        return role
    if not isinstance(role, str):
        return None
    try:
        return Role(role)
    except ValueError:
        return None


def normalize_role(raw: Optional[str]) -> Optional[Role]:
    """Map a stored role name, including legacy aliases, onto a Role.

    Returns None for anything unrecognised so callers can fail closed.
    """
    if not raw:
        return None
    name = raw.strip().lower()
    return coerce_role(name) or LEGACY_ROLE_ALIASES.get(name)


def get_role_level(role: Union[Role, str, None]) -> int:
    """Hierarchy level of a role; 0 for unknown roles."""
    resolved = coerce_role(role)
    return ROLE_LEVELS.get(resolved, 0) if resolved else 0
