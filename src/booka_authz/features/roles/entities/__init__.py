"""Role entities and catalog data."""

from .catalog import ROLE_PERMISSIONS, ROLE_SUBORDINATES
from .role import (
    LEGACY_ROLE_ALIASES,
    ROLE_LEVELS,
    TENANT_ROLES,
    Role,
    coerce_role,
    get_role_level,
    normalize_role,
)

__all__ = [
    "ROLE_PERMISSIONS",
    "ROLE_SUBORDINATES",
    "LEGACY_ROLE_ALIASES",
    "ROLE_LEVELS",
    "TENANT_ROLES",
    "Role",
    "coerce_role",
    "get_role_level",
    "normalize_role",
]
