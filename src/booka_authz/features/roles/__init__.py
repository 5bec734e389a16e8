"""Roles feature: role ladder, permission catalog and hierarchy resolution."""

from .entities import (
    LEGACY_ROLE_ALIASES,
    ROLE_LEVELS,
    ROLE_PERMISSIONS,
    ROLE_SUBORDINATES,
    TENANT_ROLES,
    Role,
    coerce_role,
    get_role_level,
    normalize_role,
)
from .services import (
    can_act_on_role,
    catalog_permissions,
    describe_catalog,
    resolve_role_permissions,
    role_satisfies,
    subordinates_of,
    validate_catalog,
)

__all__ = [
    "LEGACY_ROLE_ALIASES",
    "ROLE_LEVELS",
    "ROLE_PERMISSIONS",
    "ROLE_SUBORDINATES",
    "TENANT_ROLES",
    "Role",
    "coerce_role",
    "get_role_level",
    "normalize_role",
    "can_act_on_role",
    "catalog_permissions",
    "describe_catalog",
    "resolve_role_permissions",
    "role_satisfies",
    "subordinates_of",
    "validate_catalog",
]
