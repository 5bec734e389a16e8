"""Role hierarchy services."""

from .role_hierarchy import (
    can_act_on_role,
    catalog_permissions,
    describe_catalog,
    resolve_role_permissions,
    role_satisfies,
    subordinates_of,
    validate_catalog,
)

__all__ = [
    "can_act_on_role",
    "catalog_permissions",
    "describe_catalog",
    "resolve_role_permissions",
    "role_satisfies",
    "subordinates_of",
    "validate_catalog",
]
