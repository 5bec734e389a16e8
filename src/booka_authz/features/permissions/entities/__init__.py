"""Permission entities."""

from .access_result import AccessResult, AccessRule, DenialReason
from .permission_set import RolePermissionSet, TenantAccess
from .protocols import AccessDecider, PermissionChecker

__all__ = [
    "AccessResult",
    "AccessRule",
    "DenialReason",
    "RolePermissionSet",
    "TenantAccess",
    "AccessDecider",
    "PermissionChecker",
]
