"""Permissions feature: resolution, decision pipeline and classification."""

from .entities import (
    AccessDecider,
    AccessResult,
    AccessRule,
    DenialReason,
    PermissionChecker,
    RolePermissionSet,
    TenantAccess,
)
from .services import AccessDecisionEngine, PermissionResolver, classify, ip_allowed
from .factory import create_access_engine, create_audit_sink

__all__ = [
    "AccessDecider",
    "AccessResult",
    "AccessRule",
    "DenialReason",
    "PermissionChecker",
    "RolePermissionSet",
    "TenantAccess",
    "AccessDecisionEngine",
    "PermissionResolver",
    "classify",
    "ip_allowed",
    "create_access_engine",
    "create_audit_sink",
]
