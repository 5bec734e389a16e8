"""Audit and security classification of access decisions."""

from dataclasses import dataclass
from typing import Optional, Tuple

from ....config.constants import (
    AUDITED_OPERATIONS,
    AUDITED_RESOURCES,
    CRITICAL_PERMISSIONS,
    MUTATING_OPERATIONS,
    SYSTEM_RESOURCE,
    OperationType,
    SecurityLevel,
)
from ....core.value_objects import PermissionCode
from ...context.entities.permission_context import PermissionContext
from ...roles.entities.role import Role
from ..entities.access_result import AccessRule

ACTION_OPERATIONS = {
    "read": OperationType.READ,
    "view": OperationType.READ,
    "export": OperationType.READ,
    "create": OperationType.CREATE,
    "send": OperationType.CREATE,
    "update": OperationType.UPDATE,
    "refund": OperationType.UPDATE,
    "delete": OperationType.DELETE,
    "manage": OperationType.MANAGE,
    "configure": OperationType.CONFIGURE,
}

PRIVILEGED_ROLES = (Role.MANAGER, Role.OWNER, Role.SUPERADMIN)

CONTEXTUAL_RULES = (AccessRule.OWNERSHIP, AccessRule.TIME_WINDOW, AccessRule.IP_RESTRICTION)
IDENTITY_RULES = (AccessRule.IDENTITY, AccessRule.TENANT_ISOLATION)


@dataclass(frozen=True)
class Classification:
    audit_required: bool
    security_level: SecurityLevel


def derive_operation(
    code: Optional[PermissionCode], context: PermissionContext
) -> Tuple[Optional[OperationType], Optional[str]]:
    """Operation and resource type of a check.

    Explicit context values win; otherwise they come from the permission.
    """
    operation = context.operation_type
    resource = context.resource_type
    if code is not None:
        if resource is None:
            resource = code.resource
        if operation is None:
            if code.resource == SYSTEM_RESOURCE:
                operation = OperationType.SYSTEM_LEVEL
            else:
                operation = ACTION_OPERATIONS.get(code.action, OperationType.EXECUTE)
    return operation, resource


def is_critical_operation(operation: Optional[OperationType], permission: Optional[str]) -> bool:
    return operation in AUDITED_OPERATIONS or permission in CRITICAL_PERMISSIONS


def classify(
    *,
    granted: bool,
    failed_rule: Optional[str],
    operation: Optional[OperationType],
    resource: Optional[str],
    permission: Optional[str],
    role: Optional[Role],
    is_super_admin: bool,
    tenant_context_valid: bool,
) -> Classification:
    """Compute audit requirement and security level for a decision.

    Runs for granted and denied decisions alike.
    """
    audit_required = operation in AUDITED_OPERATIONS or resource in AUDITED_RESOURCES

    level = SecurityLevel.NORMAL
    if operation in MUTATING_OPERATIONS and (is_super_admin or role in PRIVILEGED_ROLES):
        level = SecurityLevel.ELEVATED
    if failed_rule in CONTEXTUAL_RULES:
        level = SecurityLevel.ELEVATED

    critical = (
        not tenant_context_valid
        or failed_rule in IDENTITY_RULES
        or (not granted and is_critical_operation(operation, permission))
    )
    if critical:
        level = SecurityLevel.CRITICAL

    # Identity and tenant failures are always on record, as is anything a superadmin does
    if failed_rule in IDENTITY_RULES or not tenant_context_valid or is_super_admin:
        audit_required = True

    return Classification(audit_required=audit_required, security_level=level)
