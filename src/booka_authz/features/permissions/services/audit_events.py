"""Mapping of access decisions onto audit events."""

from datetime import datetime
from typing import Optional

from ....config.constants import AuditEventType, SecurityLevel
from ...audit.entities.audit_event import AuditEvent
from ...context.entities.permission_context import PermissionContext
from ..entities.access_result import AccessResult, DenialReason


def classify_event(result: AccessResult) -> AuditEventType:
    """Pick the audit event type for a decision."""
    if result.reason == DenialReason.TENANT_ISOLATION:
        return AuditEventType.CROSS_TENANT_ACCESS
    if result.granted:
        return AuditEventType.ACCESS_GRANTED
    if result.security_level == SecurityLevel.CRITICAL:
        return AuditEventType.SECURITY_VIOLATION
    return AuditEventType.ACCESS_DENIED


def build_audit_event(
    user_id: str,
    tenant_id: Optional[str],
    permission: str,
    result: AccessResult,
    timestamp: datetime,
    context: Optional[PermissionContext] = None,
) -> AuditEvent:
    return AuditEvent(
        user_id=user_id,
        tenant_id=tenant_id,
        permission=permission,
        granted=result.granted,
        reason=result.reason,
        timestamp=timestamp,
        security_level=result.security_level,
        event_type=classify_event(result),
        applied_rules=result.applied_rules,
        target_tenant_id=context.target_tenant_id if context else None,
        resource_id=context.resource_id if context else None,
        request_id=context.request_id if context else None,
        ip_address=context.ip_address if context else None,
    )
