"""Audit event entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ....config.constants import AuditEventType, SecurityLevel


@dataclass(frozen=True)
class AuditEvent:
    """Record of one audit-required access decision."""
    user_id: str
    tenant_id: Optional[str]
    permission: str
    granted: bool
    reason: Optional[str]
    timestamp: datetime
    security_level: SecurityLevel = SecurityLevel.NORMAL
    event_type: AuditEventType = AuditEventType.ACCESS_DENIED
    applied_rules: Tuple[str, ...] = field(default_factory=tuple)
    target_tenant_id: Optional[str] = None
    resource_id: Optional[str] = None
    request_id: Optional[str] = None
    ip_address: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "tenant_id": self.tenant_id,
            "permission": self.permission,
            "granted": self.granted,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
            "security_level": self.security_level.value,
            "event_type": self.event_type.value,
            "applied_rules": list(self.applied_rules),
            "target_tenant_id": self.target_tenant_id,
            "resource_id": self.resource_id,
            "request_id": self.request_id,
            "ip_address": self.ip_address,
        }
