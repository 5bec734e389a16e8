"""Access decision value objects."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ....config.constants import SecurityLevel


class AccessRule:
    """Names of the pipeline rules, recorded in ``AccessResult.applied_rules``."""
    IDENTITY = "identity"
    TENANT_ISOLATION = "tenant_isolation"
    BASE_PERMISSION = "base_permission"
    OWNERSHIP = "ownership"
    TIME_WINDOW = "time_window"
    IP_RESTRICTION = "ip_restriction"


class DenialReason:
    """Reason strings returned with denied decisions."""
    USER_NOT_FOUND = "User not found"
    INDETERMINATE = "Access indeterminate: user profile unavailable"
    TENANT_ISOLATION = "Tenant isolation violation: cross-tenant access denied"
    PERMISSION_NOT_GRANTED = "Permission not granted"
    SELF_ACCESS = "Self-access restriction"
    OUTSIDE_TIME_WINDOW = "Outside allowed time window"
    IP_RESTRICTION = "IP restriction"


@dataclass(frozen=True)
class AccessResult:
    """Outcome of one check_access call.

    ``audit_required`` is classified independently of ``granted``: a denied
    delete is audited just like a granted one.
    """
    granted: bool
    reason: Optional[str] = None
    audit_required: bool = False
    security_level: SecurityLevel = SecurityLevel.NORMAL
    applied_rules: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def denied(self) -> bool:
        return not self.granted

    def to_dict(self) -> Dict[str, Any]:
        return {
            "granted": self.granted,
            "reason": self.reason,
            "audit_required": self.audit_required,
            "security_level": self.security_level.value,
            "applied_rules": list(self.applied_rules),
        }
