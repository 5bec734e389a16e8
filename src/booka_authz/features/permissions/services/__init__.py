"""Permission services."""

from .access_engine import AccessDecisionEngine
from .audit_events import build_audit_event, classify_event
from .classification import Classification, classify, derive_operation, is_critical_operation
from .permission_resolver import ANY_TENANT, PermissionResolver, tenant_cache_key
from .restrictions import ip_allowed

__all__ = [
    "AccessDecisionEngine",
    "build_audit_event",
    "classify_event",
    "Classification",
    "classify",
    "derive_operation",
    "is_critical_operation",
    "ANY_TENANT",
    "PermissionResolver",
    "tenant_cache_key",
    "ip_allowed",
]
