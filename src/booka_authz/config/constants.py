"""Constants shared across booka-authz features.

Cache key patterns, TTLs, security levels and the operation / resource
sets that drive audit classification.
"""

from enum import Enum
from typing import Final, FrozenSet


class SecurityLevel(str, Enum):
    """Security classification attached to every access decision.

    - NORMAL: routine read or low-impact operation
    - ELEVATED: mutating operation by a privileged role, or a contextual denial
    - CRITICAL: identity or tenant-isolation failure, or a denied critical operation
    """
    NORMAL = "normal"
    ELEVATED = "elevated"
    CRITICAL = "critical"


class OperationType(str, Enum):
    """Kind of operation a permission check guards."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    CONFIGURE = "configure"
    EXECUTE = "execute"
    SYSTEM_LEVEL = "system-level"


class PermissionScope(str, Enum):
    """Scope suffix of a permission string."""
    OWN = "own"
    ALL = "all"


class AuditEventType(str, Enum):
    """Audit event categories emitted for audit-required decisions."""
    ACCESS_GRANTED = "access_granted"
    ACCESS_DENIED = "access_denied"
    CROSS_TENANT_ACCESS = "cross_tenant_access"
    SECURITY_VIOLATION = "security_violation"


class CacheKeys:
    """Cache key patterns."""

    PERMISSION_SET: Final[str] = "perms:{user_id}:{tenant_id}"
    PERMISSION_SET_PATTERN: Final[str] = "perms:{user_id}:*"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS: Final[int] = 600
    PERMISSIONS_SHORT: Final[int] = 60


# Operation types that always require an audit record
AUDITED_OPERATIONS: Final[FrozenSet[OperationType]] = frozenset({
    OperationType.DELETE,
    OperationType.CONFIGURE,
    OperationType.SYSTEM_LEVEL,
})

# Resource types that always require an audit record
AUDITED_RESOURCES: Final[FrozenSet[str]] = frozenset({"user", "tenant", "billing"})

# Operations that change state
MUTATING_OPERATIONS: Final[FrozenSet[OperationType]] = frozenset({
    OperationType.CREATE,
    OperationType.UPDATE,
    OperationType.DELETE,
    OperationType.MANAGE,
    OperationType.CONFIGURE,
    OperationType.SYSTEM_LEVEL,
})

# Permissions whose denial is always a critical security event
CRITICAL_PERMISSIONS: Final[FrozenSet[str]] = frozenset({
    "system:manage:all",
    "tenant:manage:all",
    "billing:manage:all",
    "user:manage:all",
})

# Headers that commonly signal an elevation attempt when sent by a client
SUSPICIOUS_HEADER_PREFIXES: Final[tuple] = (
    "x-admin",
    "x-elevate",
    "x-superadmin",
    "x-bypass",
    "x-role",
    "x-permission",
)

SYSTEM_RESOURCE: Final[str] = "system"
