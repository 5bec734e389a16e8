"""booka-authz - multi-tenant authorization engine for the Booka booking platform.

Role-based, context-sensitive access control with strict tenant isolation,
ownership narrowing, time and IP restrictions, and audit classification.
"""

from .__version__ import __version__

from .config import (
    AuditEventType,
    AuthzSettings,
    LoggingConfig,
    OperationType,
    PermissionScope,
    SecurityLevel,
    get_settings,
    setup_logging,
)

from .core.exceptions import (
    AuditDeliveryError,
    AuthorizationError,
    BookaAuthzError,
    CacheError,
    ConfigurationError,
    IndeterminateAccessError,
    InvalidPermissionError,
    TenantIsolationError,
    UserLoaderError,
    UserNotFoundError,
    create_error_response,
    get_http_status_code,
)

from .core.value_objects import PermissionCode, TenantId, UserId, is_valid_permission

from .features.roles import (
    Role,
    can_act_on_role,
    normalize_role,
    resolve_role_permissions,
    role_satisfies,
)

from .features.users import (
    AsyncPGUserProfileLoader,
    AuthenticatedIdentity,
    InMemoryUserDirectory,
    UnifiedUser,
    UserProfileLoader,
)

from .features.context import ContextExtractor, PermissionContext, RequestData, TimeRestriction

from .features.permissions import (
    AccessDecisionEngine,
    AccessResult,
    DenialReason,
    PermissionResolver,
    RolePermissionSet,
    TenantAccess,
    create_access_engine,
)

from .features.cache import PermissionSetCache, PermissionSetStore, RedisPermissionSetStore

from .features.audit import AuditEmitter, AuditEvent, AuditSink, HttpAuditSink, LoggingAuditSink

from .features.guards import AccessDependencies, GuardResult, RoleGuard

__all__ = [
    "__version__",
    # Configuration
    "AuditEventType",
    "AuthzSettings",
    "LoggingConfig",
    "OperationType",
    "PermissionScope",
    "SecurityLevel",
    "get_settings",
    "setup_logging",
    # Exceptions
    "AuditDeliveryError",
    "AuthorizationError",
    "BookaAuthzError",
    "CacheError",
    "ConfigurationError",
    "IndeterminateAccessError",
    "InvalidPermissionError",
    "TenantIsolationError",
    "UserLoaderError",
    "UserNotFoundError",
    "create_error_response",
    "get_http_status_code",
    # Value objects
    "PermissionCode",
    "TenantId",
    "UserId",
    "is_valid_permission",
    # Roles
    "Role",
    "can_act_on_role",
    "normalize_role",
    "resolve_role_permissions",
    "role_satisfies",
    # Users
    "AsyncPGUserProfileLoader",
    "AuthenticatedIdentity",
    "InMemoryUserDirectory",
    "UnifiedUser",
    "UserProfileLoader",
    # Context
    "ContextExtractor",
    "PermissionContext",
    "RequestData",
    "TimeRestriction",
    # Permissions
    "AccessDecisionEngine",
    "AccessResult",
    "DenialReason",
    "PermissionResolver",
    "RolePermissionSet",
    "TenantAccess",
    "create_access_engine",
    # Cache
    "PermissionSetCache",
    "PermissionSetStore",
    "RedisPermissionSetStore",
    # Audit
    "AuditEmitter",
    "AuditEvent",
    "AuditSink",
    "HttpAuditSink",
    "LoggingAuditSink",
    # Guards
    "AccessDependencies",
    "GuardResult",
    "RoleGuard",
]
