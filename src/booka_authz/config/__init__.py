"""Configuration for booka-authz."""

from .constants import (
    AUDITED_OPERATIONS,
    AUDITED_RESOURCES,
    CRITICAL_PERMISSIONS,
    MUTATING_OPERATIONS,
    AuditEventType,
    CacheKeys,
    CacheTTL,
    OperationType,
    PermissionScope,
    SecurityLevel,
)
from .logging_config import AUDIT_LOGGER_NAME, LoggingConfig, get_logger, setup_logging
from .settings import AuthzSettings, get_settings

__all__ = [
    "AUDITED_OPERATIONS",
    "AUDITED_RESOURCES",
    "CRITICAL_PERMISSIONS",
    "MUTATING_OPERATIONS",
    "AuditEventType",
    "CacheKeys",
    "CacheTTL",
    "OperationType",
    "PermissionScope",
    "SecurityLevel",
    "AUDIT_LOGGER_NAME",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "AuthzSettings",
    "get_settings",
]
