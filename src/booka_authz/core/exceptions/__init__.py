"""Exception hierarchy for booka-authz."""

from .auth import (
    AuthorizationError,
    IndeterminateAccessError,
    InvalidPermissionError,
    TenantIsolationError,
    UserLoaderError,
    UserNotFoundError,
)
from .base import BookaAuthzError, ConfigurationError, create_error_response, get_http_status_code
from .http_mapping import HTTP_STATUS_MAP
from .infrastructure import AuditDeliveryError, CacheError

__all__ = [
    "BookaAuthzError",
    "ConfigurationError",
    "AuthorizationError",
    "InvalidPermissionError",
    "UserNotFoundError",
    "TenantIsolationError",
    "UserLoaderError",
    "IndeterminateAccessError",
    "CacheError",
    "AuditDeliveryError",
    "HTTP_STATUS_MAP",
    "create_error_response",
    "get_http_status_code",
]
