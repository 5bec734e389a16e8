"""HTTP status code mapping for exceptions."""

from typing import Dict, Type

from .auth import (
    AuthorizationError,
    IndeterminateAccessError,
    InvalidPermissionError,
    TenantIsolationError,
    UserLoaderError,
    UserNotFoundError,
)
from .base import ConfigurationError
from .infrastructure import AuditDeliveryError, CacheError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    InvalidPermissionError: 400,

    # 401 Unauthorized
    UserNotFoundError: 401,

    # 403 Forbidden
    AuthorizationError: 403,
    TenantIsolationError: 403,

    # 500 Internal Server Error
    CacheError: 500,
    ConfigurationError: 500,

    # 502 Bad Gateway
    AuditDeliveryError: 502,

    # 503 Service Unavailable
    IndeterminateAccessError: 503,
    UserLoaderError: 503,
}


def get_http_status_code(exception: Exception) -> int:
    """Resolve the HTTP status for an exception, walking its MRO."""
    for exc_type in type(exception).__mro__:
        if exc_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exc_type]
    return 500
