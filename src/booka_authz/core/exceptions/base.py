"""Base exceptions for booka-authz.

All exceptions inherit from BookaAuthzError and carry an error code, a
details mapping and an HTTP status code (see ``http_mapping``).
"""

from typing import Any, Dict, Optional


class BookaAuthzError(Exception):
    """Base exception for all booka-authz errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ConfigurationError(BookaAuthzError):
    """Raised when the engine is wired with invalid configuration."""
    pass


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as lookup_status_code
    return lookup_status_code(exception)


def create_error_response(exception: BookaAuthzError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The booka-authz exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
