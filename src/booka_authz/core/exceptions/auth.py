"""Authorization-specific exceptions for booka-authz."""

from typing import Any, Dict, Optional

from .base import BookaAuthzError


class AuthorizationError(BookaAuthzError):
    """Base exception for authorization errors."""
    pass


class InvalidPermissionError(AuthorizationError):
    """Raised when a permission string violates the resource:action:scope grammar."""

    def __init__(self, permission: str, reason: Optional[str] = None):
        super().__init__(
            f"Invalid permission '{permission}': {reason or 'expected resource:action:(own|all)'}",
            details={"permission": permission},
        )
        self.permission = permission


class UserNotFoundError(AuthorizationError):
    """Raised when an identity does not resolve to an active user."""
    pass


class TenantIsolationError(AuthorizationError):
    """Raised when an actor reaches for another tenant's data."""

    def __init__(self, user_id: str, tenant_id: str, target_tenant_id: str):
        super().__init__(
            "Tenant isolation violation: cross-tenant access denied",
            details={
                "user_id": user_id,
                "tenant_id": tenant_id,
                "target_tenant_id": target_tenant_id,
            },
        )


class UserLoaderError(BookaAuthzError):
    """Raised by a user profile loader when its backing store is unavailable."""
    pass


class IndeterminateAccessError(BookaAuthzError):
    """Raised when a permission decision cannot be made.

    Distinct from a denial: the caller must not treat it as ``False`` and
    must not treat it as ``True`` either.
    """

    def __init__(
        self,
        message: str = "Access decision indeterminate",
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, details=details)
        self.cause = cause
