"""Guards feature: role guards and FastAPI dependencies."""

from .dependencies import AccessDependencies, AccessDependencyError, identity_from_request
from .role_guard import GuardResult, RoleGuard, require_role

__all__ = [
    "AccessDependencies",
    "AccessDependencyError",
    "identity_from_request",
    "GuardResult",
    "RoleGuard",
    "require_role",
]
