"""Transport-neutral role guard.

Route-level role checks go through the same identity and tenant-isolation
steps as ``check_access`` before roles are compared.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from ...core.exceptions import IndeterminateAccessError
from ..permissions.entities.access_result import DenialReason
from ..permissions.entities.permission_set import RolePermissionSet
from ..permissions.services.permission_resolver import PermissionResolver
from ..roles.entities.role import Role, coerce_role
from ..roles.services.role_hierarchy import role_satisfies

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a guard check; ``status_code`` and ``error`` describe failures."""
    allowed: bool
    status_code: int = 200
    error: Optional[str] = None
    permission_set: Optional[RolePermissionSet] = None

    @classmethod
    def deny(cls, status_code: int, error: str) -> "GuardResult":
        return cls(allowed=False, status_code=status_code, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return {"status_code": self.status_code, "error": self.error}


class RoleGuard:
    """Requires the caller to hold at least one of ``roles`` (inheritance counts)."""

    def __init__(self, resolver: PermissionResolver, roles: Iterable[Union[Role, str]]):
        resolved = []
        for role in roles:
            coerced = coerce_role(role)
            if coerced is None:
                raise ValueError(f"Unknown role in guard: {role!r}")
            resolved.append(coerced)
        if not resolved:
            raise ValueError("RoleGuard requires at least one role")
        self.resolver = resolver
        self.roles: Tuple[Role, ...] = tuple(resolved)

    async def check(
        self,
        user_id: Optional[str],
        tenant_id: Optional[str],
        target_tenant_id: Optional[str] = None,
    ) -> GuardResult:
        if not user_id:
            return GuardResult.deny(401, "Authentication required")

        try:
            permission_set = await self.resolver.get_permission_set(user_id, tenant_id)
        except IndeterminateAccessError:
            return GuardResult.deny(503, "Authorization service unavailable")

        if permission_set is None:
            return GuardResult.deny(401, DenialReason.USER_NOT_FOUND)

        if permission_set.is_super_admin:
            return GuardResult(allowed=True, permission_set=permission_set)

        if target_tenant_id and target_tenant_id != permission_set.tenant_id:
            logger.warning(
                f"Role guard blocked cross-tenant request by {user_id} "
                f"({permission_set.tenant_id} -> {target_tenant_id})"
            )
            return GuardResult.deny(403, DenialReason.TENANT_ISOLATION)

        if not any(role_satisfies(permission_set.role, role) for role in self.roles):
            names = ", ".join(role.value for role in self.roles)
            return GuardResult.deny(403, f"Insufficient role: requires one of {names}")

        return GuardResult(allowed=True, permission_set=permission_set)


def require_role(resolver: PermissionResolver, roles: Iterable[Union[Role, str]]) -> RoleGuard:
    return RoleGuard(resolver, roles)
