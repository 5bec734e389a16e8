"""User entities for the authorization engine."""

from dataclasses import dataclass
from typing import Optional

from ....core.value_objects import is_valid_identifier
from ...roles.entities.role import Role, coerce_role


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Identity already verified by the authentication layer.

    ``tenant_id`` is the tenant the session was issued for, if any.
    """
    user_id: str
    tenant_id: Optional[str] = None


@dataclass(frozen=True)
class UnifiedUser:
    """Resolved view of a user inside one tenant.

    Immutable for the lifetime of a single decision. ``is_super_admin`` is
    orthogonal to ``role`` and bypasses the tenant role ladder.
    """
    id: str
    tenant_id: Optional[str]
    role: Role
    is_super_admin: bool = False
    active: bool = True

    def __post_init__(self):
        role = coerce_role(self.role)
        if role is None:
            raise ValueError(f"Unknown role for user {self.id}: {self.role!r}")
        object.__setattr__(self, "role", role)

        if not self.is_super_admin and not is_valid_identifier(self.tenant_id):
            raise ValueError(f"User {self.id} must belong to a tenant")

    @property
    def cache_tenant_key(self) -> str:
        """Tenant component of the permission-set cache key."""
        return self.tenant_id or "*"

    def __str__(self) -> str:
        flag = " superadmin" if self.is_super_admin else ""
        return f"UnifiedUser({self.id}@{self.tenant_id} {self.role.value}{flag})"
