"""Cached permission set for one (user, tenant) pair."""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional

from ...roles.entities.role import Role


@dataclass(frozen=True)
class RolePermissionSet:
    """Effective permissions of a user in a tenant at resolution time."""
    user_id: str
    tenant_id: Optional[str]
    role: Role
    is_super_admin: bool
    permissions: FrozenSet[str]
    resolved_at: float

    def allows(self, permission: str) -> bool:
        """Membership test with the superadmin bypass."""
        return self.is_super_admin or permission in self.permissions

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "tenant_id": self.tenant_id,
            "role": self.role.value,
            "is_super_admin": self.is_super_admin,
            "permissions": sorted(self.permissions),
            "resolved_at": self.resolved_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RolePermissionSet":
        return cls(
            user_id=data["user_id"],
            tenant_id=data.get("tenant_id"),
            role=Role(data["role"]),
            is_super_admin=bool(data.get("is_super_admin", False)),
            permissions=frozenset(data.get("permissions", ())),
            resolved_at=float(data.get("resolved_at", 0.0)),
        )


@dataclass(frozen=True)
class TenantAccess:
    """Result of a successful tenant membership validation."""
    user_id: str
    tenant_id: str
    role: Role
    is_super_admin: bool
