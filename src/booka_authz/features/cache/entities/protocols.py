"""Protocol interfaces for the cache feature."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from ...permissions.entities.permission_set import RolePermissionSet


@runtime_checkable
class PermissionSetStore(Protocol):
    """Shared (cross-process) tier for resolved permission sets.

    Implementations never raise on backend failure; a failed read is a miss.
    """

    @abstractmethod
    async def get(self, user_id: str, tenant_key: str) -> Optional[RolePermissionSet]:
        """Fetch a cached permission set."""
        ...

    @abstractmethod
    async def set(self, permission_set: RolePermissionSet, tenant_key: str, ttl: int) -> None:
        """Store a permission set with a TTL in seconds."""
        ...

    @abstractmethod
    async def delete(self, user_id: str, tenant_key: Optional[str] = None) -> int:
        """Delete one entry, or every entry of the user when tenant_key is None."""
        ...

    @abstractmethod
    async def delete_tenant(self, tenant_key: str) -> int:
        """Delete every entry for a tenant."""
        ...
