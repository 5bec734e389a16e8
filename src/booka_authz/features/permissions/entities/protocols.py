"""Protocol interfaces for the permissions feature."""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from ...context.entities.permission_context import PermissionContext
from .access_result import AccessResult


@runtime_checkable
class PermissionChecker(Protocol):
    """Boolean permission checks for a (user, tenant) pair."""

    @abstractmethod
    async def has_permission(self, user_id: str, tenant_id: Optional[str], permission: str) -> bool:
        """Check if user has a specific permission in the tenant."""
        ...

    @abstractmethod
    async def has_all_permissions(self, user_id: str, tenant_id: Optional[str], permissions: List[str]) -> bool:
        """Check if user has all of the specified permissions."""
        ...

    @abstractmethod
    async def has_any_permissions(self, user_id: str, tenant_id: Optional[str], permissions: List[str]) -> bool:
        """Check if user has any of the specified permissions."""
        ...


@runtime_checkable
class AccessDecider(Protocol):
    """Full contextual access decision."""

    @abstractmethod
    async def check_access(self, user_id: str, permission: str, context: PermissionContext) -> AccessResult:
        """Run the decision pipeline for one operation."""
        ...
