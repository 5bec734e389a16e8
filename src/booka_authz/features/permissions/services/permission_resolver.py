"""Permission resolution for (user, tenant) pairs.

Loads users through a UserProfileLoader, expands their role through the
catalog and caches the resulting RolePermissionSet.
"""

import logging
import time
from typing import Iterable, Optional

from ....core.exceptions import IndeterminateAccessError
from ....core.value_objects import is_valid_permission
from ...cache.adapters.memory_adapter import PermissionSetCache
from ...cache.entities.protocols import PermissionSetStore
from ...roles.entities.role import Role
from ...roles.services.role_hierarchy import resolve_role_permissions
from ...users.entities.protocols import UserProfileLoader
from ...users.entities.unified_user import UnifiedUser
from ..entities.permission_set import RolePermissionSet
from ..entities.protocols import PermissionChecker

logger = logging.getLogger(__name__)

ANY_TENANT = "*"


def tenant_cache_key(tenant_id: Optional[str]) -> str:
    return tenant_id or ANY_TENANT


class PermissionResolver(PermissionChecker):
    """Cache-backed permission checks.

    ``has_permission`` never turns an infrastructure failure into an answer:
    it raises IndeterminateAccessError instead of returning False.
    """

    def __init__(
        self,
        loader: UserProfileLoader,
        cache: Optional[PermissionSetCache] = None,
        store: Optional[PermissionSetStore] = None,
        ttl: int = 600,
    ):
        self.loader = loader
        self.cache = cache or PermissionSetCache(default_ttl=ttl)
        self.store = store
        self.ttl = ttl

    async def has_permission(self, user_id: str, tenant_id: Optional[str], permission: str) -> bool:
        """Check if user holds ``permission`` in ``tenant_id``.

        Args:
            user_id: Authenticated user identifier
            tenant_id: Tenant the check applies to; None means the user's primary tenant
            permission: ``resource:action:scope`` string

        Returns:
            True if granted, False if denied or malformed

        Raises:
            IndeterminateAccessError: If the user profile could not be loaded
        """
        if not is_valid_permission(permission):
            logger.error(f"Malformed permission string {permission!r} checked for user {user_id}")
            return False

        permission_set = await self.get_permission_set(user_id, tenant_id)
        if permission_set is None:
            return False
        return permission_set.allows(permission)

    async def has_all_permissions(self, user_id: str, tenant_id: Optional[str], permissions: Iterable[str]) -> bool:
        """True when every permission is held; stops at the first miss."""
        for permission in permissions:
            if not await self.has_permission(user_id, tenant_id, permission):
                return False
        return True

    async def has_any_permissions(self, user_id: str, tenant_id: Optional[str], permissions: Iterable[str]) -> bool:
        """True when at least one permission is held; stops at the first hit."""
        for permission in permissions:
            if await self.has_permission(user_id, tenant_id, permission):
                return True
        return False

    async def get_permission_set(self, user_id: str, tenant_id: Optional[str]) -> Optional[RolePermissionSet]:
        """Resolved permission set, or None when the user does not resolve in the tenant.

        Raises:
            IndeterminateAccessError: If the user profile could not be loaded
        """
        tenant_key = tenant_cache_key(tenant_id)
        return await self.cache.get_or_load(
            user_id,
            tenant_key,
            lambda: self._load_permission_set(user_id, tenant_id, tenant_key),
            ttl=self.ttl,
        )

    async def _load_permission_set(
        self, user_id: str, tenant_id: Optional[str], tenant_key: str
    ) -> Optional[RolePermissionSet]:
        generation = self.cache.generation
        if self.store is not None:
            shared = await self.store.get(user_id, tenant_key)
            if shared is not None:
                return shared

        try:
            user = await self.loader.load_user(user_id, tenant_id)
        except Exception as e:
            logger.error(f"User profile load failed for {user_id} in tenant {tenant_id}: {e}")
            raise IndeterminateAccessError(
                "Access decision indeterminate: user profile unavailable",
                details={"user_id": user_id, "tenant_id": tenant_id},
                cause=e,
            ) from e

        if user is None:
            logger.debug(f"User {user_id} did not resolve in tenant {tenant_id}")
            return None
        if not self._satisfies_contract(user, user_id, tenant_id):
            return None

        permission_set = self.build_permission_set(user)
        if self.store is not None:
            await self._publish(permission_set, tenant_key, generation)
        return permission_set

    async def _publish(self, permission_set: RolePermissionSet, tenant_key: str, generation: int) -> None:
        """Write a freshly loaded set to the shared store unless an invalidation overtook the load."""
        if self.cache.generation != generation:
            logger.debug(f"Skipping shared store write for {permission_set.user_id}: invalidated during load")
            return
        await self.store.set(permission_set, tenant_key, self.ttl)
        if self.cache.generation != generation:
            # Invalidation ran while the write was in flight
            await self.store.delete(permission_set.user_id, tenant_key)

    @staticmethod
    def _satisfies_contract(user: UnifiedUser, user_id: str, tenant_id: Optional[str]) -> bool:
        """Reject loader output that breaks the UnifiedUser guarantees."""
        problem = None
        if not isinstance(user, UnifiedUser):
            problem = f"loader returned {type(user).__name__}"
        elif user.id != user_id:
            problem = f"loader returned user {user.id}"
        elif not user.active:
            problem = "loader returned an inactive user"
        elif not user.is_super_admin and tenant_id and user.tenant_id != tenant_id:
            problem = f"loader returned tenant {user.tenant_id} for hint {tenant_id}"

        if problem:
            logger.error(f"User profile contract violation for {user_id}: {problem}")
            return False
        return True

    @staticmethod
    def build_permission_set(user: UnifiedUser) -> RolePermissionSet:
        role = Role.SUPERADMIN if user.is_super_admin else user.role
        return RolePermissionSet(
            user_id=user.id,
            tenant_id=user.tenant_id,
            role=user.role,
            is_super_admin=user.is_super_admin,
            permissions=resolve_role_permissions(role),
            resolved_at=time.time(),
        )

    async def invalidate_user(self, user_id: str, tenant_id: Optional[str] = None) -> int:
        """Drop cached permission sets after a role or membership change.

        With ``tenant_id`` None every tenant entry of the user is dropped.
        """
        tenant_key = tenant_cache_key(tenant_id) if tenant_id else None
        removed = self.cache.invalidate(user_id, tenant_key)
        if tenant_id:
            # Entries resolved without a hint may point at this tenant too
            removed += self.cache.invalidate(user_id, ANY_TENANT)
        if self.store is not None:
            await self.store.delete(user_id, tenant_key)
            if tenant_id:
                await self.store.delete(user_id, ANY_TENANT)
        logger.info(f"Invalidated {removed} cached permission sets for user {user_id}")
        return removed

    async def invalidate_tenant(self, tenant_id: str) -> int:
        """Drop every cached permission set of a tenant."""
        tenant_key = tenant_cache_key(tenant_id)
        hintless_users = set()

        def belongs_to_tenant(key, value) -> bool:
            if key[1] == tenant_key:
                return True
            if key[1] == ANY_TENANT and (value is None or value.tenant_id == tenant_id):
                hintless_users.add(key[0])
                return True
            return False

        removed = self.cache.invalidate_if(belongs_to_tenant)
        if self.store is not None:
            await self.store.delete_tenant(tenant_key)
            # Hint-less shared entries are keyed by user only; drop the ones known locally
            for user_id in sorted(hintless_users):
                await self.store.delete(user_id, ANY_TENANT)
        logger.info(f"Invalidated {removed} cached permission sets for tenant {tenant_id}")
        return removed
