"""Redis implementation of the shared permission set store."""

import json
import logging
from typing import Optional

import redis.asyncio as redis

from ....config.constants import CacheKeys
from ....core.exceptions import CacheError
from ...permissions.entities.permission_set import RolePermissionSet
from ..entities.protocols import PermissionSetStore

logger = logging.getLogger(__name__)


class RedisPermissionSetStore(PermissionSetStore):
    """Redis-backed PermissionSetStore.

    Backend failures are logged and reported as misses so the resolver falls
    through to the user profile loader.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        key_prefix: str = "booka_authz",
        client: Optional[redis.Redis] = None,
    ):
        self.redis_url = redis_url
        self.key_prefix = key_prefix
        self._redis: Optional[redis.Redis] = client

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()

    async def connect(self) -> None:
        """Connect to Redis."""
        if self._redis is not None:
            return
        try:
            self._redis = redis.from_url(self.redis_url, decode_responses=True)
            await self._redis.ping()
            logger.info("Connected to Redis for permission cache")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._redis = None
            raise CacheError(f"Redis connection failed: {e}") from e

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    def _ensure_connected(self) -> redis.Redis:
        if not self._redis:
            raise CacheError("Redis not connected. Use async context manager or call connect().")
        return self._redis

    def _make_key(self, user_id: str, tenant_key: str) -> str:
        return f"{self.key_prefix}:" + CacheKeys.PERMISSION_SET.format(user_id=user_id, tenant_id=tenant_key)

    async def get(self, user_id: str, tenant_key: str) -> Optional[RolePermissionSet]:
        try:
            raw = await self._ensure_connected().get(self._make_key(user_id, tenant_key))
        except (redis.RedisError, CacheError) as e:
            logger.warning(f"Failed to read permission set for {user_id}/{tenant_key}: {e}")
            return None
        if raw is None:
            return None
        try:
            return RolePermissionSet.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding corrupt permission set for {user_id}/{tenant_key}: {e}")
            return None

    async def set(self, permission_set: RolePermissionSet, tenant_key: str, ttl: int) -> None:
        try:
            await self._ensure_connected().setex(
                self._make_key(permission_set.user_id, tenant_key),
                ttl,
                json.dumps(permission_set.to_dict()),
            )
        except (redis.RedisError, CacheError) as e:
            logger.warning(f"Failed to store permission set for {permission_set.user_id}: {e}")

    async def delete(self, user_id: str, tenant_key: Optional[str] = None) -> int:
        if tenant_key is not None:
            return await self._delete_keys([self._make_key(user_id, tenant_key)])
        pattern = f"{self.key_prefix}:" + CacheKeys.PERMISSION_SET_PATTERN.format(user_id=user_id)
        return await self._delete_pattern(pattern)

    async def delete_tenant(self, tenant_key: str) -> int:
        pattern = f"{self.key_prefix}:" + CacheKeys.PERMISSION_SET.format(user_id="*", tenant_id=tenant_key)
        return await self._delete_pattern(pattern)

    async def _delete_pattern(self, pattern: str) -> int:
        try:
            client = self._ensure_connected()
            keys = [key async for key in client.scan_iter(match=pattern)]
        except (redis.RedisError, CacheError) as e:
            logger.warning(f"Failed to scan cache keys {pattern}: {e}")
            return 0
        return await self._delete_keys(keys)

    async def _delete_keys(self, keys) -> int:
        if not keys:
            return 0
        try:
            return await self._ensure_connected().delete(*keys)
        except (redis.RedisError, CacheError) as e:
            logger.warning(f"Failed to delete cache keys: {e}")
            return 0
