"""Cache feature: permission set caching."""

from .adapters import CacheStats, MemoryCacheEntry, PermissionSetCache, RedisPermissionSetStore
from .entities import PermissionSetStore

__all__ = [
    "CacheStats",
    "MemoryCacheEntry",
    "PermissionSetCache",
    "PermissionSetStore",
    "RedisPermissionSetStore",
]
