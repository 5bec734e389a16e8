"""Cache adapters."""

from .memory_adapter import CacheStats, MemoryCacheEntry, PermissionSetCache
from .redis_adapter import RedisPermissionSetStore

__all__ = ["CacheStats", "MemoryCacheEntry", "PermissionSetCache", "RedisPermissionSetStore"]
