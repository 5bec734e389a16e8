"""In-process permission set cache with TTL and single-flight loading."""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
CacheKey = Tuple[str, str]


@dataclass
class MemoryCacheEntry(Generic[T]):
    """Memory cache entry with expiry metadata."""
    value: T
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    """Counters exposed for diagnostics."""
    hits: int = 0
    misses: int = 0
    loads: int = 0
    coalesced: int = 0
    expirations: int = 0
    evictions: int = 0
    invalidations: int = 0

    def to_dict(self) -> Dict[str, int]:
        return dict(self.__dict__)


class PermissionSetCache:
    """TTL cache keyed by ``(user_id, tenant_key)``.

    Concurrent misses for the same key share one in-flight load task; its
    result or exception reaches every waiter. Entries expire lazily on read.
    Invalidation detaches in-flight loads so a resolution started before an
    invalidation is never stored after it.

    Relies on event-loop atomicity; not safe to share across threads.
    """

    def __init__(
        self,
        default_ttl: int = 600,
        max_entries: int = 10000,
        timer: Callable[[], float] = time.monotonic,
    ):
        if default_ttl <= 0:
            raise ValueError("default_ttl must be positive")
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._timer = timer
        self._entries: "OrderedDict[CacheKey, MemoryCacheEntry[Any]]" = OrderedDict()
        self._in_flight: Dict[CacheKey, "asyncio.Task[Any]"] = {}
        self._generation = 0
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def generation(self) -> int:
        """Counter bumped by every invalidation."""
        return self._generation

    def peek(self, user_id: str, tenant_key: str) -> Optional[Any]:
        """Return an unexpired value without loading or touching stats."""
        entry = self._entries.get((user_id, tenant_key))
        if entry is None or entry.is_expired(self._timer()):
            return None
        return entry.value

    async def get_or_load(
        self,
        user_id: str,
        tenant_key: str,
        loader: Callable[[], Awaitable[Optional[T]]],
        ttl: Optional[int] = None,
    ) -> Optional[T]:
        """Return the cached value, loading it once per key on a miss.

        ``None`` results are returned but not cached.
        """
        key = (user_id, tenant_key)
        entry = self._entries.get(key)
        if entry is not None:
            if not entry.is_expired(self._timer()):
                self.stats.hits += 1
                self._entries.move_to_end(key)
                return entry.value
            del self._entries[key]
            self.stats.expirations += 1

        self.stats.misses += 1
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader, ttl or self.default_ttl, self._generation))
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._on_load_done(key, done))
        else:
            self.stats.coalesced += 1
            logger.debug(f"Joining in-flight permission load for {key}")

        # Cancelling one waiter must not cancel the shared load
        return await asyncio.shield(task)

    async def _load(
        self,
        key: CacheKey,
        loader: Callable[[], Awaitable[Optional[T]]],
        ttl: int,
        generation: int,
    ) -> Optional[T]:
        self.stats.loads += 1
        value = await loader()
        if value is not None and generation == self._generation:
            self._store(key, value, ttl)
        return value

    def _on_load_done(self, key: CacheKey, task: "asyncio.Task[Any]") -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Permission load for {key} failed: {task.exception()!r}")

    def _store(self, key: CacheKey, value: Any, ttl: int) -> None:
        now = self._timer()
        self._entries[key] = MemoryCacheEntry(value=value, created_at=now, expires_at=now + ttl)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            self.stats.evictions += 1

    def invalidate(self, user_id: str, tenant_key: Optional[str] = None) -> int:
        """Drop one entry, or every entry of the user when ``tenant_key`` is None."""
        return self.invalidate_if(
            lambda key, value: key[0] == user_id and (tenant_key is None or key[1] == tenant_key)
        )

    def invalidate_tenant(self, tenant_key: str) -> int:
        """Drop every entry for a tenant."""
        return self.invalidate_if(lambda key, value: key[1] == tenant_key)

    def clear(self) -> None:
        self.invalidate_if(lambda key, value: True)

    def invalidate_if(self, predicate: Callable[[CacheKey, Optional[Any]], bool]) -> int:
        """Drop entries for which ``predicate(key, value)`` holds.

        In-flight loads are tested with ``value=None`` and detached when matched.
        """
        self._generation += 1
        for key in [k for k in self._in_flight if predicate(k, None)]:
            del self._in_flight[key]

        doomed = [k for k, entry in self._entries.items() if predicate(k, entry.value)]
        for key in doomed:
            del self._entries[key]
        self.stats.invalidations += len(doomed)
        return len(doomed)
