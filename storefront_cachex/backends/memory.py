import asyncio
import time
from collections.abc import Callable
from logging import getLogger
from typing import Any
from typing import Optional

from storefront_cachex.types import CacheItem

from .base import BaseCacheBackend

logger = getLogger(__name__)


class MemoryBackend(BaseCacheBackend):
    """In-memory cache backend implementation.

    Entries expire lazily: a read past the expiry removes the entry and
    reports a miss. ``start_cleanup`` additionally runs a periodic sweep.
    The store is unbounded in entry count; there is no eviction beyond TTL.
    """

    def __init__(
        self,
        cleanup_interval: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache: dict[str, CacheItem] = {}
        self.lock = asyncio.Lock()
        self.cleanup_interval = cleanup_interval
        self.clock = clock
        self._cleanup_task: Optional[asyncio.Task[None]] = None

    async def get(self, key: str) -> Optional[Any]:
        async with self.lock:
            cached_item = self.cache.get(key)
            if cached_item is None:
                return None
            if cached_item.is_valid(self.clock()):
                return cached_item.value
            del self.cache[key]
            return None

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        async with self.lock:
            expiry = self.clock() + ttl if ttl is not None else None
            self.cache[key] = CacheItem(value=value, expiry=expiry)

    async def delete(self, key: str) -> None:
        async with self.lock:
            self.cache.pop(key, None)

    async def clear(self) -> None:
        async with self.lock:
            self.cache.clear()

    async def entries(self) -> list[tuple[str, CacheItem]]:
        """Return a snapshot of every stored entry, expired ones included."""
        async with self.lock:
            return list(self.cache.items())

    def start_cleanup(self) -> None:
        """Start the periodic expiry sweep; no-op if it is already running."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        self._cleanup_task = asyncio.get_running_loop().create_task(
            self._cleanup_loop()
        )

    def stop_cleanup(self) -> None:
        task, self._cleanup_task = self._cleanup_task, None
        # A task whose loop already closed can no longer be cancelled
        if task is not None and not task.get_loop().is_closed():
            task.cancel()

    async def _cleanup_loop(self) -> None:
        while True:
            await asyncio.sleep(self.cleanup_interval)
            await self.cleanup()

    async def cleanup(self) -> int:
        """Remove expired entries and return how many were dropped."""
        async with self.lock:
            now = self.clock()
            expired_keys = [k for k, v in self.cache.items() if not v.is_valid(now)]
            for key in expired_keys:
                self.cache.pop(key, None)
        if expired_keys:
            logger.debug("Swept %d expired cache entries", len(expired_keys))
        return len(expired_keys)
