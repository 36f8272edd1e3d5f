"""
In-memory TTL cache for catalog responses.

Entries expire after their TTL and are evicted least-recently-used first
once the cache is full. `with_cache` layers cache-aside on top: concurrent
misses for one key share a single producer call.
"""
import asyncio
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Optional, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")

_MISSING = object()


class TTLCache:
    """
    Simple in-memory cache with TTL (time-to-live).

    Uses LRU eviction when cache size limit is reached.
    """

    def __init__(
        self,
        max_size: int = 5000,
        default_ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of items to cache.
            default_ttl: Default time-to-live in seconds.
            clock: Monotonic time source, injectable for tests.
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if default_ttl <= 0:
            raise ValueError("default_ttl must be greater than zero")
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock
        self._cache: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._inflight: dict[str, asyncio.Future] = {}
        self.hits = 0
        self.misses = 0
        # Callers that awaited another caller's in-flight fetch
        self.joined = 0

    def _lookup(self, key: str, touch: bool = True) -> Any:
        entry = self._cache.get(key)
        if entry is None:
            return _MISSING

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._cache[key]
            return _MISSING

        if touch:
            # Move to end (most recently used)
            self._cache.move_to_end(key)
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get value from cache.

        Args:
            key: Cache key.
            default: Returned when the key is missing or expired.

        Returns:
            Cached value or `default`.
        """
        value = self._lookup(key)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Set value in cache.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live in seconds. Uses default if None.
        """
        if ttl is None:
            ttl = self.default_ttl
        if ttl <= 0:
            raise ValueError("ttl must be greater than zero")

        if key in self._cache:
            del self._cache[key]

        while len(self._cache) >= self.max_size:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug("Cache entry evicted", key=evicted)

        self._cache[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        """Delete a specific key from cache."""
        self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear all cached items."""
        self._cache.clear()

    def __contains__(self, key: str) -> bool:
        return self._lookup(key, touch=False) is not _MISSING

    def __len__(self) -> int:
        return len(self._cache)

    @property
    def inflight(self) -> int:
        """Number of producer calls currently running."""
        return len(self._inflight)

    async def with_cache(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
        ttl: Optional[float] = None,
    ) -> T:
        """
        Return the cached value for `key`, computing it with `producer` on a miss.

        A successful result is stored for `ttl` seconds. If the producer
        raises, the exception reaches every caller waiting on this key and
        nothing is cached. Cancelling one caller does not cancel the shared
        producer call.

        Args:
            key: Non-empty cache key, e.g. "card:<id>".
            producer: Zero-argument coroutine function producing the value.
            ttl: Time-to-live in seconds. Uses default if None.
        """
        if not key:
            raise ValueError("cache key must be a non-empty string")
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be greater than zero")

        value = self._lookup(key)
        if value is not _MISSING:
            self.hits += 1
            return value

        pending = self._inflight.get(key)
        if pending is None:
            self.misses += 1
            logger.debug("Cache miss", key=key)
            pending = asyncio.ensure_future(self._fill(key, producer, ttl))
            self._inflight[key] = pending
        else:
            self.joined += 1
            logger.debug("Joining in-flight fetch", key=key)

        return await asyncio.shield(pending)

    async def _fill(
        self,
        key: str,
        producer: Callable[[], Awaitable[T]],
        ttl: Optional[float],
    ) -> T:
        try:
            value = await producer()
            self.set(key, value, ttl)
            return value
        finally:
            self._inflight.pop(key, None)
