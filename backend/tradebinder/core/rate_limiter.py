"""
Token-bucket rate limiting for outbound calls to external services.

Every request to a rate-limited provider (Scryfall) must first take a token
from the bucket registered under the provider's name. Buckets are shared by
every caller holding the same registry, so independent call sites coordinate.

Usage:
    registry = RateLimiterRegistry()
    acquire = registry.create_limiter("scryfall", capacity=8, refill_rate=8.0)

    await acquire()
    response = await client.get(...)
"""
import asyncio
import time
from typing import Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger()

# Bounds for a single sleep while waiting for a token
MIN_POLL_INTERVAL = 0.01
MAX_POLL_INTERVAL = 0.08


def _validate(capacity: int, refill_rate: float) -> None:
    if capacity < 1:
        raise ValueError(f"capacity must be at least 1, got {capacity}")
    if refill_rate <= 0:
        raise ValueError(f"refill_rate must be greater than zero, got {refill_rate}")


class TokenBucket:
    """
    Token bucket holding at most `capacity` tokens, refilled continuously
    at `refill_rate` tokens per second.

    Waiters queue on an asyncio.Lock, so tokens are handed out in arrival
    order. A waiter at the head of the queue sleeps for the time until the
    next token, clamped to [MIN_POLL_INTERVAL, MAX_POLL_INTERVAL].
    """

    def __init__(
        self,
        capacity: int,
        refill_rate: float,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ):
        _validate(capacity, refill_rate)
        self.name = name
        self.capacity = capacity
        self.refill_rate = refill_rate
        self._clock = clock
        self.tokens: float = float(capacity)
        self.last_refill: float = clock()
        self.acquisitions = 0
        self._lock = asyncio.Lock()

    def refill(self) -> None:
        """Add the tokens accrued since the last update."""
        now = self._clock()
        elapsed = max(0.0, now - self.last_refill)
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    def try_acquire(self) -> bool:
        """Take one token if available. Never waits."""
        self.refill()
        if self.tokens >= 1:
            self.tokens -= 1
            self.acquisitions += 1
            return True
        return False

    def time_until_available(self) -> float:
        """Seconds until one token is available (0 if one is available now)."""
        self.refill()
        if self.tokens >= 1:
            return 0.0
        return (1 - self.tokens) / self.refill_rate

    async def acquire(self) -> None:
        """
        Wait until a token is available and take it.

        Never fails on its own. Callers that need bounded waiting wrap the
        call in asyncio.wait_for / asyncio.timeout; cancellation releases
        the queue position without consuming a token.
        """
        async with self._lock:
            waited = False
            while not self.try_acquire():
                if not waited:
                    logger.debug(
                        "Rate limiter throttling",
                        limiter=self.name,
                        wait_seconds=round(self.time_until_available(), 3),
                    )
                    waited = True
                delay = self.time_until_available()
                await asyncio.sleep(min(MAX_POLL_INTERVAL, max(MIN_POLL_INTERVAL, delay)))

    def __repr__(self) -> str:
        return (
            f"TokenBucket(name={self.name!r}, capacity={self.capacity}, "
            f"refill_rate={self.refill_rate}, tokens={self.tokens:.2f})"
        )


class RateLimiterRegistry:
    """
    Named token buckets, created lazily and kept for the registry's lifetime.

    A bucket's configuration is fixed by the first caller. Later requests for
    the same key with different settings get the existing bucket and a
    warning is logged.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}

    def get_limiter(self, key: str, capacity: int, refill_rate: float) -> TokenBucket:
        """Get or create the bucket registered under `key`."""
        _validate(capacity, refill_rate)

        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = TokenBucket(capacity, refill_rate, name=key, clock=self._clock)
            self._buckets[key] = bucket
            logger.debug(
                "Rate limiter created",
                limiter=key,
                capacity=capacity,
                refill_rate=refill_rate,
            )
        elif bucket.capacity != capacity or bucket.refill_rate != refill_rate:
            logger.warning(
                "Rate limiter already configured, keeping existing settings",
                limiter=key,
                capacity=bucket.capacity,
                refill_rate=bucket.refill_rate,
                requested_capacity=capacity,
                requested_refill_rate=refill_rate,
            )
        return bucket

    def create_limiter(
        self,
        key: str,
        capacity: int = 8,
        refill_rate: float = 8.0,
    ) -> Callable[[], Awaitable[None]]:
        """Return the `acquire` coroutine function of the bucket for `key`."""
        return self.get_limiter(key, capacity, refill_rate).acquire

    def get(self, key: str) -> Optional[TokenBucket]:
        return self._buckets.get(key)

    def keys(self) -> list[str]:
        return list(self._buckets)

    def items(self) -> list[tuple[str, TokenBucket]]:
        return list(self._buckets.items())

    def clear(self) -> None:
        """Drop all buckets. Useful for testing."""
        self._buckets.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)
