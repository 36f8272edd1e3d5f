"""
Core module containing configuration and shared infrastructure.
"""
from tradebinder.core.cache import TTLCache
from tradebinder.core.config import settings
from tradebinder.core.rate_limiter import RateLimiterRegistry, TokenBucket

__all__ = [
    "settings",
    "TTLCache",
    "RateLimiterRegistry",
    "TokenBucket",
]
