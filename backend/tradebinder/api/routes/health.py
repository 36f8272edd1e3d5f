"""
Health check endpoints.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from tradebinder.api.deps import get_card_service, get_limiter_registry
from tradebinder.core.rate_limiter import RateLimiterRegistry
from tradebinder.services.scryfall import CardService

router = APIRouter()


@router.get("/health")
async def health_check(
    service: CardService = Depends(get_card_service),
    limiters: RateLimiterRegistry = Depends(get_limiter_registry),
):
    """
    Health check endpoint.

    Reports cache occupancy and the state of each rate limiter. Does not
    call Scryfall, so it never spends a rate-limit token.
    """
    cache = service.cache
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "api": "ok",
            "cache": {
                "entries": len(cache),
                "max_entries": cache.max_size,
                "hits": cache.hits,
                "misses": cache.misses,
                "joined": cache.joined,
                "inflight": cache.inflight,
            },
            "rate_limiters": {
                key: {
                    "capacity": bucket.capacity,
                    "refill_rate": bucket.refill_rate,
                    "tokens": round(bucket.tokens, 2),
                    "acquisitions": bucket.acquisitions,
                }
                for key, bucket in limiters.items()
            },
        },
    }


@router.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Trade Binder API",
        "version": "1.0.0",
        "docs": "/docs",
    }
