"""
API dependencies for shared services.

Services are created once per application and stored on `app.state`;
tests replace them through `app.dependency_overrides`.
"""
from fastapi import Request

from tradebinder.core.rate_limiter import RateLimiterRegistry
from tradebinder.services.scryfall import CardService


def get_card_service(request: Request) -> CardService:
    """Get the application's card service."""
    return request.app.state.card_service


def get_limiter_registry(request: Request) -> RateLimiterRegistry:
    """Get the application's rate limiter registry."""
    return request.app.state.limiters
