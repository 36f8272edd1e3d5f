"""
Pytest configuration and fixtures.

Provides fixtures for:
- Rate limiter registry and TTL cache instances (fresh per test)
- A Scryfall client backed by httpx.MockTransport
- HTTP client against the FastAPI app with services overridden
"""
from typing import Any, AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tradebinder.api.deps import get_card_service, get_limiter_registry
from tradebinder.core.cache import TTLCache
from tradebinder.core.rate_limiter import RateLimiterRegistry
from tradebinder.main import app
from tradebinder.services.scryfall import CardService, ScryfallClient

SCRYFALL_URL = "https://api.scryfall.com"
BOLT_ID = "e0debb18-f57c-4b9c-9734-aef0dab42f6c"
DELVER_ID = "28059d09-2c7d-4c61-af55-8942107a7c1f"


class FakeClock:
    """Manually advanced time source for limiter and cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> RateLimiterRegistry:
    return RateLimiterRegistry()


@pytest.fixture
def cache() -> TTLCache:
    return TTLCache(max_size=100, default_ttl=60.0)


# -----------------------------------------------------------------------------
# Scryfall payloads
# -----------------------------------------------------------------------------

@pytest.fixture
def bolt_card() -> dict[str, Any]:
    """Single-faced card as returned by /cards/{id}."""
    return {
        "object": "card",
        "id": BOLT_ID,
        "name": "Lightning Bolt",
        "set": "lea",
        "collector_number": "161",
        "image_uris": {
            "small": "https://cards.scryfall.io/small/front/bolt.jpg",
            "normal": "https://cards.scryfall.io/normal/front/bolt.jpg",
        },
        "prices": {
            "usd": "450.00",
            "usd_foil": None,
            "eur": "380.00",
            "eur_foil": None,
            "tix": "1.20",
        },
    }


@pytest.fixture
def delver_card() -> dict[str, Any]:
    """Double-faced card: images live on the faces."""
    return {
        "object": "card",
        "id": DELVER_ID,
        "name": "Delver of Secrets // Insectile Aberration",
        "card_faces": [
            {
                "name": "Delver of Secrets",
                "image_uris": {"normal": "https://cards.scryfall.io/normal/front/delver.jpg"},
            },
            {
                "name": "Insectile Aberration",
                "image_uris": {"normal": "https://cards.scryfall.io/normal/back/delver.jpg"},
            },
        ],
        "prices": {"usd": "0.25"},
    }


@pytest.fixture
def search_page(bolt_card) -> dict[str, Any]:
    return {
        "object": "list",
        "total_cards": 1,
        "has_more": False,
        "data": [bolt_card],
    }


@pytest.fixture
def scryfall_routes(bolt_card, delver_card, search_page) -> dict[str, tuple[int, Any]]:
    """Path -> (status, JSON body) served by the mock transport."""
    return {
        f"/cards/{BOLT_ID}": (200, bolt_card),
        f"/cards/{DELVER_ID}": (200, delver_card),
        f"/cards/{BOLT_ID}/prints": (200, {"object": "list", "data": [bolt_card]}),
        "/cards/search": (200, search_page),
        "/cards/named": (200, bolt_card),
    }


@pytest.fixture
def scryfall_requests() -> list[httpx.Request]:
    """Every request that reached the mock transport."""
    return []


@pytest.fixture
def mock_transport(scryfall_routes, scryfall_requests) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        scryfall_requests.append(request)
        status, body = scryfall_routes.get(
            request.url.path,
            (404, {"object": "error", "code": "not_found", "status": 404}),
        )
        return httpx.Response(status, json=body)

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture
async def scryfall_client(registry, mock_transport) -> AsyncGenerator[ScryfallClient, None]:
    limiter = registry.get_limiter("scryfall", capacity=8, refill_rate=8.0)
    client = ScryfallClient(
        limiter,
        base_url=SCRYFALL_URL,
        http_client=httpx.AsyncClient(transport=mock_transport),
    )
    yield client
    await client.aclose()


@pytest.fixture
def card_service(scryfall_client, cache) -> CardService:
    return CardService(scryfall_client, cache)


@pytest_asyncio.fixture
async def client(card_service, registry) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with the catalog served by the mock transport."""
    app.dependency_overrides[get_card_service] = lambda: card_service
    app.dependency_overrides[get_limiter_registry] = lambda: registry

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
