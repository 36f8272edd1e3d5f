"""
Card catalog service.

The interface the rest of the application uses to read the Scryfall catalog.
Each lookup goes through the TTL cache first and reaches ScryfallClient only
on a miss. Search results are kept for 10 minutes; cards, printings and
name lookups for an hour, since printing data hardly ever changes.
Images and prices are projections of the cached card, not separate entries.
"""
from typing import Any, Optional

import structlog

from tradebinder.core.cache import TTLCache
from tradebinder.core.config import Settings
from tradebinder.core.rate_limiter import RateLimiterRegistry
from tradebinder.schemas.card import CardPrices
from tradebinder.services.scryfall.client import ScryfallClient

logger = structlog.get_logger()

SCRYFALL_LIMITER = "scryfall"

SEARCH_TTL_SECONDS = 60 * 10
CARD_TTL_SECONDS = 60 * 60


def search_key(q: str, page: int = 1) -> str:
    return f"search:{q}:{page}"


def card_key(card_id: str) -> str:
    return f"card:{card_id}"


def prints_key(card_id: str) -> str:
    return f"prints:{card_id}"


def name_key(exact: Optional[str] = None, fuzzy: Optional[str] = None) -> str:
    if bool(exact) == bool(fuzzy):
        raise ValueError("Provide exactly one of 'exact' or 'fuzzy'")
    return f"name:exact:{exact}" if exact else f"name:fuzzy:{fuzzy}"


def extract_images(card: dict[str, Any]) -> Optional[dict[str, str]]:
    """Image URIs of a card; double-faced cards fall back to the front face."""
    if card.get("image_uris"):
        return card["image_uris"]
    faces = card.get("card_faces") or []
    if faces and faces[0].get("image_uris"):
        return faces[0]["image_uris"]
    return None


def extract_prices(card: dict[str, Any]) -> CardPrices:
    """Price projection of a card. Missing prices come back as None."""
    prices = card.get("prices") or {}
    return CardPrices(
        eur=prices.get("eur"),
        eur_foil=prices.get("eur_foil"),
        usd=prices.get("usd"),
        usd_foil=prices.get("usd_foil"),
        tix=prices.get("tix"),
    )


class CardService:
    """
    Cached, rate-limited access to the card catalog.

    Usage:
        service = CardService.from_settings(settings, RateLimiterRegistry())
        card = await service.get_card_by_id("e0debb18-...")
    """

    def __init__(
        self,
        client: ScryfallClient,
        cache: TTLCache,
        search_ttl: float = SEARCH_TTL_SECONDS,
        card_ttl: float = CARD_TTL_SECONDS,
    ):
        self.client = client
        self.cache = cache
        self.search_ttl = search_ttl
        self.card_ttl = card_ttl

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: RateLimiterRegistry,
        cache: TTLCache | None = None,
    ) -> "CardService":
        """Build the service, its client and its cache from application settings."""
        limiter = registry.get_limiter(
            SCRYFALL_LIMITER,
            capacity=settings.scryfall_rate_limit_capacity,
            refill_rate=settings.scryfall_refill_per_second,
        )
        client = ScryfallClient(
            limiter,
            base_url=settings.scryfall_base_url,
            user_agent=settings.scryfall_user_agent,
            timeout=settings.external_api_timeout,
        )
        if cache is None:
            cache = TTLCache(
                max_size=settings.cache_max_entries,
                default_ttl=settings.cache_default_ttl_seconds,
            )
        return cls(
            client,
            cache,
            search_ttl=settings.search_cache_ttl_seconds,
            card_ttl=settings.card_cache_ttl_seconds,
        )

    async def search_cards(self, q: str, page: int = 1) -> dict:
        return await self.cache.with_cache(
            search_key(q, page),
            lambda: self.client.search(q, page=page),
            ttl=self.search_ttl,
        )

    async def get_card_by_id(self, card_id: str) -> dict:
        return await self.cache.with_cache(
            card_key(card_id),
            lambda: self.client.by_id(card_id),
            ttl=self.card_ttl,
        )

    async def get_prints(self, card_id: str) -> dict:
        return await self.cache.with_cache(
            prints_key(card_id),
            lambda: self.client.prints(card_id),
            ttl=self.card_ttl,
        )

    async def get_by_name(
        self,
        exact: Optional[str] = None,
        fuzzy: Optional[str] = None,
    ) -> dict:
        return await self.cache.with_cache(
            name_key(exact=exact, fuzzy=fuzzy),
            lambda: self.client.named(exact=exact, fuzzy=fuzzy),
            ttl=self.card_ttl,
        )

    async def get_images(self, card_id: str) -> Optional[dict[str, str]]:
        return extract_images(await self.get_card_by_id(card_id))

    async def get_prices(self, card_id: str) -> CardPrices:
        return extract_prices(await self.get_card_by_id(card_id))

    async def aclose(self) -> None:
        await self.client.aclose()
