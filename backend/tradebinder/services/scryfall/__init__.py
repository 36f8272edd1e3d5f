"""
Scryfall catalog access: rate-limited client and cached card service.
"""
from tradebinder.services.scryfall.client import (
    ScryfallClient,
    ScryfallError,
    ScryfallRequestError,
    UpstreamError,
)
from tradebinder.services.scryfall.service import (
    SCRYFALL_LIMITER,
    CardService,
    card_key,
    extract_images,
    extract_prices,
    name_key,
    prints_key,
    search_key,
)

__all__ = [
    "ScryfallClient",
    "ScryfallError",
    "ScryfallRequestError",
    "UpstreamError",
    "SCRYFALL_LIMITER",
    "CardService",
    "card_key",
    "extract_images",
    "extract_prices",
    "name_key",
    "prints_key",
    "search_key",
]
