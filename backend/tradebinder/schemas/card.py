"""
Card-related Pydantic schemas.

Catalog payloads are passed through as Scryfall returns them; only the
narrowed projections (prices) and the response envelopes are modelled.
"""
from typing import Any, Optional

from pydantic import BaseModel


class CardPrices(BaseModel):
    """Price projection of a Scryfall card."""
    eur: Optional[str] = None
    eur_foil: Optional[str] = None
    usd: Optional[str] = None
    usd_foil: Optional[str] = None
    tix: Optional[str] = None
    provider: str = "scryfall"


class CardDataResponse(BaseModel):
    """Envelope for a single catalog payload (card, printings, named lookup)."""
    ok: bool = True
    data: Any


class CardImagesResponse(BaseModel):
    ok: bool = True
    images: Optional[dict[str, str]] = None


class CardPricesResponse(BaseModel):
    ok: bool = True
    prices: CardPrices


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str
    upstream_status: Optional[int] = None
