"""
Card catalog API endpoints.

Thin wrappers over CardService. Upstream failures are turned into
responses by the exception handlers registered in tradebinder.main.
"""
import structlog
from fastapi import APIRouter, Depends, Query

from tradebinder.api.deps import get_card_service
from tradebinder.schemas.card import (
    CardDataResponse,
    CardImagesResponse,
    CardPricesResponse,
)
from tradebinder.services.scryfall import CardService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("/search")
async def search_cards(
    q: str = Query(..., min_length=1, description="Scryfall search query"),
    page: int = Query(1, ge=1),
    service: CardService = Depends(get_card_service),
):
    """
    Search the catalog.

    Returns Scryfall's list object (data, total_cards, has_more, ...)
    merged into the response envelope.
    """
    data = await service.search_cards(q, page=page)
    return {"ok": True, **data}


@router.get("/by-name/exact/{name:path}", response_model=CardDataResponse)
async def get_card_by_exact_name(
    name: str,
    service: CardService = Depends(get_card_service),
):
    """Exact name lookup. Split and double-faced names contain "//"."""
    return CardDataResponse(data=await service.get_by_name(exact=name))


@router.get("/by-name/fuzzy/{name:path}", response_model=CardDataResponse)
async def get_card_by_fuzzy_name(
    name: str,
    service: CardService = Depends(get_card_service),
):
    return CardDataResponse(data=await service.get_by_name(fuzzy=name))


@router.get("/{card_id}", response_model=CardDataResponse)
async def get_card(
    card_id: str,
    service: CardService = Depends(get_card_service),
):
    """Get a single card by Scryfall id."""
    return CardDataResponse(data=await service.get_card_by_id(card_id))


@router.get("/{card_id}/prints", response_model=CardDataResponse)
async def get_card_prints(
    card_id: str,
    service: CardService = Depends(get_card_service),
):
    """Get every printing of a card."""
    return CardDataResponse(data=await service.get_prints(card_id))


@router.get("/{card_id}/images", response_model=CardImagesResponse)
async def get_card_images(
    card_id: str,
    service: CardService = Depends(get_card_service),
):
    return CardImagesResponse(images=await service.get_images(card_id))


@router.get("/{card_id}/prices", response_model=CardPricesResponse)
async def get_card_prices(
    card_id: str,
    service: CardService = Depends(get_card_service),
):
    return CardPricesResponse(prices=await service.get_prices(card_id))
