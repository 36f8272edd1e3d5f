"""
Pydantic schemas for API request/response validation.
"""
from tradebinder.schemas.card import (
    CardDataResponse,
    CardImagesResponse,
    CardPrices,
    CardPricesResponse,
    ErrorResponse,
)

__all__ = [
    "CardDataResponse",
    "CardImagesResponse",
    "CardPrices",
    "CardPricesResponse",
    "ErrorResponse",
]
