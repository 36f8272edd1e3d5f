"""
API module for FastAPI routes.
"""
from fastapi import APIRouter

from tradebinder.api.routes import cards

api_router = APIRouter()

api_router.include_router(cards.router, prefix="/cards", tags=["Cards"])
