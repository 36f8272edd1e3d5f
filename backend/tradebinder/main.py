"""
Main FastAPI application entry point.
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradebinder.api import api_router
from tradebinder.api.routes import health
from tradebinder.core.config import settings
from tradebinder.core.logging import setup_logging
from tradebinder.core.rate_limiter import RateLimiterRegistry
from tradebinder.schemas.card import ErrorResponse
from tradebinder.services.scryfall import (
    CardService,
    ScryfallRequestError,
    UpstreamError,
)

# Setup logging
setup_logging()
logger = structlog.get_logger()

# Upstream statuses passed through to our clients; anything else is a 502
PASSTHROUGH_STATUSES = {400, 404}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup and shutdown events.
    """
    logger.info(
        "Starting Trade Binder API",
        version="1.0.0",
        debug=settings.api_debug,
        scryfall_capacity=settings.scryfall_rate_limit_capacity,
        scryfall_refill_per_second=settings.scryfall_refill_per_second,
    )

    yield

    logger.info("Shutting down Trade Binder API")
    await app.state.card_service.aclose()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Trade Binder - card search, inventory and listings backed by the Scryfall catalog",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Process-wide rate limiters and catalog service
app.state.limiters = RateLimiterRegistry()
app.state.card_service = CardService.from_settings(settings, app.state.limiters)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    """Map a failed Scryfall response onto our own response."""
    status_code = exc.status if exc.status in PASSTHROUGH_STATUSES else 502
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=str(exc), upstream_status=exc.status).model_dump(),
    )


@app.exception_handler(ScryfallRequestError)
async def scryfall_request_error_handler(request: Request, exc: ScryfallRequestError):
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(health.router, tags=["Health"])
app.include_router(api_router, prefix="/api")


# Middleware for request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(
        "Request",
        method=request.method,
        path=request.url.path,
    )
    response = await call_next(request)
    logger.debug(
        "Response",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tradebinder.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
