"""
PrintShip Shipping Engine
FastAPI application entry point

- Multi-store x multi-courier shipping quote aggregation
- Print weight calculation
- Shipment create / cancel / label / track dispatch
- Rate limiting on the quote endpoint with SlowAPI
- One shared httpx client for every courier, closed on shutdown
"""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from printship import __version__
from printship.api.routes import shipments, shipping_quote
from printship.core.config import settings
from printship.core.error_handler import register_error_handlers
from printship.core.logging import RequestLoggingMiddleware, configure_logging
from printship.core.rate_limit import limiter, rate_limit_exceeded_handler
from printship.modules.shipping.carriers import build_default_registry
from printship.modules.shipping.token_cache import default_token_cache
from printship.services.aggregation_service import AggregationService
from printship.services.shipment_service import ShipmentService

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the courier registry around a shared HTTP client."""
    http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    registry = build_default_registry(settings, default_token_cache, http_client)

    app.state.courier_registry = registry
    app.state.aggregation_service = AggregationService(registry)
    app.state.shipment_service = ShipmentService(registry)

    enabled = [adapter.courier_id for adapter in registry.get_enabled_adapters()]
    logger.info(f"{settings.APP_NAME} starting ({settings.ENVIRONMENT}); couriers enabled: {enabled}")

    yield

    # Close HTTP clients to prevent connection leaks
    await registry.close()
    await http_client.aclose()
    logger.info("Courier HTTP client closed")


app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="Shipping rate aggregation across stores and couriers, print weight calculation and shipment dispatch.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

register_error_handlers(app)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Quote routes are served at the root and under /api
app.include_router(shipping_quote.router)
app.include_router(shipping_quote.router, prefix="/api")
app.include_router(shipments.router)


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "ok", "service": "PrintShip Shipping Engine"}
