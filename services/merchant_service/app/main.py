"""FastAPI application for the Merchant Console service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.db.session import create_tables
from services.merchant_service.routers import (
    auth_router,
    catalog_router,
    orders_router,
    profile_router,
    session_router,
)
from slowapi.errors import RateLimitExceeded

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.backendless_configured:
        logger.info(f"Using Backendless app {settings.BACKENDLESS_APP_ID}")
    else:
        # Demo mode keeps the account and profile in the local database.
        await create_tables()
        logger.warning("Backendless is not configured; running in demo mode")
    yield


def create_app() -> FastAPI:
    """Create and configure the Merchant Console FastAPI app."""
    settings = get_settings()

    app = FastAPI(
        title="Merchant Console Service",
        version="0.1.0",
        description="Store profile, catalog and order management for merchants.",
        lifespan=lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    add_observability_middleware(app)
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        mode = "backendless" if settings.backendless_configured else "demo"
        return {"status": "ok", "service": "merchant", "mode": mode}

    app.include_router(auth_router)
    app.include_router(session_router)
    app.include_router(profile_router)
    app.include_router(catalog_router)
    app.include_router(orders_router)

    return app


app = create_app()
