"""FastAPI application for the Pet Store Service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from libs.common.config import get_settings
from libs.common.error_handler import add_exception_handlers
from libs.common.logging import get_logger
from libs.common.middleware import add_observability_middleware
from libs.common.rate_limit import limiter, rate_limit_exceeded_handler
from libs.db.base import Base
from libs.db.config import AsyncSessionLocal, engine
from services.petstore_service import models  # noqa: F401  (registers tables)
from services.petstore_service.routers import (
    addresses_router,
    audit_router,
    auth_router,
    categories_router,
    discounts_router,
    pets_router,
    store_router,
    users_router,
)
from services.petstore_service.seed_data import seed_all
from slowapi.errors import RateLimitExceeded

logger = get_logger(__name__)

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.AUTO_CREATE_TABLES:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")
    if settings.SEED_DATA:
        async with AsyncSessionLocal() as db:
            await seed_all(db)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the Pet Store Service FastAPI app."""
    settings = get_settings()
    app = FastAPI(
        title="Pawfect Pet Store Service",
        version="0.1.0",
        description="Pet store backend - catalog, cart, checkout, payments, delivery.",
        lifespan=lifespan,
    )

    # Add rate limiter state to app
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability (structured logging + request tracing)
    add_observability_middleware(app)

    # Add global exception handlers for consistent error responses
    add_exception_handlers(app)

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "petstore"}

    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(pets_router, prefix=API_PREFIX)
    app.include_router(categories_router, prefix=API_PREFIX)
    app.include_router(discounts_router, prefix=API_PREFIX)
    app.include_router(store_router, prefix=API_PREFIX)
    app.include_router(addresses_router, prefix=API_PREFIX)
    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(audit_router, prefix=API_PREFIX)

    return app


app = create_app()
