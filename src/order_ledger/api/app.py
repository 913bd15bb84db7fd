"""
order_ledger.api.app

FastAPI app factory for the order ledger service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Create and dispose the shared store handle (engine, session factory, LedgerStore).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from order_ledger import __version__
from order_ledger.api.errors import register_exception_handlers
from order_ledger.api.routers.health import router as health_router
from order_ledger.api.routers.orders import router as orders_router
from order_ledger.api.routers.users import router as users_router
from order_ledger.db.init_db import init_db
from order_ledger.db.ledger import LedgerStore
from order_ledger.db.session import create_engine, create_sessionmaker, ping
from order_ledger.observability.logging import configure_logging, get_logger
from order_ledger.observability.middleware import RequestContextMiddleware
from order_ledger.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        # One engine/session factory per process; handlers reach it through `api.deps`.
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.ledger = LedgerStore(create_sessionmaker(engine))
        try:
            await ping(engine)
            if settings.create_schema:
                await init_db(engine)
            yield
        finally:
            # Dispose the engine to close pools/FDs gracefully.
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Order Ledger",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)
    app.include_router(health_router, tags=["health"])
    app.include_router(users_router)
    app.include_router(orders_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; transaction logic lives in `services.order_placement`.
