"""
order_ledger.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the async engine from settings.
- Apply connection-level durability for backends without per-transaction control.
- Create the async sessionmaker with safe defaults.
- Verify the store is reachable at startup.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from order_ledger.db.ledger import Durability
from order_ledger.errors import StoreUnavailable
from order_ledger.observability.logging import get_logger
from order_ledger.settings import Settings

log = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    # pool_pre_ping helps detect stale connections in long-lived processes.
    engine = create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        _configure_sqlite(engine, durability=settings.transaction_durability)
    return engine


def _configure_sqlite(engine: AsyncEngine, *, durability: Durability) -> None:
    synchronous = "FULL" if durability is Durability.majority else "NORMAL"

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA synchronous = {synchronous}")
        cursor.close()


async def ping(engine: AsyncEngine) -> None:
    # Startup connectivity check; the service refuses to start without a reachable store.
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.error("store_unreachable", error=str(e))
        raise StoreUnavailable("Failed to connect to store") from e


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps committed rows readable after the transaction ends.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )


# --- Module Notes -----------------------------------------------------------
# The engine and sessionmaker are built once per process in the app lifespan and
# wrapped in a `LedgerStore` (see `order_ledger.api.app`).
