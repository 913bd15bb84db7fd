"""
order_ledger.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, the ledger store and DB sessions.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from order_ledger.db.ledger import LedgerStore
from order_ledger.services.order_placement import OrderPlacementCoordinator
from order_ledger.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings the app was created with (see `create_app`), not a fresh env read.
    return request.app.state.settings  # type: ignore[attr-defined]


def ledger_store(request: Request) -> LedgerStore:
    # Built once in the app lifespan and shared by every request.
    return request.app.state.ledger  # type: ignore[attr-defined]


async def db_session(store: LedgerStore = Depends(ledger_store)) -> AsyncIterator[AsyncSession]:
    # Request-scoped session for unscoped reads/writes; commit is owned by the service layer.
    async with store.session() as session:
        yield session


def order_coordinator(
    store: LedgerStore = Depends(ledger_store),
    settings: Settings = Depends(settings_dep),
) -> OrderPlacementCoordinator:
    return OrderPlacementCoordinator(store=store, options=settings.transaction_options())


# --- Module Notes -----------------------------------------------------------
# Each request gets its own session; sessions are never shared across requests.
