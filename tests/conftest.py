"""
tests.conftest

Shared fixtures: a throwaway SQLite ledger per test, the store handle, and an
ASGI client bound to an app whose lifespan is driven explicitly.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from order_ledger.api.app import create_app
from order_ledger.db.init_db import init_db
from order_ledger.db.ledger import LedgerStore
from order_ledger.db.models import Order, User
from order_ledger.db.session import create_engine, create_sessionmaker
from order_ledger.services.ledger_service import LedgerService
from order_ledger.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def store(engine: AsyncEngine) -> LedgerStore:
    return LedgerStore(create_sessionmaker(engine))


@pytest.fixture
def make_user(store: LedgerStore) -> Callable[..., Awaitable[uuid.UUID]]:
    async def _make(name: str = "alice", balance: int = 100) -> uuid.UUID:
        async with store.session() as session:
            return await LedgerService(session).create_user(name=name, balance=balance)

    return _make


@pytest.fixture
def read_balance(store: LedgerStore) -> Callable[[uuid.UUID], Awaitable[int | None]]:
    async def _read(user_id: uuid.UUID) -> int | None:
        async with store.session() as session:
            user = await session.get(User, user_id)
            return None if user is None else user.balance

    return _read


@pytest.fixture
def read_orders(store: LedgerStore) -> Callable[..., Awaitable[list[Order]]]:
    async def _read(user_id: uuid.UUID | None = None) -> list[Order]:
        async with store.session() as session:
            stmt = select(Order).order_by(Order.created_at)
            if user_id is not None:
                stmt = stmt.where(Order.user_id == user_id)
            return list((await session.execute(stmt)).scalars().all())

    return _read


@pytest_asyncio.fixture
async def app(settings: Settings) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings)
    # httpx ASGITransport does not manage lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
