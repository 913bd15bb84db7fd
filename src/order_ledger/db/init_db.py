"""
order_ledger.db.init_db

Schema bootstrap helper.

Responsibilities:
- Create the `users` and `orders` tables when they don't exist.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from order_ledger.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from order_ledger.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    # Use a transactional DDL block when supported by the backend.
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Gated by `Settings.create_schema`; there is no migration workflow.
