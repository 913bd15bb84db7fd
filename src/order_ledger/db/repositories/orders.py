"""
order_ledger.db.repositories.orders

Repository for `Order` entities.

Responsibilities:
- Append orders inside the caller's transaction.
- Fetch all orders for listing.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from order_ledger.db.models import Order


class OrderRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, user_id: uuid.UUID, amount: int, created_at: datetime) -> Order:
        # Orders are append-only (no update/delete).
        order = Order(user_id=user_id, amount=amount, created_at=created_at)
        self._session.add(order)
        await self._session.flush()
        return order

    async def list_all(self) -> list[Order]:
        stmt = select(Order).order_by(Order.created_at)
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# `create` is only called from an order-placement transaction; nothing commits here.
