"""
order_ledger.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Create users with an initial balance.
- Apply atomic balance adjustments inside the caller's transaction.
- Fetch all users for listing.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from order_ledger.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, name: str, balance: int) -> User:
        user = User(name=name, balance=balance)
        self._session.add(user)
        await self._session.flush()
        return user

    async def adjust_balance(self, user_id: uuid.UUID, delta: int) -> int:
        """
        Single-statement `balance = balance + delta`; returns the matched row count.
        A missing user matches zero rows and is not an error.
        """

        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + delta)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def list_all(self) -> list[User]:
        return list((await self._session.execute(select(User))).scalars().all())


# --- Module Notes -----------------------------------------------------------
# `adjust_balance` never reads the balance first; the store applies the increment
# atomically against concurrent writers.
