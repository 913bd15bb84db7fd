"""
order_ledger.services.ledger_service

User creation and ledger listing.

Responsibilities:
- Create users with an initial balance (single-row write, own commit).
- List all users / orders, decoding each stored row into its view model.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from order_ledger.db.ledger import STORE_ERRORS
from order_ledger.db.repositories.orders import OrderRepo
from order_ledger.db.repositories.users import UserRepo
from order_ledger.errors import DecodeFailure, StoreUnavailable, WriteFailure
from order_ledger.observability.logging import get_logger

log = get_logger(__name__)


class UserView(BaseModel):
    id: uuid.UUID
    name: str
    balance: int


class OrderView(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    amount: int
    # Exposed as `datetime`, the persisted field name.
    placed_at: datetime = Field(serialization_alias="datetime")


class LedgerService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._orders = OrderRepo(session)

    async def create_user(self, *, name: str, balance: int) -> uuid.UUID:
        try:
            user = await self._users.create(name=name, balance=balance)
            await self._session.commit()
        except STORE_ERRORS as e:
            await self._session.rollback()
            log.warning("user_create_failed", error=str(e))
            raise WriteFailure("Failed to create user") from e
        log.info("user_created", user_id=str(user.id))
        return user.id

    async def list_users(self) -> list[UserView]:
        try:
            rows = await self._users.list_all()
        except SQLAlchemyError as e:
            raise StoreUnavailable("Failed to fetch users") from e

        try:
            return [
                UserView.model_validate({"id": u.id, "name": u.name, "balance": u.balance})
                for u in rows
            ]
        except ValidationError as e:
            log.warning("user_decode_failed", error=str(e))
            raise DecodeFailure("Failed to decode user") from e

    async def list_orders(self) -> list[OrderView]:
        try:
            rows = await self._orders.list_all()
        except SQLAlchemyError as e:
            raise StoreUnavailable("Failed to fetch orders") from e

        try:
            return [
                OrderView.model_validate(
                    {
                        "id": o.id,
                        "user_id": o.user_id,
                        "amount": o.amount,
                        "placed_at": o.created_at,
                    }
                )
                for o in rows
            ]
        except ValidationError as e:
            log.warning("order_decode_failed", error=str(e))
            raise DecodeFailure("Failed to decode order") from e


# --- Module Notes -----------------------------------------------------------
# A single undecodable row fails the whole listing; partial lists are never returned.
