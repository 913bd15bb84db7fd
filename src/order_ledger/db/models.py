"""
order_ledger.db.models

Persistence schema for the ledger.

Responsibilities:
- Define ORM models for the two collections:
  - User: named entity with a mutable integer balance
  - Order: immutable, append-only record of a placed order
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import BigInteger, DateTime, String, TypeDecorator, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from order_ledger.db.base import Base


class UTCDateTime(TypeDecorator[datetime]):
    """
    Timezone-aware UTC timestamps on every backend.

    SQLite drops the offset on storage; values are normalized to UTC on write and
    naive values read back are tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        return _as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        return _as_utc(value)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    # Naive values are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    # No floor: order placement debits unconditionally and may drive this negative.
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Plain reference, not a foreign key: an order may name a user that does not exist.
    user_id: Mapped[uuid.UUID] = mapped_column(SAUuid(as_uuid=True), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        "datetime", UTCDateTime(), nullable=False
    )


# --- Module Notes -----------------------------------------------------------
# Orders are never updated or deleted; users are only mutated by the balance debit
# issued inside an order-placement transaction.
