"""
order_ledger.db.ledger

Transactional ledger store handle.

Responsibilities:
- Hold the process-wide session factory (created once at startup, shared by handlers).
- Open per-request sessions and multi-row transactions with the requested
  isolation/durability levels.
- Guarantee every transaction ends committed or aborted and every session is released.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from order_ledger.db.models import Order
from order_ledger.db.repositories.orders import OrderRepo
from order_ledger.db.repositories.users import UserRepo
from order_ledger.errors import StoreUnavailable
from order_ledger.observability.logging import get_logger

log = get_logger(__name__)


class Isolation(enum.StrEnum):
    # Reads inside the transaction see one point-in-time view of the store.
    snapshot = "SNAPSHOT"
    read_committed = "READ_COMMITTED"


class Durability(enum.StrEnum):
    # Commit is acknowledged only once replicated to a majority of replicas.
    majority = "MAJORITY"
    local = "LOCAL"


class TransactionState(enum.StrEnum):
    active = "ACTIVE"
    committed = "COMMITTED"
    aborted = "ABORTED"


@dataclass(frozen=True, slots=True)
class TransactionOptions:
    isolation: Isolation = Isolation.snapshot
    durability: Durability = Durability.majority


# PostgreSQL REPEATABLE READ is snapshot isolation: a concurrent update of the same
# row aborts the later writer. SQLite only offers SERIALIZABLE for writers.
_ISOLATION_LEVELS: dict[str, dict[Isolation, str]] = {
    "postgresql": {
        Isolation.snapshot: "REPEATABLE READ",
        Isolation.read_committed: "READ COMMITTED",
    },
    "sqlite": {
        Isolation.snapshot: "SERIALIZABLE",
        Isolation.read_committed: "SERIALIZABLE",
    },
}

# Transaction-scoped durability. SQLite durability is a connection pragma (see db.session).
_DURABILITY_STATEMENTS: dict[str, dict[Durability, str]] = {
    "postgresql": {
        Durability.majority: "SET LOCAL synchronous_commit TO remote_apply",
        Durability.local: "SET LOCAL synchronous_commit TO local",
    },
}


# Errors a store call can raise for bad input or a failed statement. Drivers raise
# OverflowError (not a DBAPI error) for integers that do not fit a 64-bit column.
STORE_ERRORS: tuple[type[Exception], ...] = (SQLAlchemyError, OverflowError)


def isolation_level_for(dialect: str, isolation: Isolation) -> str:
    levels = _ISOLATION_LEVELS.get(dialect)
    if levels is None:
        raise ValueError(f"unsupported dialect for ledger transactions: {dialect}")
    return levels[isolation]


def durability_statement_for(dialect: str, durability: Durability) -> str | None:
    return _DURABILITY_STATEMENTS.get(dialect, {}).get(durability)


class LedgerTransaction:
    """
    Operations scoped to one active transaction.

    Nothing issued here is visible to other sessions until `commit()`; `abort()`
    rolls everything back. Both are terminal.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._orders = OrderRepo(session)
        self.state = TransactionState.active

    def _require_active(self) -> None:
        if self.state is not TransactionState.active:
            raise RuntimeError(f"transaction is {self.state.value.lower()}")

    async def increment(self, user_id: uuid.UUID, delta: int) -> int:
        """Atomically add `delta` to the user's balance; returns the matched row count."""
        self._require_active()
        return await self._users.adjust_balance(user_id, delta)

    async def insert(self, *, user_id: uuid.UUID, amount: int, created_at: datetime) -> Order:
        self._require_active()
        return await self._orders.create(user_id=user_id, amount=amount, created_at=created_at)

    async def commit(self) -> None:
        self._require_active()
        await self._session.commit()
        # Only reached on success; a failed commit leaves the transaction active for abort.
        self.state = TransactionState.committed
        log.debug("transaction_committed")

    async def abort(self) -> None:
        if self.state is not TransactionState.active:
            return
        self.state = TransactionState.aborted
        await self._session.rollback()
        log.debug("transaction_aborted")


class LedgerStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        # Unscoped session for listing and single-row writes.
        async with self._session_factory() as session:
            yield session

    @asynccontextmanager
    async def transaction(
        self, options: TransactionOptions = TransactionOptions()
    ) -> AsyncIterator[LedgerTransaction]:
        """
        Scoped transaction guard.

        Aborts unless the body committed, then releases the session on every exit
        path (including cancellation and unexpected errors).
        """

        async with self._session_factory() as session:
            dialect = session.bind.dialect.name
            await self._open(session, dialect, options)
            await self._begin(session, dialect, options)

            txn = LedgerTransaction(session)
            try:
                yield txn
            finally:
                if txn.state is TransactionState.active:
                    await self._abort(txn)

    async def _open(self, session: AsyncSession, dialect: str, options: TransactionOptions) -> None:
        level = isolation_level_for(dialect, options.isolation)
        try:
            # Acquires the pooled connection; isolation must be set before any statement runs.
            await session.connection(execution_options={"isolation_level": level})
        except SQLAlchemyError as e:
            log.warning("session_open_failed", error=str(e))
            raise StoreUnavailable("Failed to start session") from e

    async def _begin(self, session: AsyncSession, dialect: str, options: TransactionOptions) -> None:
        statement = durability_statement_for(dialect, options.durability)
        try:
            if statement is not None:
                await session.execute(text(statement))
        except SQLAlchemyError as e:
            log.warning("transaction_begin_failed", error=str(e))
            raise StoreUnavailable("Failed to start transaction") from e
        log.debug(
            "transaction_started",
            isolation=options.isolation.value,
            durability=options.durability.value,
        )

    async def _abort(self, txn: LedgerTransaction) -> None:
        try:
            await txn.abort()
        except SQLAlchemyError:
            # Session close still discards the connection's transaction; keep the original error.
            log.warning("transaction_abort_failed", exc_info=True)


# --- Module Notes -----------------------------------------------------------
# All cross-request coordination is delegated to the database's transaction manager;
# this module holds no shared mutable state beyond the session factory.
