"""
order_ledger.services.order_placement

Order placement coordinator (transaction owner).

Responsibilities:
- Run one ledger transaction per order request: debit the user's balance,
  insert the order, then commit, or abort as a unit.
- Translate store failures at each step into `TransactionFailure`.
- Track and log the placement state machine.

Known gaps, reproduced as observed behavior:
- The debit is unconditional: no sufficient-funds check and no user existence
  check (a missing user matches zero rows and the order is still inserted).
- No retries: a write conflict under snapshot isolation aborts and is surfaced.
- No idempotency: identical requests produce independent debits and orders.
"""

from __future__ import annotations

import enum
import uuid
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from order_ledger.db.ledger import STORE_ERRORS, LedgerStore, TransactionOptions
from order_ledger.errors import LedgerError, TransactionFailure
from order_ledger.observability.logging import get_logger

log = get_logger(__name__)


class PlacementState(enum.StrEnum):
    idle = "IDLE"
    session_open = "SESSION_OPEN"
    transaction_active = "TRANSACTION_ACTIVE"
    debit_applied = "DEBIT_APPLIED"
    order_inserted = "ORDER_INSERTED"
    committed = "COMMITTED"
    aborted = "ABORTED"


class PlacementStep(enum.StrEnum):
    debit = "DEBIT"
    insert = "INSERT"
    commit = "COMMIT"


_STEP_FAILURE_MESSAGES: dict[PlacementStep, str] = {
    PlacementStep.debit: "Failed to update user balance",
    PlacementStep.insert: "Failed to create order",
    PlacementStep.commit: "Failed to commit transaction",
}


@dataclass(frozen=True, slots=True)
class PlacementResult:
    order_id: uuid.UUID
    user_id: uuid.UUID
    amount: int
    matched_users: int
    placed_at: datetime
    state: PlacementState


def _utcnow() -> datetime:
    return datetime.now(UTC)


class _Placement:
    # Per-call state tracker; never shared between concurrent placements.
    def __init__(self, *, user_id: uuid.UUID, amount: int) -> None:
        self._log = log.bind(user_id=str(user_id), amount=amount)
        self.state = PlacementState.idle

    def advance(self, state: PlacementState) -> None:
        self._log.debug("placement_transition", from_state=self.state.value, to_state=state.value)
        self.state = state

    @asynccontextmanager
    async def step(self, step: PlacementStep) -> AsyncIterator[None]:
        try:
            yield
        except STORE_ERRORS as e:
            self._log.warning("placement_step_failed", step=step.value, error=str(e))
            raise TransactionFailure(_STEP_FAILURE_MESSAGES[step], step=step.value) from e


class OrderPlacementCoordinator:
    def __init__(
        self,
        *,
        store: LedgerStore,
        options: TransactionOptions | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._options = options or TransactionOptions()
        self._clock = clock

    async def place_order(self, *, user_id: uuid.UUID, amount: int) -> PlacementResult:
        placement = _Placement(user_id=user_id, amount=amount)
        try:
            async with self._store.transaction(self._options) as txn:
                placement.advance(PlacementState.session_open)
                placement.advance(PlacementState.transaction_active)

                async with placement.step(PlacementStep.debit):
                    matched = await txn.increment(user_id, -amount)
                if matched == 0:
                    log.warning("debit_matched_no_user", user_id=str(user_id), amount=amount)
                placement.advance(PlacementState.debit_applied)

                async with placement.step(PlacementStep.insert):
                    order = await txn.insert(
                        user_id=user_id, amount=amount, created_at=self._clock()
                    )
                placement.advance(PlacementState.order_inserted)

                async with placement.step(PlacementStep.commit):
                    await txn.commit()
                placement.advance(PlacementState.committed)
        except LedgerError as e:
            # The transaction guard has already aborted and released the session here.
            log.warning(
                "order_placement_aborted",
                user_id=str(user_id),
                amount=amount,
                last_state=placement.state.value,
                error=e.message,
            )
            placement.advance(PlacementState.aborted)
            raise
        except BaseException:
            placement.advance(PlacementState.aborted)
            raise

        log.info(
            "order_placed",
            order_id=str(order.id),
            user_id=str(user_id),
            amount=amount,
            matched_users=matched,
        )
        return PlacementResult(
            order_id=order.id,
            user_id=user_id,
            amount=amount,
            matched_users=matched,
            placed_at=order.created_at,
            state=placement.state,
        )


# --- Module Notes -----------------------------------------------------------
# Concurrent placements for the same user are not serialized here; the store's
# conflict detection decides whether the second writer waits or aborts.
