"""
order_ledger.api.routers.orders

Order endpoints.

Responsibilities:
- Place an order (delegates the whole transaction to the coordinator).
- List all orders.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from order_ledger.api.deps import db_session, order_coordinator
from order_ledger.api.fields import Int64
from order_ledger.services.ledger_service import LedgerService
from order_ledger.services.order_placement import OrderPlacementCoordinator

router = APIRouter(tags=["orders"])


class PlaceOrderRequest(BaseModel):
    user_id: uuid.UUID
    # Any 64-bit integer is accepted; sign and funds are not checked.
    amount: Int64


@router.post("/place_order")
async def place_order(
    body: PlaceOrderRequest,
    coordinator: OrderPlacementCoordinator = Depends(order_coordinator),
) -> dict[str, str]:
    # Failures surface as LedgerError and are mapped to 500 by `api.errors`.
    await coordinator.place_order(user_id=body.user_id, amount=body.amount)
    return {"message": "Order placed successfully"}


@router.get("/orders")
async def list_orders(session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    orders = await LedgerService(session).list_orders()
    return {"orders": [o.model_dump(mode="json", by_alias=True) for o in orders]}


# --- Module Notes -----------------------------------------------------------
# The success body is a confirmation only; the created order is visible via GET /orders.
