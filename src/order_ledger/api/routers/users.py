"""
order_ledger.api.routers.users

User endpoints.

Responsibilities:
- Create a user with an initial balance.
- List all users.
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from order_ledger.api.deps import db_session
from order_ledger.api.fields import Int64
from order_ledger.services.ledger_service import LedgerService

router = APIRouter(tags=["users"])


class CreateUserRequest(BaseModel):
    name: str
    balance: Int64 = 0


class CreateUserResponse(BaseModel):
    message: str
    user_id: uuid.UUID


@router.post("/users", response_model=CreateUserResponse)
async def create_user(
    body: CreateUserRequest,
    session: AsyncSession = Depends(db_session),
) -> CreateUserResponse:
    user_id = await LedgerService(session).create_user(name=body.name, balance=body.balance)
    return CreateUserResponse(message="User created successfully", user_id=user_id)


@router.get("/users")
async def list_users(session: AsyncSession = Depends(db_session)) -> dict[str, Any]:
    users = await LedgerService(session).list_users()
    return {"users": [u.model_dump(mode="json") for u in users]}


# --- Module Notes -----------------------------------------------------------
# `name` is required; a missing field is a 400, not a zero-value user.
