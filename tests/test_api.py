"""
tests.test_api

HTTP surface: status codes, response bodies and listing completeness.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy.exc import SQLAlchemyError

from order_ledger.api.deps import order_coordinator
from order_ledger.api.fields import INT64_MAX
from order_ledger.db.repositories.orders import OrderRepo
from order_ledger.db.repositories.users import UserRepo
from order_ledger.services.order_placement import OrderPlacementCoordinator


async def _create_user(client: httpx.AsyncClient, name: str, balance: int) -> str:
    r = await client.post("/users", json={"name": name, "balance": balance})
    assert r.status_code == 200
    assert r.json()["message"] == "User created successfully"
    return r.json()["user_id"]


async def _users_by_id(client: httpx.AsyncClient) -> dict[str, dict]:
    r = await client.get("/users")
    assert r.status_code == 200
    return {u["id"]: u for u in r.json()["users"]}


@pytest.mark.asyncio
async def test_place_order_flow(client: httpx.AsyncClient) -> None:
    user_id = await _create_user(client, "alice", 100)

    r = await client.post("/place_order", json={"user_id": user_id, "amount": 30})
    assert r.status_code == 200
    assert r.json() == {"message": "Order placed successfully"}

    users = await _users_by_id(client)
    assert users[user_id]["balance"] == 70

    r = await client.get("/orders")
    assert r.status_code == 200
    (order,) = r.json()["orders"]
    assert order["user_id"] == user_id
    assert order["amount"] == 30
    assert set(order) == {"id", "user_id", "amount", "datetime"}


@pytest.mark.asyncio
async def test_listing_round_trips_every_created_entity(client: httpx.AsyncClient) -> None:
    created = {}
    for i in range(5):
        created[await _create_user(client, f"user-{i}", i * 10)] = (f"user-{i}", i * 10)

    users = await _users_by_id(client)
    assert len(users) == 5
    for user_id, (name, balance) in created.items():
        assert users[user_id] == {"id": user_id, "name": name, "balance": balance}

    placed = []
    for user_id in list(created)[:3]:
        r = await client.post("/place_order", json={"user_id": user_id, "amount": 7})
        assert r.status_code == 200
        placed.append(user_id)

    orders = (await client.get("/orders")).json()["orders"]
    assert len(orders) == 3
    assert sorted(o["user_id"] for o in orders) == sorted(placed)
    assert {o["amount"] for o in orders} == {7}


@pytest.mark.asyncio
async def test_user_balance_defaults_to_zero(client: httpx.AsyncClient) -> None:
    r = await client.post("/users", json={"name": "bob"})
    assert r.status_code == 200
    user_id = r.json()["user_id"]
    assert (await _users_by_id(client))[user_id]["balance"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"user_id": "not-a-uuid", "amount": 10},
        {"user_id": str(uuid.uuid4())},
        {"amount": 10},
        {"user_id": str(uuid.uuid4()), "amount": "ten"},
    ],
)
async def test_place_order_malformed_body_is_400(client: httpx.AsyncClient, body: dict) -> None:
    r = await client.post("/place_order", json=body)
    assert r.status_code == 400
    assert isinstance(r.json()["error"], str)
    assert r.json()["error"]


@pytest.mark.asyncio
async def test_amount_beyond_int64_is_400(client: httpx.AsyncClient) -> None:
    user_id = await _create_user(client, "erin", 100)

    r = await client.post("/place_order", json={"user_id": user_id, "amount": 10**20})
    assert r.status_code == 400
    assert "amount" in r.json()["error"]

    assert (await _users_by_id(client))[user_id]["balance"] == 100
    assert (await client.get("/orders")).json()["orders"] == []


@pytest.mark.asyncio
async def test_balance_beyond_int64_is_400(client: httpx.AsyncClient) -> None:
    r = await client.post("/users", json={"name": "frank", "balance": 10**20})
    assert r.status_code == 400
    assert "balance" in r.json()["error"]
    assert (await client.get("/users")).json()["users"] == []


@pytest.mark.asyncio
async def test_int64_bounds_are_accepted(client: httpx.AsyncClient) -> None:
    user_id = await _create_user(client, "grace", INT64_MAX)

    r = await client.post("/place_order", json={"user_id": user_id, "amount": INT64_MAX})
    assert r.status_code == 200
    assert (await _users_by_id(client))[user_id]["balance"] == 0


@pytest.mark.asyncio
async def test_listed_order_datetime_carries_offset(app, client: httpx.AsyncClient) -> None:
    fixed = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)
    app.dependency_overrides[order_coordinator] = lambda: OrderPlacementCoordinator(
        store=app.state.ledger, clock=lambda: fixed
    )
    try:
        user_id = await _create_user(client, "heidi", 10)
        r = await client.post("/place_order", json={"user_id": user_id, "amount": 1})
        assert r.status_code == 200
    finally:
        app.dependency_overrides.clear()

    (order,) = (await client.get("/orders")).json()["orders"]
    placed_at = datetime.fromisoformat(order["datetime"])
    assert placed_at.utcoffset() == timedelta(0)
    assert placed_at == fixed


@pytest.mark.asyncio
async def test_invalid_json_is_400(client: httpx.AsyncClient) -> None:
    r = await client.post(
        "/users", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_create_user_missing_name_is_400(client: httpx.AsyncClient) -> None:
    r = await client.post("/users", json={"balance": 5})
    assert r.status_code == 400
    assert "name" in r.json()["error"]


@pytest.mark.asyncio
async def test_failed_transaction_is_500_with_no_partial_state(
    client: httpx.AsyncClient, monkeypatch
) -> None:
    user_id = await _create_user(client, "carol", 50)

    async def failing_create(self, *, user_id, amount, created_at):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(OrderRepo, "create", failing_create)
    r = await client.post("/place_order", json={"user_id": user_id, "amount": 20})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create order"}
    monkeypatch.undo()

    assert (await _users_by_id(client))[user_id]["balance"] == 50
    assert (await client.get("/orders")).json()["orders"] == []


@pytest.mark.asyncio
async def test_place_order_for_unknown_user_succeeds(client: httpx.AsyncClient) -> None:
    ghost = str(uuid.uuid4())

    r = await client.post("/place_order", json={"user_id": ghost, "amount": 3})
    assert r.status_code == 200

    orders = (await client.get("/orders")).json()["orders"]
    assert [o["user_id"] for o in orders] == [ghost]
    assert (await client.get("/users")).json()["users"] == []


@pytest.mark.asyncio
async def test_undecodable_user_fails_listing(client: httpx.AsyncClient, monkeypatch) -> None:
    async def corrupt_list_all(self):
        return [SimpleNamespace(id=uuid.uuid4(), name="mallory", balance="not-a-number")]

    monkeypatch.setattr(UserRepo, "list_all", corrupt_list_all)
    r = await client.get("/users")
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to decode user"}


@pytest.mark.asyncio
async def test_create_user_store_failure_is_500(client: httpx.AsyncClient, monkeypatch) -> None:
    async def failing_create(self, *, name, balance):
        raise SQLAlchemyError("constraint")

    monkeypatch.setattr(UserRepo, "create", failing_create)
    r = await client.post("/users", json={"name": "dave", "balance": 1})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create user"}
