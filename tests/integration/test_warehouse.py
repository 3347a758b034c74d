"""Warehouse items, stock movements and derived status."""

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import WarehouseItemFactory

pytestmark = pytest.mark.integration


async def _move(client: AsyncClient, headers: dict, item_id, type_: str, quantity: int) -> dict:
    response = await client.post(
        f"/api/v1/warehouse/{item_id}/transactions",
        json={"type": type_, "quantity": quantity},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_stock_movements_update_quantity_and_status(
    client: AsyncClient, admin_headers: dict, admin_user
):
    response = await client.post(
        "/api/v1/warehouse",
        json={"name": "Oak board", "category": "materials", "quantity": 100, "min_stock": 50},
        headers=admin_headers,
    )
    assert response.status_code == 201
    item = response.json()
    assert item["status"] == "normal"
    assert "reserved_quantity" not in item

    transaction = await _move(client, admin_headers, item["id"], "in", 50)
    assert transaction["user_id"] == str(admin_user.id)
    item = (await client.get(f"/api/v1/warehouse/{item['id']}", headers=admin_headers)).json()
    assert Decimal(item["quantity"]) == Decimal(150)
    assert item["status"] == "normal"

    await _move(client, admin_headers, item["id"], "out", 130)
    item = (await client.get(f"/api/v1/warehouse/{item['id']}", headers=admin_headers)).json()
    assert Decimal(item["quantity"]) == Decimal(20)
    assert item["status"] == "low"

    history = (
        await client.get(f"/api/v1/warehouse/{item['id']}/transactions", headers=admin_headers)
    ).json()
    assert len(history) == 2
    assert {t["type"] for t in history} == {"in", "out"}


async def test_zero_stock_is_critical_and_negative_allowed(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    item = WarehouseItemFactory.build(quantity=Decimal(10), min_stock=Decimal(5))
    db_session.add(item)
    await db_session.commit()

    await _move(client, admin_headers, item.id, "out", 10)
    body = (await client.get(f"/api/v1/warehouse/{item.id}", headers=admin_headers)).json()
    assert body["status"] == "critical"

    await _move(client, admin_headers, item.id, "out", 3)
    body = (await client.get(f"/api/v1/warehouse/{item.id}", headers=admin_headers)).json()
    assert Decimal(body["quantity"]) == Decimal(-3)
    assert body["status"] == "low"


async def test_status_cannot_be_set_directly(client: AsyncClient, admin_headers: dict):
    response = await client.post(
        "/api/v1/warehouse",
        json={"name": "Hinge", "quantity": 0, "status": "normal"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    item = response.json()
    assert item["status"] == "critical"

    response = await client.put(
        f"/api/v1/warehouse/{item['id']}",
        json={"status": "normal", "quantity": 500, "min_stock": 100},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == "normal"

    response = await client.put(
        f"/api/v1/warehouse/{item['id']}", json={"min_stock": 1000}, headers=admin_headers
    )
    assert response.json()["status"] == "low"


async def test_transaction_quantity_must_be_positive(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    item = WarehouseItemFactory.build()
    db_session.add(item)
    await db_session.commit()

    response = await client.post(
        f"/api/v1/warehouse/{item.id}/transactions",
        json={"type": "in", "quantity": 0},
        headers=admin_headers,
    )
    assert response.status_code == 422
    assert "request_id" in response.json()


async def test_list_filters(client: AsyncClient, db_session: AsyncSession, admin_headers: dict):
    db_session.add_all(
        [
            WarehouseItemFactory.build(name="Board", category="materials", status="normal"),
            WarehouseItemFactory.build(name="Glue", category="consumables", status="low"),
            WarehouseItemFactory.build(name="Screws", category="hardware", status="critical"),
        ]
    )
    await db_session.commit()

    response = await client.get("/api/v1/warehouse", params={"status": "low"}, headers=admin_headers)
    assert [i["name"] for i in response.json()["items"]] == ["Glue"]

    response = await client.get(
        "/api/v1/warehouse", params={"category": "hardware"}, headers=admin_headers
    )
    assert [i["name"] for i in response.json()["items"]] == ["Screws"]

    response = await client.get("/api/v1/warehouse", params={"limit": 2}, headers=admin_headers)
    page = response.json()
    assert len(page["items"]) == 2
    assert page["has_more"] is True
    assert page["next_cursor"]


async def test_delete_item_removes_history(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    item = WarehouseItemFactory.build()
    db_session.add(item)
    await db_session.commit()
    await _move(client, admin_headers, item.id, "in", 5)

    response = await client.delete(f"/api/v1/warehouse/{item.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await client.get(f"/api/v1/warehouse/{item.id}", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == f"Warehouse item {item.id} not found"


async def test_viewer_cannot_create_or_move_stock(
    client: AsyncClient, db_session: AsyncSession, viewer_headers: dict
):
    response = await client.post("/api/v1/warehouse", json={"name": "Glue"}, headers=viewer_headers)
    assert response.status_code == 403
    body = response.json()
    assert body["detail"] == "Permission denied: create on warehouse"
    assert body["request_id"]

    item = WarehouseItemFactory.build()
    db_session.add(item)
    await db_session.commit()

    response = await client.get(f"/api/v1/warehouse/{item.id}", headers=viewer_headers)
    assert response.status_code == 200

    response = await client.post(
        f"/api/v1/warehouse/{item.id}/transactions",
        json={"type": "out", "quantity": 1},
        headers=viewer_headers,
    )
    assert response.status_code == 403
