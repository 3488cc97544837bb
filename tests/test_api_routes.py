import logging
import pytest
from uuid import uuid4

from backoffice.domain.units import Unit
from backoffice.models.inventory import InventoryItem

from conftest import MANAGER, STAFF, make_dish, make_ingredient


class TestOrderRoutes:
    @pytest.mark.asyncio
    async def test_place_order(self, client):
        beef = await make_ingredient("Beef", 2, unit=Unit.KG, price=10.0)
        burger = await make_dish("Burger", 16.0, [(beef, 500, Unit.G)])

        response = await client.post("/api/v1/orders/", json={"dishIds": [str(burger.id)]}, headers=STAFF)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["total"] == 16.0
        assert body["data"]["message"] == "Order recorded."
        assert isinstance(body["data"]["orderNumber"], int)
        item = await InventoryItem.get(id=beef.id)
        assert item.quantity == pytest.approx(1.5)

    @pytest.mark.asyncio
    async def test_successful_order_logs_once(self, client, caplog):
        water = await make_ingredient("Water", 10, unit=Unit.UNIT)
        dish = await make_dish("Water", 1.0, [(water, 1, Unit.UNIT)])
        caplog.set_level(logging.INFO)

        response = await client.post("/api/v1/orders/", json={"dishIds": [str(dish.id)]}, headers=STAFF)

        order_number = response.json()["data"]["orderNumber"]
        order_logs = [
            r for r in caplog.records
            if r.name.startswith("backoffice") and r.levelno == logging.INFO and str(order_number) in r.getMessage()
        ]
        assert len(order_logs) == 1

    @pytest.mark.asyncio
    async def test_empty_order(self, client):
        response = await client.post("/api/v1/orders/", json={"dishIds": []}, headers=STAFF)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_insufficient_stock(self, client):
        beef = await make_ingredient("Beef", 0.2, unit=Unit.KG, price=10.0)
        burger = await make_dish("Burger", 16.0, [(beef, 500, Unit.G)])

        response = await client.post("/api/v1/orders/", json={"dishIds": [str(burger.id)]}, headers=STAFF)

        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "insufficient_stock"
        assert error["details"]["ingredient"] == "Beef"

    @pytest.mark.asyncio
    async def test_unknown_dish(self, client):
        response = await client.post("/api/v1/orders/", json={"dishIds": [str(uuid4())]}, headers=STAFF)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_caller_identity_required(self, client):
        response = await client.post("/api/v1/orders/", json={"dishIds": [str(uuid4())]})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_order_cost_requires_manager(self, client):
        beef = await make_ingredient("Beef", 2, unit=Unit.KG, price=10.0)
        burger = await make_dish("Burger", 16.0, [(beef, 500, Unit.G)])
        placed = await client.post("/api/v1/orders/", json={"dishIds": [str(burger.id)]}, headers=STAFF)
        order_id = placed.json()["data"]["orderId"]

        denied = await client.get(f"/api/v1/orders/{order_id}/cost", headers=STAFF)
        response = await client.get(f"/api/v1/orders/{order_id}/cost", headers=MANAGER)

        assert denied.status_code == 403
        assert response.status_code == 200
        assert response.json()["data"]["totalFoodCost"] == 5.0
        assert response.json()["data"]["totalProfit"] == 11.0


class TestMenuRoutes:
    @pytest.mark.asyncio
    async def test_dish_cost(self, client):
        beef = await make_ingredient("Beef", 2, unit=Unit.KG, price=10.0)
        burger = await make_dish("Burger", 16.0, [(beef, 500, Unit.G)])

        response = await client.get(f"/api/v1/menu/{burger.id}/cost", headers=MANAGER)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["menuId"] == str(burger.id)
        assert data["foodCost"] == 5.0
        assert data["profitMargin"] == 68.75
        assert data["missingCostData"] is False
        assert data["breakdown"] == [{"name": "Beef", "cost": 5.0, "msg": None}]

    @pytest.mark.asyncio
    async def test_dish_not_found(self, client):
        response = await client.get(f"/api/v1/menu/{uuid4()}/cost", headers=MANAGER)
        assert response.status_code == 404


class TestSalesRoutes:
    @pytest.mark.asyncio
    async def test_summary_today(self, client):
        beef = await make_ingredient("Beef", 2, unit=Unit.KG, price=10.0)
        burger = await make_dish("Burger", 16.0, [(beef, 500, Unit.G)])
        await client.post("/api/v1/orders/", json={"dishIds": [str(burger.id)]}, headers=STAFF)

        response = await client.get("/api/v1/sales/summary", params={"period": "today"}, headers=MANAGER)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["periodRevenue"] == 16.0
        assert data["totalSalesForPeriod"] == 1
        assert data["bestSellingDish"] == "Burger"

    @pytest.mark.asyncio
    async def test_custom_without_dates(self, client):
        response = await client.get("/api/v1/sales/summary", params={"period": "custom"}, headers=MANAGER)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_staff_denied(self, client):
        response = await client.get("/api/v1/sales/summary", headers=STAFF)
        assert response.status_code == 403


class TestWasteRoutes:
    @pytest.mark.asyncio
    async def test_log_waste(self, client):
        milk = await make_ingredient("Milk", 5, unit=Unit.L)

        response = await client.post(
            "/api/v1/waste/",
            json={"inventoryItemId": str(milk.id), "quantity": 2, "reason": "Expired"},
            headers=MANAGER,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["itemName"] == "Milk"
        assert data["unit"] == "l"
        assert data["loggedBy"] == "manager-1"

    @pytest.mark.asyncio
    async def test_non_positive_quantity(self, client):
        response = await client.post(
            "/api/v1/waste/", json={"inventoryItemId": str(uuid4()), "quantity": 0}, headers=MANAGER
        )
        assert response.status_code == 422


class TestNotificationRoutes:
    @pytest.mark.asyncio
    async def test_read_and_delete_flow(self, client):
        from backoffice.models.notification import NotificationType
        from backoffice.services.notification_service import NotificationDispatcher

        dispatcher = NotificationDispatcher()
        mine = await dispatcher.create(NotificationType.SHIFT_UPDATE, "Shift", "m", target_id="staff-1")
        theirs = await dispatcher.create(NotificationType.SHIFT_UPDATE, "Shift", "m", target_id="someone-else")

        listed = await client.get("/api/v1/notifications/my", headers=STAFF)
        assert [n["id"] for n in listed.json()["data"]] == [str(mine.id)]

        read = await client.put(f"/api/v1/notifications/{mine.id}/read", headers=STAFF)
        assert read.json()["data"]["status"] == "read"

        forbidden = await client.put(f"/api/v1/notifications/{theirs.id}/read", headers=STAFF)
        assert forbidden.status_code == 403

        deleted = await client.delete(f"/api/v1/notifications/{mine.id}", headers=STAFF)
        assert deleted.status_code == 200
        missing = await client.put(f"/api/v1/notifications/{mine.id}/read", headers=STAFF)
        assert missing.status_code == 404
