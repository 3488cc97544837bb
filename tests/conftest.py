"""
Test fixtures - in-memory SQLite database, HTTP client and small data factories
"""
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from tortoise import Tortoise

from backoffice.core.db import MODELS_MODULES
from backoffice.domain.units import Unit
from backoffice.models.inventory import InventoryItem
from backoffice.models.menu import Dish, RecipeLine

FIXED_NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)

MANAGER = {"X-User-Id": "manager-1", "X-User-Role": "manager"}
STAFF = {"X-User-Id": "staff-1", "X-User-Role": "staff"}


@pytest_asyncio.fixture()
async def db():
    """Fresh in-memory database with all tables for each test"""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": MODELS_MODULES},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture()
async def client(db):
    """httpx AsyncClient bound to the FastAPI app (lifespan not run, the db fixture owns the ORM)"""
    from backoffice.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


async def make_ingredient(name, quantity, unit=Unit.G, price=0.0, purchase_unit=None,
                          purchase_quantity=1.0, **extra):
    return await InventoryItem.create(
        name=name,
        sku=f"SKU-{name.upper().replace(' ', '-')}",
        quantity=quantity,
        unit=unit,
        purchase_price=price,
        purchase_unit=purchase_unit or unit,
        purchase_quantity=purchase_quantity,
        **extra,
    )


async def make_dish(name, price, recipe=(), category="Mains"):
    """``recipe`` is a sequence of (ingredient, quantity, unit)."""
    dish = await Dish.create(name=name, price=price, category=category)
    for position, (ingredient, quantity, unit) in enumerate(recipe):
        await RecipeLine.create(
            dish=dish,
            ingredient=ingredient,
            ingredient_name=ingredient.name,
            quantity_required=quantity,
            unit=unit,
            position=position,
        )
    return dish
