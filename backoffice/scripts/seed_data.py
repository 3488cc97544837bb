# scripts/seed_data.py
import asyncio
import logging
from datetime import timedelta
from backoffice.core.clock import utc_now
from backoffice.core.db import init_db, close_db
from backoffice.domain.units import Unit
from backoffice.models.inventory import InventoryItem
from backoffice.models.menu import Dish, RecipeLine

log = logging.getLogger(__name__)

# sku -> (name, quantity, unit, purchase_price, purchase_unit, purchase_quantity, expires_in_days)
INGREDIENTS = {
    "FLOUR-01": ("Flour", 25.0, Unit.KG, 30.0, Unit.KG, 25.0, None),
    "MOZZ-01": ("Mozzarella", 4000.0, Unit.G, 12.0, Unit.KG, 1.0, 5),
    "TOMATO-01": ("Tomato Sauce", 6.0, Unit.L, 9.0, Unit.L, 3.0, 10),
    "BASIL-01": ("Basil", 40.0, Unit.UNIT, 4.0, Unit.UNIT, 20.0, 3),
    "COLA-01": ("Cola", 96.0, Unit.UNIT, 24.0, Unit.UNIT, 24.0, None),
}

# dish name -> (category, price, [(sku, quantity, unit)])
DISHES = {
    "Margherita": ("Pizza", 12.0, [("FLOUR-01", 250, Unit.G), ("MOZZ-01", 125, Unit.G),
                                   ("TOMATO-01", 80, Unit.ML), ("BASIL-01", 3, Unit.UNIT)]),
    "Marinara": ("Pizza", 9.5, [("FLOUR-01", 250, Unit.G), ("TOMATO-01", 120, Unit.ML)]),
    "Cola": ("Drinks", 3.0, [("COLA-01", 1, Unit.UNIT)]),
}


async def seed():
    now = utc_now()
    items = {}
    for sku, (name, qty, unit, price, p_unit, p_qty, expires) in INGREDIENTS.items():
        item, created = await InventoryItem.get_or_create(sku=sku, defaults={
            "name": name, "unit": unit, "purchase_price": price, "purchase_unit": p_unit,
            "purchase_quantity": p_qty, "expires_in_days": expires,
            "date_received": now - timedelta(days=1) if expires else None,
        })
        # Reset stock on every run (idempotent)
        item.quantity = qty
        await item.save()
        items[sku] = item
        log.info(f"Ingredient {'created' if created else 'reset'}: {name} ({qty:g} {unit.value})")

    for name, (category, price, recipe) in DISHES.items():
        dish, created = await Dish.get_or_create(name=name, defaults={"category": category, "price": price})
        if created:
            for position, (sku, qty, unit) in enumerate(recipe):
                await RecipeLine.create(
                    dish=dish, ingredient=items[sku], ingredient_name=items[sku].name,
                    quantity_required=qty, unit=unit, position=position,
                )
        log.info(f"Dish {'created' if created else 'exists'}: {name} -> {dish.id}")

    log.info("Seed data ready.")

async def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    await init_db()
    await seed()
    await close_db()

if __name__ == "__main__":
    asyncio.run(main())
