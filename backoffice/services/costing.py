"""
Recipe food cost.

``calculate_recipe_cost`` is the single cost algorithm used by the dish cost
endpoint, per-order cost, the sales summary and the menu analyzer. It never
raises for bad ingredient data: unresolvable lines are skipped and reported
through ``missing_cost_data`` so callers can still show a partial total.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional
from uuid import UUID

from backoffice.domain.units import are_compatible, convert
from backoffice.models.inventory import InventoryItem
from backoffice.models.menu import Dish, RecipeLine

IngredientResolver = Callable[[Any], Optional[InventoryItem]]


@dataclass
class IngredientCost:
    name: str
    cost: float
    note: Optional[str] = None


@dataclass
class RecipeCost:
    price: float
    food_cost: float
    profit: float
    profit_margin: float
    missing_cost_data: bool
    breakdown: List[IngredientCost] = field(default_factory=list)


def price_per_stocking_unit(item) -> float:
    """Purchase price spread over one stocking unit of the item."""
    per_purchase_unit = item.purchase_price / item.purchase_quantity
    # Purchase units contained in one stocking unit; identity for unit -> unit
    return per_purchase_unit * convert(1, item.unit, item.purchase_unit)


def line_cost(line, item) -> Optional[float]:
    """Cost of one recipe line, or None when the ingredient cannot be priced."""
    if item is None:
        return None
    if item.purchase_price is None or item.purchase_price < 0 or not item.purchase_quantity:
        return None
    if not are_compatible(item.purchase_unit, item.unit):
        return None
    if not are_compatible(item.unit, line.unit):
        return None
    required = convert(line.quantity_required, line.unit, item.unit)
    return price_per_stocking_unit(item) * required


def calculate_recipe_cost(
    price: float,
    recipe_lines: Iterable,
    resolve_ingredient: IngredientResolver,
) -> RecipeCost:
    total = 0.0
    missing = False
    breakdown = []

    for line in recipe_lines:
        item = resolve_ingredient(line.ingredient_id) if line.ingredient_id else None
        cost = line_cost(line, item)
        if cost is None:
            missing = True
            note = "Ingredient missing" if item is None else "Missing cost data"
            breakdown.append(IngredientCost(name=line.ingredient_name, cost=0.0, note=note))
            continue
        total += cost
        breakdown.append(IngredientCost(name=line.ingredient_name, cost=cost))

    price = price or 0.0
    profit = price - total
    margin = (profit / price) * 100 if price > 0 else 0.0
    return RecipeCost(
        price=price,
        food_cost=total,
        profit=profit,
        profit_margin=margin,
        missing_cost_data=missing,
        breakdown=breakdown,
    )


async def cost_for_dish(dish: Dish, using_db=None) -> RecipeCost:
    """Loads the dish's recipe and current ingredient prices, then costs it."""
    lines = await RecipeLine.filter(dish_id=dish.id).using_db(using_db)
    ingredient_ids = list({line.ingredient_id for line in lines if line.ingredient_id})
    items = await InventoryItem.filter(id__in=ingredient_ids).using_db(using_db) if ingredient_ids else []
    item_map = {item.id: item for item in items}
    return calculate_recipe_cost(dish.price, lines, item_map.get)


async def cost_for_dish_id(dish_id: UUID, using_db=None) -> RecipeCost:
    """Like ``cost_for_dish``; a deleted dish costs nothing and is flagged."""
    dish = await Dish.get_or_none(id=dish_id).using_db(using_db)
    if dish is None:
        return RecipeCost(price=0.0, food_cost=0.0, profit=0.0, profit_margin=0.0, missing_cost_data=True)
    return await cost_for_dish(dish, using_db=using_db)
