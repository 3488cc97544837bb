import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from backoffice.core.clock import Clock, utc_now
from backoffice.core.errors import (
    DishNotFound,
    IngredientNotFound,
    InsufficientStock,
    OrderNotFound,
    ValidationError,
)
from backoffice.domain.units import convert
from backoffice.models.inventory import InventoryItem
from backoffice.models.menu import Dish, RecipeLine
from backoffice.models.order import Order, OrderLine
from backoffice.services.costing import cost_for_dish_id
from backoffice.services.sequence import SequentialNumberAllocator

log = logging.getLogger(__name__)

# Float slack when comparing converted quantities against stock
_EPSILON = 1e-9

_default_allocator = SequentialNumberAllocator()


@dataclass
class OrderCost:
    order_id: UUID
    total_amount: float
    total_food_cost: float
    total_profit: float
    missing_cost_data: bool


async def _lock_ingredients(ingredient_ids: List[UUID], conn) -> List[InventoryItem]:
    """Row-locks the ingredients, always in id order."""
    if not ingredient_ids:
        return []
    return await InventoryItem.filter(id__in=ingredient_ids).order_by("id").using_db(conn).select_for_update()


def _parse_dish_ids(dish_ids: Sequence) -> List[UUID]:
    if not dish_ids:
        raise ValidationError("dishIds array is required.")
    parsed = []
    for raw in dish_ids:
        try:
            parsed.append(raw if isinstance(raw, UUID) else UUID(str(raw)))
        except ValueError:
            raise DishNotFound(raw)
    return parsed


async def place_order(
    user_id: str,
    dish_ids: Sequence,
    clock: Clock = utc_now,
    allocator: Optional[SequentialNumberAllocator] = None,
) -> Order:
    """
    Records a sale as one unit of work: prices the dishes, deducts the
    aggregated ingredient usage, allocates the order number and stores the
    order. Any failure rolls back every write.
    """
    requested = _parse_dish_ids(dish_ids)
    allocator = allocator or _default_allocator

    async with in_transaction() as conn:
        # 1. Load every requested dish; one missing dish aborts the sale
        unique_ids = list(dict.fromkeys(requested))
        dishes = await Dish.filter(id__in=unique_ids).using_db(conn)
        dish_map = {d.id: d for d in dishes}
        for dish_id in requested:
            if dish_id not in dish_map:
                raise DishNotFound(dish_id)

        # 2. Price snapshot per occurrence
        total = 0.0
        snapshots = []
        for position, dish_id in enumerate(requested):
            dish = dish_map[dish_id]
            total += dish.price
            snapshots.append(
                OrderLine(dish_id=dish.id, dish_name=dish.name, price=dish.price, position=position)
            )

        # 3. Lock every ingredient any of the dishes consumes
        lines = await RecipeLine.filter(dish_id__in=unique_ids).using_db(conn)
        recipes: Dict[UUID, List[RecipeLine]] = defaultdict(list)
        for line in lines:
            recipes[line.dish_id].append(line)

        ingredient_ids = list({line.ingredient_id for line in lines if line.ingredient_id})
        stock = {item.id: item for item in await _lock_ingredients(ingredient_ids, conn)}

        # Aggregate need per ingredient, in its stocking unit, across all occurrences
        needed: Dict[UUID, float] = defaultdict(float)
        for dish_id in requested:
            for line in recipes[dish_id]:
                item = stock.get(line.ingredient_id) if line.ingredient_id else None
                if item is None:
                    raise IngredientNotFound(line.ingredient_name)
                needed[item.id] += convert(line.quantity_required, line.unit, item.unit)

        # 4. Validate every ingredient before touching any of them
        for item_id, amount in needed.items():
            item = stock[item_id]
            if item.quantity + _EPSILON < amount:
                raise InsufficientStock(item.name, available=item.quantity, required=amount)

        # 5. Apply deductions, number the order and persist it
        for item_id, amount in needed.items():
            await InventoryItem.filter(id=item_id).using_db(conn).update(quantity=F("quantity") - amount)

        order_number = await allocator.next(using_db=conn)
        order = await Order.create(
            order_number=order_number,
            total_amount=total,
            sold_by=user_id,
            created_at=clock(),
            using_db=conn,
        )
        for snapshot in snapshots:
            snapshot.order_id = order.id
        await OrderLine.bulk_create(snapshots, using_db=conn)

    log.info(f"Order #{order.order_number} recorded for {user_id}: {len(requested)} item(s), total {total:.2f}")
    return order


async def get_order_by_id(order_id: UUID) -> Optional[Order]:
    """Fetches an order with its line snapshots."""
    return await Order.get_or_none(id=order_id).prefetch_related("lines")


async def get_order_cost(order_id: UUID) -> OrderCost:
    """Food cost and profit of one recorded order, at current ingredient prices."""
    order = await get_order_by_id(order_id)
    if not order:
        raise OrderNotFound(order_id)

    total_cost = 0.0
    missing = False
    for line in order.lines:
        cost = await cost_for_dish_id(line.dish_id)
        missing = missing or cost.missing_cost_data
        total_cost += cost.food_cost

    return OrderCost(
        order_id=order.id,
        total_amount=order.total_amount,
        total_food_cost=round(total_cost, 2),
        total_profit=round(order.total_amount - total_cost, 2),
        missing_cost_data=missing,
    )
