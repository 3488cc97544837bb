from typing import List, Optional
import uuid

from backoffice.schemas.response import CamelModel
from backoffice.services.costing import RecipeCost


class IngredientCostResponse(CamelModel):
    name: str
    cost: float
    msg: Optional[str] = None


class DishCostResponse(CamelModel):
    """Food cost of one dish at current ingredient prices."""
    menu_id: uuid.UUID
    name: str
    price: float
    food_cost: float
    profit: float
    profit_margin: float
    missing_cost_data: bool
    breakdown: List[IngredientCostResponse]

    @classmethod
    def from_cost(cls, dish, cost: RecipeCost) -> "DishCostResponse":
        return cls(
            menu_id=dish.id,
            name=dish.name,
            price=dish.price,
            food_cost=round(cost.food_cost, 2),
            profit=round(cost.profit, 2),
            profit_margin=round(cost.profit_margin, 2),
            missing_cost_data=cost.missing_cost_data,
            breakdown=[
                IngredientCostResponse(name=line.name, cost=round(line.cost, 2), msg=line.note)
                for line in cost.breakdown
            ],
        )
