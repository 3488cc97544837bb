from fastapi import APIRouter, Depends
from backoffice.api.deps import CurrentUser, require_manager
from backoffice.core.errors import DishNotFound
from backoffice.models.menu import Dish
from backoffice.schemas.cost import DishCostResponse
from backoffice.schemas.response import SuccessResponse
from backoffice.services.costing import cost_for_dish
from uuid import UUID

router = APIRouter()


@router.get("/{dish_id}/cost", response_model=SuccessResponse)
async def get_dish_cost(dish_id: UUID, user: CurrentUser = Depends(require_manager)):
    """Calculated food cost, profit and margin for one dish."""
    dish = await Dish.get_or_none(id=dish_id)
    if not dish:
        raise DishNotFound(dish_id)

    cost = await cost_for_dish(dish)
    return SuccessResponse(data=DishCostResponse.from_cost(dish, cost).to_wire())
