import logging
from fastapi import APIRouter, Depends, status
from backoffice.api.deps import CurrentUser, get_current_user, require_manager
from backoffice.core.errors import BackofficeError
from backoffice.schemas.response import SuccessResponse
from backoffice.services.order_service import place_order, get_order_cost
from backoffice.schemas.order import OrderRequest, OrderPlacementResponse, OrderCostResponse
from uuid import UUID

router = APIRouter()
log = logging.getLogger(__name__)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def create_order_endpoint(request_data: OrderRequest, user: CurrentUser = Depends(get_current_user)):
    """
    Records a sale. Stock is deducted in the same transaction, so a 201 means
    the order and every deduction are committed.
    """
    try:
        order = await place_order(user_id=user.id, dish_ids=request_data.dish_ids)
    except BackofficeError as e:
        log.error(f"Order rejected for user {user.id}: {e.message}")
        raise

    data = OrderPlacementResponse(
        order_id=order.id,
        order_number=order.order_number,
        total=order.total_amount,
        message="Order recorded.",
    ).to_wire()
    return SuccessResponse(data=data)


@router.get("/{order_id}/cost", response_model=SuccessResponse)
async def get_order_cost_endpoint(order_id: UUID, user: CurrentUser = Depends(require_manager)):
    """Food cost and profit of one order at current ingredient prices."""
    cost = await get_order_cost(order_id)
    data = OrderCostResponse(
        order_id=cost.order_id,
        total_amount=cost.total_amount,
        total_food_cost=cost.total_food_cost,
        total_profit=cost.total_profit,
        missing_cost_data=cost.missing_cost_data,
    ).to_wire()
    return SuccessResponse(data=data)
