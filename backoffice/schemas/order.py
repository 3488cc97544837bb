from pydantic import Field
from typing import List
import uuid

from backoffice.schemas.response import CamelModel


class OrderRequest(CamelModel):
    """Schema for the order placement request body. Each id is one unit sold."""
    dish_ids: List[uuid.UUID] = Field(default_factory=list)


class OrderPlacementResponse(CamelModel):
    """Response schema for a recorded order."""
    order_id: uuid.UUID
    order_number: int
    total: float
    message: str


class OrderCostResponse(CamelModel):
    order_id: uuid.UUID
    total_amount: float
    total_food_cost: float
    total_profit: float
    missing_cost_data: bool
