from typing import Optional
import uuid

from backoffice.schemas.response import CamelModel


class SalesSummaryResponse(CamelModel):
    period_revenue: float
    total_sales_for_period: int
    period_profit: float
    period_margin: float
    best_selling_dish: str
    best_selling_dish_count: int
    best_selling_dish_id: Optional[uuid.UUID] = None
    missing_cost_data: bool = False
