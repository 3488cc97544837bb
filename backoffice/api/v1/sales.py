from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from backoffice.api.deps import CurrentUser, require_manager
from backoffice.schemas.response import SuccessResponse
from backoffice.schemas.sales import SalesSummaryResponse
from backoffice.services.sales_service import SalesPeriod, sales_summary

router = APIRouter()


@router.get("/summary", response_model=SuccessResponse)
async def get_sales_summary(
    period: SalesPeriod = Query(SalesPeriod.TODAY),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    user: CurrentUser = Depends(require_manager),
):
    """Revenue, order count, profit, margin and best seller for a period."""
    summary = await sales_summary(period, start_date=start_date, end_date=end_date)
    data = SalesSummaryResponse(
        period_revenue=summary.period_revenue,
        total_sales_for_period=summary.total_sales_for_period,
        period_profit=summary.period_profit,
        period_margin=summary.period_margin,
        best_selling_dish=summary.best_selling_dish,
        best_selling_dish_count=summary.best_selling_dish_count,
        best_selling_dish_id=summary.best_selling_dish_id,
        missing_cost_data=summary.missing_cost_data,
    ).to_wire()
    return SuccessResponse(data=data)
