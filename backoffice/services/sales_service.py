"""
Sales reporting over a time window.

Revenue comes from the immutable order snapshots. Profit is an approximation:
each sold dish is costed at *current* recipe and ingredient prices through the
shared cost calculator, once per distinct dish per report.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple
from uuid import UUID

from backoffice.core.clock import utc_now
from backoffice.core.errors import ValidationError
from backoffice.models.menu import Dish
from backoffice.models.order import Order
from backoffice.services.costing import RecipeCost, cost_for_dish

log = logging.getLogger(__name__)

EXCLUDED_BEST_SELLER_CATEGORY = "Drinks"


class SalesPeriod(str, Enum):
    TODAY = "today"
    LAST_7_DAYS = "last_7_days"
    THIS_MONTH = "this_month"
    THIS_YEAR = "this_year"
    CUSTOM = "custom"


@dataclass
class SalesSummary:
    period_revenue: float
    total_sales_for_period: int
    period_profit: float
    period_margin: float
    best_selling_dish: str
    best_selling_dish_count: int
    best_selling_dish_id: Optional[UUID]
    missing_cost_data: bool


def _midnight(day: date, tz) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def resolve_period(
    period: SalesPeriod,
    now: datetime,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Tuple[datetime, datetime]:
    """
    Turns a period selector into a ``[start, end)`` window.

    ``end`` is the midnight after the last included day, so the whole current
    day (or the whole custom end date) is covered.
    """
    tz = now.tzinfo
    today = now.date()
    end = _midnight(today + timedelta(days=1), tz)

    period = SalesPeriod(period)
    if period == SalesPeriod.CUSTOM:
        if not start_date or not end_date:
            raise ValidationError("Custom period requires startDate and endDate.")
        if end_date < start_date:
            raise ValidationError("endDate must not be before startDate.")
        return _midnight(start_date, tz), _midnight(end_date + timedelta(days=1), tz)

    if period == SalesPeriod.LAST_7_DAYS:
        start = _midnight(today - timedelta(days=7), tz)
    elif period == SalesPeriod.THIS_MONTH:
        start = _midnight(today.replace(day=1), tz)
    elif period == SalesPeriod.THIS_YEAR:
        start = _midnight(today.replace(month=1, day=1), tz)
    else:
        start = _midnight(today, tz)
    return start, end


async def sales_summary(
    period: SalesPeriod = SalesPeriod.TODAY,
    now: Optional[datetime] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> SalesSummary:
    start, end = resolve_period(period, now or utc_now(), start_date, end_date)
    orders = await Order.filter(created_at__gte=start, created_at__lt=end).prefetch_related("lines")

    revenue = sum(order.total_amount for order in orders)

    # dish_id -> [units sold, snapshot price, snapshot name]
    sold: Dict[UUID, list] = {}
    for order in orders:
        for line in order.lines:
            entry = sold.setdefault(line.dish_id, [0, line.price, line.dish_name])
            entry[0] += 1

    dishes = {d.id: d for d in await Dish.filter(id__in=list(sold))} if sold else {}

    # Cost each distinct dish once, then apply it to every line that sold it
    costs: Dict[UUID, RecipeCost] = {}
    missing = False
    total_cost = 0.0
    for dish_id, (count, _, _) in sold.items():
        dish = dishes.get(dish_id)
        if dish is None:
            missing = True
            continue
        costs[dish_id] = await cost_for_dish(dish)
        missing = missing or costs[dish_id].missing_cost_data
        total_cost += costs[dish_id].food_cost * count

    # Lines whose dish no longer exists have no category and are not ranked
    candidates = [
        (count, price, name, dish_id)
        for dish_id, (count, price, name) in sold.items()
        if dish_id in dishes and dishes[dish_id].category != EXCLUDED_BEST_SELLER_CATEGORY
    ]
    best = max(candidates, key=lambda c: (c[0], c[1]), default=None)

    profit = revenue - total_cost
    margin = (profit / revenue) * 100 if revenue > 0 else 0.0

    log.debug(f"Sales summary {period} [{start} .. {end}): {len(orders)} orders, revenue {revenue:.2f}")
    return SalesSummary(
        period_revenue=round(revenue, 2),
        total_sales_for_period=len(orders),
        period_profit=round(profit, 2),
        period_margin=round(margin, 2),
        best_selling_dish=best[2] if best else "N/A",
        best_selling_dish_count=best[0] if best else 0,
        best_selling_dish_id=best[3] if best else None,
        missing_cost_data=missing,
    )
