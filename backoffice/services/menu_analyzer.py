"""
Inventory and menu analysis behind the daily operations brief.

Each run scans dishes against current stock (which dishes cannot be made,
which are running low), flags expiring and surplus ingredients, ranks the
dishes that would use them up by profit margin, and asks the advisory service
to turn all of that into a short brief. At most one brief is broadcast per
rolling 24 hours.
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from operator import attrgetter
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from backoffice.core.clock import Clock, utc_now
from backoffice.core.config import (
    EXPIRY_WINDOW_DAYS,
    HIGH_STOCK_THRESHOLD,
    LOW_STOCK_THRESHOLD,
    TOP_SUGGESTIONS,
)
from backoffice.core.errors import IncompatibleUnits
from backoffice.domain.units import convert
from backoffice.models.inventory import InventoryItem
from backoffice.models.menu import Dish, RecipeLine
from backoffice.models.notification import Notification, NotificationType
from backoffice.services.advisory_client import AdvisoryClient
from backoffice.services.costing import calculate_recipe_cost
from backoffice.services.notification_service import NotificationDispatcher

log = logging.getLogger(__name__)

BRIEF_TITLE = "Daily Operations & Profit Brief"
BRIEF_WINDOW = timedelta(hours=24)

SYSTEM_PROMPT = """You are an expert restaurant manager AI. Write a concise daily brief (under 100 words).
1. Prioritize URGENT "CANNOT MAKE" items.
2. List "LOW STOCK" items.
3. Suggest high-profit specials for "EXPIRING" or "SURPLUS" inventory.
No markdown. Professional tone."""

_EPSILON = 1e-9


class AnalysisOutcome(str, Enum):
    NO_ALERTS = "no_alerts"
    ALREADY_SENT = "already_sent"
    NOTIFIED = "notified"


@dataclass
class CannotMakeDish:
    dish: str
    reason: str


@dataclass
class LowStockDish:
    dish: str
    ingredient: str
    servings: int


@dataclass
class ExpiringItem:
    id: UUID
    name: str
    days_remaining: int


@dataclass
class SurplusItem:
    id: UUID
    name: str
    quantity: float
    unit: str


@dataclass
class DishSuggestion:
    dish: str
    profit_margin: float


@dataclass
class AnalysisReport:
    cannot_make: List[CannotMakeDish] = field(default_factory=list)
    low_stock: List[LowStockDish] = field(default_factory=list)
    expiring: List[ExpiringItem] = field(default_factory=list)
    surplus: List[SurplusItem] = field(default_factory=list)
    expiring_suggestions: List[DishSuggestion] = field(default_factory=list)
    surplus_suggestions: List[DishSuggestion] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.cannot_make or self.low_stock or self.expiring or self.surplus)


@dataclass
class AnalysisRun:
    outcome: AnalysisOutcome
    report: AnalysisReport
    notification: Optional[Notification] = None


def _join(entries: Iterable[str]) -> str:
    return ", ".join(entries) or "None"


def build_user_prompt(report: AnalysisReport) -> str:
    return "\n".join([
        "Report Data:",
        f"- CANNOT MAKE: {_join(f'{d.dish} ({d.reason})' for d in report.cannot_make)}",
        f"- LOW STOCK: {_join(f'{d.dish} (only {d.servings} left, limited by {d.ingredient})' for d in report.low_stock)}",
        f"- EXPIRING: {_join(f'{i.name} ({i.days_remaining}d)' for i in report.expiring)}",
        f"- PROFITABLE EXPIRING DISHES: {_join(f'{s.dish} ({s.profit_margin:.0f}%)' for s in report.expiring_suggestions)}",
        f"- SURPLUS: {_join(f'{i.name} ({i.quantity:g} {i.unit})' for i in report.surplus)}",
        f"- PROFITABLE SURPLUS DISHES: {_join(f'{s.dish} ({s.profit_margin:.0f}%)' for s in report.surplus_suggestions)}",
    ])


class InventoryMenuAnalyzer:
    def __init__(
        self,
        advisory: AdvisoryClient,
        notifications: NotificationDispatcher,
        clock: Clock = utc_now,
        low_stock_threshold: int = LOW_STOCK_THRESHOLD,
        high_stock_threshold: float = HIGH_STOCK_THRESHOLD,
        expiry_window_days: int = EXPIRY_WINDOW_DAYS,
        top_suggestions: int = TOP_SUGGESTIONS,
    ):
        self.advisory = advisory
        self.notifications = notifications
        self.clock = clock
        self.low_stock_threshold = low_stock_threshold
        self.high_stock_threshold = high_stock_threshold
        self.expiry_window_days = expiry_window_days
        self.top_suggestions = top_suggestions

    # --- Pure analysis ---

    def classify_dish(self, dish: Dish, lines: List[RecipeLine], stock: Dict[UUID, InventoryItem]):
        """
        Returns a CannotMakeDish, a LowStockDish or None (fine).

        Ingredients are checked in recipe order and the first one that blocks
        the dish supplies the reason.
        """
        min_servings = math.inf
        scarcest = None

        for line in lines:
            item = stock.get(line.ingredient_id) if line.ingredient_id else None
            if item is None:
                return CannotMakeDish(dish.name, f"{line.ingredient_name} missing from DB")
            if item.quantity <= 0:
                return CannotMakeDish(dish.name, f"{line.ingredient_name} out of stock")
            if not line.quantity_required or line.quantity_required <= 0:
                return CannotMakeDish(dish.name, f"invalid quantity for {line.ingredient_name}")
            try:
                available = convert(item.quantity, item.unit, line.unit)
            except IncompatibleUnits:
                return CannotMakeDish(dish.name, f"incompatible units for {line.ingredient_name}")

            servings = math.floor(available / line.quantity_required + _EPSILON)
            if servings < 1:
                return CannotMakeDish(dish.name, f"Out of {line.ingredient_name}")
            if servings < min_servings:
                min_servings = servings
                scarcest = line.ingredient_name

        if min_servings < self.low_stock_threshold:
            return LowStockDish(dish.name, scarcest, int(min_servings))
        return None

    def days_until_expiry(self, item: InventoryItem, now: datetime) -> Optional[float]:
        if not item.expires_in_days or not item.date_received:
            return None
        expires_at = item.date_received + timedelta(days=item.expires_in_days)
        return (expires_at - now).total_seconds() / 86400

    def analyze(
        self,
        dishes: List[Dish],
        recipes: Dict[UUID, List[RecipeLine]],
        items: List[InventoryItem],
        now: datetime,
    ) -> AnalysisReport:
        report = AnalysisReport()
        stock = {item.id: item for item in items}

        for dish in dishes:
            lines = recipes.get(dish.id) or []
            if not lines:
                continue
            try:
                verdict = self.classify_dish(dish, lines, stock)
            except Exception as e:
                log.exception(f"Could not analyze dish {dish.name}")
                verdict = CannotMakeDish(dish.name, f"analysis failed: {e}")
            if isinstance(verdict, CannotMakeDish):
                report.cannot_make.append(verdict)
            elif isinstance(verdict, LowStockDish):
                report.low_stock.append(verdict)

        for item in items:
            days = self.days_until_expiry(item, now)
            if days is not None and 0 < days <= self.expiry_window_days:
                report.expiring.append(ExpiringItem(item.id, item.name, math.ceil(days)))
            if item.quantity > self.high_stock_threshold:
                report.surplus.append(SurplusItem(item.id, item.name, item.quantity, item.unit.value))

        expiring_ids = {i.id for i in report.expiring}
        surplus_ids = {i.id for i in report.surplus}
        expiring_dishes, surplus_dishes = [], []
        for dish in dishes:
            lines = recipes.get(dish.id) or []
            used = {line.ingredient_id for line in lines if line.ingredient_id}
            uses_expiring = bool(used & expiring_ids)
            uses_surplus = bool(used & surplus_ids)
            if not (uses_expiring or uses_surplus):
                continue

            cost = calculate_recipe_cost(dish.price, lines, stock.get)
            if cost.missing_cost_data:
                continue
            suggestion = DishSuggestion(dish.name, cost.profit_margin)
            if uses_expiring:
                expiring_dishes.append(suggestion)
            if uses_surplus:
                surplus_dishes.append(suggestion)

        by_margin = attrgetter("profit_margin")
        report.expiring_suggestions = sorted(expiring_dishes, key=by_margin, reverse=True)[: self.top_suggestions]
        report.surplus_suggestions = sorted(surplus_dishes, key=by_margin, reverse=True)[: self.top_suggestions]
        return report

    # --- Job entry point ---

    async def load_and_analyze(self) -> AnalysisReport:
        dishes = await Dish.all()
        lines = await RecipeLine.all()
        items = await InventoryItem.all()

        recipes: Dict[UUID, List[RecipeLine]] = defaultdict(list)
        for line in lines:
            recipes[line.dish_id].append(line)
        return self.analyze(dishes, recipes, items, self.clock())

    async def run(self) -> AnalysisRun:
        log.info("Running background job: analyzing menu, inventory and profit...")
        report = await self.load_and_analyze()

        if not report.has_findings:
            log.info("Menu analysis complete. No alerts needed.")
            return AnalysisRun(AnalysisOutcome.NO_ALERTS, report)

        if await self.notifications.has_recent(BRIEF_TITLE, self.clock() - BRIEF_WINDOW):
            log.info("Menu analysis complete. Brief already sent in the last 24 hours.")
            return AnalysisRun(AnalysisOutcome.ALREADY_SENT, report)

        brief = await self.advisory.generate(SYSTEM_PROMPT, build_user_prompt(report))
        notification = await self.notifications.create(
            NotificationType.MARKETING_SUGGESTION, BRIEF_TITLE, brief, target_id=None
        )
        return AnalysisRun(AnalysisOutcome.NOTIFIED, report, notification)
