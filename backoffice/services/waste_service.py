import logging
from uuid import UUID

from tortoise.expressions import F
from tortoise.transactions import in_transaction

from backoffice.core.clock import Clock, utc_now
from backoffice.core.errors import IngredientNotFound, InsufficientStock, ValidationError
from backoffice.models.inventory import InventoryItem, WasteReason, WasteRecord

log = logging.getLogger(__name__)


async def log_waste(
    ingredient_id: UUID,
    quantity: float,
    reason: WasteReason,
    logged_by: str,
    clock: Clock = utc_now,
) -> WasteRecord:
    """Deducts discarded stock and records why, in one transaction."""
    if quantity is None or quantity <= 0:
        raise ValidationError("Waste quantity must be positive.", {"quantity": quantity})

    async with in_transaction() as conn:
        item = await InventoryItem.filter(id=ingredient_id).using_db(conn).select_for_update().first()
        if not item:
            raise IngredientNotFound(ingredient_id)

        if item.quantity < quantity:
            raise InsufficientStock(item.name, available=item.quantity, required=quantity)

        await InventoryItem.filter(id=item.id).using_db(conn).update(quantity=F("quantity") - quantity)

        record = await WasteRecord.create(
            inventory_item_id=item.id,
            item_name=item.name,
            quantity=quantity,
            unit=item.unit,
            reason=WasteReason(reason),
            logged_by=logged_by,
            created_at=clock(),
            using_db=conn,
        )

    log.info(f"Waste logged: {quantity:g} {item.unit.value} of {item.name} ({record.reason.value})")
    return record
