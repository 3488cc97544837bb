from enum import Enum
from tortoise import fields, models
import uuid

from backoffice.domain.units import Unit


class WasteReason(str, Enum):
    EXPIRED = "Expired"
    DAMAGED = "Damaged"
    COOKED_WRONG = "Cooked wrong"
    DROPPED = "Dropped"
    OTHER = "Other"


class InventoryItem(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255)
    sku = fields.CharField(max_length=64, unique=True)
    description = fields.TextField(null=True)
    # On-hand amount, expressed in the stocking unit
    quantity = fields.FloatField(default=0)
    unit = fields.CharEnumField(Unit, max_length=8, default=Unit.UNIT)
    # purchase_price buys purchase_quantity of purchase_unit; null means not priced yet
    purchase_price = fields.FloatField(null=True, default=0)
    purchase_unit = fields.CharEnumField(Unit, max_length=8, default=Unit.UNIT)
    purchase_quantity = fields.FloatField(default=1)
    supplier_id = fields.CharField(max_length=64, null=True)
    date_received = fields.DatetimeField(null=True)
    expires_in_days = fields.IntField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "inventory_items"
        indexes = [
            ("name",),  # Lookup by ingredient name
        ]

    def __str__(self):
        return self.name


class WasteRecord(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    # Kept when the ingredient is later deleted, the snapshot fields still describe it
    inventory_item = fields.ForeignKeyField(
        "models.InventoryItem", related_name="waste_records", null=True, on_delete=fields.SET_NULL
    )
    item_name = fields.CharField(max_length=255)
    quantity = fields.FloatField()
    unit = fields.CharEnumField(Unit, max_length=8)
    reason = fields.CharEnumField(WasteReason, max_length=32, default=WasteReason.OTHER)
    logged_by = fields.CharField(max_length=64)
    created_at = fields.DatetimeField()

    class Meta:
        table = "waste_records"
        indexes = [
            ("created_at",),  # Time-based queries
        ]
