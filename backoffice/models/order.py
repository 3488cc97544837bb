from tortoise import fields, models
import uuid


class Order(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order_number = fields.IntField(unique=True)
    total_amount = fields.FloatField(default=0)
    sold_by = fields.CharField(max_length=64)
    created_at = fields.DatetimeField()

    class Meta:
        table = "orders"
        indexes = [
            ("sold_by",),     # Seller history
            ("created_at",),  # Time-based queries (sales reports)
        ]


class OrderLine(models.Model):
    """Immutable snapshot of one dish sold. Price is copied at sale time."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    order = fields.ForeignKeyField("models.Order", related_name="lines", on_delete=fields.CASCADE)
    # Plain reference, so the snapshot outlives the dish
    dish_id = fields.UUIDField()
    dish_name = fields.CharField(max_length=255)
    price = fields.FloatField()
    position = fields.IntField(default=0)

    class Meta:
        table = "order_lines"
        ordering = ["position"]
        indexes = [
            ("order_id",),  # Order line items
            ("dish_id",),   # Dish popularity
        ]


class SequenceCounter(models.Model):
    """Named counter holding the last issued value."""
    name = fields.CharField(max_length=64, primary_key=True)
    value = fields.BigIntField()

    class Meta:
        table = "sequence_counters"
