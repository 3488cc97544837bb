from tortoise import fields, models
import uuid

from backoffice.domain.units import Unit


class Dish(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    name = fields.CharField(max_length=255, unique=True)
    category = fields.CharField(max_length=64)
    price = fields.FloatField(default=0)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "dishes"
        indexes = [
            ("category",),  # Category filtering (e.g. Drinks)
        ]

    def __str__(self):
        return self.name


class RecipeLine(models.Model):
    """One ingredient requirement of a dish."""
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    dish = fields.ForeignKeyField("models.Dish", related_name="recipe_lines", on_delete=fields.CASCADE)
    # Nulled when the ingredient is deleted; costing flags the line as missing data
    ingredient = fields.ForeignKeyField(
        "models.InventoryItem", related_name="recipe_lines", null=True, on_delete=fields.SET_NULL
    )
    ingredient_name = fields.CharField(max_length=255)
    quantity_required = fields.FloatField()
    unit = fields.CharEnumField(Unit, max_length=8)
    position = fields.IntField(default=0)

    class Meta:
        table = "recipe_lines"
        ordering = ["position"]
        indexes = [
            ("dish_id",),        # Recipe of a dish
            ("ingredient_id",),  # Dishes using an ingredient
        ]
