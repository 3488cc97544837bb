"""
Domain error taxonomy.

Every error carries an HTTP status and a machine-readable code so the
exception handlers can render a structured failure without each route
re-mapping it.
"""
from typing import Any, Dict, Optional


class BackofficeError(Exception):
    status_code = 500
    code = "server_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BackofficeError):
    """Malformed or missing input. Nothing is persisted."""
    status_code = 400
    code = "validation_error"


class Forbidden(BackofficeError):
    status_code = 403
    code = "forbidden"


class NotFound(BackofficeError):
    status_code = 404
    code = "not_found"


class DishNotFound(NotFound):
    def __init__(self, dish_id: Any):
        super().__init__(f"Dish with ID {dish_id} not found", {"dish_id": str(dish_id)})


class IngredientNotFound(NotFound):
    def __init__(self, ingredient: Any):
        super().__init__(
            f"An ingredient ({ingredient}) was not found in inventory.",
            {"ingredient": str(ingredient)},
        )


class OrderNotFound(NotFound):
    def __init__(self, order_id: Any):
        super().__init__("Order not found", {"order_id": str(order_id)})


class NotificationNotFound(NotFound):
    def __init__(self, notification_id: Any):
        super().__init__("Notification not found", {"notification_id": str(notification_id)})


class InsufficientStock(BackofficeError):
    """Business-rule violation: stock on hand does not cover the request."""
    status_code = 409
    code = "insufficient_stock"

    def __init__(self, ingredient: str, available: float, required: float):
        super().__init__(
            f"Not enough {ingredient} in stock. Need {required:g}, have {available:g}.",
            {"ingredient": ingredient, "available": available, "required": required},
        )
        self.ingredient = ingredient
        self.available = available
        self.required = required


class IncompatibleUnits(BackofficeError):
    """Two units from different families (mass, volume, count) were mixed."""
    status_code = 422
    code = "incompatible_units"

    def __init__(self, from_unit: Any, to_unit: Any):
        super().__init__(
            f"Cannot convert between '{from_unit}' and '{to_unit}'",
            {"from_unit": str(from_unit), "to_unit": str(to_unit)},
        )


class ExternalServiceFailure(BackofficeError):
    """The advisory backend failed. Never propagated past the advisory client."""
    status_code = 502
    code = "external_service_failure"

    def __init__(self, message: str, status: Optional[int] = None, retryable: bool = True):
        super().__init__(message, {"status": status})
        self.status = status
        self.retryable = retryable
