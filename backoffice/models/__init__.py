# backoffice/models/__init__.py
from .inventory import InventoryItem, WasteReason, WasteRecord
from .menu import Dish, RecipeLine
from .order import Order, OrderLine, SequenceCounter
from .notification import Notification, NotificationStatus, NotificationType

# Export all models
__all__ = [
    "Dish",
    "InventoryItem",
    "Notification",
    "NotificationStatus",
    "NotificationType",
    "Order",
    "OrderLine",
    "RecipeLine",
    "SequenceCounter",
    "WasteReason",
    "WasteRecord",
]
