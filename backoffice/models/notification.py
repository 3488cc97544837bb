from enum import Enum
from tortoise import fields, models
import uuid


class NotificationType(str, Enum):
    MARKETING_SUGGESTION = "marketing_suggestion"
    LOW_STOCK = "low_stock"
    SHIFT_UPDATE = "shift_update"
    SYSTEM = "system"


class NotificationStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"


class Notification(models.Model):
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    type = fields.CharEnumField(NotificationType, max_length=32)
    title = fields.CharField(max_length=255)
    message = fields.TextField()
    # None means broadcast: visible to every user
    target_id = fields.CharField(max_length=64, null=True)
    status = fields.CharEnumField(NotificationStatus, max_length=16, default=NotificationStatus.UNREAD)
    created_at = fields.DatetimeField()

    class Meta:
        table = "notifications"
        indexes = [
            ("target_id",),             # Per-user feed
            ("title", "created_at"),    # Composite: daily brief guard
        ]
