from datetime import datetime
from typing import Optional
import uuid

from backoffice.models.notification import NotificationStatus, NotificationType
from backoffice.schemas.response import CamelModel


class NotificationResponse(CamelModel):
    id: uuid.UUID
    type: NotificationType
    title: str
    message: str
    target_id: Optional[str] = None
    status: NotificationStatus
    created_at: datetime

    @classmethod
    def from_model(cls, notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            target_id=notification.target_id,
            status=notification.status,
            created_at=notification.created_at,
        )
