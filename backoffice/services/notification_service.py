import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from tortoise.expressions import Q

from backoffice.core.clock import Clock, utc_now
from backoffice.core.errors import Forbidden, NotificationNotFound
from backoffice.models.notification import Notification, NotificationStatus, NotificationType

log = logging.getLogger(__name__)

ELEVATED_ROLES = frozenset({"admin"})


class NotificationDispatcher:
    """Stores targeted or broadcast notifications and enforces who may touch them."""

    def __init__(self, clock: Clock = utc_now):
        self.clock = clock

    async def create(
        self,
        type: NotificationType,
        title: str,
        message: str,
        target_id: Optional[str] = None,
    ) -> Notification:
        notification = await Notification.create(
            type=NotificationType(type),
            title=title,
            message=message,
            target_id=target_id,
            status=NotificationStatus.UNREAD,
            created_at=self.clock(),
        )
        log.info(f"Notification created: {title} (target={target_id or 'everyone'})")
        return notification

    async def list_for(self, user_id: str, limit: int = 20) -> List[Notification]:
        """Notifications addressed to ``user_id`` or broadcast; unread first, newest first."""
        return (
            await Notification.filter(Q(target_id=user_id) | Q(target_id__isnull=True))
            .order_by("-status", "-created_at")
            .limit(limit)
        )

    async def _get(self, notification_id: UUID) -> Notification:
        notification = await Notification.get_or_none(id=notification_id)
        if not notification:
            raise NotificationNotFound(notification_id)
        return notification

    async def mark_read(self, notification_id: UUID, requester_id: str) -> Notification:
        notification = await self._get(notification_id)
        if notification.target_id is not None and notification.target_id != requester_id:
            raise Forbidden("Not authorized to read this notification")

        notification.status = NotificationStatus.READ
        await notification.save(update_fields=["status"])
        return notification

    async def delete(self, notification_id: UUID, requester_id: str, requester_role: str) -> None:
        notification = await self._get(notification_id)
        is_target = notification.target_id is None or notification.target_id == requester_id
        if not is_target and requester_role not in ELEVATED_ROLES:
            raise Forbidden("Not authorized to delete this notification")

        await notification.delete()
        log.info(f"Notification {notification_id} deleted by {requester_id}")

    async def has_recent(self, title: str, since: datetime) -> bool:
        """True when a notification with ``title`` was created at or after ``since``."""
        return await Notification.filter(title=title, created_at__gte=since).exists()
