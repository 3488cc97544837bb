from fastapi import APIRouter, Depends, Request
from backoffice.api.deps import CurrentUser, get_current_user
from backoffice.schemas.notification import NotificationResponse
from backoffice.schemas.response import SuccessResponse
from backoffice.services.notification_service import NotificationDispatcher
from uuid import UUID

router = APIRouter()


def get_dispatcher(request: Request) -> NotificationDispatcher:
    """The dispatcher built by the app lifespan, or a default one."""
    return getattr(request.app.state, "notifications", None) or NotificationDispatcher()


@router.get("/my", response_model=SuccessResponse)
async def my_notifications(
    user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Notifications for the caller plus broadcasts, unread first."""
    notifications = await dispatcher.list_for(user.id)
    return SuccessResponse(data=[NotificationResponse.from_model(n).to_wire() for n in notifications])


@router.put("/{notification_id}/read", response_model=SuccessResponse)
async def mark_notification_read(
    notification_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    notification = await dispatcher.mark_read(notification_id, user.id)
    return SuccessResponse(data=NotificationResponse.from_model(notification).to_wire())


@router.delete("/{notification_id}", response_model=SuccessResponse)
async def delete_notification(
    notification_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    await dispatcher.delete(notification_id, user.id, user.role.value)
    return SuccessResponse(data={"message": "Notification removed"})
