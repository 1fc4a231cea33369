"""
Notification center endpoints
"""
from fastapi import APIRouter, Depends

from followuply.deps import get_current_user_id, get_notification_gateway
from followuply.middleware.rate_limiter import rate_limited
from followuply.models.schemas import NotificationCreate
from followuply.routers.common import respond
from followuply.services.notification_gateway import NotificationGateway

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/")
async def list_notifications(
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationGateway = Depends(get_notification_gateway),
):
    return await notifications.list(user_id)


@router.get("/unread")
async def list_unread_notifications(
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationGateway = Depends(get_notification_gateway),
):
    return await notifications.unread(user_id)


@router.post("/", dependencies=[Depends(rate_limited("notifications:create"))])
async def create_notification(
    data: NotificationCreate,
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationGateway = Depends(get_notification_gateway),
):
    notification = await notifications.create(user_id, data)
    return respond(notification, "Notification created")


@router.post("/read-all")
async def mark_all_notifications_read(
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationGateway = Depends(get_notification_gateway),
):
    changed = await notifications.mark_all_read(user_id)
    return respond({"updated": changed}, "All notifications marked as read")


@router.post("/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    user_id: str = Depends(get_current_user_id),
    notifications: NotificationGateway = Depends(get_notification_gateway),
):
    notification = await notifications.mark_read(user_id, notification_id)
    return respond(notification, "Notification marked as read")
