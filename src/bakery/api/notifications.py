"""FastAPI endpoints for in-app notifications."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from bakery.api.schemas import (
    ActorId,
    CountResponse,
    NotificationListResponse,
    NotificationResponse,
    StatusResponse,
)
from bakery.notification.notification import Notification
from bakery.notification.reading import MarkAllNotificationsRead, MarkNotificationRead

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("", response_model=NotificationListResponse)
async def list_notifications(actor_id: ActorId) -> NotificationListResponse:
    notifications = current_domain.repository_for(Notification).for_user(actor_id)
    return NotificationListResponse(
        notifications=[
            NotificationResponse(
                notification_id=str(n.id),
                title=n.title,
                message=n.message,
                type=n.type,
                order_id=str(n.order_id) if n.order_id else None,
                action_url=n.action_url,
                read=n.read,
                created_at=n.created_at.isoformat() if n.created_at else None,
            )
            for n in notifications
        ]
    )


@notification_router.get("/unread-count", response_model=CountResponse)
async def unread_notification_count(actor_id: ActorId) -> CountResponse:
    return CountResponse(count=current_domain.repository_for(Notification).unread_count(actor_id))


@notification_router.post("/read-all", response_model=CountResponse)
async def mark_all_notifications_read(actor_id: ActorId) -> CountResponse:
    count = current_domain.process(MarkAllNotificationsRead(user_id=actor_id), asynchronous=False)
    return CountResponse(count=count or 0)


@notification_router.post("/{notification_id}/read", response_model=StatusResponse)
async def mark_notification_read(notification_id: str, actor_id: ActorId) -> StatusResponse:
    command = MarkNotificationRead(notification_id=notification_id, user_id=actor_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
