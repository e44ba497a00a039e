"""Notification aggregate — an in-app message shown on the user's dashboard.

Notifications are written by the notify hook after a workflow change has
committed. They are advisory; losing one never affects an order or an
application.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import Boolean, DateTime, Identifier, String, Text

from bakery.domain import bakery
from bakery.exceptions import Unauthorized


class NotificationType(Enum):
    STATUS_UPDATE = "status_update"
    ASSIGNMENT = "assignment"
    CANCELLATION = "cancellation"
    APPLICATION = "application"
    REVIEW = "review"


@bakery.aggregate
class Notification:
    user_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    message = Text(required=True)
    type = String(choices=NotificationType, required=True)
    order_id = Identifier()
    action_url = String(max_length=500)
    read = Boolean(default=False)
    created_at = DateTime()

    @classmethod
    def create(cls, user_id, title, message, notification_type, order_id=None, action_url=None):
        return cls(
            user_id=str(user_id),
            title=title,
            message=message,
            type=notification_type,
            order_id=str(order_id) if order_id else None,
            action_url=action_url,
            read=False,
            created_at=datetime.now(UTC),
        )

    def mark_read(self, reader_id):
        if str(reader_id) != str(self.user_id):
            raise Unauthorized(
                "You can only mark your own notifications as read",
                actor_id=str(reader_id),
                action="mark_notification_read",
                notification_id=str(self.id),
            )
        if self.read:
            return False
        self.read = True
        return True
