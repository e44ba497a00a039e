"""In-app notifier — stores a Notification record per call."""

from protean.utils.globals import current_domain

from bakery.notification.notification import Notification, NotificationType
from bakery.notifier.port import Notifier

# event -> (type, title, message template)
_TEMPLATES = {
    "order_assigned": (
        NotificationType.ASSIGNMENT,
        "New Order Assigned",
        "Order #{order_id} has been assigned to you",
    ),
    "order_delegated": (
        NotificationType.ASSIGNMENT,
        "Order Delegated",
        "Order #{order_id} has been delegated to you",
    ),
    "order_status_changed": (
        NotificationType.STATUS_UPDATE,
        "Order Status Updated",
        "Your order #{order_id} status has been updated to {status}",
    ),
    "order_cancelled": (
        NotificationType.CANCELLATION,
        "Order Cancelled",
        "Order #{order_id} has been cancelled",
    ),
    "application_approved": (
        NotificationType.APPLICATION,
        "Application Approved",
        "Your application to become {role} has been approved",
    ),
    "application_rejected": (
        NotificationType.APPLICATION,
        "Application Rejected",
        "Your application to become {role} has been rejected",
    ),
    "order_reviewed": (
        NotificationType.REVIEW,
        "New Review",
        "Your order #{order_id} has been reviewed by a customer",
    ),
}


class InAppNotifier(Notifier):
    def notify(self, user_id: str, event: str, payload: dict) -> None:
        if event not in _TEMPLATES:
            raise ValueError(f"Unknown notification event: {event}")

        notification_type, title, template = _TEMPLATES[event]
        order_id = payload.get("order_id")
        notification = Notification.create(
            user_id=user_id,
            title=title,
            message=template.format(**payload),
            notification_type=notification_type.value,
            order_id=order_id,
            action_url=f"/dashboard?order={order_id}" if order_id else None,
        )
        current_domain.repository_for(Notification).add(notification)
