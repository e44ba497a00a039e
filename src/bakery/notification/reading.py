"""Mark notifications read — commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.notification.notification import Notification
from bakery.utils.lookup import fetch


@bakery.command(part_of="Notification")
class MarkNotificationRead:
    notification_id = Identifier(required=True)
    user_id = Identifier(required=True)


@bakery.command(part_of="Notification")
class MarkAllNotificationsRead:
    user_id = Identifier(required=True)


@bakery.command_handler(part_of=Notification)
class NotificationReadHandler:
    @handle(MarkNotificationRead)
    def mark_notification_read(self, command):
        notification = fetch(Notification, command.notification_id)
        if notification.mark_read(command.user_id):
            current_domain.repository_for(Notification).add(notification)

    @handle(MarkAllNotificationsRead)
    def mark_all_notifications_read(self, command):
        repo = current_domain.repository_for(Notification)
        unread = repo.unread_for_user(command.user_id)
        for notification in unread:
            notification.mark_read(command.user_id)
            repo.add(notification)
        return len(unread)
