from bakery.domain import bakery
from bakery.notification.notification import Notification


@bakery.repository(part_of=Notification)
class NotificationRepository:
    def for_user(self, user_id):
        notifications = self._dao.query.filter(user_id=str(user_id)).all().items
        return sorted(notifications, key=lambda n: n.created_at, reverse=True)

    def unread_for_user(self, user_id):
        return self._dao.query.filter(user_id=str(user_id), read=False).all().items

    def unread_count(self, user_id) -> int:
        return self._dao.query.filter(user_id=str(user_id), read=False).all().total
