from bakery.domain import bakery
from bakery.messaging.chat_message import ChatMessage


@bakery.repository(part_of=ChatMessage)
class ChatMessageRepository:
    def conversation(self, user_id, other_user_id):
        """Messages exchanged between two users, oldest first."""
        sent = self._dao.query.filter(sender_id=str(user_id), receiver_id=str(other_user_id)).all().items
        received = self._dao.query.filter(sender_id=str(other_user_id), receiver_id=str(user_id)).all().items
        return sorted(sent + received, key=lambda message: message.sent_at)

    def unread_count(self, user_id) -> int:
        return self._dao.query.filter(receiver_id=str(user_id), read=False).all().total
