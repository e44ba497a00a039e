"""ChatMessage aggregate — direct messages between users.

Messaging is advisory: it never gates an order or application change, and
who may talk to whom is decided by ``access.ensure_can_message``.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, Text

from bakery import access
from bakery.domain import bakery
from bakery.exceptions import Unauthorized
from bakery.messaging.events import MessageSent


@bakery.aggregate
class ChatMessage:
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    order_id = Identifier()
    content = Text(required=True)
    read = Boolean(default=False)
    sent_at = DateTime()

    @classmethod
    def send(cls, sender, receiver, content, order=None):
        access.ensure_can_message(sender, receiver, order)

        now = datetime.now(UTC)
        message = cls(
            sender_id=str(sender.id),
            receiver_id=str(receiver.id),
            order_id=str(order.id) if order is not None else None,
            content=content,
            read=False,
            sent_at=now,
        )
        message.raise_(
            MessageSent(
                message_id=str(message.id),
                sender_id=str(sender.id),
                receiver_id=str(receiver.id),
                order_id=message.order_id,
                sent_at=now,
            )
        )
        return message

    def mark_read(self, reader_id):
        """Only the receiver can mark a message read. Returns True if it changed."""
        if str(reader_id) != str(self.receiver_id):
            raise Unauthorized(
                "Only the receiver can mark a message as read",
                actor_id=str(reader_id),
                action="mark_message_read",
                message_id=str(self.id),
            )
        if self.read:
            return False
        self.read = True
        return True
