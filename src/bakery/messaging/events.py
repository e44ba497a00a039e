from protean.fields import DateTime, Identifier

from bakery.domain import bakery


@bakery.event(part_of="ChatMessage")
class MessageSent:
    __version__ = 1

    message_id = Identifier(required=True)
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    order_id = Identifier()
    sent_at = DateTime(required=True)
