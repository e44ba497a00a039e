"""Direct messaging — send a message and mark messages read."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.messaging.chat_message import ChatMessage
from bakery.order.order import Order
from bakery.user.user import User
from bakery.utils.lookup import fetch, fetch_optional

logger = structlog.get_logger(__name__)


@bakery.command(part_of="ChatMessage")
class SendMessage:
    sender_id = Identifier(required=True)
    receiver_id = Identifier(required=True)
    order_id = Identifier()
    content = Text(required=True)


@bakery.command(part_of="ChatMessage")
class MarkMessagesRead:
    reader_id = Identifier(required=True)
    message_ids = Text(required=True)  # JSON list of message ids


@bakery.command_handler(part_of=ChatMessage)
class ChatMessageCommandHandler:
    @handle(SendMessage)
    def send_message(self, command):
        sender = fetch(User, command.sender_id)
        receiver = fetch(User, command.receiver_id)
        order = fetch_optional(Order, command.order_id)

        message = ChatMessage.send(sender, receiver, command.content, order)
        current_domain.repository_for(ChatMessage).add(message)

        logger.info(
            "Message sent",
            message_id=str(message.id),
            sender_id=str(sender.id),
            receiver_id=str(receiver.id),
            order_id=message.order_id,
        )
        return str(message.id)

    @handle(MarkMessagesRead)
    def mark_messages_read(self, command):
        message_ids = json.loads(command.message_ids)
        if not isinstance(message_ids, list) or not message_ids:
            raise ValidationError({"message_ids": ["A non-empty list of message ids is required"]})

        repo = current_domain.repository_for(ChatMessage)
        messages = [fetch(ChatMessage, message_id) for message_id in message_ids]

        # Check every message before saving any
        changed = [message for message in messages if message.mark_read(command.reader_id)]
        for message in changed:
            repo.add(message)
        return len(changed)
