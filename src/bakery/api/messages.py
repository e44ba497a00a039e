"""FastAPI endpoints for direct messages."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from bakery.api.schemas import (
    ActorId,
    ConversationResponse,
    CountResponse,
    MarkMessagesReadRequest,
    MessageIdResponse,
    MessageResponse,
    SendMessageRequest,
    StatusResponse,
)
from bakery.messaging.chat_message import ChatMessage
from bakery.messaging.sending import MarkMessagesRead, SendMessage

message_router = APIRouter(prefix="/messages", tags=["messages"])


@message_router.post("", status_code=201, response_model=MessageIdResponse)
async def send_message(body: SendMessageRequest, actor_id: ActorId) -> MessageIdResponse:
    command = SendMessage(
        sender_id=actor_id,
        receiver_id=body.receiver_id,
        order_id=body.order_id,
        content=body.content,
    )
    result = current_domain.process(command, asynchronous=False)
    return MessageIdResponse(message_id=result)


@message_router.get("", response_model=ConversationResponse)
async def get_conversation(other_user_id: str, actor_id: ActorId) -> ConversationResponse:
    messages = current_domain.repository_for(ChatMessage).conversation(actor_id, other_user_id)
    return ConversationResponse(
        messages=[
            MessageResponse(
                message_id=str(m.id),
                sender_id=str(m.sender_id),
                receiver_id=str(m.receiver_id),
                order_id=str(m.order_id) if m.order_id else None,
                content=m.content,
                read=m.read,
                sent_at=m.sent_at.isoformat() if m.sent_at else None,
            )
            for m in messages
        ]
    )


@message_router.get("/unread-count", response_model=CountResponse)
async def unread_message_count(actor_id: ActorId) -> CountResponse:
    return CountResponse(count=current_domain.repository_for(ChatMessage).unread_count(actor_id))


@message_router.post("/mark-read", response_model=StatusResponse)
async def mark_messages_read(body: MarkMessagesReadRequest, actor_id: ActorId) -> StatusResponse:
    command = MarkMessagesRead(reader_id=actor_id, message_ids=json.dumps(body.message_ids))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()
