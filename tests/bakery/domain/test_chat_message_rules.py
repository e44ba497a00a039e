"""Tests for ChatMessage — sending rules and read receipts."""

import pytest
from bakery.exceptions import Unauthorized
from bakery.messaging.chat_message import ChatMessage
from bakery.messaging.events import MessageSent


class TestSend:
    def test_junior_messages_main_without_order(self, make_user):
        junior, main = make_user("junior_baker"), make_user("main_baker")
        message = ChatMessage.send(junior, main, "Can I take Saturday's cakes?")

        assert message.read is False
        assert message.order_id is None
        assert isinstance(message._events[-1], MessageSent)

    def test_customer_messages_own_baker_about_order(self, make_user, make_order):
        customer, main = make_user("customer"), make_user("main_baker")
        order = make_order(customer=customer)
        order.assign(main)

        message = ChatMessage.send(customer, main, "Less sugar please", order)
        assert message.order_id == str(order.id)

    def test_customer_without_order_is_refused(self, make_user):
        with pytest.raises(Unauthorized):
            ChatMessage.send(make_user("customer"), make_user("main_baker"), "Hello?")


class TestMarkRead:
    def test_receiver_marks_read(self, make_user):
        junior, main = make_user("junior_baker"), make_user("main_baker")
        message = ChatMessage.send(junior, main, "Done with the croissants")

        assert message.mark_read(main.id) is True
        assert message.read is True
        assert message.mark_read(main.id) is False

    def test_sender_cannot_mark_read(self, make_user):
        junior, main = make_user("junior_baker"), make_user("main_baker")
        message = ChatMessage.send(junior, main, "Done with the croissants")

        with pytest.raises(Unauthorized):
            message.mark_read(junior.id)
        assert message.read is False
