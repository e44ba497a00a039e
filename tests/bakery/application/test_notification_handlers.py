"""Application tests for the notify hook driven by workflow events."""

import json
from uuid import uuid4

import pytest
from bakery.baker_application.decision import DecideBakerApplication
from bakery.baker_application.submission import SubmitBakerApplication
from bakery.exceptions import Unauthorized
from bakery.notification.notification import Notification
from bakery.notification.reading import MarkAllNotificationsRead, MarkNotificationRead
from bakery.order.assignment import AssignOrder
from bakery.order.order import Order
from bakery.order.placement import PlaceOrder
from bakery.order.status import UpdateOrderStatus
from bakery.user.registration import RegisterUser
from protean import current_domain


def _register(role="customer"):
    return current_domain.process(
        RegisterUser(username=f"user-{uuid4().hex[:8]}", role=role),
        asynchronous=False,
    )


def _place(customer_id):
    return current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            items=json.dumps([{"name": "Brioche", "price": 4.0, "quantity": 3}]),
            delivery_info=json.dumps(
                {"address": "3 Flour Court", "city": "Springfield", "zip_code": "62701", "phone": "555-0103"}
            ),
            payment_method="credit_card",
        ),
        asynchronous=False,
    )


@pytest.fixture()
def ids():
    return {
        "admin": _register("admin"),
        "main": _register("main_baker"),
        "junior": _register("junior_baker"),
        "customer": _register("customer"),
    }


class TestNotifyHook:
    def test_assignment_notifies_bakers_and_customer(self, ids, fake_notifier):
        order_id = _place(ids["customer"])
        current_domain.process(
            AssignOrder(order_id=order_id, actor_id=ids["main"], junior_baker_id=None, main_baker_id=ids["main"]),
            asynchronous=False,
        )
        current_domain.process(
            AssignOrder(order_id=order_id, actor_id=ids["main"], junior_baker_id=ids["junior"]),
            asynchronous=False,
        )

        assert fake_notifier.events_for(ids["main"]) == ["order_assigned"]
        assert fake_notifier.events_for(ids["junior"]) == ["order_delegated"]
        assert fake_notifier.events_for(ids["customer"]) == ["order_status_changed"]

    def test_application_decision_notifies_applicant(self, ids, fake_notifier):
        application_id = current_domain.process(
            SubmitBakerApplication(
                user_id=ids["customer"],
                requested_role="junior_baker",
                experience="Bread club regular.",
                reason="Want to bake daily.",
            ),
            asynchronous=False,
        )
        current_domain.process(
            DecideBakerApplication(application_id=application_id, reviewer_id=ids["admin"], decision="rejected"),
            asynchronous=False,
        )
        assert fake_notifier.events_for(ids["customer"]) == ["application_rejected"]

    def test_failing_hook_never_rolls_back_the_transition(self, ids, fake_notifier):
        fake_notifier.configure(should_succeed=False)
        order_id = _place(ids["customer"])

        current_domain.process(AssignOrder(order_id=order_id, actor_id=ids["main"]), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "assigned"
        assert order.main_baker_id == ids["main"]
        assert fake_notifier.sent == []


class TestInAppNotifications:
    def test_status_change_creates_customer_notification(self, ids):
        order_id = _place(ids["customer"])
        current_domain.process(AssignOrder(order_id=order_id, actor_id=ids["main"]), asynchronous=False)
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, actor_id=ids["main"], status="in_progress"),
            asynchronous=False,
        )

        repo = current_domain.repository_for(Notification)
        notifications = repo.for_user(ids["customer"])
        messages = {n.message for n in notifications}
        assert f"Your order #{order_id} status has been updated to in_progress" in messages
        assert all(n.type == "status_update" for n in notifications)
        assert notifications[0].action_url == f"/dashboard?order={order_id}"
        assert repo.unread_count(ids["customer"]) == 2

    def test_mark_one_and_mark_all_read(self, ids):
        order_id = _place(ids["customer"])
        current_domain.process(AssignOrder(order_id=order_id, actor_id=ids["main"]), asynchronous=False)
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, actor_id=ids["main"], status="in_progress"),
            asynchronous=False,
        )
        repo = current_domain.repository_for(Notification)
        first = repo.for_user(ids["customer"])[0]

        current_domain.process(
            MarkNotificationRead(notification_id=str(first.id), user_id=ids["customer"]),
            asynchronous=False,
        )
        assert repo.unread_count(ids["customer"]) == 1

        marked = current_domain.process(MarkAllNotificationsRead(user_id=ids["customer"]), asynchronous=False)
        assert marked == 1
        assert repo.unread_count(ids["customer"]) == 0

    def test_only_owner_marks_notification_read(self, ids):
        order_id = _place(ids["customer"])
        current_domain.process(AssignOrder(order_id=order_id, actor_id=ids["main"]), asynchronous=False)
        notification = current_domain.repository_for(Notification).for_user(ids["customer"])[0]

        with pytest.raises(Unauthorized):
            current_domain.process(
                MarkNotificationRead(notification_id=str(notification.id), user_id=ids["main"]),
                asynchronous=False,
            )
