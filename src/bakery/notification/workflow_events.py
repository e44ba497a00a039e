"""Event handlers that turn workflow events into notifications.

Listens to Order (assignment, status changes, cancellation), BakerApplication
(decisions) and OrderReview (new review) events.
"""

from protean.utils.mixins import handle

from bakery.baker_application.events import BakerApplicationApproved, BakerApplicationRejected
from bakery.domain import bakery
from bakery.notification.helpers import notify
from bakery.notification.notification import Notification
from bakery.order.events import OrderAssigned, OrderCancelled, OrderStatusChanged
from bakery.review.events import OrderReviewSubmitted


@bakery.event_handler(part_of=Notification, stream_category="bakery::order")
class OrderEventsHandler:
    @handle(OrderAssigned)
    def on_order_assigned(self, event: OrderAssigned) -> None:
        payload = {"order_id": str(event.order_id), "status": event.status}
        if event.main_baker_id and event.main_baker_id != event.previous_main_baker_id:
            notify(event.main_baker_id, "order_assigned", payload)
        if event.junior_baker_id and event.junior_baker_id != event.previous_junior_baker_id:
            notify(event.junior_baker_id, "order_delegated", payload)

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        """Tell the customer whenever their order moves on."""
        notify(
            event.customer_id,
            "order_status_changed",
            {"order_id": str(event.order_id), "status": event.new_status},
        )

    @handle(OrderCancelled)
    def on_order_cancelled(self, event: OrderCancelled) -> None:
        payload = {"order_id": str(event.order_id), "reason": event.reason}
        recipients = {event.customer_id, event.main_baker_id, event.junior_baker_id}
        recipients.discard(event.cancelled_by)
        for user_id in sorted(r for r in recipients if r):
            notify(user_id, "order_cancelled", payload)


@bakery.event_handler(part_of=Notification, stream_category="bakery::baker_application")
class BakerApplicationEventsHandler:
    @handle(BakerApplicationApproved)
    def on_application_approved(self, event: BakerApplicationApproved) -> None:
        notify(
            event.user_id,
            "application_approved",
            {"application_id": str(event.application_id), "role": event.requested_role},
        )

    @handle(BakerApplicationRejected)
    def on_application_rejected(self, event: BakerApplicationRejected) -> None:
        notify(
            event.user_id,
            "application_rejected",
            {"application_id": str(event.application_id), "role": event.requested_role},
        )


@bakery.event_handler(part_of=Notification, stream_category="bakery::order_review")
class OrderReviewEventsHandler:
    @handle(OrderReviewSubmitted)
    def on_order_review_submitted(self, event: OrderReviewSubmitted) -> None:
        notify(
            event.junior_baker_id,
            "order_reviewed",
            {"order_id": str(event.order_id), "rating": event.rating},
        )
