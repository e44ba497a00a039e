"""Order review submission — command and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.order.order import Order
from bakery.review.order_review import OrderReview
from bakery.user.user import User
from bakery.utils.concurrency import conflicts_raise
from bakery.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@bakery.command(part_of="OrderReview")
class SubmitOrderReview:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


@bakery.command_handler(part_of=OrderReview)
class SubmitOrderReviewHandler:
    @handle(SubmitOrderReview)
    def submit_order_review(self, command):
        customer = fetch(User, command.customer_id)
        order = fetch(Order, command.order_id)
        review = OrderReview.submit(order, customer, command.rating, command.comment)
        order.record_review(review)

        # Saving the order first makes a concurrent second review lose on its version
        with conflicts_raise(lambda: ValidationError({"order_id": ["This order has already been reviewed"]})):
            current_domain.repository_for(Order).add(order)
        current_domain.repository_for(OrderReview).add(review)

        logger.info(
            "Order review submitted",
            review_id=str(review.id),
            order_id=str(order.id),
            rating=review.rating,
        )
        return str(review.id)
