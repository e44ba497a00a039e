"""OrderReview aggregate — a customer's rating of a delivered order.

Reviews are write-once: one per order, left by the customer who placed it.
The rating feeds the junior baker's average (see
``bakery.projections.junior_baker_rating``), an informational signal when
admins weigh a promotion.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text

from bakery import access
from bakery.access import Action
from bakery.domain import bakery
from bakery.order.order import OrderStatus
from bakery.review.events import OrderReviewSubmitted


@bakery.aggregate
class OrderReview:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    main_baker_id = Identifier()
    junior_baker_id = Identifier()
    rating = Integer(required=True)
    comment = Text()
    created_at = DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        if self.rating is not None and (self.rating < 1 or self.rating > 5):
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

    @classmethod
    def submit(cls, order, customer, rating, comment=None):
        access.ensure_can_act(customer, Action.REVIEW_ORDER, order, "You can only review your own orders")
        if order.status != OrderStatus.DELIVERED.value:
            raise ValidationError({"order_id": ["Only delivered orders can be reviewed"]})

        now = datetime.now(UTC)
        review = cls(
            order_id=str(order.id),
            customer_id=str(customer.id),
            main_baker_id=order.main_baker_id,
            junior_baker_id=order.junior_baker_id,
            rating=rating,
            comment=comment,
            created_at=now,
        )
        review.raise_(
            OrderReviewSubmitted(
                review_id=str(review.id),
                order_id=str(order.id),
                customer_id=str(customer.id),
                main_baker_id=order.main_baker_id,
                junior_baker_id=order.junior_baker_id,
                rating=rating,
                submitted_at=now,
            )
        )
        return review
