from protean.fields import DateTime, Identifier, Integer

from bakery.domain import bakery


@bakery.event(part_of="OrderReview")
class OrderReviewSubmitted:
    __version__ = 1

    review_id = Identifier(required=True)
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    main_baker_id = Identifier()
    junior_baker_id = Identifier()
    rating = Integer(required=True)
    submitted_at = DateTime(required=True)
