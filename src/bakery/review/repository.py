from bakery.domain import bakery
from bakery.review.order_review import OrderReview


def _newest_first(reviews):
    return sorted(reviews, key=lambda review: review.created_at, reverse=True)


@bakery.repository(part_of=OrderReview)
class OrderReviewRepository:
    def for_order(self, order_id):
        return _newest_first(self._dao.query.filter(order_id=str(order_id)).all().items)

    def for_junior_baker(self, junior_baker_id):
        """Reviews of every order the junior baker worked on."""
        return _newest_first(self._dao.query.filter(junior_baker_id=str(junior_baker_id)).all().items)
