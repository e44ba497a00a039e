"""JuniorBakerRating — review statistics per junior baker."""

import json

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, Identifier, Integer, Text
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.review.events import OrderReviewSubmitted
from bakery.review.order_review import OrderReview


@bakery.projection
class JuniorBakerRating:
    junior_baker_id = Identifier(identifier=True, required=True)
    average_rating = Float(default=0.0)
    total_reviews = Integer(default=0)
    rating_distribution = Text()  # JSON: {"1": 0, "2": 0, "3": 0, "4": 0, "5": 0}
    updated_at = DateTime()


def _default_distribution():
    return json.dumps({"1": 0, "2": 0, "3": 0, "4": 0, "5": 0})


def _recalculate_average(distribution):
    total = sum(distribution.values())
    if total == 0:
        return 0.0
    weighted_sum = sum(int(rating) * count for rating, count in distribution.items())
    return round(weighted_sum / total, 2)


@bakery.projector(projector_for=JuniorBakerRating, aggregates=[OrderReview])
class JuniorBakerRatingProjector:
    @on(OrderReviewSubmitted)
    def on_order_review_submitted(self, event):
        if not event.junior_baker_id:
            return  # Nobody to credit

        repo = current_domain.repository_for(JuniorBakerRating)
        try:
            rating = repo.get(event.junior_baker_id)
        except ObjectNotFoundError:
            rating = JuniorBakerRating(
                junior_baker_id=event.junior_baker_id,
                total_reviews=0,
                rating_distribution=_default_distribution(),
            )

        distribution = json.loads(rating.rating_distribution or _default_distribution())
        key = str(event.rating)
        distribution[key] = distribution.get(key, 0) + 1

        rating.total_reviews = rating.total_reviews + 1
        rating.rating_distribution = json.dumps(distribution)
        rating.average_rating = _recalculate_average(distribution)
        rating.updated_at = event.submitted_at

        repo.add(rating)
