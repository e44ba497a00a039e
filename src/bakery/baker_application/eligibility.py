"""Promotion eligibility — how close a junior baker is to applying for main baker."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from bakery.baker_application.baker_application import BakerApplication
from bakery.order.order import Order
from bakery.projections.junior_baker_rating import JuniorBakerRating

DEFAULT_MIN_COMPLETED_ORDERS = 5


def required_completed_orders() -> int:
    """Finished orders a junior baker needs before applying for main baker."""
    custom = current_domain.config.get("custom", {}) or {}
    return int(custom.get("promotion_min_completed_orders", DEFAULT_MIN_COMPLETED_ORDERS))


def completed_orders_for(user_id) -> int:
    return current_domain.repository_for(Order).count_finished_by_junior(user_id)


def average_rating_for(user_id):
    """Average review score across the junior baker's orders, or None."""
    try:
        rating = current_domain.repository_for(JuniorBakerRating).get(str(user_id))
    except ObjectNotFoundError:
        return None
    return rating.average_rating if rating.total_reviews else None


def promotion_eligibility(user_id) -> dict:
    completed = completed_orders_for(user_id)
    required = required_completed_orders()
    pending = current_domain.repository_for(BakerApplication).pending_for_user(user_id)
    return {
        "user_id": str(user_id),
        "completed_orders": completed,
        "required_orders": required,
        "has_pending_application": pending is not None,
        "eligible": completed >= required and pending is None,
        "average_rating": average_rating_for(user_id),
    }
