"""Order repository — read paths the workflow and dashboards need.

Written against the repository's DAO query interface only, so the same
code runs on the memory provider in tests and PostgreSQL in production.
"""

from bakery import access
from bakery.domain import bakery
from bakery.order.order import FINISHED_STATUSES, Order, OrderStatus


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


@bakery.repository(part_of=Order)
class OrderRepository:
    def visible_to(self, user):
        """Orders the user's dashboard lists, according to their role."""
        scope = access.order_scope(user)
        query = self._dao.query.filter(**scope) if scope else self._dao.query
        return _newest_first(query.all().items)

    def unclaimed(self):
        """Pending orders that no main baker has picked up yet."""
        pending = self._dao.query.filter(status=OrderStatus.PENDING.value).all().items
        return _newest_first([order for order in pending if not order.main_baker_id])

    def count_finished_by_junior(self, junior_baker_id) -> int:
        """Orders a junior baker carried at least as far as completed."""
        return (
            self._dao.query.filter(
                junior_baker_id=str(junior_baker_id),
                status__in=[status.value for status in FINISHED_STATUSES],
            )
            .all()
            .total
        )
