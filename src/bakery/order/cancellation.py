"""Customer cancellation — command and handler.

Customers never use the generic status update. They may withdraw their
own order while it is still pending; bakers and admins cancel through
``UpdateOrderStatus`` with status ``cancelled``.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.exceptions import TransitionFailed
from bakery.order.order import Order
from bakery.user.user import User
from bakery.utils.concurrency import conflicts_raise
from bakery.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@bakery.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    reason = String(max_length=500)


@bakery.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        actor = fetch(User, command.actor_id)
        order = fetch(Order, command.order_id)

        if order.cancel_by_customer(actor, reason=command.reason):
            with conflicts_raise(
                lambda: TransitionFailed(
                    f"Order {order.id} changed while it was being cancelled",
                    order_id=str(order.id),
                )
            ):
                current_domain.repository_for(Order).add(order)
            logger.info("Order cancelled by customer", order_id=str(order.id), customer_id=str(actor.id))

        return order.status
