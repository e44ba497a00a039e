"""Order status updates — command and handler.

All status changes except assignment and customer cancellation go through
``UpdateOrderStatus``; the legal moves live in the Order's transition table.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.exceptions import TransitionFailed
from bakery.order.order import Order
from bakery.user.user import User
from bakery.utils.concurrency import check_expected_version, conflicts_raise
from bakery.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@bakery.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=30)
    actor_id = Identifier(required=True)
    expected_version = Integer()  # Optional optimistic-concurrency guard


@bakery.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        actor = fetch(User, command.actor_id)
        order = fetch(Order, command.order_id)
        check_expected_version(order, command.expected_version)

        previous_status = order.status
        if not order.transition_to(command.status, actor):
            return order.status

        with conflicts_raise(
            lambda: TransitionFailed(
                f"Order {order.id} changed while updating its status",
                order_id=str(order.id),
                target_status=command.status,
            )
        ):
            current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
            actor_id=str(actor.id),
        )
        return order.status
