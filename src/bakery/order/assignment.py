"""Order assignment — command and handler.

Binds a main baker and/or junior baker to an order. Baker ids are resolved
to users here so the Order can check their roles; the assignment and the
pending → assigned step are saved as one write.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.exceptions import TransitionFailed
from bakery.order.order import Order
from bakery.user.user import User
from bakery.utils.concurrency import check_expected_version, conflicts_raise
from bakery.utils.lookup import fetch, fetch_optional

logger = structlog.get_logger(__name__)


@bakery.command(part_of="Order")
class AssignOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    main_baker_id = Identifier()
    junior_baker_id = Identifier()
    expected_version = Integer()


@bakery.command_handler(part_of=Order)
class AssignOrderHandler:
    @handle(AssignOrder)
    def assign_order(self, command):
        actor = fetch(User, command.actor_id)
        order = fetch(Order, command.order_id)
        check_expected_version(order, command.expected_version)

        main_baker = fetch_optional(User, command.main_baker_id)
        junior_baker = fetch_optional(User, command.junior_baker_id)

        if not order.assign(actor, main_baker=main_baker, junior_baker=junior_baker):
            return str(order.id)

        with conflicts_raise(
            lambda: TransitionFailed(
                f"Order {order.id} changed while it was being assigned",
                order_id=str(order.id),
            )
        ):
            current_domain.repository_for(Order).add(order)

        logger.info(
            "Order assigned",
            order_id=str(order.id),
            main_baker_id=order.main_baker_id,
            junior_baker_id=order.junior_baker_id,
            status=order.status,
            actor_id=str(actor.id),
        )
        return str(order.id)
