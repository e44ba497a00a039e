"""Order placement — command and handler."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from bakery.domain import bakery
from bakery.order.order import Order
from bakery.user.user import User
from bakery.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@bakery.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of item dicts
    delivery_info = Text(required=True)  # JSON object
    payment_method = String(required=True, max_length=30)


@bakery.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer = fetch(User, command.customer_id)

        order = Order.place(
            customer_id=str(customer.id),
            items_data=json.loads(command.items),
            delivery_info=json.loads(command.delivery_info),
            payment_method=command.payment_method,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(customer.id),
            total_amount=order.total_amount,
        )
        return str(order.id)
