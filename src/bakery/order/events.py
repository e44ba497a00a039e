"""Domain events for the Order aggregate.

Events feed the notification hook and projections. None of them gate a
transition; they are published only after the change is committed.
"""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from bakery.domain import bakery


@bakery.event(part_of="Order")
class OrderPlaced:
    """A customer checked out; the order starts in the pending state."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of item dicts
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@bakery.event(part_of="Order")
class OrderStatusChanged:
    """The order moved one step along the status chain."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)


@bakery.event(part_of="Order")
class OrderAssigned:
    """Bakers were bound to the order (first assignment or reassignment)."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    main_baker_id = Identifier()
    junior_baker_id = Identifier()
    previous_main_baker_id = Identifier()
    previous_junior_baker_id = Identifier()
    status = String(required=True)
    assigned_by = Identifier(required=True)
    assigned_at = DateTime(required=True)


@bakery.event(part_of="Order")
class OrderCancelled:
    """The order reached the terminal cancelled state."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    main_baker_id = Identifier()
    junior_baker_id = Identifier()
    previous_status = String(required=True)
    cancelled_by = Identifier(required=True)
    reason = String()
    cancelled_at = DateTime(required=True)
