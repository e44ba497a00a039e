"""Order aggregate (CQRS) — the core of the bakery domain.

An order is placed by a customer, claimed by a main baker, optionally
delegated to a junior baker, and walked forward through the kitchen until
it is delivered. Items are fixed once the order is placed; afterwards only
the status and the baker assignment change.

State Machine (7 states):
    PENDING → ASSIGNED → IN_PROGRESS → COMPLETED → READY_FOR_DELIVERY → DELIVERED
    CANCELLED (from any state except DELIVERED)

The status values and role names are wire-visible and must not change.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from bakery import access
from bakery.access import Action
from bakery.domain import bakery
from bakery.exceptions import AssignmentPrecondition, InvalidTransition
from bakery.order.events import (
    OrderAssigned,
    OrderCancelled,
    OrderPlaced,
    OrderStatusChanged,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    READY_FOR_DELIVERY = "ready_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ItemType(Enum):
    PRODUCT = "product"
    CUSTOM_CAKE = "custom_cake"
    CUSTOM_CHOCOLATE = "custom_chocolate"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"


# State machine transition map: every open state moves one step forward
# or is cancelled.
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.ASSIGNED, OrderStatus.CANCELLED},
    OrderStatus.ASSIGNED: {OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: {OrderStatus.READY_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.READY_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Statuses that count as a finished bake for promotion eligibility
FINISHED_STATUSES = {
    OrderStatus.COMPLETED,
    OrderStatus.READY_FOR_DELIVERY,
    OrderStatus.DELIVERED,
}

_REQUIRED_CUSTOMIZATION = {
    ItemType.CUSTOM_CAKE: ("shape", "size", "flavor", "filling", "frosting"),
    ItemType.CUSTOM_CHOCOLATE: ("shape", "size", "flavor", "packaging"),
}


def allowed_transitions(status):
    """Statuses reachable in one step from ``status``."""
    return _VALID_TRANSITIONS.get(OrderStatus(status), set())


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@bakery.value_object(part_of="Order")
class DeliveryInfo:
    """Where and to whom the order is delivered, captured at checkout."""

    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    zip_code = String(required=True, max_length=20)
    phone = String(required=True, max_length=30)
    special_instructions = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@bakery.entity(part_of="Order")
class OrderItem:
    """A line of the order: a catalogue product or a custom creation.

    Prices are locked when the order is placed.
    """

    product_id = Identifier()
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    type = String(choices=ItemType, default=ItemType.PRODUCT.value)
    customization = Text()  # JSON object for custom cakes/chocolates


def _validate_customization(item_type, customization, position):
    required = _REQUIRED_CUSTOMIZATION.get(item_type)
    if not required:
        return
    missing = [key for key in required if not (customization or {}).get(key)]
    if missing:
        raise ValidationError(
            {"items": [f"Item {position}: {item_type.value} requires {', '.join(missing)}"]}
        )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@bakery.aggregate
class Order:
    """One customer purchase and the bakers working on it."""

    customer_id = Identifier(required=True)
    main_baker_id = Identifier()
    junior_baker_id = Identifier()
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    payment_method = String(choices=PaymentMethod, required=True)
    delivery_info = ValueObject(DeliveryInfo)
    cancellation_reason = String(max_length=500)
    review_id = Identifier()  # Set once the customer reviews the delivered order
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def junior_baker_requires_main_baker(self):
        if self.junior_baker_id and not self.main_baker_id:
            raise ValidationError({"junior_baker_id": ["A junior baker can only work under a main baker"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, items_data, delivery_info, payment_method):
        """Place a new order. The status always starts as pending.

        Args:
            customer_id: The user placing the order.
            items_data: List of dicts with name, price, quantity and
                optionally product_id, type and customization.
            delivery_info: Dict with address, city, zip_code, phone and
                optionally special_instructions.
            payment_method: One of PaymentMethod values (payment is simulated).
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            status=OrderStatus.PENDING.value,
            total_amount=0.0,
            payment_method=payment_method,
            delivery_info=DeliveryInfo(**delivery_info),
            created_at=now,
            updated_at=now,
        )

        for position, item in enumerate(items_data, start=1):
            item_type = ItemType(item.get("type") or ItemType.PRODUCT.value)
            customization = item.get("customization")
            _validate_customization(item_type, customization, position)

            order.add_items(
                OrderItem(
                    product_id=item.get("product_id"),
                    name=item.get("name"),
                    price=item.get("price"),
                    quantity=item.get("quantity"),
                    type=item_type.value,
                    customization=json.dumps(customization) if customization else None,
                )
            )
        order.total_amount = round(sum(item.price * item.quantity for item in order.items), 2)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                items=json.dumps(items_data),
                item_count=len(order.items),
                total_amount=order.total_amount,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(current.value, target_status.value, order_id=str(self.id))

    def transition_to(self, target_status, actor):
        """Move the order to ``target_status`` on behalf of ``actor``.

        Only the assigned bakers or an admin may do this; junior bakers can
        only move forward. Requesting the status the order already has is a
        successful no-op. Returns True when the status changed.
        """
        try:
            target = OrderStatus(target_status)
        except ValueError as exc:
            raise InvalidTransition(self.status, target_status, f"Unknown order status: {target_status}") from exc

        action = Action.CANCEL_ORDER if target == OrderStatus.CANCELLED else Action.ADVANCE_ORDER
        access.ensure_can_act(actor, action, self)

        current = OrderStatus(self.status)
        if target == current:
            return False

        self._assert_can_transition(target)
        if target == OrderStatus.ASSIGNED and not self.main_baker_id:
            raise InvalidTransition(
                current.value,
                target.value,
                "An order becomes assigned by assigning a main baker",
                order_id=str(self.id),
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target.value
            self.updated_at = now

        if target == OrderStatus.CANCELLED:
            self.raise_(
                OrderCancelled(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    main_baker_id=self.main_baker_id,
                    junior_baker_id=self.junior_baker_id,
                    previous_status=current.value,
                    cancelled_by=str(actor.id),
                    cancelled_at=now,
                )
            )
        else:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    previous_status=current.value,
                    new_status=target.value,
                    changed_by=str(actor.id),
                    changed_at=now,
                )
            )
        return True

    def cancel_by_customer(self, actor, reason=None):
        """Let the customer withdraw an order nobody has started on yet."""
        access.ensure_can_act(actor, Action.CANCEL_OWN_ORDER, self, "Only the customer who placed the order can cancel it")

        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            return False
        if current != OrderStatus.PENDING:
            raise InvalidTransition(
                current.value,
                OrderStatus.CANCELLED.value,
                "Orders can only be cancelled by the customer while pending",
                order_id=str(self.id),
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.cancellation_reason = reason
            self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                previous_status=current.value,
                cancelled_by=str(actor.id),
                reason=reason,
                cancelled_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------
    def _resolve_main_baker(self, actor, main_baker, claim_if_unowned):
        """Work out who the main baker will be after this call."""
        if main_baker is None:
            if claim_if_unowned and self.main_baker_id is None and access.can_act(actor, Action.CLAIM_ORDER, self):
                return str(actor.id)  # Self-claim
            return self.main_baker_id

        if str(main_baker.id) == str(self.main_baker_id):
            return self.main_baker_id

        is_self_claim = str(main_baker.id) == str(actor.id) and access.can_act(actor, Action.CLAIM_ORDER, self)
        if not is_self_claim:
            access.ensure_can_act(
                actor,
                Action.ASSIGN_MAIN_BAKER,
                self,
                "Only an admin can hand an order to another main baker",
            )
        if not access.is_main_baker(main_baker):
            raise AssignmentPrecondition(
                f"User {main_baker.id} is not a main baker",
                order_id=str(self.id),
                main_baker_id=str(main_baker.id),
            )
        return str(main_baker.id)

    def assign(self, actor, main_baker=None, junior_baker=None):
        """Bind bakers to the order on behalf of ``actor``.

        A main baker calling this without naming anyone claims an unowned
        order. A junior baker can only be delegated once a main baker is
        (or becomes, in the same call) responsible. A pending order that
        gains a main baker becomes assigned in the same step. Every check
        runs before any field changes, so a refused call leaves the order
        untouched.
        """
        access.ensure_can_act(actor, Action.ASSIGN_ORDER, self, "Only an admin or the order's main baker can assign it")

        current = OrderStatus(self.status)
        if current in TERMINAL_STATUSES:
            raise AssignmentPrecondition(
                f"Order is {current.value} and can no longer be assigned",
                order_id=str(self.id),
                status=current.value,
            )

        claim_if_unowned = main_baker is None and junior_baker is None
        new_main = self._resolve_main_baker(actor, main_baker, claim_if_unowned)
        new_junior = self.junior_baker_id

        if junior_baker is not None:
            if new_main is None:
                raise AssignmentPrecondition(
                    "A junior baker can only be assigned once a main baker is set",
                    order_id=str(self.id),
                    junior_baker_id=str(junior_baker.id),
                )
            access.ensure_can_act(
                actor,
                Action.ASSIGN_JUNIOR_BAKER,
                self,
                "Only an admin or the order's main baker can delegate it",
            )
            if not access.is_junior_baker(junior_baker):
                raise AssignmentPrecondition(
                    f"User {junior_baker.id} is not a junior baker",
                    order_id=str(self.id),
                    junior_baker_id=str(junior_baker.id),
                )
            new_junior = str(junior_baker.id)

        if new_main is None:
            raise AssignmentPrecondition("Nothing to assign: no main baker given", order_id=str(self.id))

        if str(new_main) == str(self.main_baker_id or "") and str(new_junior or "") == str(self.junior_baker_id or ""):
            return False

        previous_main, previous_junior = self.main_baker_id, self.junior_baker_id
        now = datetime.now(UTC)
        advanced = current == OrderStatus.PENDING

        with atomic_change(self):
            self.main_baker_id = new_main
            self.junior_baker_id = new_junior
            if advanced:
                self.status = OrderStatus.ASSIGNED.value
            self.updated_at = now

        self.raise_(
            OrderAssigned(
                order_id=str(self.id),
                customer_id=str(self.customer_id),
                main_baker_id=new_main,
                junior_baker_id=new_junior,
                previous_main_baker_id=previous_main,
                previous_junior_baker_id=previous_junior,
                status=self.status,
                assigned_by=str(actor.id),
                assigned_at=now,
            )
        )
        if advanced:
            self.raise_(
                OrderStatusChanged(
                    order_id=str(self.id),
                    customer_id=str(self.customer_id),
                    previous_status=current.value,
                    new_status=OrderStatus.ASSIGNED.value,
                    changed_by=str(actor.id),
                    changed_at=now,
                )
            )
        return True

    # -------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------
    def record_review(self, review):
        """Link the customer's review. An order is reviewed at most once."""
        if self.review_id:
            raise ValidationError({"order_id": ["This order has already been reviewed"]})
        self.review_id = str(review.id)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_open(self):
        return OrderStatus(self.status) not in TERMINAL_STATUSES

    def items_as_dicts(self):
        return [
            {
                "id": str(item.id),
                "product_id": str(item.product_id) if item.product_id else None,
                "name": item.name,
                "price": item.price,
                "quantity": item.quantity,
                "type": item.type,
                "customization": json.loads(item.customization) if item.customization else None,
            }
            for item in self.items
        ]
