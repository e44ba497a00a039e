"""Roles and the capability rules every workflow consults.

This module is the only place that compares roles. Aggregates and command
handlers ask ``can_act(user, action, resource)`` (or ``ensure_can_act``,
which raises) instead of inspecting ``user.role`` themselves.

Capability summary:

    admin         unrestricted on order status, assignment and application
                  decisions
    main_baker    full control over orders they own (main_baker_id), may
                  self-claim unassigned orders and delegate junior bakers
    junior_baker  forward status changes on orders delegated to them; no
                  cancellation, no assignment
    customer      read-only on their own orders; may cancel an order that
                  is still pending, review delivered orders, apply to bake
"""

from enum import Enum

from bakery.exceptions import Unauthorized


class Role(Enum):
    CUSTOMER = "customer"
    JUNIOR_BAKER = "junior_baker"
    MAIN_BAKER = "main_baker"
    ADMIN = "admin"


class Action(Enum):
    VIEW_ORDER = "view_order"
    LIST_ALL_ORDERS = "list_all_orders"
    LIST_UNCLAIMED_ORDERS = "list_unclaimed_orders"
    ADVANCE_ORDER = "advance_order"
    CANCEL_ORDER = "cancel_order"
    CANCEL_OWN_ORDER = "cancel_own_order"
    CLAIM_ORDER = "claim_order"
    ASSIGN_ORDER = "assign_order"
    ASSIGN_MAIN_BAKER = "assign_main_baker"
    ASSIGN_JUNIOR_BAKER = "assign_junior_baker"
    REVIEW_ORDER = "review_order"
    SUBMIT_APPLICATION = "submit_application"
    DECIDE_APPLICATION = "decide_application"
    VIEW_APPLICATION = "view_application"
    LIST_ALL_APPLICATIONS = "list_all_applications"


# Roles that can be applied for, and the role required to apply (None: any)
_REQUESTABLE_ROLES = {
    Role.JUNIOR_BAKER: None,
    Role.MAIN_BAKER: Role.JUNIOR_BAKER,
}

# Actions an admin may always perform, regardless of ownership
_ADMIN_ACTIONS = {
    Action.VIEW_ORDER,
    Action.LIST_ALL_ORDERS,
    Action.LIST_UNCLAIMED_ORDERS,
    Action.ADVANCE_ORDER,
    Action.CANCEL_ORDER,
    Action.ASSIGN_ORDER,
    Action.ASSIGN_MAIN_BAKER,
    Action.ASSIGN_JUNIOR_BAKER,
    Action.DECIDE_APPLICATION,
    Action.VIEW_APPLICATION,
    Action.LIST_ALL_APPLICATIONS,
}


def role_of(user) -> Role:
    return Role(user.role)


def holds(user, role: Role) -> bool:
    return user is not None and role_of(user) == role


def is_main_baker(user) -> bool:
    return holds(user, Role.MAIN_BAKER)


def is_junior_baker(user) -> bool:
    return holds(user, Role.JUNIOR_BAKER)


def _same(user_id, other_id) -> bool:
    return user_id is not None and other_id is not None and str(user_id) == str(other_id)


def _owns_as_main(user, order) -> bool:
    return is_main_baker(user) and _same(user.id, order.main_baker_id)


def _executes_as_junior(user, order) -> bool:
    return is_junior_baker(user) and _same(user.id, order.junior_baker_id)


def can_act(user, action: Action, resource=None) -> bool:
    """Return True when ``user`` may perform ``action`` on ``resource``."""
    role = role_of(user)

    if role == Role.ADMIN and action in _ADMIN_ACTIONS:
        return True

    if action == Action.VIEW_ORDER:
        return (
            _same(user.id, resource.customer_id)
            or _owns_as_main(user, resource)
            or _executes_as_junior(user, resource)
            or (role == Role.MAIN_BAKER and resource.main_baker_id is None)
        )

    if action == Action.LIST_UNCLAIMED_ORDERS:
        return role == Role.MAIN_BAKER

    if action == Action.ADVANCE_ORDER:
        return _owns_as_main(user, resource) or _executes_as_junior(user, resource)

    if action == Action.CANCEL_ORDER:
        return _owns_as_main(user, resource)

    if action == Action.CANCEL_OWN_ORDER:
        return _same(user.id, resource.customer_id)

    if action == Action.CLAIM_ORDER:
        return role == Role.MAIN_BAKER and resource.main_baker_id is None

    if action in (Action.ASSIGN_ORDER, Action.ASSIGN_JUNIOR_BAKER):
        # An unowned order is claimed by the main baker in the same call
        return role == Role.MAIN_BAKER and (resource.main_baker_id is None or _same(user.id, resource.main_baker_id))

    if action == Action.REVIEW_ORDER:
        return _same(user.id, resource.customer_id)

    if action == Action.SUBMIT_APPLICATION:
        return role in (Role.CUSTOMER, Role.JUNIOR_BAKER, Role.MAIN_BAKER)

    if action == Action.VIEW_APPLICATION:
        return _same(user.id, resource.user_id)

    return False


def ensure_can_act(user, action: Action, resource=None, message: str | None = None) -> None:
    """Raise ``Unauthorized`` unless ``can_act`` allows the action."""
    if not can_act(user, action, resource):
        raise Unauthorized(
            message or f"{role_of(user).value} {user.id} may not {action.value.replace('_', ' ')}",
            actor_id=str(user.id),
            action=action.value,
        )


def can_request_role(user, requested_role: Role) -> bool:
    """Anyone but an admin may ask for a baker role they do not hold yet.

    Only junior bakers may apply to become main bakers.
    """
    if requested_role not in _REQUESTABLE_ROLES or requested_role == role_of(user):
        return False
    required = _REQUESTABLE_ROLES[requested_role]
    return required is None or required == role_of(user)


def order_scope(user) -> dict:
    """Repository filter selecting the orders a user's dashboard lists."""
    role = role_of(user)
    if role == Role.ADMIN:
        return {}
    if role == Role.MAIN_BAKER:
        return {"main_baker_id": str(user.id)}
    if role == Role.JUNIOR_BAKER:
        return {"junior_baker_id": str(user.id)}
    return {"customer_id": str(user.id)}


def is_related_to_order(user, order) -> bool:
    """Whether the user takes part in the order in the capacity their role implies."""
    role = role_of(user)
    if role == Role.ADMIN:
        return True
    if role == Role.MAIN_BAKER:
        return _same(user.id, order.main_baker_id)
    if role == Role.JUNIOR_BAKER:
        return _same(user.id, order.junior_baker_id)
    return _same(user.id, order.customer_id)


# Who may open a conversation with whom when no order is attached
_DIRECT_CONTACTS = {
    Role.JUNIOR_BAKER: {Role.MAIN_BAKER, Role.ADMIN},
    Role.MAIN_BAKER: {Role.JUNIOR_BAKER, Role.ADMIN},
    Role.ADMIN: set(Role),
}


def ensure_can_message(sender, receiver, order=None) -> None:
    """Apply the messaging rules; raise ``Unauthorized`` when they refuse."""
    if order is not None:
        if not (is_related_to_order(sender, order) and is_related_to_order(receiver, order)):
            raise Unauthorized(
                "You can only message users related to this order",
                actor_id=str(sender.id),
                action="send_message",
                order_id=str(order.id),
            )
        return

    sender_role = role_of(sender)
    if sender_role == Role.CUSTOMER:
        raise Unauthorized(
            "Customers can only message bakers about specific orders",
            actor_id=str(sender.id),
            action="send_message",
        )
    if role_of(receiver) not in _DIRECT_CONTACTS[sender_role]:
        raise Unauthorized(
            f"{sender_role.value} users cannot message {role_of(receiver).value} users without order context",
            actor_id=str(sender.id),
            action="send_message",
        )
