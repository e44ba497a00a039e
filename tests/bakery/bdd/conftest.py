"""Shared BDD fixtures and step definitions for the bakery workflows.

Steps drive the domain through its commands, so every scenario exercises
the same path the API does. A refused command is captured on ``state``
and checked by a Then step.
"""

import json

import pytest
from bakery.baker_application.baker_application import BakerApplication
from bakery.baker_application.decision import DecideBakerApplication
from bakery.baker_application.submission import SubmitBakerApplication
from bakery.exceptions import BakeryError
from bakery.order.assignment import AssignOrder
from bakery.order.cancellation import CancelOrder
from bakery.order.order import Order
from bakery.order.placement import PlaceOrder
from bakery.order.status import UpdateOrderStatus
from bakery.user.registration import RegisterUser
from bakery.user.user import User
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def state():
    return {"users": {}, "order_id": None, "application_id": None, "error": None}


def _attempt(state, command):
    """Process ``command``; remember a refusal instead of raising it."""
    try:
        result = current_domain.process(command, asynchronous=False)
    except (BakeryError, ValidationError) as exc:
        state["error"] = exc
        return None
    state["error"] = None
    return result


def _register(state, name, role):
    state["users"][name] = current_domain.process(RegisterUser(username=name, role=role), asynchronous=False)
    return state["users"][name]


def _place_order(customer_id):
    return current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            items=json.dumps([{"name": "Country Loaf", "price": 7.0, "quantity": 1}]),
            delivery_info=json.dumps(
                {"address": "1 Mill Lane", "city": "Springfield", "zip_code": "62701", "phone": "555-0199"}
            ),
            payment_method="paypal",
        ),
        asynchronous=False,
    )


def _order(state):
    return current_domain.repository_for(Order).get(state["order_id"])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an admin "{name}"'))
def _(state, name):
    _register(state, name, "admin")


@given(parsers.cfparse('a main baker "{name}"'))
def _(state, name):
    _register(state, name, "main_baker")


@given(parsers.cfparse('a junior baker "{name}"'))
def _(state, name):
    _register(state, name, "junior_baker")


@given(parsers.cfparse('a customer "{name}"'))
def _(state, name):
    _register(state, name, "customer")


@given(parsers.cfparse('"{name}" placed an order'))
def _(state, name):
    state["order_id"] = _place_order(state["users"][name])


@given(parsers.cfparse('a junior baker "{name}" who finished {count:d} orders'))
def _(state, name, count):
    junior = _register(state, name, "junior_baker")
    mentor = _register(state, f"{name}-mentor", "main_baker")
    patron = _register(state, f"{name}-patron", "customer")

    for _n in range(count):
        order_id = _place_order(patron)
        current_domain.process(
            AssignOrder(order_id=order_id, actor_id=mentor, main_baker_id=mentor, junior_baker_id=junior),
            asynchronous=False,
        )
        for status in ("in_progress", "completed"):
            current_domain.process(
                UpdateOrderStatus(order_id=order_id, actor_id=junior, status=status),
                asynchronous=False,
            )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{name}" claims the order'))
def _(state, name):
    _attempt(state, AssignOrder(order_id=state["order_id"], actor_id=state["users"][name]))


@when(parsers.cfparse('"{name}" delegates the order to "{junior}"'))
def _(state, name, junior):
    _attempt(
        state,
        AssignOrder(
            order_id=state["order_id"],
            actor_id=state["users"][name],
            junior_baker_id=state["users"][junior],
        ),
    )


@when(parsers.cfparse('"{name}" assigns the order to main baker "{main}"'))
def _(state, name, main):
    _attempt(
        state,
        AssignOrder(
            order_id=state["order_id"],
            actor_id=state["users"][name],
            main_baker_id=state["users"][main],
        ),
    )


@when(parsers.cfparse('"{name}" moves the order to "{status}"'))
def _(state, name, status):
    _attempt(
        state,
        UpdateOrderStatus(order_id=state["order_id"], actor_id=state["users"][name], status=status),
    )


@when(parsers.cfparse('"{name}" cancels the order'))
def _(state, name):
    _attempt(state, CancelOrder(order_id=state["order_id"], actor_id=state["users"][name]))


@when(parsers.cfparse('"{name}" applies to become a "{role}"'))
def _(state, name, role):
    application_id = _attempt(
        state,
        SubmitBakerApplication(
            user_id=state["users"][name],
            requested_role=role,
            experience="Years of early mornings at the family bakery.",
            reason="Ready for more responsibility.",
        ),
    )
    if application_id:
        state["application_id"] = application_id


@when(parsers.cfparse('"{name}" approves the application'))
def _(state, name):
    _attempt(
        state,
        DecideBakerApplication(
            application_id=state["application_id"],
            reviewer_id=state["users"][name],
            decision="approved",
        ),
    )


@when(parsers.cfparse('"{name}" rejects the application'))
def _(state, name):
    _attempt(
        state,
        DecideBakerApplication(
            application_id=state["application_id"],
            reviewer_id=state["users"][name],
            decision="rejected",
        ),
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the action fails with {error_name}"))
def _(state, error_name):
    assert state["error"] is not None, "Expected the action to be refused"
    assert type(state["error"]).__name__ == error_name


@then(parsers.cfparse('the order status is "{status}"'))
def _(state, status):
    assert _order(state).status == status


@then(parsers.cfparse('the main baker is "{name}"'))
def _(state, name):
    assert _order(state).main_baker_id == state["users"][name]


@then("the order has no main baker")
def _(state):
    assert _order(state).main_baker_id is None


@then("the order has no junior baker")
def _(state):
    assert _order(state).junior_baker_id is None


@then(parsers.cfparse('the application status is "{status}"'))
def _(state, status):
    application = current_domain.repository_for(BakerApplication).get(state["application_id"])
    assert application.status == status


@then(parsers.cfparse('"{name}" is a "{role}"'))
def _(state, name, role):
    assert current_domain.repository_for(User).get(state["users"][name]).role == role
