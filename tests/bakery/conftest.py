import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def bakery_bed():
    from bakery.domain import bakery

    bed = DomainFixture(bakery)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(bakery_bed):
    with bakery_bed.domain_context():
        yield


@pytest.fixture()
def fake_notifier():
    """Swap the notify hook for a recorder for the duration of a test."""
    from bakery.notifier import set_notifier
    from bakery.notifier.fake import FakeNotifier

    notifier = FakeNotifier()
    set_notifier(notifier)
    yield notifier
    notifier.reset()


DELIVERY = {
    "address": "12 Baker Street",
    "city": "Springfield",
    "zip_code": "62701",
    "phone": "+1-555-0100",
}

LOAF = {"name": "Sourdough Loaf", "price": 6.5, "quantity": 2}


@pytest.fixture()
def delivery():
    return dict(DELIVERY)


@pytest.fixture()
def make_user():
    """Build an unsaved user with a unique username."""
    from uuid import uuid4

    from bakery.user.user import User

    def _make(role="customer", **overrides):
        defaults = {"username": f"user-{uuid4().hex[:8]}", "role": role}
        defaults.update(overrides)
        user = User.register(**defaults)
        user._events.clear()
        return user

    return _make


@pytest.fixture()
def make_order(make_user):
    """Build an unsaved pending order."""
    from bakery.order.order import Order

    def _make(customer=None, items=None, **overrides):
        customer = customer or make_user()
        defaults = {
            "customer_id": str(customer.id),
            "items_data": items or [dict(LOAF)],
            "delivery_info": dict(DELIVERY),
            "payment_method": "credit_card",
        }
        defaults.update(overrides)
        order = Order.place(**defaults)
        order._events.clear()
        return order

    return _make
