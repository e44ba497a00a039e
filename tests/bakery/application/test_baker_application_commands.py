"""Application tests for submitting and deciding baker applications."""

import json
from uuid import uuid4

import pytest
from bakery.baker_application import decision as decision_handler
from bakery.baker_application import submission as submission_handler
from bakery.baker_application.baker_application import BakerApplication
from bakery.baker_application.decision import DecideBakerApplication
from bakery.baker_application.eligibility import promotion_eligibility, required_completed_orders
from bakery.baker_application.submission import SubmitBakerApplication
from bakery.exceptions import (
    AlreadyDecided,
    DuplicatePendingApplication,
    PromotionNotEligible,
    StaleRoleSnapshot,
    TransitionFailed,
    Unauthorized,
)
from bakery.order.assignment import AssignOrder
from bakery.order.placement import PlaceOrder
from bakery.order.status import UpdateOrderStatus
from bakery.user.registration import RegisterUser
from bakery.user.user import User
from bakery.utils import lookup
from protean import current_domain


def _register(role="customer"):
    return current_domain.process(
        RegisterUser(username=f"user-{uuid4().hex[:8]}", role=role),
        asynchronous=False,
    )


def _finish_orders(junior_id, count):
    """Have ``junior_id`` bake ``count`` orders through to completed."""
    customer_id = _register("customer")
    main_id = _register("main_baker")
    for _ in range(count):
        order_id = current_domain.process(
            PlaceOrder(
                customer_id=customer_id,
                items=json.dumps([{"name": "Croissant", "price": 2.5, "quantity": 6}]),
                delivery_info=json.dumps(
                    {"address": "1 Mill Lane", "city": "Springfield", "zip_code": "62701", "phone": "555-0101"}
                ),
                payment_method="credit_card",
            ),
            asynchronous=False,
        )
        current_domain.process(
            AssignOrder(order_id=order_id, actor_id=main_id, main_baker_id=main_id, junior_baker_id=junior_id),
            asynchronous=False,
        )
        for status in ("in_progress", "completed"):
            current_domain.process(
                UpdateOrderStatus(order_id=order_id, actor_id=junior_id, status=status),
                asynchronous=False,
            )


def _submit(user_id, requested_role="junior_baker", **overrides):
    defaults = {
        "experience": "Ten years of home baking.",
        "reason": "Ready to work the early shift.",
    }
    defaults.update(overrides)
    return current_domain.process(
        SubmitBakerApplication(user_id=user_id, requested_role=requested_role, **defaults),
        asynchronous=False,
    )


def _decide(application_id, reviewer_id, decision="approved", **kwargs):
    return current_domain.process(
        DecideBakerApplication(application_id=application_id, reviewer_id=reviewer_id, decision=decision, **kwargs),
        asynchronous=False,
    )


def _role(user_id):
    return current_domain.repository_for(User).get(user_id).role


def _application(application_id):
    return current_domain.repository_for(BakerApplication).get(application_id)


def _serve_stale(monkeypatch, handler_module, stale):
    """Have the handler load ``stale`` whenever it asks for that same record."""

    def fake_fetch(aggregate_cls, identifier):
        if isinstance(stale, aggregate_cls) and str(identifier) == str(stale.id):
            return stale
        return lookup.fetch(aggregate_cls, identifier)

    monkeypatch.setattr(handler_module, "fetch", fake_fetch)


@pytest.fixture()
def admin_id():
    return _register("admin")


class TestPromotionScenario:
    def test_duplicate_then_approval_then_new_submission(self, admin_id):
        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 5)

        first = _submit(junior_id, "main_baker")
        with pytest.raises(DuplicatePendingApplication) as exc:
            _submit(junior_id, "main_baker")
        assert exc.value.context["application_id"] == first

        assert _decide(first, admin_id) == "approved"
        assert _role(junior_id) == "main_baker"
        assert _application(first).status == "approved"

        second = _submit(junior_id, "junior_baker")
        assert _application(second).status == "pending"
        assert _application(second).current_role == "main_baker"


class TestSubmitCommand:
    def test_customer_applies(self):
        customer_id = _register("customer")
        application = _application(_submit(customer_id))
        assert application.current_role == "customer"
        assert application.completed_orders == 0

    def test_completed_orders_are_snapshotted(self):
        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 5)
        application = _application(_submit(junior_id, "main_baker"))
        assert application.completed_orders == 5

    def test_main_baker_gate(self):
        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 2)
        with pytest.raises(PromotionNotEligible):
            _submit(junior_id, "main_baker")
        assert current_domain.repository_for(BakerApplication).pending_for_user(junior_id) is None

    def test_gate_threshold_comes_from_config(self, monkeypatch):
        monkeypatch.setitem(current_domain.config, "custom", {"promotion_min_completed_orders": 2})
        assert required_completed_orders() == 2

        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 2)
        assert _application(_submit(junior_id, "main_baker")).requested_role == "main_baker"

    def test_stale_role_from_client(self):
        junior_id = _register("junior_baker")
        with pytest.raises(StaleRoleSnapshot):
            _submit(junior_id, "main_baker", current_role="customer")

    def test_customer_cannot_ask_for_main_baker(self):
        with pytest.raises(Unauthorized):
            _submit(_register("customer"), "main_baker")

    def test_interleaved_submissions_leave_one_pending(self, monkeypatch):
        customer_id = _register("customer")
        # Read by the second submission before the first one commits
        stale_user = current_domain.repository_for(User).get(customer_id)

        first = _submit(customer_id)
        _serve_stale(monkeypatch, submission_handler, stale_user)

        with pytest.raises(DuplicatePendingApplication):
            _submit(customer_id)

        applications = current_domain.repository_for(BakerApplication).for_user(customer_id)
        assert [str(app.id) for app in applications if app.status == "pending"] == [first]
        assert current_domain.repository_for(User).get(customer_id).pending_application_id == first


class TestDecideCommand:
    def test_rejection_leaves_role_and_allows_resubmission(self, admin_id):
        customer_id = _register("customer")
        application_id = _submit(customer_id)

        assert _decide(application_id, admin_id, "rejected") == "rejected"
        assert _role(customer_id) == "customer"
        assert _application(application_id).reviewed_by == admin_id

        _submit(customer_id)

    def test_second_decision_fails(self, admin_id):
        customer_id = _register("customer")
        application_id = _submit(customer_id)
        _decide(application_id, admin_id)

        with pytest.raises(AlreadyDecided):
            _decide(application_id, _register("admin"), "rejected")
        assert _application(application_id).status == "approved"
        assert _role(customer_id) == "junior_baker"

    @pytest.mark.parametrize("role", ["customer", "junior_baker", "main_baker"])
    def test_non_admin_cannot_decide(self, role):
        customer_id = _register("customer")
        application_id = _submit(customer_id)

        with pytest.raises(Unauthorized):
            _decide(application_id, _register(role))
        assert _application(application_id).status == "pending"
        assert _role(customer_id) == "customer"

    def test_refused_promotion_leaves_both_records_untouched(self, admin_id):
        customer_id = _register("customer")
        application_id = _submit(customer_id)

        # Role changed behind the application's back
        users = current_domain.repository_for(User)
        user = users.get(customer_id)
        user.role = "junior_baker"
        users.add(user)

        with pytest.raises(StaleRoleSnapshot):
            _decide(application_id, admin_id)
        assert _application(application_id).status == "pending"
        assert _role(customer_id) == "junior_baker"

    def test_stale_expected_version(self, admin_id):
        application_id = _submit(_register("customer"))
        version = _application(application_id)._version

        with pytest.raises(TransitionFailed):
            _decide(application_id, admin_id, expected_version=version + 1)
        assert _application(application_id).status == "pending"


class TestConcurrentDecisions:
    def test_second_admin_on_a_stale_copy_loses(self, admin_id, monkeypatch):
        customer_id = _register("customer")
        application_id = _submit(customer_id)
        second_admin = _register("admin")
        stale = _application(application_id)

        _decide(application_id, admin_id)
        _serve_stale(monkeypatch, decision_handler, stale)

        with pytest.raises(AlreadyDecided):
            _decide(application_id, second_admin, "rejected")

        assert _application(application_id).status == "approved"
        assert _role(customer_id) == "junior_baker"

    def test_approval_rolls_back_when_the_user_changed(self, admin_id, monkeypatch):
        customer_id = _register("customer")
        application_id = _submit(customer_id)
        users = current_domain.repository_for(User)
        stale_user = users.get(customer_id)

        user = users.get(customer_id)
        user.full_name = "Pat Flour"
        users.add(user)
        _serve_stale(monkeypatch, decision_handler, stale_user)

        with pytest.raises(TransitionFailed):
            _decide(application_id, admin_id)

        assert _application(application_id).status == "pending"
        assert _role(customer_id) == "customer"
        assert users.get(customer_id).full_name == "Pat Flour"


class TestEligibilityQuery:
    def test_reports_progress(self):
        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 3)

        result = promotion_eligibility(junior_id)

        assert result["completed_orders"] == 3
        assert result["required_orders"] == 5
        assert result["eligible"] is False
        assert result["has_pending_application"] is False
        assert result["average_rating"] is None

    def test_eligible_once_threshold_reached(self):
        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 5)
        assert promotion_eligibility(junior_id)["eligible"] is True

    def test_pending_application_blocks_eligibility(self):
        junior_id = _register("junior_baker")
        _finish_orders(junior_id, 5)
        _submit(junior_id, "main_baker")
        result = promotion_eligibility(junior_id)
        assert result["has_pending_application"] is True
        assert result["eligible"] is False
