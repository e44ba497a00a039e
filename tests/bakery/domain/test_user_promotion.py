"""Tests for User registration and the role change applied by an approved application."""

import pytest
from bakery.baker_application.baker_application import BakerApplication
from bakery.exceptions import DuplicatePendingApplication, StaleRoleSnapshot
from bakery.user.events import UserRegistered, UserRoleChanged
from bakery.user.user import User
from protean.exceptions import ValidationError


def _application_for(user, requested_role="junior_baker"):
    return BakerApplication.submit(
        user,
        requested_role=requested_role,
        experience="Years of sourdough.",
        reason="Ready for more.",
        completed_orders=5,
        min_completed_orders=5,
    )


class TestRegister:
    def test_defaults_to_customer(self):
        user = User.register(username="dough-fan")
        assert user.role == "customer"
        assert isinstance(user._events[-1], UserRegistered)

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            User.register(username="wizard", role="wizard")


class TestApplyPromotion:
    def test_approved_application_changes_role(self, make_user):
        user = make_user("customer")
        application = _application_for(user)
        application.approve(make_user("admin"))

        user.apply_promotion(application)

        assert user.role == "junior_baker"
        assert user.role_changed_at is not None
        event = user._events[-1]
        assert isinstance(event, UserRoleChanged)
        assert (event.previous_role, event.new_role) == ("customer", "junior_baker")
        assert event.application_id == str(application.id)

    def test_pending_application_changes_nothing(self, make_user):
        user = make_user("customer")
        application = _application_for(user)

        with pytest.raises(ValidationError):
            user.apply_promotion(application)
        assert user.role == "customer"

    def test_rejected_application_changes_nothing(self, make_user):
        user = make_user("customer")
        application = _application_for(user)
        application.reject(make_user("admin"))

        with pytest.raises(ValidationError):
            user.apply_promotion(application)
        assert user.role == "customer"

    def test_application_of_another_user(self, make_user):
        user = make_user("customer")
        application = _application_for(make_user("customer"))
        application.approve(make_user("admin"))

        with pytest.raises(ValidationError):
            user.apply_promotion(application)
        assert user.role == "customer"

    def test_role_changed_since_submission(self, make_user):
        user = make_user("junior_baker")
        application = _application_for(user, "main_baker")
        application.approve(make_user("admin"))
        user.role = "main_baker"

        with pytest.raises(StaleRoleSnapshot):
            user.apply_promotion(application)


class TestPendingApplicationHold:
    def test_one_application_at_a_time(self, make_user):
        user = make_user("customer")
        first = _application_for(user)
        user.hold_application(first)
        assert user.pending_application_id == str(first.id)

        with pytest.raises(DuplicatePendingApplication):
            user.hold_application(_application_for(user))
        assert user.pending_application_id == str(first.id)

    def test_release_only_frees_the_held_application(self, make_user):
        user = make_user("customer")
        held = _application_for(user)
        user.hold_application(held)

        user.release_application(_application_for(user))
        assert user.pending_application_id == str(held.id)

        user.release_application(held)
        assert user.pending_application_id is None
