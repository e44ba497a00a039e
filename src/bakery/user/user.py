"""User aggregate — an account and the role it acts under.

The role decides what a user may do to orders and applications (see
``bakery.access``). It is set at registration and afterwards changes only
through ``apply_promotion``, which requires an approved baker application
for that same user.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from bakery.access import Role
from bakery.domain import bakery
from bakery.exceptions import DuplicatePendingApplication, StaleRoleSnapshot


@bakery.aggregate
class User:
    """A registered customer, baker or administrator."""

    username: String(required=True, max_length=50)
    email: String(max_length=254)
    full_name: String(max_length=150)
    role: String(choices=Role, default=Role.CUSTOMER.value)
    created_at: DateTime()
    role_changed_at: DateTime()
    pending_application_id: Identifier()  # At most one application awaits a decision

    @classmethod
    def register(cls, username, email=None, full_name=None, role=Role.CUSTOMER.value):
        from bakery.user.events import UserRegistered

        now = datetime.now(UTC)
        user = cls(
            username=username,
            email=email,
            full_name=full_name,
            role=role,
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=str(user.id),
                username=username,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def apply_promotion(self, application):
        """Take on the role requested by an approved application.

        The application must belong to this user, be approved, and have been
        filed against the role the user still holds.
        """
        from bakery.baker_application.baker_application import ApplicationStatus
        from bakery.user.events import UserRoleChanged

        if str(application.user_id) != str(self.id):
            raise ValidationError({"application": ["Application belongs to a different user"]})
        if application.status != ApplicationStatus.APPROVED.value:
            raise ValidationError({"application": ["Only an approved application can change a role"]})
        if application.current_role != self.role:
            raise StaleRoleSnapshot(
                f"Application was filed as {application.current_role} but user is now {self.role}",
                user_id=str(self.id),
                application_id=str(application.id),
            )

        previous_role = self.role
        now = datetime.now(UTC)
        self.role = application.requested_role
        self.role_changed_at = now

        self.raise_(
            UserRoleChanged(
                user_id=str(self.id),
                previous_role=previous_role,
                new_role=self.role,
                application_id=str(application.id),
                changed_at=now,
            )
        )

    def hold_application(self, application):
        """Record ``application`` as the one this user has waiting for a decision.

        Submitting saves the user as well as the application, so two
        concurrent submissions collide on the user's version.
        """
        if self.pending_application_id:
            raise DuplicatePendingApplication(
                f"User {self.id} already has a pending application",
                user_id=str(self.id),
                application_id=str(self.pending_application_id),
            )
        self.pending_application_id = str(application.id)

    def release_application(self, application):
        if str(self.pending_application_id or "") == str(application.id):
            self.pending_application_id = None
