"""BakerApplication aggregate — a request to be promoted to a baker role.

State Machine (3 states):
    PENDING → APPROVED | REJECTED
    APPROVED, REJECTED → (terminal, no reopen)

Any non-admin may apply for a baker role they do not hold yet; only junior
bakers may apply to become main bakers. The applicant's role at submission
time is kept as a snapshot (``current_role``); approval is the only path
that changes ``User.role`` and is applied together with the decision (see
``decision.py``).
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from bakery import access
from bakery.access import Action, Role
from bakery.baker_application.events import (
    BakerApplicationApproved,
    BakerApplicationRejected,
    BakerApplicationSubmitted,
)
from bakery.domain import bakery
from bakery.exceptions import AlreadyDecided, PromotionNotEligible, StaleRoleSnapshot, Unauthorized


class ApplicationStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApplicationDecision(Enum):
    APPROVED = "approved"
    REJECTED = "rejected"


@bakery.aggregate
class BakerApplication:
    user_id = Identifier(required=True)
    current_role = String(choices=Role, required=True)
    requested_role = String(choices=Role, required=True)
    experience = Text(required=True)
    reason = Text(required=True)
    preferred_main_baker_id = Identifier()
    completed_orders = Integer(default=0, min_value=0)
    status = String(choices=ApplicationStatus, default=ApplicationStatus.PENDING.value)
    created_at = DateTime()
    reviewed_at = DateTime()
    reviewed_by = Identifier()

    @classmethod
    def submit(
        cls,
        applicant,
        requested_role,
        experience,
        reason,
        current_role=None,
        preferred_main_baker_id=None,
        completed_orders=0,
        min_completed_orders=0,
    ):
        """File a new application for ``applicant``.

        ``current_role`` is the role the caller believes the applicant holds;
        a mismatch with the stored role means the caller acted on stale data.
        Requests for main baker need ``min_completed_orders`` finished orders.
        The one-pending-per-user rule needs a repository lookup and is
        checked by the submission handler.
        """
        access.ensure_can_act(applicant, Action.SUBMIT_APPLICATION)

        if current_role is not None and current_role != applicant.role:
            raise StaleRoleSnapshot(
                f"Applicant holds {applicant.role}, not {current_role}",
                user_id=str(applicant.id),
                current_role=applicant.role,
                claimed_role=current_role,
            )

        try:
            requested = Role(requested_role)
        except ValueError as exc:
            raise ValidationError({"requested_role": [f"Unknown role: {requested_role}"]}) from exc

        if not access.can_request_role(applicant, requested):
            raise Unauthorized(
                f"A {applicant.role} cannot apply to become {requested.value}",
                actor_id=str(applicant.id),
                action=Action.SUBMIT_APPLICATION.value,
            )

        if requested == Role.MAIN_BAKER and completed_orders < min_completed_orders:
            raise PromotionNotEligible(
                f"{min_completed_orders} completed orders are required to apply for main baker",
                user_id=str(applicant.id),
                completed_orders=completed_orders,
                required_orders=min_completed_orders,
            )

        if requested != Role.JUNIOR_BAKER:
            preferred_main_baker_id = None  # Only junior bakers pick a mentor

        now = datetime.now(UTC)
        application = cls(
            user_id=str(applicant.id),
            current_role=applicant.role,
            requested_role=requested.value,
            experience=experience,
            reason=reason,
            preferred_main_baker_id=preferred_main_baker_id,
            completed_orders=completed_orders,
            status=ApplicationStatus.PENDING.value,
            created_at=now,
        )
        application.raise_(
            BakerApplicationSubmitted(
                application_id=str(application.id),
                user_id=str(applicant.id),
                current_role=applicant.role,
                requested_role=requested.value,
                preferred_main_baker_id=preferred_main_baker_id,
                completed_orders=completed_orders,
                submitted_at=now,
            )
        )
        return application

    @property
    def is_pending(self):
        return self.status == ApplicationStatus.PENDING.value

    def _decide(self, reviewer, status):
        access.ensure_can_act(reviewer, Action.DECIDE_APPLICATION, self, "Only an admin can decide baker applications")

        if not self.is_pending:
            raise AlreadyDecided(
                f"Application {self.id} is already {self.status}",
                application_id=str(self.id),
                status=self.status,
            )

        self.status = status.value
        self.reviewed_by = str(reviewer.id)
        self.reviewed_at = datetime.now(UTC)

    def approve(self, reviewer):
        self._decide(reviewer, ApplicationStatus.APPROVED)
        self.raise_(
            BakerApplicationApproved(
                application_id=str(self.id),
                user_id=str(self.user_id),
                requested_role=self.requested_role,
                reviewed_by=str(reviewer.id),
                reviewed_at=self.reviewed_at,
            )
        )

    def reject(self, reviewer):
        self._decide(reviewer, ApplicationStatus.REJECTED)
        self.raise_(
            BakerApplicationRejected(
                application_id=str(self.id),
                user_id=str(self.user_id),
                requested_role=self.requested_role,
                reviewed_by=str(reviewer.id),
                reviewed_at=self.reviewed_at,
            )
        )
