"""Baker application submission — command and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from bakery.access import Role
from bakery.baker_application.baker_application import BakerApplication
from bakery.baker_application.eligibility import completed_orders_for, required_completed_orders
from bakery.domain import bakery
from bakery.exceptions import DuplicatePendingApplication
from bakery.user.user import User
from bakery.utils.concurrency import conflicts_raise
from bakery.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@bakery.command(part_of="BakerApplication")
class SubmitBakerApplication:
    user_id = Identifier(required=True)
    requested_role = String(required=True, max_length=20)
    experience = Text(required=True)
    reason = Text(required=True)
    current_role = String(max_length=20)  # Role the client saw when the form was filled
    preferred_main_baker_id = Identifier()


@bakery.command_handler(part_of=BakerApplication)
class SubmitBakerApplicationHandler:
    @handle(SubmitBakerApplication)
    def submit_application(self, command):
        applicant = fetch(User, command.user_id)
        if applicant.pending_application_id:
            raise DuplicatePendingApplication(
                f"User {applicant.id} already has a pending application",
                user_id=str(applicant.id),
                application_id=str(applicant.pending_application_id),
            )

        completed = completed_orders_for(applicant.id) if applicant.role == Role.JUNIOR_BAKER.value else 0
        application = BakerApplication.submit(
            applicant,
            requested_role=command.requested_role,
            experience=command.experience,
            reason=command.reason,
            current_role=command.current_role,
            preferred_main_baker_id=command.preferred_main_baker_id,
            completed_orders=completed,
            min_completed_orders=required_completed_orders(),
        )
        applicant.hold_application(application)

        # The user is saved first: a concurrent submission loses on its version
        with conflicts_raise(
            lambda: DuplicatePendingApplication(
                f"User {applicant.id} submitted another application concurrently",
                user_id=str(applicant.id),
            )
        ):
            current_domain.repository_for(User).add(applicant)
        current_domain.repository_for(BakerApplication).add(application)

        logger.info(
            "Baker application submitted",
            application_id=str(application.id),
            user_id=str(applicant.id),
            requested_role=application.requested_role,
            completed_orders=completed,
        )
        return str(application.id)
