"""Baker application decisions — command and handler.

Approval changes the applicant's role, and any decision frees the applicant
to submit again. Both aggregates are checked and changed in memory first,
then saved in the handler's unit of work, so either both writes commit or
neither does.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from bakery.access import Action, ensure_can_act
from bakery.baker_application.baker_application import ApplicationDecision, BakerApplication
from bakery.domain import bakery
from bakery.exceptions import AlreadyDecided, TransitionFailed
from bakery.user.user import User
from bakery.utils.concurrency import check_expected_version, conflicts_raise
from bakery.utils.lookup import fetch

logger = structlog.get_logger(__name__)


@bakery.command(part_of="BakerApplication")
class DecideBakerApplication:
    application_id = Identifier(required=True)
    decision = String(required=True, choices=ApplicationDecision)
    reviewer_id = Identifier(required=True)
    expected_version = Integer()


@bakery.command_handler(part_of=BakerApplication)
class DecideBakerApplicationHandler:
    @handle(DecideBakerApplication)
    def decide_application(self, command):
        reviewer = fetch(User, command.reviewer_id)
        ensure_can_act(reviewer, Action.DECIDE_APPLICATION, message="Only an admin can decide baker applications")

        application = fetch(BakerApplication, command.application_id)
        check_expected_version(application, command.expected_version)

        decision = ApplicationDecision(command.decision)

        applicant = fetch(User, application.user_id)
        if decision == ApplicationDecision.APPROVED:
            application.approve(reviewer)
            applicant.apply_promotion(application)
        else:
            application.reject(reviewer)
        applicant.release_application(application)

        with conflicts_raise(
            lambda: AlreadyDecided(
                f"Application {application.id} was decided by someone else",
                application_id=str(application.id),
            )
        ):
            current_domain.repository_for(BakerApplication).add(application)

        with conflicts_raise(
            lambda: TransitionFailed(
                f"User {applicant.id} changed while their application was decided",
                user_id=str(applicant.id),
                application_id=str(application.id),
            )
        ):
            current_domain.repository_for(User).add(applicant)

        if decision == ApplicationDecision.APPROVED:
            logger.info(
                "User role changed",
                user_id=str(applicant.id),
                previous_role=application.current_role,
                new_role=applicant.role,
                application_id=str(application.id),
            )

        logger.info(
            "Baker application decided",
            application_id=str(application.id),
            decision=application.status,
            reviewer_id=str(reviewer.id),
        )
        return application.status
