"""FastAPI endpoints for baker applications."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from bakery import access
from bakery.access import Action
from bakery.api.schemas import (
    ActorId,
    ApplicationIdResponse,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationStatusResponse,
    DecideApplicationRequest,
    SubmitApplicationRequest,
)
from bakery.baker_application.baker_application import BakerApplication
from bakery.baker_application.decision import DecideBakerApplication
from bakery.baker_application.submission import SubmitBakerApplication
from bakery.user.user import User
from bakery.utils.lookup import fetch

application_router = APIRouter(prefix="/applications", tags=["applications"])


def _application_response(application) -> ApplicationResponse:
    return ApplicationResponse(
        application_id=str(application.id),
        user_id=str(application.user_id),
        current_role=application.current_role,
        requested_role=application.requested_role,
        experience=application.experience,
        reason=application.reason,
        preferred_main_baker_id=(
            str(application.preferred_main_baker_id) if application.preferred_main_baker_id else None
        ),
        completed_orders=application.completed_orders or 0,
        status=application.status,
        version=application._version,
        created_at=application.created_at.isoformat() if application.created_at else None,
        reviewed_at=application.reviewed_at.isoformat() if application.reviewed_at else None,
        reviewed_by=str(application.reviewed_by) if application.reviewed_by else None,
    )


@application_router.post("", status_code=201, response_model=ApplicationIdResponse)
async def submit_application(body: SubmitApplicationRequest, actor_id: ActorId) -> ApplicationIdResponse:
    command = SubmitBakerApplication(
        user_id=actor_id,
        requested_role=body.requested_role,
        experience=body.experience,
        reason=body.reason,
        current_role=body.current_role,
        preferred_main_baker_id=body.preferred_main_baker_id,
    )
    result = current_domain.process(command, asynchronous=False)
    return ApplicationIdResponse(application_id=result)


@application_router.get("", response_model=ApplicationListResponse)
async def list_applications(actor_id: ActorId) -> ApplicationListResponse:
    """Admins see every application; everyone else sees their own."""
    actor = fetch(User, actor_id)
    repo = current_domain.repository_for(BakerApplication)
    if access.can_act(actor, Action.LIST_ALL_APPLICATIONS):
        applications = repo.all_applications()
    else:
        applications = repo.for_user(actor.id)
    return ApplicationListResponse(applications=[_application_response(app) for app in applications])


@application_router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(application_id: str, actor_id: ActorId) -> ApplicationResponse:
    actor = fetch(User, actor_id)
    application = fetch(BakerApplication, application_id)
    access.ensure_can_act(actor, Action.VIEW_APPLICATION, application, "You do not have access to this application")
    return _application_response(application)


@application_router.put("/{application_id}/decision", response_model=ApplicationStatusResponse)
async def decide_application(
    application_id: str, body: DecideApplicationRequest, actor_id: ActorId
) -> ApplicationStatusResponse:
    command = DecideBakerApplication(
        application_id=application_id,
        decision=body.decision,
        reviewer_id=actor_id,
        expected_version=body.expected_version,
    )
    status = current_domain.process(command, asynchronous=False)
    return ApplicationStatusResponse(application_id=application_id, status=status)
