"""FastAPI endpoints for users and promotion eligibility."""

from fastapi import APIRouter
from protean.utils.globals import current_domain

from bakery.api.orders import review_response
from bakery.api.schemas import (
    BakerReviewsResponse,
    EligibilityResponse,
    RegisterUserRequest,
    UserIdResponse,
    UserResponse,
)
from bakery.baker_application.eligibility import average_rating_for, promotion_eligibility
from bakery.review.order_review import OrderReview
from bakery.user.registration import RegisterUser
from bakery.user.user import User
from bakery.utils.lookup import fetch

user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(
        username=body.username,
        email=body.email,
        full_name=body.full_name,
        role=body.role,
    )
    result = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=result)


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str) -> UserResponse:
    user = fetch(User, user_id)
    return UserResponse(
        user_id=str(user.id),
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        role=user.role,
    )


@user_router.get("/{user_id}/promotion-eligibility", response_model=EligibilityResponse)
async def get_promotion_eligibility(user_id: str) -> EligibilityResponse:
    """Progress toward the main baker application threshold."""
    fetch(User, user_id)
    return EligibilityResponse(**promotion_eligibility(user_id))


@user_router.get("/{user_id}/reviews", response_model=BakerReviewsResponse)
async def get_junior_baker_reviews(user_id: str) -> BakerReviewsResponse:
    """Reviews of the orders a junior baker worked on, with their average rating."""
    fetch(User, user_id)
    reviews = current_domain.repository_for(OrderReview).for_junior_baker(user_id)
    return BakerReviewsResponse(
        junior_baker_id=user_id,
        average_rating=average_rating_for(user_id),
        total_reviews=len(reviews),
        reviews=[review_response(review) for review in reviews],
    )
