"""Pydantic request/response schemas for the Bakery API."""

from __future__ import annotations

from typing import Annotated

from fastapi import Header
from pydantic import BaseModel, Field

# The acting user; authentication transport is handled outside this service
ActorId = Annotated[str, Header(alias="X-Actor-Id")]


# --- Request Schemas ---


class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "username": "jane",
                    "email": "jane@example.com",
                    "full_name": "Jane Doe",
                }
            ]
        }
    }

    username: str = Field(..., max_length=50)
    email: str | None = Field(None, max_length=254)
    full_name: str | None = Field(None, max_length=150)
    role: str = Field("customer", max_length=20)


class OrderItemInput(BaseModel):
    product_id: str | None = None
    name: str = Field(..., max_length=255)
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    type: str = Field("product", max_length=30)
    customization: dict | None = None


class DeliveryInfoInput(BaseModel):
    address: str = Field(..., max_length=255)
    city: str = Field(..., max_length=100)
    zip_code: str = Field(..., max_length=20)
    phone: str = Field(..., max_length=30)
    special_instructions: str | None = Field(None, max_length=500)


class PlaceOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {"name": "Sourdough Loaf", "price": 6.5, "quantity": 2},
                        {
                            "name": "Birthday Cake",
                            "price": 45.0,
                            "quantity": 1,
                            "type": "custom_cake",
                            "customization": {
                                "shape": "round",
                                "size": "8 inch",
                                "flavor": "vanilla",
                                "filling": "raspberry",
                                "frosting": "buttercream",
                            },
                        },
                    ],
                    "delivery_info": {
                        "address": "12 Baker Street",
                        "city": "Springfield",
                        "zip_code": "62701",
                        "phone": "+1-555-0100",
                    },
                    "payment_method": "credit_card",
                }
            ]
        }
    }

    items: list[OrderItemInput] = Field(..., min_length=1)
    delivery_info: DeliveryInfoInput
    payment_method: str = Field(..., max_length=20)


class UpdateOrderStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "in_progress"}]}}

    status: str = Field(..., max_length=30)
    expected_version: int | None = None


class AssignOrderRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"junior_baker_id": "user-junior-001"}]}}

    main_baker_id: str | None = None
    junior_baker_id: str | None = None
    expected_version: int | None = None


class CancelOrderRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class SubmitReviewRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"rating": 5, "comment": "Perfect crumb!"}]}}

    rating: int
    comment: str | None = None


class SubmitApplicationRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "requested_role": "junior_baker",
                    "current_role": "customer",
                    "experience": "Two years of weekend baking for the farmers market.",
                    "reason": "I want to learn laminated doughs from professionals.",
                }
            ]
        }
    }

    requested_role: str = Field(..., max_length=20)
    experience: str
    reason: str
    current_role: str | None = Field(None, max_length=20)
    preferred_main_baker_id: str | None = None


class DecideApplicationRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"decision": "approved"}]}}

    decision: str = Field(..., max_length=20)
    expected_version: int | None = None


class SendMessageRequest(BaseModel):
    receiver_id: str
    order_id: str | None = None
    content: str = Field(..., min_length=1)


class MarkMessagesReadRequest(BaseModel):
    message_ids: list[str] = Field(..., min_length=1)


# --- Response Schemas ---


class UserIdResponse(BaseModel):
    user_id: str


class UserResponse(BaseModel):
    user_id: str
    username: str
    email: str | None = None
    full_name: str | None = None
    role: str


class OrderIdResponse(BaseModel):
    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    main_baker_id: str | None = None
    junior_baker_id: str | None = None
    status: str
    total_amount: float
    payment_method: str
    delivery_info: dict | None = None
    items: list[dict] = []
    cancellation_reason: str | None = None
    version: int
    created_at: str | None = None
    updated_at: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse]


class ReviewIdResponse(BaseModel):
    review_id: str


class ReviewResponse(BaseModel):
    review_id: str
    order_id: str
    customer_id: str
    main_baker_id: str | None = None
    junior_baker_id: str | None = None
    rating: int
    comment: str | None = None
    created_at: str | None = None


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]


class BakerReviewsResponse(BaseModel):
    junior_baker_id: str
    average_rating: float | None = None
    total_reviews: int
    reviews: list[ReviewResponse]


class ApplicationIdResponse(BaseModel):
    application_id: str


class ApplicationResponse(BaseModel):
    application_id: str
    user_id: str
    current_role: str
    requested_role: str
    experience: str
    reason: str
    preferred_main_baker_id: str | None = None
    completed_orders: int = 0
    status: str
    version: int
    created_at: str | None = None
    reviewed_at: str | None = None
    reviewed_by: str | None = None


class ApplicationListResponse(BaseModel):
    applications: list[ApplicationResponse]


class ApplicationStatusResponse(BaseModel):
    application_id: str
    status: str


class EligibilityResponse(BaseModel):
    user_id: str
    completed_orders: int
    required_orders: int
    has_pending_application: bool
    eligible: bool
    average_rating: float | None = None


class MessageIdResponse(BaseModel):
    message_id: str


class MessageResponse(BaseModel):
    message_id: str
    sender_id: str
    receiver_id: str
    order_id: str | None = None
    content: str
    read: bool
    sent_at: str | None = None


class ConversationResponse(BaseModel):
    messages: list[MessageResponse]


class NotificationResponse(BaseModel):
    notification_id: str
    title: str
    message: str
    type: str
    order_id: str | None = None
    action_url: str | None = None
    read: bool
    created_at: str | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]


class CountResponse(BaseModel):
    count: int


class StatusResponse(BaseModel):
    status: str = "ok"
