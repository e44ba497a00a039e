"""FastAPI endpoints for orders: checkout, dashboards, status, assignment, reviews.

Thin adapters that translate HTTP requests into domain commands.
"""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from bakery import access
from bakery.access import Action
from bakery.api.schemas import (
    ActorId,
    AssignOrderRequest,
    CancelOrderRequest,
    OrderIdResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusResponse,
    PlaceOrderRequest,
    ReviewIdResponse,
    ReviewListResponse,
    ReviewResponse,
    SubmitReviewRequest,
    UpdateOrderStatusRequest,
)
from bakery.order.assignment import AssignOrder
from bakery.order.cancellation import CancelOrder
from bakery.order.order import Order
from bakery.order.placement import PlaceOrder
from bakery.order.status import UpdateOrderStatus
from bakery.review.order_review import OrderReview
from bakery.review.submission import SubmitOrderReview
from bakery.user.user import User
from bakery.utils.lookup import fetch

order_router = APIRouter(prefix="/orders", tags=["orders"])


def _isoformat(value):
    return value.isoformat() if value else None


def _order_response(order) -> OrderResponse:
    delivery = order.delivery_info
    return OrderResponse(
        order_id=str(order.id),
        customer_id=str(order.customer_id),
        main_baker_id=str(order.main_baker_id) if order.main_baker_id else None,
        junior_baker_id=str(order.junior_baker_id) if order.junior_baker_id else None,
        status=order.status,
        total_amount=order.total_amount,
        payment_method=order.payment_method,
        delivery_info=(
            {
                "address": delivery.address,
                "city": delivery.city,
                "zip_code": delivery.zip_code,
                "phone": delivery.phone,
                "special_instructions": delivery.special_instructions,
            }
            if delivery
            else None
        ),
        items=order.items_as_dicts(),
        cancellation_reason=order.cancellation_reason,
        version=order._version,
        created_at=_isoformat(order.created_at),
        updated_at=_isoformat(order.updated_at),
    )


def review_response(review) -> ReviewResponse:
    return ReviewResponse(
        review_id=str(review.id),
        order_id=str(review.order_id),
        customer_id=str(review.customer_id),
        main_baker_id=str(review.main_baker_id) if review.main_baker_id else None,
        junior_baker_id=str(review.junior_baker_id) if review.junior_baker_id else None,
        rating=review.rating,
        comment=review.comment,
        created_at=_isoformat(review.created_at),
    )


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, actor_id: ActorId) -> OrderIdResponse:
    command = PlaceOrder(
        customer_id=actor_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        delivery_info=json.dumps(body.delivery_info.model_dump()),
        payment_method=body.payment_method,
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


@order_router.get("", response_model=OrderListResponse)
async def list_orders(actor_id: ActorId) -> OrderListResponse:
    """Orders on the actor's dashboard, newest first."""
    actor = fetch(User, actor_id)
    orders = current_domain.repository_for(Order).visible_to(actor)
    return OrderListResponse(orders=[_order_response(order) for order in orders])


@order_router.get("/unclaimed", response_model=OrderListResponse)
async def list_unclaimed_orders(actor_id: ActorId) -> OrderListResponse:
    actor = fetch(User, actor_id)
    access.ensure_can_act(actor, Action.LIST_UNCLAIMED_ORDERS)
    orders = current_domain.repository_for(Order).unclaimed()
    return OrderListResponse(orders=[_order_response(order) for order in orders])


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, actor_id: ActorId) -> OrderResponse:
    actor = fetch(User, actor_id)
    order = fetch(Order, order_id)
    access.ensure_can_act(actor, Action.VIEW_ORDER, order, "You do not have access to this order")
    return _order_response(order)


@order_router.put("/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, actor_id: ActorId) -> OrderStatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        actor_id=actor_id,
        expected_version=body.expected_version,
    )
    status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=status)


@order_router.put("/{order_id}/assignment", response_model=OrderResponse)
async def assign_order(order_id: str, body: AssignOrderRequest, actor_id: ActorId) -> OrderResponse:
    command = AssignOrder(
        order_id=order_id,
        actor_id=actor_id,
        main_baker_id=body.main_baker_id,
        junior_baker_id=body.junior_baker_id,
        expected_version=body.expected_version,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(fetch(Order, order_id))


@order_router.post("/{order_id}/cancel", response_model=OrderStatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest, actor_id: ActorId) -> OrderStatusResponse:
    """Customer withdraws a pending order."""
    command = CancelOrder(order_id=order_id, actor_id=actor_id, reason=body.reason)
    status = current_domain.process(command, asynchronous=False)
    return OrderStatusResponse(order_id=order_id, status=status)


@order_router.post("/{order_id}/review", status_code=201, response_model=ReviewIdResponse)
async def review_order(order_id: str, body: SubmitReviewRequest, actor_id: ActorId) -> ReviewIdResponse:
    command = SubmitOrderReview(
        order_id=order_id,
        customer_id=actor_id,
        rating=body.rating,
        comment=body.comment,
    )
    result = current_domain.process(command, asynchronous=False)
    return ReviewIdResponse(review_id=result)


@order_router.get("/{order_id}/reviews", response_model=ReviewListResponse)
async def list_order_reviews(order_id: str, actor_id: ActorId) -> ReviewListResponse:
    actor = fetch(User, actor_id)
    order = fetch(Order, order_id)
    access.ensure_can_act(actor, Action.VIEW_ORDER, order, "You do not have access to this order")
    reviews = current_domain.repository_for(OrderReview).for_order(order.id)
    return ReviewListResponse(reviews=[review_response(review) for review in reviews])
