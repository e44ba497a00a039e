import copy

import pytest
from bakery.api.applications import application_router
from bakery.api.errors import register_bakery_exception_handlers
from bakery.api.messages import message_router
from bakery.api.notifications import notification_router
from bakery.api.orders import order_router
from bakery.api.users import user_router
from fastapi import FastAPI
from fastapi.testclient import TestClient

_ORDER_PAYLOAD = {
    "items": [{"name": "Sourdough Loaf", "price": 6.5, "quantity": 2}],
    "delivery_info": {
        "address": "12 Baker Street",
        "city": "Springfield",
        "zip_code": "62701",
        "phone": "555-0100",
    },
    "payment_method": "credit_card",
}


@pytest.fixture()
def order_payload():
    return copy.deepcopy(_ORDER_PAYLOAD)


@pytest.fixture()
def client():
    app = FastAPI()
    for router in (user_router, order_router, application_router, message_router, notification_router):
        app.include_router(router)
    register_bakery_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def register(client):
    counter = {"n": 0}

    def _register(role="customer"):
        counter["n"] += 1
        response = client.post("/users", json={"username": f"{role}-{counter['n']}", "role": role})
        assert response.status_code == 201
        return response.json()["user_id"]

    return _register


@pytest.fixture()
def place_order(client, order_payload):
    def _place(customer_id):
        response = client.post("/orders", json=order_payload, headers={"X-Actor-Id": customer_id})
        assert response.status_code == 201
        return response.json()["order_id"]

    return _place
