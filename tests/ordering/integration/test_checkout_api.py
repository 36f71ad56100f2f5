"""Integration tests for the checkout endpoint via TestClient."""

import inspect
import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from storefront.api import register_error_handlers
from storefront.identity.api import user_router
from storefront.ordering.api import order_router
from storefront.ordering.order import Order


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(user_router)
    register_error_handlers(app)
    return TestClient(app)


@pytest.fixture()
def auth(session_service, customer):
    return {"Authorization": f"Bearer {session_service.issue(customer.id)}"}


def _payment_data(token_id="tok_visa"):
    return {"paymentMethodData": {"tokenizationData": {"token": json.dumps({"id": token_id})}}}


def _body(variant, sizes, **extra):
    return {
        "cart": {
            "products": {str(variant.id): {"productRefId": str(variant.product_ref_id), "sizes": sizes}},
            "deliveryType": "post",
        },
        "paymentData": _payment_data(),
        **extra,
    }


class TestProcessPaymentAPI:
    def test_successful_checkout(self, client, auth, gateway, make_variant):
        variant = make_variant(price=50.0)

        response = client.post("/order/process/payment", json=_body(variant, {"M": 1}), headers=auth)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "succeeded"
        assert body["details"] == {"currency": "usd", "totalCount": 1, "totalPrice": 55.0}
        assert gateway.charge_calls[0]["source"] == "tok_visa"

        order = current_domain.repository_for(Order).get(body["orderId"])
        assert order.payment_charge_id == next(iter(gateway.charges.values())).id

    def test_order_appears_in_history(self, client, auth, gateway, make_variant):
        variant = make_variant()
        order_id = client.post("/order/process/payment", json=_body(variant, {"M": 1}), headers=auth).json()["orderId"]

        response = client.get("/user/orders", headers=auth)
        assert [o["id"] for o in response.json()["orders"]] == [order_id]

    def test_idempotency_key(self, client, auth, gateway, make_variant):
        variant = make_variant()
        body = _body(variant, {"M": 1}, idempotencyKey="key-1")

        first = client.post("/order/process/payment", json=body, headers=auth)
        second = client.post("/order/process/payment", json=body, headers=auth)

        assert first.json() == second.json()
        assert len(gateway.charge_calls) == 1

    def test_requires_token(self, client, gateway, make_variant):
        response = client.post("/order/process/payment", json=_body(make_variant(), {"M": 1}))
        assert response.status_code == 401

    def test_inactive_user_is_403(self, client, session_service, make_customer, gateway, make_variant):
        token = session_service.issue(make_customer(email="new@example.com", activated=False))
        response = client.post(
            "/order/process/payment",
            json=_body(make_variant(), {"M": 1}),
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 403

    def test_mismatch_is_400_with_pricing_at_top_level(self, client, auth, gateway, make_variant):
        variant = make_variant(sizes={"M": 2})

        response = client.post("/order/process/payment", json=_body(variant, {"M": 3}), headers=auth)

        assert response.status_code == 400
        body = response.json()
        assert {"invalid", "totalPrice", "paymentVariants", "mismatchedVariants"} <= set(body)
        assert body["invalid"] is True
        assert body["totalPrice"] == 0
        assert body["paymentVariants"] == {}
        assert body["error"]["code"] == "pricing_rejected"
        assert body["mismatchedVariants"] == [{"variantId": str(variant.id), "size": "M", "quantity": 3}]
        assert gateway.calls == []

    def test_declined_card_is_400(self, client, auth, gateway, make_variant):
        gateway.configure(should_succeed=False, failure_code="card_declined", failure_message="Declined")

        response = client.post("/order/process/payment", json=_body(make_variant(), {"M": 1}), headers=auth)

        assert response.status_code == 400
        assert response.json() == {"error": {"code": "card_declined", "message": "Declined"}}

    def test_missing_address_is_400(self, client, session_service, make_customer, gateway, make_variant):
        token = session_service.issue(make_customer(email="new@example.com", with_address=False))
        response = client.post(
            "/order/process/payment",
            json=_body(make_variant(), {"M": 1}),
            headers={"Authorization": f"Bearer {token}"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "missing_address"

    def test_malformed_payment_token_is_400(self, client, auth, gateway, make_variant):
        body = _body(make_variant(), {"M": 1})
        body["paymentData"]["paymentMethodData"]["tokenizationData"]["token"] = "not json"

        response = client.post("/order/process/payment", json=body, headers=auth)

        assert response.status_code == 400
        assert gateway.calls == []


def test_checkout_endpoint_runs_in_the_threadpool():
    route = next(r for r in order_router.routes if r.path == "/order/process/payment")
    assert not inspect.iscoroutinefunction(route.endpoint)
