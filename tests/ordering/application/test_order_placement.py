"""Application tests for order commands via domain.process()."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.ordering.order import Order, OrderStatus
from storefront.ordering.placement import CancelOrder, CompleteOrder, PlaceOrder

ADDRESS = {
    "firstName": "Jane",
    "lastName": "Doe",
    "phoneNumber": "+1 555 0100",
    "street": "Main Street",
    "city": "Springfield",
    "homeNumber": "12",
    "postCode": "62701",
}


def _place():
    return current_domain.process(
        PlaceOrder(
            customer_id="user-1",
            lines=json.dumps(
                [
                    {
                        "variantId": "var-1",
                        "productRefId": "prod-1",
                        "name": "Linen Shirt",
                        "price": 50.0,
                        "currency": "USD",
                        "sizes": {"M": 1},
                    }
                ]
            ),
            delivery_address=json.dumps(ADDRESS),
            invoice_address=json.dumps(ADDRESS),
            total_amount=55.0,
            total_product_count=1,
            delivery_type="post",
            currency="usd",
            payment_charge_id="ch_123",
        ),
        asynchronous=False,
    )


class TestOrderPlacement:
    def test_place_returns_id(self):
        order = current_domain.repository_for(Order).get(_place())

        assert order.status == OrderStatus.PENDING.value
        assert order.delivery_address.city == "Springfield"
        assert order.lines[0].name == "Linen Shirt"

    def test_complete(self):
        order_id = _place()
        current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.COMPLETED.value

    def test_cancel(self):
        order_id = _place()
        current_domain.process(CancelOrder(order_id=order_id, reason="Refunded"), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "Refunded"

    def test_cannot_cancel_completed(self):
        order_id = _place()
        current_domain.process(CompleteOrder(order_id=order_id), asynchronous=False)
        with pytest.raises(ValidationError):
            current_domain.process(CancelOrder(order_id=order_id, reason="Too late"), asynchronous=False)
