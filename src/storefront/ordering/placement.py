"""Order creation and status changes. ``PlaceOrder`` is the only way an Order comes to exist."""

import json

from protean import handle
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order
from storefront.shared.address import PostalAddress


@storefront.command(part_of="Order")
class PlaceOrder:
    """Create a pending order for a charge that already succeeded.

    ``lines`` is a JSON list of priced payment variants, the addresses are
    JSON objects in the client's camelCase shape.
    """

    customer_id: Identifier(required=True)
    lines: Text(required=True)
    delivery_address: Text(required=True)
    invoice_address: Text(required=True)
    total_amount: Float(required=True)
    total_product_count: Integer(required=True)
    delivery_type: String(required=True, max_length=10)
    currency: String(required=True, max_length=3)
    discount_percent: Integer(default=0)
    payment_charge_id: String(required=True, max_length=255)
    checkout_id: Identifier()


@storefront.command(part_of="Order")
class CompleteOrder:
    order_id: Identifier(required=True)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id: Identifier(required=True)
    reason: String(required=True, max_length=500)


@storefront.command_handler(part_of=Order)
class OrderPlacementHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            customer_id=command.customer_id,
            lines=json.loads(command.lines),
            delivery_address=PostalAddress.from_dict(json.loads(command.delivery_address)),
            invoice_address=PostalAddress.from_dict(json.loads(command.invoice_address)),
            total_amount=command.total_amount,
            total_product_count=command.total_product_count,
            delivery_type=command.delivery_type,
            currency=command.currency,
            discount_percent=command.discount_percent or 0,
            payment_charge_id=command.payment_charge_id,
            checkout_id=command.checkout_id,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)

    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.complete()
        repo.add(order)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel(command.reason)
        repo.add(order)
