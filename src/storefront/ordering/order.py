"""Order aggregate: the immutable record of a paid purchase.

Only ``status`` changes after creation: ``pending`` becomes ``completed``
once the order is in the customer's history, or ``cancelled`` when the
checkout behind it was compensated.
"""

import json
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.ordering.events import OrderCancelled, OrderCompleted, OrderPlaced
from storefront.shared.address import PostalAddress


class OrderStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


@storefront.entity(part_of="Order")
class OrderLine:
    """One variant of the order; ``sizes`` is a JSON list of ``{size, quantity}``."""

    variant_id: Identifier(required=True)
    product_ref_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    price: Float(required=True, min_value=0.0)
    currency: String(required=True, max_length=3)
    sizes: Text(required=True)
    image: String(max_length=500)

    @property
    def size_list(self) -> list[dict]:
        return json.loads(self.sizes)


@storefront.aggregate
class Order:
    customer_id: Identifier(required=True)
    lines: HasMany(OrderLine)
    status: String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    delivery_address: ValueObject(PostalAddress, required=True)
    invoice_address: ValueObject(PostalAddress, required=True)
    total_amount: Float(required=True, min_value=0.01)
    total_product_count: Integer(required=True, min_value=1)
    delivery_type: String(required=True, max_length=10)
    currency: String(required=True, max_length=3)
    discount_percent: Integer(default=0)
    payment_charge_id: String(required=True, max_length=255)
    checkout_id: Identifier()
    order_date: DateTime(default=datetime.now)
    completed_at: DateTime()
    cancelled_at: DateTime()
    cancellation_reason: String(max_length=500)

    @classmethod
    def place(
        cls,
        customer_id,
        lines,
        delivery_address,
        invoice_address,
        total_amount,
        total_product_count,
        delivery_type,
        currency,
        payment_charge_id,
        discount_percent=0,
        checkout_id=None,
    ):
        """Create a pending order from priced lines (``{variantId, productRefId, name, price, ...}``)."""
        if not lines:
            raise ValidationError({"lines": ["An order needs at least one line"]})

        now = datetime.now()
        order = cls(
            customer_id=customer_id,
            delivery_address=delivery_address,
            invoice_address=invoice_address,
            total_amount=total_amount,
            total_product_count=total_product_count,
            delivery_type=delivery_type,
            currency=currency,
            discount_percent=discount_percent,
            payment_charge_id=payment_charge_id,
            checkout_id=checkout_id,
            order_date=now,
        )
        for line in lines:
            order.add_lines(
                OrderLine(
                    variant_id=line["variantId"],
                    product_ref_id=line["productRefId"],
                    name=line["name"],
                    price=line["price"],
                    currency=line["currency"],
                    sizes=json.dumps([{"size": s, "quantity": q} for s, q in line["sizes"].items()]),
                    image=line.get("image"),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                payment_charge_id=payment_charge_id,
                total_amount=total_amount,
                total_product_count=total_product_count,
                currency=currency,
                placed_at=now,
            )
        )
        return order

    def _transition_to(self, new_status: OrderStatus):
        current = OrderStatus(self.status)
        if new_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {new_status.value}"]})
        self.status = new_status.value

    def complete(self):
        """Mark the order completed. Completing a completed order is a no-op."""
        if self.status == OrderStatus.COMPLETED.value:
            return

        self._transition_to(OrderStatus.COMPLETED)
        self.completed_at = datetime.now()
        self.raise_(OrderCompleted(order_id=str(self.id), completed_at=self.completed_at))

    def cancel(self, reason):
        self._transition_to(OrderStatus.CANCELLED)
        self.cancelled_at = datetime.now()
        self.cancellation_reason = reason
        self.raise_(OrderCancelled(order_id=str(self.id), reason=reason, cancelled_at=self.cancelled_at))

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "status": self.status,
            "orderDate": self.order_date.isoformat() if self.order_date else None,
            "totalAmount": self.total_amount,
            "totalProductCount": self.total_product_count,
            "currency": self.currency,
            "deliveryType": self.delivery_type,
            "paymentChargeId": self.payment_charge_id,
            "deliveryAddress": self.delivery_address.to_dict(),
            "invoiceAddress": self.invoice_address.to_dict(),
            "products": [
                {
                    "variantId": str(line.variant_id),
                    "productRefId": str(line.product_ref_id),
                    "name": line.name,
                    "price": line.price,
                    "currency": line.currency,
                    "image": line.image,
                    "sizes": line.size_list,
                }
                for line in self.lines
            ],
        }
