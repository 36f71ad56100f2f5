"""Domain events for the Order and Checkout aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A paid order was written; ``payment_charge_id`` ties it to the processor."""

    __version__ = 1

    order_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    payment_charge_id: String(required=True)
    total_amount: Float(required=True)
    total_product_count: Integer(required=True)
    currency: String(required=True)
    placed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id: Identifier(required=True)
    completed_at: DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id: Identifier(required=True)
    reason: String(required=True)
    cancelled_at: DateTime(required=True)


@storefront.event(part_of="Checkout")
class PaymentCaptured:
    """The processor accepted the charge for a checkout."""

    __version__ = 1

    checkout_id: Identifier(required=True)
    charge_id: String(required=True)
    amount_minor_units: Integer(required=True)
    currency: String(required=True)


@storefront.event(part_of="Checkout")
class CheckoutCompleted:
    __version__ = 1

    checkout_id: Identifier(required=True)
    order_id: Identifier(required=True)
    charge_id: String(required=True)


@storefront.event(part_of="Checkout")
class CheckoutCompensated:
    """Stock was put back and the charge refunded after a post-charge mismatch."""

    __version__ = 1

    checkout_id: Identifier(required=True)
    charge_id: String(required=True)
    refund_id: String()
    reason: String(required=True)


@storefront.event(part_of="Checkout")
class CheckoutAborted:
    __version__ = 1

    checkout_id: Identifier(required=True)
    step: String(required=True)
    reason: String(required=True)
    charge_id: String()
