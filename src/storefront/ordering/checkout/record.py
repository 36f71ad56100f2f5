"""Checkout record: the durable outbox of one checkout attempt.

Each attempt of an idempotency key gets its own record, keyed
``<idempotency key>:<attempt>`` and written before the payment gateway is
called.  Earlier attempts are kept, so a charge id is never lost.  Each
completed step advances ``status`` so an interrupted checkout can be resumed
from where it stopped, and a finished one answered again without charging
twice.
"""

import json
from datetime import datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.events import (
    CheckoutAborted,
    CheckoutCompensated,
    CheckoutCompleted,
    PaymentCaptured,
)


class CheckoutStatus(Enum):
    VALIDATING = "Validating"
    PRICING = "Pricing"
    CHARGING = "Charging"
    DECREMENTING = "Decrementing"
    PERSISTING = "Persisting"
    NOTIFYING = "Notifying"
    DONE = "Done"
    FAILED = "Failed"
    COMPENSATING = "Compensating"
    COMPENSATED = "Compensated"


_VALID_TRANSITIONS = {
    CheckoutStatus.VALIDATING: {CheckoutStatus.PRICING, CheckoutStatus.FAILED},
    CheckoutStatus.PRICING: {CheckoutStatus.CHARGING, CheckoutStatus.FAILED},
    CheckoutStatus.CHARGING: {CheckoutStatus.DECREMENTING, CheckoutStatus.FAILED},
    CheckoutStatus.DECREMENTING: {CheckoutStatus.PERSISTING, CheckoutStatus.COMPENSATING, CheckoutStatus.FAILED},
    CheckoutStatus.PERSISTING: {CheckoutStatus.NOTIFYING, CheckoutStatus.COMPENSATING, CheckoutStatus.FAILED},
    CheckoutStatus.NOTIFYING: {CheckoutStatus.DONE},
    CheckoutStatus.COMPENSATING: {CheckoutStatus.COMPENSATED, CheckoutStatus.FAILED},
    CheckoutStatus.DONE: set(),
    CheckoutStatus.FAILED: set(),
    CheckoutStatus.COMPENSATED: set(),
}

# A record resting in one of these has been charged but not finished
CHARGED_STATES = {
    CheckoutStatus.DECREMENTING.value,
    CheckoutStatus.PERSISTING.value,
    CheckoutStatus.NOTIFYING.value,
    CheckoutStatus.COMPENSATING.value,
}

TERMINAL_STATES = {
    CheckoutStatus.DONE.value,
    CheckoutStatus.FAILED.value,
    CheckoutStatus.COMPENSATED.value,
}


@storefront.aggregate
class Checkout:
    idempotency_key: String(required=True, max_length=255)
    customer_id: String(required=True, max_length=255)
    status: String(choices=CheckoutStatus, default=CheckoutStatus.VALIDATING.value)
    cart: Text(required=True)
    delivery_type: String(max_length=10)
    promo_code_hash: String(max_length=64)
    payment_source: String(max_length=255)
    attempt: Integer(default=1, min_value=1)
    delivery_address: Text()
    invoice_address: Text()
    payment_details: Text()
    amount_minor_units: Integer()
    currency: String(max_length=3)
    charge_id: String(max_length=255)
    charge_status: String(max_length=50)
    decremented_lines: Text(default="[]")
    promo_marked: Boolean(default=False)
    order_id: String(max_length=255)
    user_recorded: Boolean(default=False)
    order_completed: Boolean(default=False)
    refund_id: String(max_length=255)
    failed_step: String(max_length=50)
    failure_reason: Text()
    total_price: Float()
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def open(cls, idempotency_key, customer_id, cart: dict, payment_source, promo_code_hash=None, attempt=1):
        now = datetime.now()
        return cls(
            id=f"{idempotency_key}:{attempt}",
            idempotency_key=idempotency_key,
            customer_id=customer_id,
            cart=json.dumps(cart),
            delivery_type=cart.get("deliveryType"),
            promo_code_hash=promo_code_hash,
            payment_source=payment_source,
            attempt=attempt,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Views over the JSON columns
    # -------------------------------------------------------------------
    @property
    def cart_data(self) -> dict:
        return json.loads(self.cart)

    @property
    def payment_data(self) -> dict | None:
        return json.loads(self.payment_details) if self.payment_details else None

    @property
    def decremented(self) -> list[dict]:
        return json.loads(self.decremented_lines) if self.decremented_lines else []

    @property
    def charge_key(self) -> str:
        """Idempotency key sent to the processor; every attempt has its own."""
        return str(self.id)

    @property
    def is_charged(self) -> bool:
        return bool(self.charge_id)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def awaits_refund(self) -> bool:
        """Failed after the charge without the money going back."""
        return self.status == CheckoutStatus.FAILED.value and self.is_charged and not self.refund_id

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def advance(self, new_status: CheckoutStatus):
        current = CheckoutStatus(self.status)
        if new_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move checkout from {current.value} to {new_status.value}"]})
        self.status = new_status.value
        self.updated_at = datetime.now()

    def record_pricing(self, payment_details: dict, delivery_address: dict, invoice_address: dict):
        self.payment_details = json.dumps(payment_details)
        self.total_price = payment_details["totalPrice"]
        self.currency = payment_details["currency"]
        self.amount_minor_units = round(payment_details["totalPrice"] * 100)
        self.delivery_address = json.dumps(delivery_address)
        self.invoice_address = json.dumps(invoice_address)
        self.advance(CheckoutStatus.CHARGING)

    def record_charge(self, charge_id, charge_status):
        self.charge_id = charge_id
        self.charge_status = charge_status
        self.advance(CheckoutStatus.DECREMENTING)
        self.raise_(
            PaymentCaptured(
                checkout_id=str(self.id),
                charge_id=charge_id,
                amount_minor_units=self.amount_minor_units,
                currency=self.currency,
            )
        )

    def record_promo_used(self):
        self.promo_marked = True
        self.updated_at = datetime.now()

    def record_decrement(self, variant_id, size, quantity):
        lines = self.decremented
        lines.append({"variantId": variant_id, "size": size, "quantity": quantity})
        self.decremented_lines = json.dumps(lines)
        self.updated_at = datetime.now()

    def record_restock(self, variant_id, size):
        lines = [d for d in self.decremented if not (d["variantId"] == variant_id and d["size"] == size)]
        self.decremented_lines = json.dumps(lines)
        self.updated_at = datetime.now()

    def has_decremented(self, variant_id, size) -> bool:
        return any(d["variantId"] == variant_id and d["size"] == size for d in self.decremented)

    def record_order(self, order_id):
        self.order_id = order_id
        self.updated_at = datetime.now()

    def complete(self):
        self.advance(CheckoutStatus.DONE)
        self.raise_(CheckoutCompleted(checkout_id=str(self.id), order_id=self.order_id, charge_id=self.charge_id))

    def fail(self, reason, step=None):
        self.failed_step = step or self.status
        self.failure_reason = reason
        self.advance(CheckoutStatus.FAILED)
        self.raise_(
            CheckoutAborted(
                checkout_id=str(self.id),
                step=self.failed_step,
                reason=reason,
                charge_id=self.charge_id,
            )
        )

    def note_failure(self, reason):
        """Keep the step for the reconciler and remember why it stopped."""
        self.failed_step = self.status
        self.failure_reason = reason
        self.updated_at = datetime.now()

    def compensated(self, refund_id, reason):
        self.refund_id = refund_id
        self.failure_reason = reason
        self.advance(CheckoutStatus.COMPENSATED)
        self.raise_(
            CheckoutCompensated(
                checkout_id=str(self.id),
                charge_id=self.charge_id,
                refund_id=refund_id,
                reason=reason,
            )
        )

    def result(self) -> dict:
        """Response body of a finished checkout."""
        details = self.payment_data or {}
        return {
            "message": self.charge_status,
            "orderId": self.order_id,
            "details": {
                "currency": details.get("currency"),
                "totalCount": details.get("totalCount"),
                "totalPrice": details.get("totalPrice"),
            },
        }
