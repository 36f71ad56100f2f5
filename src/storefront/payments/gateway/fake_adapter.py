"""Configurable fake payment processor for development and tests.

Charges are remembered per idempotency key, so a repeated key returns the
original charge instead of charging again, the way the real processor does.
"""

from uuid import uuid4

from storefront.errors import PaymentDeclined, RefundFailed
from storefront.payments.gateway.port import ChargeResult, PaymentGateway, RefundResult


class FakeGateway(PaymentGateway):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_code: str = "card_declined"
        self.failure_message: str = "Your card was declined."
        self.refund_should_succeed: bool = True
        self.calls: list[dict] = []
        self.charges: dict[str, ChargeResult] = {}
        self.refunds: dict[str, RefundResult] = {}

    def configure(
        self,
        should_succeed: bool = True,
        failure_code: str = "card_declined",
        failure_message: str = "Your card was declined.",
        refund_should_succeed: bool = True,
    ) -> None:
        self.should_succeed = should_succeed
        self.failure_code = failure_code
        self.failure_message = failure_message
        self.refund_should_succeed = refund_should_succeed

    @property
    def charge_calls(self) -> list[dict]:
        return [c for c in self.calls if c["method"] == "charge"]

    @property
    def refund_calls(self) -> list[dict]:
        return [c for c in self.calls if c["method"] == "refund"]

    def charge(
        self,
        amount_minor_units: int,
        currency: str,
        description: str,
        source: str,
        idempotency_key: str,
    ) -> ChargeResult:
        self.calls.append(
            {
                "method": "charge",
                "amount": amount_minor_units,
                "currency": currency,
                "description": description,
                "source": source,
                "idempotency_key": idempotency_key,
            }
        )

        if idempotency_key in self.charges:
            return self.charges[idempotency_key]

        if not self.should_succeed:
            raise PaymentDeclined(code=self.failure_code, message=self.failure_message)

        result = ChargeResult(
            id=f"ch_fake_{uuid4().hex[:12]}",
            status="succeeded",
            amount_charged=amount_minor_units,
            currency=currency,
        )
        self.charges[idempotency_key] = result
        return result

    def refund(self, charge_id: str, reason: str, idempotency_key: str | None = None) -> RefundResult:
        self.calls.append(
            {
                "method": "refund",
                "charge_id": charge_id,
                "reason": reason,
                "idempotency_key": idempotency_key,
            }
        )

        if not self.refund_should_succeed:
            raise RefundFailed(f"Refund of {charge_id} failed")

        result = RefundResult(id=f"re_fake_{uuid4().hex[:12]}", status="succeeded", charge_id=charge_id)
        self.refunds[charge_id] = result
        return result
