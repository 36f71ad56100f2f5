"""Stripe adapter built on the stripe-python SDK (Charges API with card tokens).

Only refusals are declines.  Connection, authentication and API errors say
nothing about whether the charge went through, so they surface as
``PaymentGatewayUnavailable`` and the checkout retries with the same key.
"""

import stripe

from storefront.domain import logger
from storefront.errors import PaymentDeclined, PaymentGatewayUnavailable, RefundFailed
from storefront.payments.gateway.port import ChargeResult, PaymentGateway, RefundResult


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str) -> None:
        if not api_key:
            raise ValueError("STRIPE_SECRET must be set to use the Stripe gateway")
        self.api_key = api_key

    def charge(
        self,
        amount_minor_units: int,
        currency: str,
        description: str,
        source: str,
        idempotency_key: str,
    ) -> ChargeResult:
        try:
            charge = stripe.Charge.create(
                amount=amount_minor_units,
                currency=currency,
                description=description,
                source=source,
                api_key=self.api_key,
                idempotency_key=idempotency_key,
            )
        except stripe.CardError as exc:
            raise PaymentDeclined(code=exc.code, message=exc.user_message or str(exc)) from exc
        except stripe.InvalidRequestError as exc:
            raise PaymentDeclined(code=exc.code or "invalid_request", message=exc.user_message or str(exc)) from exc
        except stripe.StripeError as exc:
            logger.error("Stripe charge outcome unknown", error=str(exc), idempotency_key=idempotency_key)
            raise PaymentGatewayUnavailable(f"Payment processor unavailable: {exc.user_message or exc}") from exc

        if charge.status == "failed":
            raise PaymentDeclined(code=charge.failure_code, message=charge.failure_message or "Payment failed")

        return ChargeResult(
            id=charge.id,
            status=charge.status,
            amount_charged=charge.amount,
            currency=charge.currency,
        )

    def refund(self, charge_id: str, reason: str, idempotency_key: str | None = None) -> RefundResult:
        params = {"charge": charge_id, "metadata": {"reason": reason}, "api_key": self.api_key}
        if idempotency_key:
            params["idempotency_key"] = idempotency_key

        try:
            refund = stripe.Refund.create(**params)
        except stripe.StripeError as exc:
            logger.error("Stripe refund request failed", charge_id=charge_id, error=str(exc))
            raise RefundFailed(f"Refund of {charge_id} failed: {exc.user_message or exc}") from exc

        return RefundResult(id=refund.id, status=refund.status, charge_id=charge_id)
