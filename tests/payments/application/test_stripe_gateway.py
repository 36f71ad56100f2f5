from types import SimpleNamespace

import pytest
import stripe
from storefront.errors import PaymentDeclined, PaymentGatewayUnavailable, RefundFailed
from storefront.payments.gateway.stripe_adapter import StripeGateway


@pytest.fixture()
def stripe_gateway():
    return StripeGateway(api_key="sk_test_123")


def _charge(gateway):
    return gateway.charge(
        amount_minor_units=5500,
        currency="usd",
        description="Payment for 1 items at Storefront",
        source="tok_visa",
        idempotency_key="key-1:1",
    )


def _raising(exc):
    def _create(**params):
        raise exc

    return _create


class TestCharge:
    def test_successful_charge(self, monkeypatch, stripe_gateway):
        sent = {}

        def _create(**params):
            sent.update(params)
            return SimpleNamespace(id="ch_1", status="succeeded", amount=params["amount"], currency="usd")

        monkeypatch.setattr(stripe.Charge, "create", _create)

        result = _charge(stripe_gateway)

        assert result.id == "ch_1"
        assert result.amount_charged == 5500
        assert sent["idempotency_key"] == "key-1:1"
        assert sent["source"] == "tok_visa"
        assert sent["api_key"] == "sk_test_123"

    def test_card_error_is_a_decline(self, monkeypatch, stripe_gateway):
        monkeypatch.setattr(
            stripe.Charge, "create", _raising(stripe.CardError("Your card was declined.", None, "card_declined"))
        )

        with pytest.raises(PaymentDeclined) as exc:
            _charge(stripe_gateway)

        assert exc.value.code == "card_declined"
        assert exc.value.message == "Your card was declined."

    def test_invalid_token_is_a_decline(self, monkeypatch, stripe_gateway):
        monkeypatch.setattr(stripe.Charge, "create", _raising(stripe.InvalidRequestError("No such token", "source")))

        with pytest.raises(PaymentDeclined) as exc:
            _charge(stripe_gateway)

        assert exc.value.code == "invalid_request"

    def test_failed_charge_status_is_a_decline(self, monkeypatch, stripe_gateway):
        def _create(**params):
            return SimpleNamespace(
                id="ch_1",
                status="failed",
                amount=5500,
                currency="usd",
                failure_code="expired_card",
                failure_message="Card expired",
            )

        monkeypatch.setattr(stripe.Charge, "create", _create)

        with pytest.raises(PaymentDeclined) as exc:
            _charge(stripe_gateway)

        assert exc.value.code == "expired_card"

    @pytest.mark.parametrize(
        "error",
        [
            stripe.APIConnectionError("Connection reset by peer"),
            stripe.APIError("Internal server error"),
            stripe.RateLimitError("Too many requests"),
        ],
    )
    def test_unknown_outcome_is_not_a_decline(self, monkeypatch, stripe_gateway, error):
        monkeypatch.setattr(stripe.Charge, "create", _raising(error))

        with pytest.raises(PaymentGatewayUnavailable) as exc:
            _charge(stripe_gateway)

        assert not isinstance(exc.value, PaymentDeclined)
        assert exc.value.status_code == 502


class TestRefund:
    def test_refund(self, monkeypatch, stripe_gateway):
        sent = {}

        def _create(**params):
            sent.update(params)
            return SimpleNamespace(id="re_1", status="succeeded")

        monkeypatch.setattr(stripe.Refund, "create", _create)

        result = stripe_gateway.refund("ch_1", reason="Out of stock", idempotency_key="refund-key-1:1")

        assert result.id == "re_1"
        assert result.charge_id == "ch_1"
        assert sent["charge"] == "ch_1"
        assert sent["idempotency_key"] == "refund-key-1:1"
        assert sent["metadata"] == {"reason": "Out of stock"}

    def test_refund_error_raises_refund_failed(self, monkeypatch, stripe_gateway):
        monkeypatch.setattr(stripe.Refund, "create", _raising(stripe.APIConnectionError("Connection reset")))

        with pytest.raises(RefundFailed):
            stripe_gateway.refund("ch_1", reason="Out of stock")
