"""Payment gateway factory.

``get_gateway()`` builds the adapter named by ``PAYMENT_GATEWAY`` on first
use; tests swap it with ``set_gateway()``.
"""

from storefront.config import settings
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import PaymentGateway
from storefront.payments.gateway.stripe_adapter import StripeGateway

_current_gateway: PaymentGateway | None = None


def build_gateway(name: str | None = None) -> PaymentGateway:
    name = (name or settings.payment_gateway).lower()
    if name == "stripe":
        return StripeGateway(api_key=settings.stripe_secret)
    if name == "fake":
        return FakeGateway()
    raise ValueError(f"Unknown payment gateway: {name}")


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
