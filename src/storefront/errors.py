"""Storefront errors that surface to HTTP callers.

Protean's own ``ValidationError``, ``ObjectNotFoundError`` and
``InvalidOperationError`` are still raised for plain input and lookup
problems; the classes here carry the extra payload some responses need.
"""


class StorefrontError(Exception):
    status_code = 500
    code = "storefront_error"

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__
        self.details = details

    def to_dict(self) -> dict:
        payload = {"error": {"code": self.code, "message": self.message}}
        if self.details:
            payload["error"].update(self.details)
        return payload


class PricingRejected(StorefrontError):
    """The cart failed verification against the catalogue."""

    status_code = 400
    code = "pricing_rejected"

    def __init__(self, details: dict, message: str = "Some products in the cart are no longer available"):
        super().__init__(message)
        self.pricing = details

    def to_dict(self) -> dict:
        return {**self.pricing, "error": {"code": self.code, "message": self.message}}


class PromoCodeNotFound(StorefrontError):
    status_code = 404
    code = "promo_code_not_found"


class PromoCodeInvalid(StorefrontError):
    """The code exists but is expired or used up."""

    status_code = 400
    code = "promo_code_invalid"


class PromoCodeConflict(StorefrontError):
    status_code = 409
    code = "promo_code_conflict"


class MissingAddress(StorefrontError):
    status_code = 400
    code = "missing_address"


class PaymentDeclined(StorefrontError):
    """Raised by gateway adapters when the processor refuses a charge."""

    status_code = 400

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code or "card_declined"


class PaymentGatewayUnavailable(StorefrontError):
    """The processor could not be reached or answered with an error; the charge may have gone through."""

    status_code = 502
    code = "payment_gateway_unavailable"


class RefundFailed(StorefrontError):
    status_code = 502
    code = "refund_failed"


class CheckoutFailed(StorefrontError):
    """A step after the charge failed; the charge id is kept for reconciliation."""

    status_code = 500
    code = "checkout_failed"

    def __init__(self, message: str, checkout_id: str, charge_id: str | None = None):
        super().__init__(message, checkoutId=checkout_id, chargeId=charge_id)
        self.checkout_id = checkout_id
        self.charge_id = charge_id


class CheckoutConflict(StorefrontError):
    status_code = 409
    code = "checkout_conflict"


class Unauthorized(StorefrontError):
    status_code = 401
    code = "unauthorized"


class Forbidden(StorefrontError):
    status_code = 403
    code = "forbidden"
