"""Pricing engine: turns an untrusted cart into authoritative payment details.

Arithmetic runs on ``Decimal`` and is rounded once, half-up to cents, at the
total.  Line prices are never rounded on their own.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean.utils.globals import current_domain

from storefront.catalogue.variant import ProductVariant
from storefront.config import settings as default_settings
from storefront.domain import logger
from storefront.errors import PricingRejected
from storefront.ordering.cart import (
    Cart,
    DeliveryType,
    MismatchedVariant,
    PaymentDetails,
    PaymentVariant,
)

CENT = Decimal("0.01")


def _decimal(value) -> Decimal:
    return Decimal(str(value))


def _round(value: Decimal) -> float:
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


class PricingEngine:
    def __init__(self, promo_ledger, settings=None):
        self.promo_ledger = promo_ledger
        self.settings = settings or default_settings

    def shipping_cost(self, delivery_type: str) -> Decimal:
        if delivery_type == DeliveryType.COURIER.value:
            return _decimal(self.settings.shipping_courier)
        return _decimal(self.settings.shipping_post)

    def compute(self, cart: Cart, promo_code: str | None = None) -> PaymentDetails:
        """Price ``cart`` without rejecting it. ``compute_payment_details`` rejects."""
        promo_code = promo_code if promo_code is not None else cart.promo_code
        variants = current_domain.repository_for(ProductVariant).find_variants_by_ids(cart.variant_ids)

        mismatched = []
        payment_variants = []
        subtotal = Decimal("0")
        discountable = Decimal("0")
        total_count = 0
        currency = None

        for line in cart.lines:
            variant = variants.get(line.variant_id)
            if variant is not None and str(variant.product_ref_id) != str(line.product_ref_id):
                variant = None

            valid_sizes = {}
            for size, quantity in line.sizes.items():
                stock = variant.size_stock(size) if variant is not None else None
                if stock is None or quantity < 1 or quantity > stock.count:
                    mismatched.append(MismatchedVariant(line.variant_id, size, quantity))
                    continue

                line_total = quantity * _decimal(variant.price)
                subtotal += line_total
                total_count += quantity
                if not variant.old_price:
                    discountable += line_total
                valid_sizes[size] = quantity

            if not valid_sizes:
                continue

            currency = currency or variant.currency.lower()
            payment_variants.append(
                PaymentVariant(
                    variant_id=line.variant_id,
                    product_ref_id=str(variant.product_ref_id),
                    name=variant.name,
                    sub_title=variant.sub_title,
                    color=variant.color,
                    currency=variant.currency,
                    price=variant.price,
                    old_price=variant.old_price,
                    image=variant.thumbnail,
                    sizes=valid_sizes,
                    display=dict(line.display),
                )
            )

        discount_percent = 0
        if promo_code:
            discount_percent = self.promo_ledger.validate(promo_code)["percentDiscount"]
        discount = discountable * Decimal(discount_percent) / Decimal(100)
        total = subtotal - discount

        shipping = Decimal("0")
        if Decimal("0") < total < _decimal(self.settings.free_shipping_threshold):
            shipping = self.shipping_cost(cart.delivery_type)
        total += shipping

        return PaymentDetails(
            total_count=total_count,
            total_price=_round(total),
            currency=currency or "usd",
            payment_variants=payment_variants,
            mismatched_variants=mismatched,
            discount_percent=discount_percent,
            discount_amount=_round(discount),
            shipping_cost=_round(shipping),
        )

    def compute_payment_details(self, cart: Cart, promo_code: str | None = None) -> PaymentDetails:
        """Price ``cart`` and raise ``PricingRejected`` for a zero-value or mismatched cart."""
        details = self.compute(cart, promo_code)
        if details.invalid:
            logger.info(
                "Cart pricing rejected",
                total_price=details.total_price,
                mismatched=len(details.mismatched_variants),
            )
            raise PricingRejected(details.rejection())
        return details
