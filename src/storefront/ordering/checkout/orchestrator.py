"""Checkout orchestrator: prices a cart, charges it once and commits the order.

Steps run strictly in order::

    VALIDATING -> PRICING -> CHARGING -> DECREMENTING -> PERSISTING -> NOTIFYING -> DONE

Nothing is written before PRICING succeeds.  The checkout record is saved
right before the charge and after every later step, so a crash leaves a
record the reconciler can pick up.  When the stock of a paid line is gone
by the time it is decremented, the checkout is compensated: decremented
lines are restocked, the charge refunded and the promo use given back.
"""

import json
from uuid import uuid4

from protean.exceptions import InvalidOperationError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.variant import InsufficientStock, ProductVariant
from storefront.config import settings as default_settings
from storefront.domain import logger
from storefront.errors import (
    CheckoutConflict,
    CheckoutFailed,
    MissingAddress,
    PaymentDeclined,
    PricingRejected,
    RefundFailed,
)
from storefront.identity.history import RecordOrder
from storefront.identity.user import User
from storefront.ordering.cart import Cart, PaymentDetails
from storefront.ordering.checkout.record import Checkout, CheckoutStatus
from storefront.ordering.order import Order
from storefront.ordering.placement import CancelOrder, CompleteOrder, PlaceOrder
from storefront.payments.gateway import get_gateway
from storefront.promotions.promo_code import hash_code
from storefront.utils.logging import add_context, clear_context


class CheckoutOrchestrator:
    def __init__(self, pricing_engine, promo_ledger, notifier, gateway=None, settings=None):
        self.pricing_engine = pricing_engine
        self.promo_ledger = promo_ledger
        self.notifier = notifier
        self._gateway = gateway
        self.settings = settings or default_settings

    @property
    def gateway(self):
        return self._gateway or get_gateway()

    @staticmethod
    def _records():
        return current_domain.repository_for(Checkout)

    def _save(self, record: Checkout):
        self._records().add(record)

    # -------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------
    def process_payment(self, user, cart: Cart, payment_source: str, idempotency_key: str | None = None) -> dict:
        """Run a checkout for ``user`` and return the response body.

        A key whose record is DONE answers with the stored result; a key whose
        record was charged but not finished is resumed.  A failed or
        compensated key starts a new attempt next to the earlier ones, unless
        the earlier charge was never refunded.
        """
        key = idempotency_key or uuid4().hex
        add_context(checkout_id=key, customer_id=user.id)
        try:
            attempt = 1
            existing = self._find(key)
            if existing is not None:
                if existing.customer_id != user.id:
                    raise ValidationError({"idempotencyKey": ["Idempotency key belongs to another checkout"]})
                if existing.status == CheckoutStatus.DONE.value:
                    logger.info("Replaying finished checkout", order_id=existing.order_id)
                    return existing.result()
                if not existing.is_terminal:
                    logger.info("Resuming unfinished checkout", status=existing.status)
                    return self.resume(existing)

                if existing.awaits_refund:
                    logger.warning(
                        "New attempt refused while a charge awaits its refund",
                        charge_id=existing.charge_id,
                        attempt=existing.attempt,
                    )
                    raise CheckoutConflict(
                        "An earlier payment for this checkout is awaiting a refund",
                        checkoutId=str(existing.id),
                        chargeId=existing.charge_id,
                    )
                attempt = existing.attempt + 1

            return self._run(user, cart, payment_source, key, attempt)
        finally:
            clear_context("checkout_id", "customer_id")

    def resume(self, record: Checkout) -> dict:
        """Continue ``record`` from the last step it completed."""
        status = record.status
        if status == CheckoutStatus.DONE.value:
            return record.result()
        if status == CheckoutStatus.CHARGING.value:
            return self._charge(record)
        if status == CheckoutStatus.COMPENSATING.value:
            raise self._compensate(record, record.failure_reason or "Resumed compensation", [])
        if record.is_charged and not record.is_terminal:
            return self._after_charge(record)
        raise InvalidOperationError(f"Checkout {record.id} in status {status} cannot be resumed")

    # -------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------
    def _find(self, key) -> Checkout | None:
        return self._records().latest_for(key)

    def _run(self, user, cart: Cart, payment_source, key, attempt) -> dict:
        # VALIDATING
        account = current_domain.repository_for(User).get(user.id)
        delivery = account.selected_address
        if delivery is None or account.invoice_address is None:
            raise MissingAddress("A delivery address and an invoice address are required to check out")

        # PRICING
        details = self.pricing_engine.compute_payment_details(cart)

        record = Checkout.open(
            idempotency_key=key,
            customer_id=user.id,
            cart=cart.to_dict(include_promo=False),
            payment_source=payment_source,
            promo_code_hash=hash_code(cart.promo_code) if cart.promo_code else None,
            attempt=attempt,
        )
        record.advance(CheckoutStatus.PRICING)
        record.record_pricing(details.to_dict(), delivery.details.to_dict(), account.invoice_address.to_dict())
        self._save(record)
        logger.info("Checkout priced", total_price=details.total_price, total_count=details.total_count)

        return self._charge(record)

    def _charge(self, record: Checkout) -> dict:
        details = record.payment_data
        description = f"Payment for {details['totalCount']} items at {self.settings.brand}"
        try:
            charge = self.gateway.charge(
                amount_minor_units=record.amount_minor_units,
                currency=record.currency,
                description=description,
                source=record.payment_source,
                idempotency_key=record.charge_key,
            )
        except PaymentDeclined as exc:
            record.fail(f"{exc.code}: {exc.message}", step=CheckoutStatus.CHARGING.value)
            self._save(record)
            logger.info("Payment declined", code=exc.code)
            raise
        except Exception as exc:
            # Outcome unknown; the reconciler retries with the same processor key
            record.note_failure(str(exc))
            self._save(record)
            logger.error("Payment gateway call failed", error=str(exc), exc_info=True)
            raise CheckoutFailed("Payment could not be processed", str(record.id)) from exc

        record.record_charge(charge.id, charge.status)
        self._save(record)
        logger.info("Payment captured", charge_id=charge.id, amount=charge.amount_charged)

        return self._after_charge(record)

    def _after_charge(self, record: Checkout) -> dict:
        try:
            self._mark_promo(record)
            if record.status == CheckoutStatus.DECREMENTING.value:
                self._decrement(record)
            if record.status == CheckoutStatus.PERSISTING.value:
                self._persist(record)
            if record.status == CheckoutStatus.NOTIFYING.value:
                self._notify(record)
        except (PricingRejected, CheckoutFailed):
            raise
        except Exception as exc:
            logger.error(
                "Checkout failed after payment",
                charge_id=record.charge_id,
                step=record.status,
                error=str(exc),
                exc_info=True,
            )
            record.note_failure(str(exc))
            self._save(record)
            raise CheckoutFailed(
                "Payment was taken but the order could not be completed",
                str(record.id),
                record.charge_id,
            ) from exc

        return record.result()

    def _mark_promo(self, record: Checkout):
        if not record.promo_code_hash or record.promo_marked:
            return

        self.promo_ledger.mark_used_by_hash(record.promo_code_hash)
        record.record_promo_used()
        self._save(record)

    def _decrement(self, record: Checkout):
        details = PaymentDetails.from_dict(record.payment_data)
        variants = current_domain.repository_for(ProductVariant)

        for variant in details.payment_variants:
            for size, quantity in variant.sizes.items():
                if record.has_decremented(variant.variant_id, size):
                    continue
                try:
                    variants.decrement(variant.variant_id, size, quantity)
                except (InsufficientStock, ObjectNotFoundError) as exc:
                    logger.warning(
                        "Stock gone after payment",
                        variant_id=variant.variant_id,
                        size=size,
                        quantity=quantity,
                        error=str(exc),
                    )
                    mismatch = {"variantId": variant.variant_id, "size": size, "quantity": quantity}
                    reason = f"Insufficient stock for {variant.variant_id} size {size}"
                    raise self._compensate(record, reason, [mismatch])

                record.record_decrement(variant.variant_id, size, quantity)
                self._save(record)

        record.advance(CheckoutStatus.PERSISTING)
        self._save(record)

    def _compensate(self, record: Checkout, reason: str, mismatched: list[dict]) -> PricingRejected:
        """Undo a paid checkout and return the ``PricingRejected`` to raise with the mismatch."""
        if record.status != CheckoutStatus.COMPENSATING.value:
            record.failure_reason = reason
            record.advance(CheckoutStatus.COMPENSATING)
            self._save(record)

        variants = current_domain.repository_for(ProductVariant)
        for line in reversed(record.decremented):
            variants.restock(line["variantId"], line["size"], line["quantity"])
            record.record_restock(line["variantId"], line["size"])
            self._save(record)

        try:
            refund = self.gateway.refund(record.charge_id, reason=reason, idempotency_key=f"refund-{record.charge_key}")
        except RefundFailed as exc:
            logger.error("Refund failed during compensation", charge_id=record.charge_id, error=str(exc))
            record.fail(f"Refund failed: {exc.message}", step=CheckoutStatus.COMPENSATING.value)
            self._save(record)
            raise CheckoutFailed("Payment could not be refunded", str(record.id), record.charge_id) from exc

        if record.promo_marked:
            self.promo_ledger.release_by_hash(record.promo_code_hash)
        if record.order_id:
            current_domain.process(CancelOrder(order_id=record.order_id, reason=reason), asynchronous=False)

        record.compensated(refund.id, reason)
        self._save(record)
        logger.warning("Checkout compensated", charge_id=record.charge_id, refund_id=refund.id, reason=reason)

        details = record.payment_data
        return PricingRejected(
            {
                "invalid": True,
                "totalPrice": details["totalPrice"],
                "paymentVariants": details["paymentVariants"],
                "mismatchedVariants": mismatched,
            }
        )

    def _persist(self, record: Checkout):
        details = record.payment_data

        if not record.order_id:
            lines = [{"variantId": vid, **variant} for vid, variant in details["paymentVariants"].items()]
            order_id = current_domain.process(
                PlaceOrder(
                    customer_id=record.customer_id,
                    lines=json.dumps(lines),
                    delivery_address=record.delivery_address,
                    invoice_address=record.invoice_address,
                    total_amount=details["totalPrice"],
                    total_product_count=details["totalCount"],
                    delivery_type=record.delivery_type,
                    currency=details["currency"],
                    discount_percent=details.get("discountPercent", 0),
                    payment_charge_id=record.charge_id,
                    checkout_id=str(record.id),
                ),
                asynchronous=False,
            )
            record.record_order(order_id)
            self._save(record)
            logger.info("Order placed", order_id=order_id, charge_id=record.charge_id)

        if not record.user_recorded:
            current_domain.process(RecordOrder(user_id=record.customer_id, order_id=record.order_id), asynchronous=False)
            record.user_recorded = True
            self._save(record)

        if not record.order_completed:
            current_domain.process(CompleteOrder(order_id=record.order_id), asynchronous=False)
            record.order_completed = True
            self._save(record)

        record.advance(CheckoutStatus.NOTIFYING)
        self._save(record)

    def _notify(self, record: Checkout):
        try:
            user = current_domain.repository_for(User).get(record.customer_id)
            order = current_domain.repository_for(Order).get(record.order_id)
            self.notifier.send_order_confirmation(
                {"firstName": user.personal_info.first_name, "email": user.email},
                order.to_summary(),
                record.payment_data,
            )
        except Exception as exc:
            logger.error("Order confirmation could not be sent", order_id=record.order_id, error=str(exc))

        record.complete()
        self._save(record)
        logger.info("Checkout completed", order_id=record.order_id, charge_id=record.charge_id)
