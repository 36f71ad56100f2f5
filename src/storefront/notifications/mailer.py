"""Mail notifier: renders templates and hands them to the email channel.

Sending never raises.  A failed delivery is logged and reported as False
so callers that already took the customer's money carry on.
"""

import structlog

from storefront.config import settings as default_settings
from storefront.notifications.channel import get_email_channel
from storefront.notifications.templates import (
    InternalOrderCopyTemplate,
    OrderConfirmationTemplate,
    PromoCodeTemplate,
    PromoInviteTemplate,
)

logger = structlog.get_logger(__name__)


def _format_address(address: dict | None) -> str:
    if not address:
        return ""
    return (
        f"{address.get('firstName')} {address.get('lastName')}, {address.get('phoneNumber')}\n"
        f"{address.get('street')} {address.get('homeNumber')}, {address.get('postCode')} {address.get('city')}"
    )


class MailNotifier:
    def __init__(self, settings=None):
        self.settings = settings or default_settings

    def _send(self, to: str, template, context: dict, kind: str) -> bool:
        message = template.render({"brand": self.settings.brand, **context})
        try:
            result = get_email_channel().send(to=to, subject=message["subject"], body=message["body"])
        except Exception as exc:
            logger.error("Mail delivery raised", kind=kind, recipient=to, error=str(exc))
            return False

        if result.get("status") != "sent":
            logger.warning("Mail delivery failed", kind=kind, recipient=to, error=result.get("error"))
            return False

        logger.info("Mail sent", kind=kind, recipient=to, message_id=result.get("message_id"))
        return True

    def send_order_confirmation(self, user: dict, order_summary: dict, payment_summary: dict) -> bool:
        """Send the receipt to the customer and a copy to the shop mailbox."""
        context = {
            "order_id": order_summary.get("id"),
            "first_name": user.get("firstName"),
            "customer_email": user.get("email"),
            "products": order_summary.get("products", []),
            "delivery_type": order_summary.get("deliveryType"),
            "delivery_address": _format_address(order_summary.get("deliveryAddress")),
            "charge_id": order_summary.get("paymentChargeId"),
            "currency": payment_summary.get("currency"),
            "total_price": payment_summary.get("totalPrice", 0),
            "total_count": payment_summary.get("totalCount", 0),
            "shipping_cost": payment_summary.get("shippingCost", 0),
        }
        customer_sent = self._send(user.get("email"), OrderConfirmationTemplate, context, "order_confirmation")
        internal_sent = self._send(self.settings.shop_email, InternalOrderCopyTemplate, context, "order_copy")
        return customer_sent and internal_sent

    def send_promo_code(self, email: str, code: str, percent_discount: int, end_date) -> bool:
        context = {"code": code, "percent_discount": percent_discount, "end_date": end_date}
        return self._send(email, PromoCodeTemplate, context, "promo_code")

    def send_promo_invite(self, email: str, percent_discount: int, subscribe_link: str) -> bool:
        context = {"percent_discount": percent_discount, "subscribe_link": subscribe_link}
        return self._send(email, PromoInviteTemplate, context, "promo_invite")
