from storefront.notifications.templates.order_confirmation import (
    InternalOrderCopyTemplate,
    OrderConfirmationTemplate,
)
from storefront.notifications.templates.promo import PromoCodeTemplate, PromoInviteTemplate

__all__ = [
    "InternalOrderCopyTemplate",
    "OrderConfirmationTemplate",
    "PromoCodeTemplate",
    "PromoInviteTemplate",
]
