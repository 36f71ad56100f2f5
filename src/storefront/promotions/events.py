"""Domain events for promo codes and newsletter subscribers."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="PromoCode")
class PromoCodeIssued:
    __version__ = 1

    promo_code_id: Identifier(required=True)
    email: String(required=True)
    percent_discount: Integer(required=True)
    end_date: DateTime(required=True)


@storefront.event(part_of="PromoCode")
class PromoCodeUsed:
    """One redemption of the code was counted against a paid order."""

    __version__ = 1

    promo_code_id: Identifier(required=True)
    usage_count: Integer(required=True)
    usage_limit: Integer(required=True)


@storefront.event(part_of="PromoCode")
class PromoCodeReleased:
    """A counted redemption was given back after a compensated checkout."""

    __version__ = 1

    promo_code_id: Identifier(required=True)
    usage_count: Integer(required=True)


@storefront.event(part_of="NewsSubscriber")
class NewsletterSubscribed:
    __version__ = 1

    subscriber_id: Identifier(required=True)
    email: String(required=True)
    subscribed_at: DateTime(required=True)
